"""Baseball player stats service with editable overrides and AI scouting reports."""

__version__ = "0.1.0"
