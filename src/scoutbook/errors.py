"""Exceptions raised by the reconciliation and description layers."""

from __future__ import annotations


class ScoutbookError(Exception):
    """Base class for errors surfaced to callers of the core services."""


class UpstreamUnavailable(ScoutbookError):
    """The upstream stats source could not be read or returned a malformed payload."""


class PlayerNotFound(ScoutbookError, LookupError):
    def __init__(self, player_id: str):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id


NotFound = PlayerNotFound


class GenerationUnavailable(ScoutbookError):
    """The text-generation backend is not configured."""


class GenerationFailed(GenerationUnavailable):
    """The text-generation backend is configured but the call failed."""
