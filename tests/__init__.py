"""Test package for scoutbook; ``src`` is put on the path by ``pythonpath`` in pyproject.toml."""
