"""Player models."""

from .player import (
    FLOAT_STAT_FIELDS,
    INT_STAT_FIELDS,
    MUTABLE_FIELDS,
    STAT_FIELDS,
    OverridePatch,
    Player,
    PlayerPatch,
)

__all__ = [
    "FLOAT_STAT_FIELDS",
    "INT_STAT_FIELDS",
    "MUTABLE_FIELDS",
    "STAT_FIELDS",
    "OverridePatch",
    "Player",
    "PlayerPatch",
]
