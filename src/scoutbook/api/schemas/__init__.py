"""Pydantic models for API I/O."""

from scoutbook.models import Player, PlayerPatch

from .player import DescriptionResponse

__all__ = [
    "DescriptionResponse",
    "Player",
    "PlayerPatch",
]
