"""Canonical player models shared across ingestion, persistence and the API."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


INT_STAT_FIELDS: tuple[str, ...] = (
    "games",
    "at_bats",
    "runs",
    "hits",
    "doubles",
    "triples",
    "home_runs",
    "rbi",
    "walks",
    "strikeouts",
    "stolen_bases",
    "caught_stealing",
)

FLOAT_STAT_FIELDS: tuple[str, ...] = ("avg", "obp", "slg", "ops")

STAT_FIELDS: tuple[str, ...] = INT_STAT_FIELDS + FLOAT_STAT_FIELDS

# Every field an override record may carry; the identifier is never overridden.
MUTABLE_FIELDS: tuple[str, ...] = ("name", "position") + STAT_FIELDS + ("description",)


class Player(BaseModel):
    """Career batting line for one player, after normalization and overrides."""

    id: str = Field(..., min_length=1)
    name: str = ""
    position: str = ""
    games: int = 0
    at_bats: int = 0
    runs: int = 0
    hits: int = 0
    doubles: int = 0
    triples: int = 0
    home_runs: int = 0
    rbi: int = 0
    walks: int = 0
    strikeouts: int = 0
    stolen_bases: int = 0
    caught_stealing: int = 0
    avg: float = 0.0
    obp: float = 0.0
    slg: float = 0.0
    ops: float = 0.0
    description: Optional[str] = None

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    def mutable_fields(self) -> Dict[str, Any]:
        return self.model_dump(include=set(MUTABLE_FIELDS))

    @property
    def hits_per_game(self) -> float:
        return self.hits / self.games if self.games else 0.0


class PlayerPatch(BaseModel):
    """Validated partial update submitted by a client."""

    name: Optional[str] = None
    position: Optional[str] = None
    games: Optional[int] = Field(default=None, ge=0)
    at_bats: Optional[int] = Field(default=None, ge=0)
    runs: Optional[int] = Field(default=None, ge=0)
    hits: Optional[int] = Field(default=None, ge=0)
    doubles: Optional[int] = Field(default=None, ge=0)
    triples: Optional[int] = Field(default=None, ge=0)
    home_runs: Optional[int] = Field(default=None, ge=0)
    rbi: Optional[int] = Field(default=None, ge=0)
    walks: Optional[int] = Field(default=None, ge=0)
    strikeouts: Optional[int] = Field(default=None, ge=0)
    stolen_bases: Optional[int] = Field(default=None, ge=0)
    caught_stealing: Optional[int] = Field(default=None, ge=0)
    avg: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    obp: Optional[float] = Field(default=None, ge=0.0)
    slg: Optional[float] = Field(default=None, ge=0.0)
    ops: Optional[float] = Field(default=None, ge=0.0)

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )

    def to_fields(self) -> Dict[str, Any]:
        """Return only the fields the caller supplied, keyed by field name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class OverridePatch(PlayerPatch):
    """Internal partial update; also carries a generated description."""

    description: Optional[str] = None
