"""Input adapters that normalize the upstream player feed."""

from .cache import TimedCache
from .upstream import (
    FIELD_SOURCES,
    UpstreamFetcher,
    map_raw_to_player,
    parse_players,
    player_id_for,
    slugify,
)

__all__ = [
    "FIELD_SOURCES",
    "TimedCache",
    "UpstreamFetcher",
    "map_raw_to_player",
    "parse_players",
    "player_id_for",
    "slugify",
]
