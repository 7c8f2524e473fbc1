"""Ordering helpers for player listings."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Literal

from scoutbook.models import Player


SortDirection = Literal["asc", "desc"]

SORT_KEYS: Dict[str, Callable[[Player], Any]] = {
    "name": lambda player: player.name.casefold(),
    "position": lambda player: player.position.casefold(),
    "games": lambda player: player.games,
    "hits": lambda player: player.hits,
    "hitsPerGame": lambda player: player.hits_per_game,
    "homeRuns": lambda player: player.home_runs,
    "avg": lambda player: player.avg,
    "ops": lambda player: player.ops,
}


def sort_players(
    players: Iterable[Player],
    key: str,
    direction: SortDirection = "asc",
) -> List[Player]:
    """Stable sort by one of ``SORT_KEYS``; ties keep their incoming order."""
    try:
        key_func = SORT_KEYS[key]
    except KeyError:
        raise ValueError(
            f"Unsupported sort key '{key}'; expected one of {', '.join(SORT_KEYS)}"
        ) from None
    if direction not in ("asc", "desc"):
        raise ValueError(f"Unsupported sort direction '{direction}'")
    return sorted(players, key=key_func, reverse=direction == "desc")
