"""Fetch the upstream player dataset and normalize it into canonical records."""

from __future__ import annotations

import asyncio
import logging
import math
import re
import time
from typing import Any, List, Mapping, Optional, Sequence, Tuple

import httpx

from scoutbook.config import DEFAULT_CACHE_TTL, DEFAULT_UPSTREAM_TIMEOUT, DEFAULT_UPSTREAM_URL
from scoutbook.errors import UpstreamUnavailable
from scoutbook.ingest.cache import Clock, TimedCache
from scoutbook.models import INT_STAT_FIELDS, Player


logger = logging.getLogger(__name__)

# Upstream rows label the same stat several ways; first non-null key wins.
FIELD_SOURCES: dict[str, tuple[str, ...]] = {
    "name": ("Player name", "player name", "name"),
    "position": ("position", "Position"),
    "games": ("Games",),
    "at_bats": ("At-bat", "At-bats"),
    "runs": ("Runs",),
    "hits": ("Hits",),
    "doubles": ("Double (2B)", "2B"),
    "triples": ("third baseman", "3B"),
    "home_runs": ("home run", "Home run", "HR"),
    "rbi": ("run batted in", "RBI"),
    "walks": ("a walk", "BB"),
    "strikeouts": ("Strikeouts", "SO"),
    "stolen_bases": ("stolen base", "SB"),
    "caught_stealing": ("Caught stealing", "CS"),
    "avg": ("AVG",),
    "obp": ("On-base Percentage", "OBP"),
    "slg": ("Slugging Percentage", "SLG"),
    "ops": ("On-base Plus Slugging", "OPS"),
}

_TEXT_FIELDS = {"name", "position"}
_INT_FIELDS = set(INT_STAT_FIELDS)


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def player_id_for(name: str, index: int) -> str:
    """Positional identifier; unique within one fetch, not across fetches."""
    return f"{slugify(name)}-{index}"


def _first_present(raw: Mapping[str, Any], names: Sequence[str]) -> Any:
    for name in names:
        value = raw.get(name)
        if value is not None:
            return value
    return None


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def map_raw_to_player(raw: Mapping[str, Any], index: int) -> Player:
    data: dict[str, Any] = {}
    for field, names in FIELD_SOURCES.items():
        value = _first_present(raw, names)
        if field in _TEXT_FIELDS:
            data[field] = "" if value is None else str(value)
        elif field in _INT_FIELDS:
            data[field] = int(_to_number(value))
        else:
            data[field] = _to_number(value)
    data["id"] = player_id_for(data["name"], index)
    data["description"] = None
    return Player(**data)


def parse_players(payload: Any) -> List[Player]:
    if not isinstance(payload, list):
        raise UpstreamUnavailable(
            f"Bad upstream payload: expected a list, got {type(payload).__name__}"
        )
    players = []
    for index, row in enumerate(payload):
        if not isinstance(row, Mapping):
            logger.debug("Upstream row %s is %s, treating as empty", index, type(row).__name__)
            row = {}
        players.append(map_raw_to_player(row, index))
    return players


def _consume_exception(future: asyncio.Future) -> None:
    # Every awaiter may have been cancelled; mark the error as retrieved.
    if not future.cancelled():
        future.exception()

class UpstreamFetcher:
    """Reads the upstream dataset, caching the normalized result for ``ttl`` seconds.

    Callers arriving while a refresh is in flight await that same refresh
    instead of issuing their own request.
    """

    def __init__(
        self,
        url: str = DEFAULT_UPSTREAM_URL,
        *,
        client: httpx.AsyncClient | None = None,
        cache: TimedCache[Tuple[Player, ...]] | None = None,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Clock = time.monotonic,
        timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client
        self._cache: TimedCache[Tuple[Player, ...]] = cache or TimedCache(ttl, clock=clock)
        self._inflight: Optional[asyncio.Future[Tuple[Player, ...]]] = None

    @property
    def cache(self) -> TimedCache[Tuple[Player, ...]]:
        return self._cache

    async def fetch_all(self) -> List[Player]:
        cached = self._cache.get()
        if cached is not None:
            logger.debug("Serving %s upstream players from cache", len(cached))
            return list(cached)
        inflight = self._inflight
        if inflight is None:
            inflight = asyncio.ensure_future(self._refresh())
            inflight.add_done_callback(_consume_exception)
            self._inflight = inflight
        return list(await asyncio.shield(inflight))

    def invalidate(self) -> None:
        self._cache.invalidate()

    async def _refresh(self) -> Tuple[Player, ...]:
        try:
            started = time.perf_counter()
            payload = await self._download()
            players = tuple(parse_players(payload))
            self._cache.set(players)
            logger.info(
                "Fetched %s upstream players in %.2fs",
                len(players),
                time.perf_counter() - started,
            )
            return players
        finally:
            self._inflight = None

    async def _download(self) -> Any:
        if self._client is not None:
            return await self._get_json(self._client)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._get_json(client)

    async def _get_json(self, client: httpx.AsyncClient) -> Any:
        try:
            response = await client.get(self.url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Upstream request to %s failed: %s", self.url, exc)
            raise UpstreamUnavailable(f"Upstream request failed: {exc}") from exc
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("Bad upstream payload: invalid JSON") from exc

