"""Core services: reconciliation, description caching and listing order."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from scoutbook.config import Settings
from scoutbook.ingest import UpstreamFetcher
from scoutbook.llm import OpenAIGenerator, TextGenerator
from scoutbook.persistence import OverrideStore, SqliteOverrideStore

from .descriptions import DescriptionResult, DescriptionService, build_prompt
from .players import PlayerService, apply_override
from .sorting import SORT_KEYS, sort_players


@dataclass
class Services:
    fetcher: UpstreamFetcher
    store: OverrideStore
    players: PlayerService
    descriptions: DescriptionService


def build_services(
    settings: Settings,
    *,
    fetcher: Optional[UpstreamFetcher] = None,
    store: Optional[OverrideStore] = None,
    generator: Optional[TextGenerator] = None,
) -> Services:
    fetcher = fetcher or UpstreamFetcher(
        settings.upstream_url,
        ttl=settings.cache_ttl,
        timeout=settings.upstream_timeout,
    )
    store = store or SqliteOverrideStore(settings.db_path)
    if generator is None:
        generator = OpenAIGenerator(settings.openai_api_key, model=settings.openai_model)
    players = PlayerService(fetcher, store)
    return Services(
        fetcher=fetcher,
        store=store,
        players=players,
        descriptions=DescriptionService(players, generator),
    )


__all__ = [
    "DescriptionResult",
    "DescriptionService",
    "PlayerService",
    "SORT_KEYS",
    "Services",
    "apply_override",
    "build_prompt",
    "build_services",
    "sort_players",
]
