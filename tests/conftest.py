from pathlib import Path

import pytest

from scoutbook.ingest import UpstreamFetcher
from scoutbook.persistence import SqliteOverrideStore
from scoutbook.services import PlayerService

from .helpers import SAMPLE_ROWS, UPSTREAM_URL, FakeClock, UpstreamStub


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub([dict(row) for row in SAMPLE_ROWS])


@pytest.fixture
def fetcher(upstream: UpstreamStub, clock: FakeClock) -> UpstreamFetcher:
    return UpstreamFetcher(UPSTREAM_URL, client=upstream.client(), ttl=300, clock=clock)


@pytest.fixture
def store(tmp_path: Path) -> SqliteOverrideStore:
    return SqliteOverrideStore(tmp_path / "overrides.sqlite")


@pytest.fixture
def player_service(fetcher: UpstreamFetcher, store: SqliteOverrideStore) -> PlayerService:
    return PlayerService(fetcher, store)
