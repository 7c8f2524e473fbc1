import asyncio
import gc

import httpx
import pytest

from scoutbook.errors import UpstreamUnavailable
from scoutbook.ingest import (
    TimedCache,
    UpstreamFetcher,
    map_raw_to_player,
    parse_players,
    player_id_for,
    slugify,
)

from .helpers import UPSTREAM_URL, FakeClock, UpstreamStub


def test_map_raw_to_player_babe_ruth_row():
    player = map_raw_to_player({"Player name": "Babe Ruth", "Hits": "2873", "HR": 714}, 0)

    assert player.id == "babe-ruth-0"
    assert player.name == "Babe Ruth"
    assert player.hits == 2873
    assert player.home_runs == 714
    assert player.games == 0
    assert player.avg == 0.0
    assert player.position == ""
    assert player.description is None


@pytest.mark.parametrize("label", ["HR", "home run", "Home run"])
def test_home_run_synonyms(label: str):
    player = map_raw_to_player({"name": "Slugger", label: 5}, 3)
    assert player.home_runs == 5


def test_synonym_priority_takes_first_present_value():
    player = map_raw_to_player({"name": "X", "home run": 3, "HR": 9}, 0)
    assert player.home_runs == 3

    player = map_raw_to_player({"name": "X", "home run": None, "HR": 9}, 0)
    assert player.home_runs == 9


def test_non_numeric_values_default_to_zero():
    player = map_raw_to_player(
        {
            "name": "Nobody",
            "Hits": "n/a",
            "Games": None,
            "AVG": "abc",
            "OPS": float("nan"),
            "RBI": True,
            "SO": {"career": 10},
            "Runs": 10**400,
            "BB": "9" * 400,
        },
        0,
    )
    assert player.hits == 0
    assert player.games == 0
    assert player.avg == 0.0
    assert player.ops == 0.0
    assert player.rbi == 0
    assert player.strikeouts == 0
    assert player.runs == 0
    assert player.walks == 0


def test_numeric_strings_are_parsed():
    player = map_raw_to_player({"name": "Ty", "Games": "3,035", "AVG": ".366", "SB": " 897 "}, 1)
    assert player.games == 3035
    assert player.avg == pytest.approx(0.366)
    assert player.stolen_bases == 897


def test_all_synonym_columns_are_read():
    row = {
        "Player name": "Full Row",
        "Position": "SS",
        "Games": 10,
        "At-bats": 40,
        "Runs": 7,
        "Hits": 12,
        "Double (2B)": 3,
        "third baseman": 1,
        "HR": 2,
        "run batted in": 8,
        "a walk": 4,
        "Strikeouts": 9,
        "stolen base": 5,
        "Caught stealing": 1,
        "AVG": 0.3,
        "On-base Percentage": 0.36,
        "Slugging Percentage": 0.5,
        "On-base Plus Slugging": 0.86,
    }
    player = map_raw_to_player(row, 0)
    assert (player.position, player.at_bats, player.runs) == ("SS", 40, 7)
    assert (player.doubles, player.triples, player.rbi) == (3, 1, 8)
    assert (player.walks, player.strikeouts) == (4, 9)
    assert (player.stolen_bases, player.caught_stealing) == (5, 1)
    assert (player.obp, player.slg, player.ops) == (0.36, 0.5, 0.86)


def test_slugify_and_identifier():
    assert slugify("Ken Griffey Jr.") == "ken-griffey-jr"
    assert slugify("--Mark  McGwire!!") == "mark-mcgwire"
    assert player_id_for("Ken Griffey Jr.", 12) == "ken-griffey-jr-12"


def test_parse_players_gives_duplicate_names_distinct_ids():
    players = parse_players([{"name": "John Smith"}, {"name": "John Smith"}])
    assert [player.id for player in players] == ["john-smith-0", "john-smith-1"]


def test_parse_players_treats_non_object_rows_as_empty():
    players = parse_players([{"name": "Real"}, "junk"])
    assert players[1].name == ""
    assert players[1].hits == 0


@pytest.mark.parametrize("payload", [{"players": []}, "oops", None, 42])
def test_parse_players_rejects_non_list(payload):
    with pytest.raises(UpstreamUnavailable):
        parse_players(payload)


def test_timed_cache_expiry():
    clock = FakeClock()
    cache: TimedCache[str] = TimedCache(10, clock=clock)
    assert cache.get() is None

    cache.set("value")
    assert cache.expires_at == clock.now + 10
    clock.advance(9.999)
    assert cache.get() == "value"
    clock.advance(0.001)
    assert cache.get() is None


def test_timed_cache_invalidate_and_validation():
    cache: TimedCache[str] = TimedCache(10, clock=FakeClock())
    cache.set("value")
    cache.invalidate()
    assert cache.get() is None

    with pytest.raises(ValueError):
        TimedCache(-1)


@pytest.mark.anyio
async def test_fetch_within_window_reuses_cache(fetcher, upstream, clock):
    first = await fetcher.fetch_all()
    clock.advance(299)
    second = await fetcher.fetch_all()

    assert upstream.calls == 1
    assert [p.id for p in first] == [p.id for p in second]
    assert [p.id for p in first] == ["babe-ruth-0", "ty-cobb-1", "ted-williams-2"]


@pytest.mark.anyio
async def test_fetch_after_window_refreshes_once(fetcher, upstream, clock):
    await fetcher.fetch_all()
    clock.advance(300)
    await fetcher.fetch_all()
    await fetcher.fetch_all()

    assert upstream.calls == 2


@pytest.mark.anyio
async def test_concurrent_callers_share_one_refresh(fetcher, upstream, clock):
    await fetcher.fetch_all()
    clock.advance(301)

    results = await asyncio.gather(*(fetcher.fetch_all() for _ in range(5)))

    assert upstream.calls == 2
    assert all([p.id for p in result] == [p.id for p in results[0]] for result in results)


@pytest.mark.anyio
async def test_fetch_all_returns_independent_lists(fetcher):
    first = await fetcher.fetch_all()
    first.clear()
    assert len(await fetcher.fetch_all()) == 3


@pytest.mark.anyio
async def test_invalidate_forces_refetch(fetcher, upstream):
    await fetcher.fetch_all()
    fetcher.invalidate()
    await fetcher.fetch_all()
    assert upstream.calls == 2


@pytest.mark.anyio
async def test_upstream_http_error_is_surfaced(fetcher, upstream):
    upstream.status_code = 503
    with pytest.raises(UpstreamUnavailable):
        await fetcher.fetch_all()


@pytest.mark.anyio
async def test_upstream_transport_error_is_surfaced(fetcher, upstream):
    upstream.error = lambda request: httpx.ConnectError("refused", request=request)
    with pytest.raises(UpstreamUnavailable):
        await fetcher.fetch_all()


@pytest.mark.anyio
async def test_upstream_invalid_json_is_surfaced(fetcher, upstream):
    upstream.raw_body = b"<html>not json</html>"
    with pytest.raises(UpstreamUnavailable):
        await fetcher.fetch_all()


@pytest.mark.anyio
async def test_upstream_non_list_payload_is_surfaced(fetcher, upstream):
    upstream.payload = {"error": "maintenance"}
    with pytest.raises(UpstreamUnavailable):
        await fetcher.fetch_all()


@pytest.mark.anyio
async def test_expired_cache_is_not_served_when_refresh_fails(fetcher, upstream, clock):
    await fetcher.fetch_all()
    clock.advance(300)
    upstream.status_code = 500

    with pytest.raises(UpstreamUnavailable):
        await fetcher.fetch_all()

    upstream.status_code = 200
    players = await fetcher.fetch_all()
    assert len(players) == 3
    assert upstream.calls == 3


@pytest.mark.anyio
async def test_zero_ttl_fetches_every_time(upstream, clock):
    fetcher = UpstreamFetcher(UPSTREAM_URL, client=upstream.client(), ttl=0, clock=clock)
    await fetcher.fetch_all()
    await fetcher.fetch_all()
    assert upstream.calls == 2


@pytest.mark.anyio
async def test_fetcher_builds_its_own_client_when_none_given(monkeypatch):
    stub = UpstreamStub([{"name": "Solo"}])
    real_client = httpx.AsyncClient

    def fake_client(**kwargs):
        kwargs["transport"] = httpx.MockTransport(stub.handler)
        return real_client(**kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", fake_client)
    fetcher = UpstreamFetcher(UPSTREAM_URL, timeout=2.0)

    players = await fetcher.fetch_all()
    assert [p.id for p in players] == ["solo-0"]
    assert stub.calls == 1


@pytest.mark.anyio
async def test_failed_refresh_with_no_remaining_awaiters_is_not_reported():
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        await release.wait()
        return httpx.Response(500)

    fetcher = UpstreamFetcher(
        UPSTREAM_URL,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        clock=FakeClock(),
    )
    loop = asyncio.get_running_loop()
    reported: list[dict] = []
    previous_handler = loop.get_exception_handler()
    loop.set_exception_handler(lambda _loop, context: reported.append(context))
    try:
        caller = asyncio.ensure_future(fetcher.fetch_all())
        await asyncio.sleep(0)
        refresh = fetcher._inflight
        assert refresh is not None
        await asyncio.sleep(0)

        caller.cancel()
        with pytest.raises(asyncio.CancelledError):
            await caller

        release.set()
        await asyncio.wait([refresh])
        await asyncio.sleep(0)
        assert refresh.done() and not refresh.cancelled()
        assert fetcher._inflight is None

        del refresh, caller
        gc.collect()
        await asyncio.sleep(0)
    finally:
        loop.set_exception_handler(previous_handler)

    assert reported == []
