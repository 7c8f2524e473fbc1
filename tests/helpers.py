"""Fakes shared by the test modules."""

from __future__ import annotations

from typing import Any, Callable, Optional

import httpx


UPSTREAM_URL = "https://upstream.test/api/baseball"

SAMPLE_ROWS: list[dict[str, Any]] = [
    {
        "Player name": "Babe Ruth",
        "position": "RF",
        "Games": 2503,
        "At-bat": 8399,
        "Hits": "2873",
        "HR": 714,
        "RBI": 2214,
        "BB": 2062,
        "AVG": 0.342,
        "OBP": 0.474,
        "SLG": 0.690,
        "OPS": 1.164,
    },
    {
        "player name": "Ty Cobb",
        "Position": "CF",
        "Games": "3,035",
        "At-bats": 11434,
        "Hits": 4189,
        "home run": 117,
        "run batted in": 1944,
        "stolen base": 897,
        "AVG": ".366",
        "On-base Plus Slugging": 0.945,
    },
    {
        "name": "Ted Williams",
        "position": "LF",
        "Games": 2292,
        "Hits": 2654,
        "Home run": 521,
        "RBI": 1839,
        "AVG": 0.344,
        "OPS": 1.116,
    },
]


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """Serves a payload through ``httpx.MockTransport`` and counts requests."""

    def __init__(self, payload: Any):
        self.payload = payload
        self.status_code = 200
        self.raw_body: Optional[bytes] = None
        self.error: Optional[Callable[[httpx.Request], Exception]] = None
        self.calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.error is not None:
            raise self.error(request)
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.payload)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeGenerator:
    def __init__(self, text: str = "  A patient slugger with rare power.  ", *, configured: bool = True):
        self.text = text
        self._configured = configured
        self.calls: list[dict[str, Any]] = []

    @property
    def configured(self) -> bool:
        return self._configured

    async def generate(self, prompt: str, *, temperature: float, max_tokens: int) -> str:
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        return self.text
