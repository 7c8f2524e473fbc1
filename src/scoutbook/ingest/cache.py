"""Time-boxed single-value cache with an injectable clock."""

from __future__ import annotations

import time
from typing import Callable, Generic, Optional, TypeVar


T = TypeVar("T")

Clock = Callable[[], float]


class TimedCache(Generic[T]):
    """Holds one ``(value, expires_at)`` pair.

    ``get`` returns ``None`` once the clock reaches ``expires_at``; expired
    values are never handed out.
    """

    def __init__(self, ttl: float, *, clock: Clock = time.monotonic):
        if ttl < 0:
            raise ValueError("ttl must be non-negative")
        self.ttl = ttl
        self._clock = clock
        self._value: Optional[T] = None
        self._expires_at = 0.0

    @property
    def expires_at(self) -> float:
        return self._expires_at

    def get(self) -> Optional[T]:
        if self._value is None:
            return None
        if self._clock() >= self._expires_at:
            return None
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        self._expires_at = self._clock() + self.ttl

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0
