"""Key to boolean caches with optional time to live."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta


class NoSuchKeyError(LookupError):
    """Raised when a key is missing from a cache or has expired."""

    def __init__(self, message: str = "there's no such key existing in cache") -> None:
        super().__init__(message)


TTL = "float | timedelta | None"


def _seconds(ttl: float | timedelta | None) -> float:
    if ttl is None:
        return -1.0
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


@dataclass(frozen=True)
class _Item:
    value: bool
    expires_at: float
    ttl: float

    def expired(self, now: float) -> bool:
        return self.ttl > 0 and now > self.expires_at


class Cache(ABC):
    """A cache of boolean results keyed by string."""

    @abstractmethod
    def set(self, key: str, value: bool, ttl: float | timedelta | None = None) -> None:
        """Store ``value`` under ``key``; a ttl of None or <= 0 never expires."""

    @abstractmethod
    def get(self, key: str) -> bool:
        """Return the value for ``key`` or raise NoSuchKeyError."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` or raise NoSuchKeyError."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every item."""


class DefaultCache(Cache):
    """A plain dictionary backed cache, not safe for concurrent use."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._items: dict[str, _Item] = {}

    def set(self, key: str, value: bool, ttl: float | timedelta | None = None) -> None:
        seconds = _seconds(ttl)
        self._items[key] = _Item(value, self._clock() + seconds, seconds)

    def get(self, key: str) -> bool:
        try:
            item = self._items[key]
        except KeyError:
            raise NoSuchKeyError() from None
        if item.expired(self._clock()):
            del self._items[key]
            raise NoSuchKeyError()
        return item.value

    def delete(self, key: str) -> None:
        try:
            del self._items[key]
        except KeyError:
            raise NoSuchKeyError() from None

    def clear(self) -> None:
        self._items = {}


class SyncCache(Cache):
    """A cache guarded by a lock, safe to share between threads."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._cache = DefaultCache(clock)
        self._lock = threading.Lock()

    def set(self, key: str, value: bool, ttl: float | timedelta | None = None) -> None:
        with self._lock:
            self._cache.set(key, value, ttl)

    def get(self, key: str) -> bool:
        with self._lock:
            return self._cache.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.delete(key)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()