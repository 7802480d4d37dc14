import json
import math
import time
from typing import Any, Awaitable, Callable, NamedTuple

import redis
from cachetools import TLRUCache

from .config import Settings


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _time_to_use(_key, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class Cache:
    """
    Keyed store with per-entry expiry, backed by Redis or an in-process LRU.

    Values must be JSON-serializable so both backends behave the same.
    There is no locking around ``compute``: concurrent misses on one key
    each call it and the last write wins.
    """
    def __init__(self, backend: Any = None, maxsize: int = 4096,
                 timer: Callable[[], float] = time.monotonic):
        self.backend = backend
        self._local = TLRUCache(maxsize=maxsize, ttu=_time_to_use, timer=timer)

    def exists(self, key: str) -> bool:
        if self.backend is not None:
            return bool(self.backend.exists(key))
        return key in self._local

    def get(self, key: str) -> Any | None:
        if self.backend is not None:
            raw = self.backend.get(key)
            return json.loads(raw) if raw is not None else None
        entry = self._local.get(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any, ttl: float) -> None:
        if self.backend is not None:
            # Redis SETEX takes whole seconds, at least one
            self.backend.setex(key, max(1, math.ceil(ttl)), json.dumps(value, separators=(",", ":")))
        else:
            self._local[key] = _Entry(value, ttl)

    async def fetch(self, key: str, ttl: float, compute: Callable[[], Awaitable[Any]]) -> Any:
        """Return the live value under ``key``, or await ``compute`` and store its result."""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        self.set(key, value, ttl)
        return value

    def clear(self) -> None:
        if self.backend is not None:
            self.backend.flushdb()
        else:
            self._local.clear()


def build_cache(settings: Settings) -> Cache:
    """Factory picks Redis or in-memory based on env flags."""
    if settings.USE_REDIS:
        return Cache(backend=redis.Redis.from_url(settings.REDIS_URL, decode_responses=True))
    return Cache(maxsize=settings.CACHE_MAXSIZE)
