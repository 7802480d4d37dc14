from __future__ import annotations

from typing import Any, List, Optional

import pytest
import redis

from forecasts.core.cache import Cache
from forecasts.core.errors import WeatherError
from forecasts.data.base import SearchResult, WeatherSnapshot
from forecasts.data.weather_client import MockWeather

CUPERTINO = "1 Infinite Loop, Cupertino, California"


class Clock:
    """Manually advanced monotonic timer."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StaticSearch:
    """Address search returning a canned response."""

    def __init__(self, response: Optional[List[SearchResult]]) -> None:
        self.response = response
        self.calls: List[str] = []

    async def search(self, address: str) -> Optional[List[SearchResult]]:
        self.calls.append(address)
        return self.response


class CountingWeather:
    def __init__(self) -> None:
        self.calls = 0
        self._inner = MockWeather()

    async def fetch(self, latitude: float, longitude: float) -> WeatherSnapshot:
        self.calls += 1
        return await self._inner.fetch(latitude, longitude)


class FailingWeather:
    def __init__(self) -> None:
        self.calls = 0

    async def fetch(self, latitude: float, longitude: float) -> WeatherSnapshot:
        self.calls += 1
        raise WeatherError("Weather provider returned HTTP 503")


class RecordingCache(Cache):
    """Cache that records every access."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.accesses: List[str] = []

    def exists(self, key: str) -> bool:
        self.accesses.append(f"exists:{key}")
        return super().exists(key)

    def get(self, key: str) -> Any:
        self.accesses.append(f"get:{key}")
        return super().get(key)


class UnreachableRedis:
    """Redis client whose every command fails as if the server were down."""

    def exists(self, key):
        raise redis.ConnectionError("redis down")

    def get(self, key):
        raise redis.ConnectionError("redis down")

    def setex(self, key, ttl, value):
        raise redis.ConnectionError("redis down")


class CorruptRedis:
    """Redis client holding a value that is not a weather snapshot."""

    def __init__(self, raw: str) -> None:
        self.raw = raw

    def exists(self, key):
        return 1

    def get(self, key):
        return self.raw

    def setex(self, key, ttl, value):
        self.raw = value


def search_payload(
    lat: Any = "37.3316756",
    lon: Any = "-122.0300982",
    country_code: Any = "us",
    postcode: Any = "95014",
) -> dict:
    return {"lat": lat, "lon": lon, "address": {"country_code": country_code, "postcode": postcode}}


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def cache(clock: Clock) -> RecordingCache:
    return RecordingCache(timer=clock)
