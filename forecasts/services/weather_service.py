import json
import logging

import redis
from prometheus_client import Counter

from ..core.cache import Cache
from ..core.errors import WeatherError
from ..data.base import WeatherLookup, WeatherSnapshot

logger = logging.getLogger(__name__)

CACHE_LOOKUPS = Counter("weather_cache_lookups_total", "Weather cache lookups", ["result"])

class WeatherCacheGateway:
    """
    Serves weather per cache key, calling the provider at most once per key
    per TTL window (barring concurrent misses, which may each fetch).
    Provider failures propagate as-is and are never cached. Cache backend
    failures and unreadable cached values surface as WeatherError with
    reason ``cache_error``.
    """
    def __init__(self, cache: Cache, weather: WeatherLookup, ttl_seconds: float = 30 * 60):
        self.cache = cache
        self.weather = weather
        self.ttl_seconds = ttl_seconds

    def is_cached(self, key: str) -> bool:
        try:
            return self.cache.exists(key)
        except redis.RedisError as exc:
            logger.error("Weather cache unavailable: %s", exc)
            raise WeatherError("Weather cache is unavailable", reason="cache_error") from exc

    async def fetch_weather(self, key: str, latitude: float, longitude: float) -> WeatherSnapshot:
        missed = False

        async def compute() -> dict:
            nonlocal missed
            missed = True
            logger.info("Weather cache miss for %s", key)
            snapshot = await self.weather.fetch(latitude, longitude)
            return snapshot.to_dict()

        try:
            payload = await self.cache.fetch(key, self.ttl_seconds, compute)
        except (redis.RedisError, json.JSONDecodeError) as exc:
            logger.error("Weather cache unavailable for %s: %s", key, exc)
            raise WeatherError("Weather cache is unavailable", reason="cache_error") from exc
        CACHE_LOOKUPS.labels(result="miss" if missed else "hit").inc()

        try:
            return WeatherSnapshot.from_dict(payload)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Cached weather for %s is unreadable: %s", key, exc)
            raise WeatherError("Cached weather is unreadable", reason="cache_error") from exc
