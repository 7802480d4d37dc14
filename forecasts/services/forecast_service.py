import logging
from dataclasses import dataclass
from typing import Union

from ..core.errors import ForecastError, GeocodeError, WeatherError
from ..core.utils import weather_cache_key
from ..data.base import GeographicFix, WeatherSnapshot
from .geocode_service import GeocodeResolver
from .weather_service import WeatherCacheGateway

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class NothingRequested:
    pass

@dataclass(frozen=True)
class LookupSuccess:
    fix: GeographicFix
    weather: WeatherSnapshot
    cache_hit: bool

@dataclass(frozen=True)
class LookupFailure:
    error: ForecastError

    @property
    def reason(self) -> str:
        return self.error.message

LookupOutcome = Union[NothingRequested, LookupSuccess, LookupFailure]

class ForecastService:
    """
    Orchestrates:
      address → geocode → cache key (country/postcode) → cached-or-fresh weather
    Failures come back as a LookupFailure; no partial results.
    """
    def __init__(self, resolver: GeocodeResolver, gateway: WeatherCacheGateway):
        self.resolver = resolver
        self.gateway = gateway

    async def lookup(self, address: str | None) -> LookupOutcome:
        if not address or not address.strip():
            return NothingRequested()

        try:
            fix = await self.resolver.resolve(address)
        except GeocodeError as exc:
            logger.warning("Geocoding failed (%s): %s", exc.reason, exc.message)
            return LookupFailure(exc)

        key = weather_cache_key(fix)
        try:
            cache_hit = self.gateway.is_cached(key)
            weather = await self.gateway.fetch_weather(key, fix.latitude, fix.longitude)
        except WeatherError as exc:
            logger.warning("Weather lookup failed for %s (%s): %s", key, exc.reason, exc.message)
            return LookupFailure(exc)

        return LookupSuccess(fix=fix, weather=weather, cache_hit=cache_hit)
