import logging

import httpx

from .base import WeatherLookup, WeatherSnapshot
from ..core.config import Settings
from ..core.errors import WeatherError
from ..core.utils import fnv1a_32, seeded_rand

logger = logging.getLogger(__name__)

DESCRIPTIONS = ["clear sky", "few clouds", "scattered clouds", "broken clouds", "light rain", "mist"]

class MockWeather(WeatherLookup):
    """
    Synthetic current conditions. Same coordinates (to ~100 m) → same snapshot.
    """
    async def fetch(self, latitude: float, longitude: float) -> WeatherSnapshot:
        seed = fnv1a_32(f"{latitude:.3f},{longitude:.3f}")
        r = seeded_rand(seed, 5)
        # Milder towards the equator, 2..32 °C
        base = 32.0 - abs(latitude) / 90.0 * 20.0 - r[0] * 10.0
        spread = 1.0 + r[1] * 5.0
        return WeatherSnapshot(
            temperature=round(base, 2),
            temperature_min=round(base - spread, 2),
            temperature_max=round(base + spread, 2),
            humidity=int(20 + r[2] * 75),
            pressure=int(995 + r[3] * 40),
            description=DESCRIPTIONS[int(r[4] * len(DESCRIPTIONS)) % len(DESCRIPTIONS)],
        )

class OpenWeatherClient(WeatherLookup):
    """
    Current weather from OpenWeatherMap (metric units).
    """
    def __init__(self, base_url: str, api_key: str, timeout: float = 10,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    async def fetch(self, latitude: float, longitude: float) -> WeatherSnapshot:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.get(
                    f"{self.base_url}/data/2.5/weather",
                    params={"lat": latitude, "lon": longitude, "units": "metric", "appid": self.api_key},
                )
                r.raise_for_status()
                j = r.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Weather provider returned %s", exc.response.status_code)
            raise WeatherError(f"Weather provider returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Weather request failed: %s", exc)
            raise WeatherError("Weather request failed") from exc
        except ValueError as exc:
            raise WeatherError("Weather provider returned invalid JSON") from exc

        try:
            main = j["main"]
            description = j["weather"][0]["description"]
            snapshot = WeatherSnapshot(
                temperature=float(main["temp"]),
                temperature_min=float(main["temp_min"]),
                temperature_max=float(main["temp_max"]),
                humidity=int(main["humidity"]),
                pressure=int(main["pressure"]),
                description=str(description),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise WeatherError(f"Weather payload is malformed: {exc}") from exc
        return snapshot

def weather_client(settings: Settings) -> WeatherLookup:
    if settings.WEATHER_PROVIDER == "openweather" and settings.OPENWEATHER_API_KEY:
        return OpenWeatherClient(
            settings.WEATHER_BASE_URL, settings.OPENWEATHER_API_KEY, timeout=settings.HTTP_TIMEOUT_SECONDS
        )
    return MockWeather()
