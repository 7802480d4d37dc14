import math
from typing import Any, Mapping, Optional, Protocol, Sequence
from dataclasses import dataclass, field

# ----- Data shapes (thin & explicit) -----

@dataclass(frozen=True)
class SearchResult:
    # Raw provider payload: {"lat": "..", "lon": "..", "address": {"country_code": .., "postcode": ..}}
    data: Optional[Mapping[str, Any]] = field(default=None)

@dataclass(frozen=True)
class GeographicFix:
    latitude: float
    longitude: float
    country_code: str           # e.g. "us", as returned by the geocoder
    postal_code: str            # e.g. "95014"

@dataclass(frozen=True)
class WeatherSnapshot:
    # Celsius, percent, hectopascal
    temperature: float
    temperature_min: float
    temperature_max: float
    humidity: int
    pressure: int
    description: str

    def __post_init__(self):
        # Shared by every provider, so nothing out of range reaches the cache
        for name in ("temperature", "temperature_min", "temperature_max"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} is not a finite number")
        if not 0 <= self.humidity <= 100:
            raise ValueError(f"humidity {self.humidity} is outside 0..100")
        if self.pressure <= 0:
            raise ValueError(f"pressure {self.pressure} is not positive")
        if not self.description:
            raise ValueError("description is empty")

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "temperature_min": self.temperature_min,
            "temperature_max": self.temperature_max,
            "humidity": self.humidity,
            "pressure": self.pressure,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "WeatherSnapshot":
        return cls(
            temperature=float(d["temperature"]),
            temperature_min=float(d["temperature_min"]),
            temperature_max=float(d["temperature_max"]),
            humidity=int(d["humidity"]),
            pressure=int(d["pressure"]),
            description=str(d["description"]),
        )

# ----- Protocols (interfaces) -----

class AddressSearch(Protocol):
    async def search(self, address: str) -> Optional[Sequence[SearchResult]]: ...

class WeatherLookup(Protocol):
    async def fetch(self, latitude: float, longitude: float) -> WeatherSnapshot: ...
