from __future__ import annotations

from forecasts.core.utils import weather_cache_key
from forecasts.data.base import GeographicFix


def test_key_is_country_slash_postcode() -> None:
    fix = GeographicFix(latitude=37.3316756, longitude=-122.0300982, country_code="us", postal_code="95014")

    assert weather_cache_key(fix) == "us/95014"


def test_same_region_same_key_regardless_of_coordinates() -> None:
    a = GeographicFix(latitude=37.3316756, longitude=-122.0300982, country_code="us", postal_code="95014")
    b = GeographicFix(latitude=37.3316799, longitude=-122.0300911, country_code="us", postal_code="95014")
    c = GeographicFix(latitude=37.3230, longitude=-122.0322, country_code="us", postal_code="95014")

    assert weather_cache_key(a) == weather_cache_key(b) == weather_cache_key(c)


def test_case_is_passed_through() -> None:
    fix = GeographicFix(latitude=51.5, longitude=-0.12, country_code="GB", postal_code="SW1A 1AA")

    assert weather_cache_key(fix) == "GB/SW1A 1AA"
