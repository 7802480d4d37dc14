from __future__ import annotations

import pytest

from forecasts.core.errors import GeocodeError
from forecasts.data.base import SearchResult
from forecasts.data.geocode_client import MockAddressSearch
from forecasts.services.geocode_service import GeocodeResolver

from .conftest import CUPERTINO, StaticSearch, search_payload


async def _resolve(response):
    return await GeocodeResolver(StaticSearch(response)).resolve("somewhere")


async def _reason(response) -> str:
    with pytest.raises(GeocodeError) as info:
        await _resolve(response)
    return info.value.reason


@pytest.mark.asyncio
async def test_known_address_resolves_to_cupertino() -> None:
    fix = await GeocodeResolver(MockAddressSearch()).resolve(CUPERTINO)

    assert fix.latitude == pytest.approx(37.33, abs=0.1)
    assert fix.longitude == pytest.approx(-122.03, abs=0.1)
    assert fix.country_code == "us"
    assert fix.postal_code == "95014"


@pytest.mark.asyncio
async def test_first_result_wins() -> None:
    fix = await _resolve([
        SearchResult(data=search_payload(postcode="95014")),
        SearchResult(data=search_payload(postcode="10001")),
    ])

    assert fix.postal_code == "95014"


@pytest.mark.asyncio
async def test_coordinates_are_parsed_as_floats() -> None:
    fix = await _resolve([SearchResult(data=search_payload(lat="51.5", lon=-0.12))])

    assert fix.latitude == 51.5
    assert fix.longitude == -0.12


@pytest.mark.asyncio
async def test_no_response() -> None:
    assert await _reason(None) == "no_response"


@pytest.mark.asyncio
async def test_empty_response() -> None:
    assert await _reason([]) == "no_results"


@pytest.mark.asyncio
async def test_missing_data() -> None:
    assert await _reason([SearchResult(data=None)]) == "no_data"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload, reason",
    [
        ({"lon": "1", "address": {"country_code": "us", "postcode": "1"}}, "missing_latitude"),
        ({"lat": "1", "address": {"country_code": "us", "postcode": "1"}}, "missing_longitude"),
        ({"lat": "1", "lon": "1"}, "missing_address"),
        ({"lat": "1", "lon": "1", "address": {"postcode": "1"}}, "missing_country_code"),
        ({"lat": "1", "lon": "1", "address": {"country_code": "us"}}, "missing_postal_code"),
    ],
)
async def test_missing_fields(payload, reason) -> None:
    assert await _reason([SearchResult(data=payload)]) == reason


@pytest.mark.asyncio
async def test_empty_postcode_is_rejected() -> None:
    with pytest.raises(GeocodeError) as info:
        await _resolve([SearchResult(data=search_payload(postcode=""))])

    assert info.value.reason == "missing_postal_code"
    assert info.value.message == "Geocoder postal code is missing"


@pytest.mark.asyncio
@pytest.mark.parametrize("lat", ["north", "nan", "inf"])
async def test_unparseable_latitude_fails_closed(lat) -> None:
    assert await _reason([SearchResult(data=search_payload(lat=lat))]) == "invalid_latitude"


@pytest.mark.asyncio
async def test_unparseable_longitude_fails_closed() -> None:
    assert await _reason([SearchResult(data=search_payload(lon="west"))]) == "invalid_longitude"


@pytest.mark.asyncio
async def test_resolver_makes_a_single_upstream_call() -> None:
    search = StaticSearch([])
    with pytest.raises(GeocodeError):
        await GeocodeResolver(search).resolve("nowhere")

    assert search.calls == ["nowhere"]
