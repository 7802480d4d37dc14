import logging
import math
from typing import Any, Mapping

from ..core.errors import GeocodeError
from ..data.base import AddressSearch, GeographicFix

logger = logging.getLogger(__name__)

def _required(payload: Mapping[str, Any], key: str, reason: str, message: str) -> Any:
    value = payload.get(key)
    if value is None or value == "":
        raise GeocodeError(message, reason=reason)
    return value

def _coordinate(raw: Any, reason: str, message: str) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError) as exc:
        raise GeocodeError(message, reason=reason) from exc
    if not math.isfinite(value):
        raise GeocodeError(message, reason=reason)
    return value

class GeocodeResolver:
    """
    Turns a free-text address into a validated GeographicFix.

    Only the first search result is used; there is no ranking between
    candidates. Any gap in the payload raises GeocodeError, so downstream
    code never sees a partial fix.
    """
    def __init__(self, search: AddressSearch):
        self.search = search

    async def resolve(self, address: str) -> GeographicFix:
        response = await self.search.search(address)
        if response is None:
            raise GeocodeError("Geocoder error", reason="no_response")
        if len(response) == 0:
            raise GeocodeError("Geocoder is empty", reason="no_results")

        data = response[0].data
        if not data:
            raise GeocodeError("Geocoder data error", reason="no_data")

        lat = _required(data, "lat", "missing_latitude", "Geocoder latitude is missing")
        lon = _required(data, "lon", "missing_longitude", "Geocoder longitude is missing")
        block = _required(data, "address", "missing_address", "Geocoder address is missing")
        if not isinstance(block, Mapping):
            raise GeocodeError("Geocoder address is missing", reason="missing_address")
        country_code = _required(block, "country_code", "missing_country_code", "Geocoder country code is missing")
        postal_code = _required(block, "postcode", "missing_postal_code", "Geocoder postal code is missing")

        fix = GeographicFix(
            latitude=_coordinate(lat, "invalid_latitude", "Geocoder latitude is invalid"),
            longitude=_coordinate(lon, "invalid_longitude", "Geocoder longitude is invalid"),
            country_code=str(country_code),
            postal_code=str(postal_code),
        )
        logger.info("Geocoded address to %s/%s", fix.country_code, fix.postal_code)
        return fix
