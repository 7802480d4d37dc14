import json

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response

from ..core.errors import GeocodeError, InputMissing, WeatherError
from ..core.utils import weak_etag
from ..schemas import ForecastRequest, ForecastResponse
from ..services.forecast_service import (
    ForecastService, LookupFailure, LookupSuccess, NothingRequested,
)

router = APIRouter()

def service_dep(request: Request) -> ForecastService:
    # Collaborators are built once in create_app and live on app.state.
    return request.app.state.forecast_service

def _etag_matches(if_none_match: str, etag: str) -> bool:
    """Weak comparison against a comma-separated If-None-Match list, or "*"."""
    candidates = [c.strip() for c in if_none_match.split(",")]
    if "*" in candidates:
        return True
    opaque = etag.removeprefix("W/")
    return any(c.removeprefix("W/") == opaque for c in candidates if c)

def _render(address: str, outcome: LookupSuccess) -> tuple[dict, str]:
    payload = {
        "address": address,
        "latitude": outcome.fix.latitude,
        "longitude": outcome.fix.longitude,
        "country_code": outcome.fix.country_code,
        "postal_code": outcome.fix.postal_code,
        "weather": outcome.weather.to_dict(),
    }
    # ETag covers the forecast only, not whether it came from cache
    etag = weak_etag(json.dumps(payload, separators=(',',':'), sort_keys=True).encode("utf-8"))
    payload["cached"] = outcome.cache_hit
    payload["etag"] = etag
    return payload, etag

async def _respond(svc: ForecastService, address: str | None, response: Response,
                   if_none_match: str | None, default_address: str):
    outcome = await svc.lookup(address)
    if isinstance(outcome, NothingRequested):
        return {"address": None, "address_default": default_address, "cached": False}
    if isinstance(outcome, LookupFailure):
        if isinstance(outcome.error, GeocodeError):
            status = 422
        elif isinstance(outcome.error, WeatherError) and outcome.error.reason == "cache_error":
            status = 503
        else:
            status = 502
        raise HTTPException(status_code=status, detail=outcome.error.to_dict())

    payload, etag = _render(address, outcome)
    if if_none_match and _etag_matches(if_none_match, etag):
        return Response(status_code=304, headers={"ETag": etag})
    response.headers["ETag"] = etag
    return payload

@router.get("/forecast", response_model=ForecastResponse, response_model_exclude_none=True)
async def get_forecast(
    request: Request,
    response: Response,
    address: str | None = Query(default=None),
    if_none_match: str | None = Header(default=None),
    svc: ForecastService = Depends(service_dep),
):
    return await _respond(svc, address, response, if_none_match, request.app.state.settings.DEFAULT_ADDRESS)

@router.post("/forecast", response_model=ForecastResponse, response_model_exclude_none=True)
async def post_forecast(
    body: ForecastRequest,
    request: Request,
    response: Response,
    if_none_match: str | None = Header(default=None),
    svc: ForecastService = Depends(service_dep),
):
    if not body.address.strip():
        raise HTTPException(status_code=400, detail=InputMissing().to_dict())
    return await _respond(svc, body.address, response, if_none_match, request.app.state.settings.DEFAULT_ADDRESS)
