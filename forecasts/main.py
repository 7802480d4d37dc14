from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Routers
from .routers.forecasts import router as forecasts_router

# Core modules
from .core.cache import Cache, build_cache
from .core.config import Settings, settings as default_settings
from .core.logging import configure_logging, CorrelationIdMiddleware
from .core.metrics import PromMiddleware, metrics_endpoint

# Pipeline
from .data.base import AddressSearch, WeatherLookup
from .data.geocode_client import geocode_client
from .data.weather_client import weather_client
from .services.forecast_service import ForecastService
from .services.geocode_service import GeocodeResolver
from .services.weather_service import WeatherCacheGateway

def create_app(
    settings: Settings | None = None,
    *,
    cache: Cache | None = None,
    search: AddressSearch | None = None,
    weather: WeatherLookup | None = None,
) -> FastAPI:
    """
    App factory so tests and ASGI servers can instantiate cleanly.
    Collaborators default to what settings select; tests pass their own.
    """
    settings = settings or default_settings
    configure_logging()  # Set up JSON logs + correlation-id filter

    app = FastAPI(
        title="Forecast Lookup API",
        version="1.0.0",
        description="Address → geocode → current weather, cached per postal region.",
    )

    # CORS: allow your static site to call the API.
    allow_origins = [o.strip() for o in settings.ALLOW_ORIGINS.split(",")] if settings.ALLOW_ORIGINS else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["ETag","X-Request-Id"],
    )

    # Observability middlewares
    app.add_middleware(CorrelationIdMiddleware)  # Adds/propagates X-Request-Id
    if settings.PROMETHEUS_ENABLED:
        app.add_middleware(PromMiddleware)       # Records req/latency metrics

    # One cache per app; shared by all requests
    gateway = WeatherCacheGateway(
        cache if cache is not None else build_cache(settings),
        weather if weather is not None else weather_client(settings),
        ttl_seconds=settings.CACHE_TTL_SECONDS,
    )
    resolver = GeocodeResolver(search if search is not None else geocode_client(settings))
    app.state.settings = settings
    app.state.forecast_service = ForecastService(resolver, gateway)

    # Meta routes
    @app.get("/v1/health", tags=["meta"])
    def health():
        return {"status": "ok"}

    @app.get("/v1/ping", tags=["meta"])
    def ping():
        return {"pong": True}

    if settings.PROMETHEUS_ENABLED:
        # Standard Prometheus scrape endpoint
        app.add_route("/v1/metrics", metrics_endpoint, methods=["GET"])

    # Business routes
    app.include_router(forecasts_router, prefix="/v1", tags=["forecast"])

    return app

app = create_app()
