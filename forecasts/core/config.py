import os
from pydantic import BaseModel

class Settings(BaseModel):
    # Basic
    ENV: str = os.getenv("ENV", "dev")
    DEFAULT_ADDRESS: str = os.getenv("DEFAULT_ADDRESS", "1 Infinite Loop, Cupertino, California")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    # Data providers
    GEO_PROVIDER: str = os.getenv("GEO_PROVIDER", "mock")              # mock | nominatim
    GEO_BASE_URL: str = os.getenv("GEO_BASE_URL", "https://nominatim.openstreetmap.org")
    GEO_USER_AGENT: str = os.getenv("GEO_USER_AGENT", "forecast-lookup-api/1.0")
    WEATHER_PROVIDER: str = os.getenv("WEATHER_PROVIDER", "mock")      # mock | openweather
    WEATHER_BASE_URL: str = os.getenv("WEATHER_BASE_URL", "https://api.openweathermap.org")
    OPENWEATHER_API_KEY: str | None = os.getenv("OPENWEATHER_API_KEY")

    # CORS
    ALLOW_ORIGINS: str = os.getenv("ALLOW_ORIGINS", "*")

    # Cache (weather is kept per postal region for 30 minutes)
    CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", "1800"))
    CACHE_MAXSIZE: int = int(os.getenv("CACHE_MAXSIZE", "4096"))
    USE_REDIS: bool = os.getenv("USE_REDIS", "false").lower() == "true"
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Metrics
    PROMETHEUS_ENABLED: bool = os.getenv("PROMETHEUS_ENABLED", "true").lower() == "true"

settings = Settings()
