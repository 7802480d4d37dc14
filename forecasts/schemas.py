from pydantic import BaseModel, Field

class ForecastRequest(BaseModel):
    address: str = ""

class Weather(BaseModel):
    temperature: float
    temperature_min: float
    temperature_max: float
    humidity: int = Field(ge=0, le=100)
    pressure: int
    description: str

class ForecastResponse(BaseModel):
    address: str | None = None
    address_default: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    country_code: str | None = None
    postal_code: str | None = None
    weather: Weather | None = None
    cached: bool = False
    etag: str | None = None
