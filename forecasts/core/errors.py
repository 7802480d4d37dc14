"""
Closed set of lookup failures.

Each error carries a machine-readable ``reason`` next to the human-readable
``message`` so HTTP callers can branch on the former and show the latter.
"""


class ForecastError(Exception):
    reason: str = "forecast_error"

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason

    def to_dict(self) -> dict:
        return {"reason": self.reason, "message": self.message}


class InputMissing(ForecastError):
    """No address was given. Not a failure of the pipeline, just nothing to do."""
    reason = "input_missing"

    def __init__(self, message: str = "address is required"):
        super().__init__(message)


class GeocodeError(ForecastError):
    reason = "geocode_error"


class WeatherError(ForecastError):
    reason = "weather_error"
