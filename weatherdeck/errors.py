"""Error kinds raised by the provider clients and surfaced by the coordinator."""


class WeatherError(Exception):
    """Base class for all weatherdeck failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidInput(WeatherError):
    """Search text was blank. Suppressed silently, never surfaced."""


class NotFound(WeatherError):
    """The provider could not resolve the requested location."""


class NetworkError(WeatherError):
    """Transport or provider failure, including timeouts and bad payloads."""


class GeolocationError(WeatherError):
    """The device position could not be determined."""


class PermissionDenied(GeolocationError):
    pass


class Unsupported(GeolocationError):
    pass
