"""Device position providers."""

import logging

from weatherdeck.errors import PermissionDenied, Unsupported
from weatherdeck.models.common import Coordinate

logger = logging.getLogger(__name__)


class UnsupportedGeolocator:
    """Used where no positioning source exists, e.g. a headless terminal."""

    async def get_current_position(self) -> Coordinate:
        raise Unsupported("Geolocation is not supported on this device")


class FixedGeolocator:
    """Reports a configured position, or denies access when ``allowed`` is False."""

    def __init__(self, lat: float, lon: float, allowed: bool = True):
        self.lat = lat
        self.lon = lon
        self.allowed = allowed

    async def get_current_position(self) -> Coordinate:
        if not self.allowed:
            raise PermissionDenied("Geolocation permission denied")
        logger.debug("Reporting fixed position %.4f,%.4f", self.lat, self.lon)
        return (self.lat, self.lon)
