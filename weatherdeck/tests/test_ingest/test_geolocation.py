"""Tests for position providers."""

import asyncio

import pytest

from weatherdeck.errors import GeolocationError, PermissionDenied, Unsupported
from weatherdeck.ingest.geolocation import FixedGeolocator, UnsupportedGeolocator


class TestGeolocators:
    def test_fixed_position(self):
        geo = FixedGeolocator(48.8566, 2.3522)
        assert asyncio.run(geo.get_current_position()) == (48.8566, 2.3522)

    def test_permission_denied(self):
        geo = FixedGeolocator(48.8566, 2.3522, allowed=False)
        with pytest.raises(PermissionDenied):
            asyncio.run(geo.get_current_position())

    def test_unsupported(self):
        with pytest.raises(Unsupported) as exc:
            asyncio.run(UnsupportedGeolocator().get_current_position())
        assert isinstance(exc.value, GeolocationError)
