"""Tests for weather, search and chart value types."""

from dataclasses import FrozenInstanceError
from datetime import UTC, date, datetime

import pytest

from weatherdeck.models.chart import GraphScale
from weatherdeck.models.common import from_epoch, to_epoch, utc_day
from weatherdeck.models.search import Channel, CityQuery, CoordinateQuery, SearchToken
from weatherdeck.models.weather import ForecastViews, WeatherSnapshot
from weatherdeck.tests.fakes import make_sample


class TestWeatherSnapshot:
    def test_coordinate(self, london: WeatherSnapshot):
        assert london.coordinate == (51.5085, -0.1257)

    def test_icon_url(self, london: WeatherSnapshot):
        assert london.icon_url == "https://openweathermap.org/img/wn/04d@2x.png"

    def test_frozen(self, london: WeatherSnapshot):
        with pytest.raises(FrozenInstanceError):
            london.temp = 20.0


class TestForecastSample:
    def test_timestamp_and_day_are_utc(self):
        sample = make_sample(1770714000, 6.0)
        assert sample.timestamp == datetime(2026, 2, 10, 9, tzinfo=UTC)
        assert sample.day == date(2026, 2, 10)

    def test_day_boundary(self):
        # 23:59:59 and 00:00:00 fall on different days
        assert utc_day(1770767999) == date(2026, 2, 10)
        assert utc_day(1770768000) == date(2026, 2, 11)


class TestForecastViews:
    def test_empty(self):
        views = ForecastViews.empty()
        assert views.is_empty
        assert views == ForecastViews(daily=(), hourly=())

    def test_not_empty_with_hourly(self):
        views = ForecastViews(daily=(), hourly=(make_sample(1770714000, 6.0),))
        assert not views.is_empty


class TestSearchTypes:
    def test_queries_hash_by_value(self):
        assert {CityQuery("Oslo"), CityQuery("Oslo")} == {CityQuery("Oslo")}
        assert CoordinateQuery(1.0, 2.0) == CoordinateQuery(lat=1.0, lon=2.0)

    def test_tokens_distinguish_channels(self):
        assert SearchToken(Channel.CITY, 1) != SearchToken(Channel.COORDINATES, 1)


class TestHelpers:
    def test_epoch_round_trip(self):
        moment = datetime(2026, 2, 10, 13, tzinfo=UTC)
        assert from_epoch(to_epoch(moment)) == moment

    def test_naive_taken_as_utc(self):
        assert to_epoch(datetime(2026, 2, 10, 9)) == 1770714000

    def test_graph_scale_span(self):
        assert GraphScale(min=2.0, max=12.5, unit="°C", precision=0).span == 10.5
