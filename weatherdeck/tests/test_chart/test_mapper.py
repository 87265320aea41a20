"""Tests for chart scaling and plot geometry."""

from datetime import date

import pytest

from weatherdeck.chart.mapper import (
    CoordinateMapper,
    daily_polylines,
    daily_scale,
    extract_points,
)
from weatherdeck.config.schema import ChartGeometry
from weatherdeck.models.chart import GraphScale, PlotPoint, SeriesPoint
from weatherdeck.models.common import MetricKind
from weatherdeck.models.weather import DailyBucket
from weatherdeck.tests.fakes import make_sample


def _points(*values: float) -> list[SeriesPoint]:
    return [SeriesPoint(time=i * 10800, value=v) for i, v in enumerate(values)]


@pytest.fixture
def mapper() -> CoordinateMapper:
    return CoordinateMapper()


class TestScale:
    def test_empty(self, mapper: CoordinateMapper):
        scale = mapper.scale([], MetricKind.TEMPERATURE)
        assert (scale.min, scale.max) == (0, 10)

    def test_temperature_padding(self, mapper: CoordinateMapper):
        scale = mapper.scale(_points(10, 14, 12), MetricKind.TEMPERATURE)
        assert (scale.min, scale.max) == (8.5, 15.5)
        assert scale.unit == "°C"
        assert scale.precision == 0

    def test_temperature_flat(self, mapper: CoordinateMapper):
        scale = mapper.scale(_points(5, 5), MetricKind.TEMPERATURE)
        assert (scale.min, scale.max) == (3.5, 6.5)

    def test_humidity_clamped(self, mapper: CoordinateMapper):
        assert _bounds(mapper.scale(_points(40, 60), MetricKind.HUMIDITY)) == (35, 65)
        assert _bounds(mapper.scale(_points(98, 99), MetricKind.HUMIDITY)) == (93, 100)
        assert _bounds(mapper.scale(_points(0, 3), MetricKind.HUMIDITY)) == (0, 8)

    def test_humidity_out_of_range_falls_back(self, mapper: CoordinateMapper):
        scale = mapper.scale(_points(105, 105), MetricKind.HUMIDITY)
        assert (scale.min, scale.max) == (100, 110)

    def test_wind_padding(self, mapper: CoordinateMapper):
        assert _bounds(mapper.scale(_points(3, 5), MetricKind.WIND)) == (2, 7)
        assert _bounds(mapper.scale(_points(3, 3), MetricKind.WIND)) == (1, 5)
        assert _bounds(mapper.scale(_points(0.5, 2), MetricKind.WIND)) == (0, 4)
        assert mapper.scale(_points(3), MetricKind.WIND).precision == 1

    def test_pressure_padding(self, mapper: CoordinateMapper):
        scale = mapper.scale(_points(1012, 1012), MetricKind.PRESSURE)
        assert (scale.min, scale.max) == (1009, 1015)
        assert scale.unit == " hPa"

    def test_max_always_above_min(self, mapper: CoordinateMapper):
        series = [(), (0,), (-40, -40), (100, 100), (0, 0), (1013.2,), (7, 3, 9)]
        for values in series:
            for metric in MetricKind:
                scale = mapper.scale(_points(*values), metric)
                assert scale.max > scale.min, (values, metric)


class TestPlotPoint:
    def test_linear_mapping(self, mapper: CoordinateMapper):
        scale = GraphScale(min=0, max=100, unit="%", precision=0)
        assert mapper.to_plot_point(0, 0, 3, scale) == PlotPoint(50, 270)
        assert mapper.to_plot_point(1, 50, 3, scale) == PlotPoint(600, 160)
        assert mapper.to_plot_point(2, 100, 3, scale) == PlotPoint(1150, 50)

    def test_single_point_spacing(self, mapper: CoordinateMapper):
        scale = GraphScale(min=0, max=10, unit="", precision=0)
        assert mapper.to_plot_point(0, 5, 1, scale).x == 50

    def test_flat_scale_uses_fallback_span(self, mapper: CoordinateMapper):
        scale = GraphScale(min=5, max=5, unit="", precision=0)
        assert mapper.to_plot_point(0, 10, 2, scale).y == 270 - 0.5 * 220

    def test_y_decreases_as_value_increases(self, mapper: CoordinateMapper):
        scale = GraphScale(min=-10, max=30, unit="°C", precision=0)
        ys = [mapper.to_plot_point(0, v, 8, scale).y for v in range(-15, 36, 5)]
        assert all(a > b for a, b in zip(ys, ys[1:]))

    def test_fixed_step_geometry(self):
        mapper = CoordinateMapper(ChartGeometry(x_origin=50, x_step=100))
        scale = GraphScale(min=0, max=10, unit="", precision=0)
        assert [mapper.to_plot_point(i, 0, 2, scale).x for i in range(3)] == [50, 150, 250]


class TestPolyline:
    def test_polyline(self, mapper: CoordinateMapper):
        points = [PlotPoint(50, 160), PlotPoint(600, 50.126)]
        assert mapper.to_polyline_string(points) == "50,160 600,50.13"

    def test_polyline_needs_two_points(self, mapper: CoordinateMapper):
        assert mapper.to_polyline_string([]) == ""
        assert mapper.to_polyline_string([PlotPoint(50, 160)]) == ""

    def test_polygon_closes_at_baseline(self, mapper: CoordinateMapper):
        points = [PlotPoint(50, 160), PlotPoint(600, 50), PlotPoint(1150, 100)]
        assert mapper.to_filled_polygon_string(points) == (
            "50,160 600,50 1150,100 1150,320 50,320"
        )

    def test_polygon_needs_two_points(self, mapper: CoordinateMapper):
        assert mapper.to_filled_polygon_string([PlotPoint(50, 160)]) == ""


class TestFormatLabel:
    def test_units_and_precision(self):
        assert CoordinateMapper.format_label(12.4, MetricKind.TEMPERATURE) == "12°C"
        assert CoordinateMapper.format_label(81, MetricKind.HUMIDITY) == "81%"
        assert CoordinateMapper.format_label(3.26, MetricKind.WIND) == "3.3 m/s"
        assert CoordinateMapper.format_label(1013, MetricKind.PRESSURE) == "1013 hPa"

    def test_halves_round_away_from_zero(self):
        assert CoordinateMapper.format_label(12.5, MetricKind.TEMPERATURE) == "13°C"
        assert CoordinateMapper.format_label(13.5, MetricKind.TEMPERATURE) == "14°C"
        assert CoordinateMapper.format_label(-2.5, MetricKind.TEMPERATURE) == "-3°C"
        assert CoordinateMapper.format_label(3.25, MetricKind.WIND) == "3.3 m/s"


class TestBuildChart:
    def test_extract_points_keeps_icon_for_temperature_only(self):
        samples = [make_sample(0, 5, icon="10d", humidity=80)]
        assert extract_points(samples, MetricKind.TEMPERATURE)[0].icon == "10d"
        humidity = extract_points(samples, MetricKind.HUMIDITY)[0]
        assert humidity.icon is None
        assert humidity.value == 80

    def test_chart_for_hourly_window(self, mapper: CoordinateMapper):
        samples = [make_sample(i * 10800, 0, humidity=h) for i, h in enumerate((40, 50, 60))]
        chart = mapper.build_chart(samples, MetricKind.HUMIDITY)
        assert (chart.scale.min, chart.scale.max) == (35, 65)
        assert [p.x for p in chart.points] == [50, 600, 1150]
        assert chart.labels == ("40%", "50%", "60%")
        assert chart.polyline.count(",") == 3
        assert chart.polygon.endswith("1150,320 50,320")

    def test_chart_for_empty_window(self, mapper: CoordinateMapper):
        chart = mapper.build_chart([], MetricKind.WIND)
        assert chart.points == ()
        assert chart.polyline == ""
        assert chart.polygon == ""


def _bucket(day: int, rep: float, low: float, high: float) -> DailyBucket:
    return DailyBucket(
        day=date(2026, 2, day),
        representative=make_sample(0, rep, temp_min=low, temp_max=high),
        temp_min=low,
        temp_max=high,
    )


class TestDailyChart:
    def test_scale_spans_minima_and_maxima(self):
        scale = daily_scale([_bucket(10, 5, 2, 10), _bucket(11, 8, 4, 12)])
        assert (scale.min, scale.max) == (2, 12)

    def test_scale_defaults(self):
        assert _bounds(daily_scale([])) == (0, 30)
        assert _bounds(daily_scale([_bucket(10, 5, 5, 5)])) == (5, 15)

    def test_polylines(self):
        lines = daily_polylines([_bucket(10, 5, 2, 10), _bucket(11, 8, 4, 12)])
        assert lines == {
            "temp": "50,190 150,130",
            "max": "50,90 150,50",
            "min": "50,250 150,210",
        }

    def test_single_day_keeps_its_point(self):
        lines = daily_polylines([_bucket(10, 10, 5, 15)])
        assert lines == {"temp": "50,150", "max": "50,50", "min": "50,250"}

    def test_no_days_no_lines(self):
        assert daily_polylines([]) == {"temp": "", "max": "", "min": ""}


def _bounds(scale: GraphScale) -> tuple[float, float]:
    return (scale.min, scale.max)
