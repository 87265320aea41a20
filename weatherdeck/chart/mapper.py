"""Map forecast series to 2-D plot geometry for SVG-style charts.

Coordinates use a top-left origin: larger values map to smaller y.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from weatherdeck.config.defaults import DAILY_GEOMETRY, HOURLY_GEOMETRY
from weatherdeck.config.schema import ChartGeometry
from weatherdeck.models.chart import Chart, GraphScale, PlotPoint, SeriesPoint
from weatherdeck.models.common import MetricKind
from weatherdeck.models.weather import DailyBucket, ForecastSample

UNITS: dict[MetricKind, str] = {
    MetricKind.TEMPERATURE: "°C",
    MetricKind.HUMIDITY: "%",
    MetricKind.WIND: " m/s",
    MetricKind.PRESSURE: " hPa",
}

FALLBACK_SPAN = 10.0
EMPTY_SCALE_MAX = 10.0
EMPTY_DAILY_MAX = 30.0


def precision_for(metric: MetricKind) -> int:
    return 1 if metric == MetricKind.WIND else 0


def metric_value(sample: ForecastSample, metric: MetricKind) -> float:
    if metric == MetricKind.TEMPERATURE:
        return sample.temp
    if metric == MetricKind.HUMIDITY:
        return sample.humidity
    if metric == MetricKind.WIND:
        return sample.wind_speed
    if metric == MetricKind.PRESSURE:
        return sample.pressure
    raise ValueError(f"Unknown metric: {metric}")


def extract_points(samples: Sequence[ForecastSample], metric: MetricKind) -> list[SeriesPoint]:
    """Pick one metric out of each sample. Icons are kept for temperature only."""
    return [
        SeriesPoint(
            time=s.dt,
            value=metric_value(s, metric),
            icon=s.icon if metric == MetricKind.TEMPERATURE else None,
        )
        for s in samples
    ]


def _fmt(coord: float) -> str:
    text = f"{coord:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _join(points: Sequence[PlotPoint]) -> str:
    return " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in points)


class CoordinateMapper:
    def __init__(self, geometry: ChartGeometry = HOURLY_GEOMETRY):
        self.geometry = geometry

    def scale(self, points: Sequence[SeriesPoint], metric: MetricKind) -> GraphScale:
        """Axis bounds for ``points`` with per-metric padding. Always max > min."""
        unit = UNITS[metric]
        precision = precision_for(metric)
        if not points:
            return GraphScale(min=0.0, max=EMPTY_SCALE_MAX, unit=unit, precision=precision)

        values = [p.value for p in points]
        low, high = float(min(values)), float(max(values))
        flat = high == low

        if metric == MetricKind.TEMPERATURE:
            low, high = low - 1.5, high + 1.5
        elif metric == MetricKind.HUMIDITY:
            low, high = max(low - 5, 0.0), min(high + 5, 100.0)
        elif metric == MetricKind.WIND:
            low, high = max(low - (2 if flat else 1), 0.0), high + 2
        elif metric == MetricKind.PRESSURE:
            low, high = low - 3, high + 3

        if high <= low:
            high = low + FALLBACK_SPAN
        return GraphScale(min=low, max=high, unit=unit, precision=precision)

    def x_position(self, index: int, point_count: int) -> float:
        g = self.geometry
        if g.x_step is not None:
            return g.x_origin + index * g.x_step
        spacing = g.width / ((point_count - 1) or 1)
        return g.x_origin + index * spacing

    def y_position(self, value: float, scale: GraphScale) -> float:
        g = self.geometry
        span = scale.span or FALLBACK_SPAN
        return g.y_bottom - (value - scale.min) / span * g.height

    def to_plot_point(
        self, index: int, value: float, point_count: int, scale: GraphScale
    ) -> PlotPoint:
        return PlotPoint(
            x=self.x_position(index, point_count),
            y=self.y_position(value, scale),
        )

    def plot(self, values: Sequence[float], scale: GraphScale) -> list[PlotPoint]:
        count = len(values)
        return [self.to_plot_point(i, v, count, scale) for i, v in enumerate(values)]

    def to_polyline_string(self, points: Sequence[PlotPoint]) -> str:
        if len(points) < 2:
            return ""
        return _join(points)

    def to_filled_polygon_string(self, points: Sequence[PlotPoint]) -> str:
        """Polyline closed down to the baseline, for an area fill."""
        line = self.to_polyline_string(points)
        if not line:
            return ""
        base = _fmt(self.geometry.baseline)
        return f"{line} {_fmt(points[-1].x)},{base} {_fmt(points[0].x)},{base}"

    @staticmethod
    def format_label(value: float, metric: MetricKind) -> str:
        """Value rounded half away from zero to the metric's precision, plus unit."""
        step = Decimal(1).scaleb(-precision_for(metric))
        rounded = Decimal(value).quantize(step, rounding=ROUND_HALF_UP)
        return f"{rounded}{UNITS[metric]}"

    def build_chart(self, samples: Sequence[ForecastSample], metric: MetricKind) -> Chart:
        """Everything a renderer needs to draw one metric of the hourly window."""
        series = extract_points(samples, metric)
        scale = self.scale(series, metric)
        points = self.plot([p.value for p in series], scale)
        return Chart(
            metric=metric,
            scale=scale,
            points=tuple(points),
            polyline=self.to_polyline_string(points),
            polygon=self.to_filled_polygon_string(points),
            labels=tuple(self.format_label(p.value, metric) for p in series),
        )


def daily_scale(buckets: Sequence[DailyBucket]) -> GraphScale:
    """Unpadded temperature bounds across the day minima and maxima."""
    unit = UNITS[MetricKind.TEMPERATURE]
    if not buckets:
        return GraphScale(min=0.0, max=EMPTY_DAILY_MAX, unit=unit, precision=0)
    low = float(min(b.temp_min for b in buckets))
    high = float(max(b.temp_max for b in buckets))
    if high <= low:
        high = low + FALLBACK_SPAN
    return GraphScale(min=low, max=high, unit=unit, precision=0)


def daily_polylines(
    buckets: Sequence[DailyBucket], geometry: ChartGeometry = DAILY_GEOMETRY
) -> dict[str, str]:
    """Representative, maximum and minimum temperature lines for the daily chart.

    A single day still yields its one point.
    """
    mapper = CoordinateMapper(geometry)
    scale = daily_scale(buckets)
    lines = {
        "temp": [b.representative.temp for b in buckets],
        "max": [b.temp_max for b in buckets],
        "min": [b.temp_min for b in buckets],
    }
    return {
        name: _join(mapper.plot(values, scale))
        for name, values in lines.items()
    }
