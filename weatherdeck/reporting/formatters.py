"""Output formatters for weather state."""

import json
from collections.abc import Sequence
from datetime import datetime

from weatherdeck.chart.mapper import CoordinateMapper
from weatherdeck.clock import city_time_now
from weatherdeck.models.chart import Chart
from weatherdeck.models.common import MetricKind, from_epoch
from weatherdeck.models.weather import ForecastSample, ForecastViews, WeatherSnapshot


def format_weather_text(w: WeatherSnapshot, city_time: datetime | None = None) -> str:
    """Plain text current conditions."""
    lines = [
        f"=== {w.name}, {w.country} ===",
        f"{w.description.capitalize()} | {w.temp:.0f}°C (feels like {w.feels_like:.0f}°C)",
        f"Humidity: {w.humidity}% | Pressure: {w.pressure} hPa | "
        f"Wind: {w.wind_speed:.1f} m/s",
    ]
    if w.utc_offset is not None:
        sunrise = city_time_now(w.utc_offset, from_epoch(w.sunrise))
        sunset = city_time_now(w.utc_offset, from_epoch(w.sunset))
        lines.append(f"Sunrise: {sunrise:%H:%M} | Sunset: {sunset:%H:%M}")
    if city_time is not None:
        lines.append(f"Local time: {city_time:%a %d %b %H:%M:%S}")
    return "\n".join(lines)


def format_daily_text(views: ForecastViews) -> str:
    if not views.daily:
        return "No daily forecast"
    lines = ["--- Daily ---"]
    for b in views.daily:
        lines.append(
            f"{b.day:%a %d %b}: {b.temp_min:.0f}° / {b.temp_max:.0f}° "
            f"{b.representative.description}"
        )
    return "\n".join(lines)


def format_hourly_text(samples: Sequence[ForecastSample]) -> str:
    if not samples:
        return "No hourly forecast"
    lines = ["--- Next hours (UTC) ---"]
    for s in samples:
        lines.append(
            f"{s.timestamp:%a %H:%M}: "
            f"{CoordinateMapper.format_label(s.temp, MetricKind.TEMPERATURE)} "
            f"{s.humidity}% {CoordinateMapper.format_label(s.wind_speed, MetricKind.WIND)}"
        )
    return "\n".join(lines)


def format_chart_text(chart: Chart) -> str:
    lines = [
        f"--- {chart.metric} chart ---",
        f"Scale: {chart.scale.min:.{chart.scale.precision}f} to "
        f"{chart.scale.max:.{chart.scale.precision}f}{chart.scale.unit}",
        f"Labels: {' '.join(chart.labels) or '-'}",
        f"Polyline: {chart.polyline or '-'}",
        f"Polygon: {chart.polygon or '-'}",
    ]
    return "\n".join(lines)


def format_state_json(w: WeatherSnapshot | None, views: ForecastViews) -> str:
    """JSON state for programmatic consumption."""
    data = {
        "weather": None,
        "daily": [
            {
                "day": b.day.isoformat(),
                "dt": b.representative.dt,
                "temp": b.representative.temp,
                "temp_min": b.temp_min,
                "temp_max": b.temp_max,
                "icon": b.representative.icon,
            }
            for b in views.daily
        ],
        "hourly": [
            {
                "dt": s.dt,
                "temp": s.temp,
                "humidity": s.humidity,
                "pressure": s.pressure,
                "wind_speed": s.wind_speed,
                "icon": s.icon,
            }
            for s in views.hourly
        ],
    }
    if w is not None:
        data["weather"] = {
            "name": w.name,
            "country": w.country,
            "temp": w.temp,
            "feels_like": w.feels_like,
            "humidity": w.humidity,
            "pressure": w.pressure,
            "wind_speed": w.wind_speed,
            "description": w.description,
            "icon": w.icon,
            "utc_offset": w.utc_offset,
            "lat": w.lat,
            "lon": w.lon,
        }
    return json.dumps(data, indent=2, ensure_ascii=False)
