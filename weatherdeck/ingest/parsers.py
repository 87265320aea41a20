"""Extract the consumed fields from OpenWeatherMap response bodies."""

import logging
from typing import Any

from weatherdeck.errors import NetworkError
from weatherdeck.models.weather import ForecastSample, WeatherSnapshot

logger = logging.getLogger(__name__)


def parse_weather(raw: dict[str, Any]) -> WeatherSnapshot:
    """Build a WeatherSnapshot from a ``/weather`` body.

    Raises NetworkError if a required field is missing or malformed.
    """
    try:
        main = raw["main"]
        coord = raw["coord"]
        sys = raw.get("sys", {})
        condition = _primary_condition(raw)
        return WeatherSnapshot(
            name=raw.get("name", ""),
            country=sys.get("country", ""),
            sunrise=int(sys.get("sunrise", 0)),
            sunset=int(sys.get("sunset", 0)),
            temp=float(main["temp"]),
            feels_like=float(main.get("feels_like", main["temp"])),
            humidity=int(main.get("humidity", 0)),
            pressure=int(main.get("pressure", 0)),
            icon=condition.get("icon", ""),
            description=condition.get("description", ""),
            wind_speed=float(raw.get("wind", {}).get("speed", 0.0)),
            utc_offset=_optional_int(raw.get("timezone")),
            lat=float(coord["lat"]),
            lon=float(coord["lon"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Malformed weather payload: %s", e)
        raise NetworkError(f"Malformed weather payload: {e}") from e


def parse_forecast(raw: dict[str, Any] | None) -> list[ForecastSample]:
    """Build the ordered sample list from a ``/forecast`` body.

    A missing or empty ``list`` is a valid empty forecast.
    """
    items = (raw or {}).get("list") or []
    samples: list[ForecastSample] = []
    for item in items:
        try:
            samples.append(_parse_sample(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Malformed forecast entry: %s", e)
            raise NetworkError(f"Malformed forecast entry: {e}") from e
    return samples


def _parse_sample(item: dict[str, Any]) -> ForecastSample:
    main = item["main"]
    condition = _primary_condition(item)
    return ForecastSample(
        dt=int(item["dt"]),
        temp=float(main["temp"]),
        humidity=int(main.get("humidity", 0)),
        pressure=int(main.get("pressure", 0)),
        wind_speed=float(item.get("wind", {}).get("speed", 0.0)),
        icon=condition.get("icon", ""),
        description=condition.get("description", ""),
    )


def _primary_condition(raw: dict[str, Any]) -> dict[str, Any]:
    conditions = raw.get("weather") or [{}]
    return conditions[0]


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    return int(value)
