"""Common types and helpers shared across models."""

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import TypeAlias

Coordinate: TypeAlias = tuple[float, float]


class MetricKind(StrEnum):
    TEMPERATURE = "temp"
    HUMIDITY = "humidity"
    WIND = "wind"
    PRESSURE = "pressure"


def utc_now() -> datetime:
    return datetime.now(UTC)


def from_epoch(seconds: int | float) -> datetime:
    return datetime.fromtimestamp(seconds, UTC)


def to_epoch(moment: datetime) -> float:
    """Epoch seconds for a datetime. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.timestamp()


def utc_day(seconds: int | float) -> date:
    return from_epoch(seconds).date()
