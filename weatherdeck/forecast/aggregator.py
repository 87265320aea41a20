"""Forecast aggregation: daily buckets and the near-future hourly window."""

import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from weatherdeck.forecast.series import group_by_day, next_window, sort_chronologically
from weatherdeck.models.weather import DailyBucket, ForecastSample, ForecastViews

logger = logging.getLogger(__name__)

DEFAULT_DAYS = 5
DEFAULT_HOURS = 8


def aggregate(
    samples: Sequence[ForecastSample],
    now: datetime,
    days: int = DEFAULT_DAYS,
    hours: int = DEFAULT_HOURS,
) -> ForecastViews:
    """Build the daily and hourly views from a raw sample series.

    Each day is represented by its first sample, with ``temp_min`` and
    ``temp_max`` overlaid from all samples of that day. Days are UTC calendar
    days, matching the provider's epoch timestamps.
    """
    if not samples:
        return ForecastViews.empty()

    daily = build_daily(samples, days)
    hourly = next_window(sort_chronologically(samples), now, hours)

    logger.debug(
        "Aggregated %d samples into %d days and %d hourly slots",
        len(samples), len(daily), len(hourly),
    )
    return ForecastViews(daily=tuple(daily), hourly=tuple(hourly))


def build_daily(samples: Sequence[ForecastSample], days: int = DEFAULT_DAYS) -> list[DailyBucket]:
    buckets: list[DailyBucket] = []
    for day, day_samples in group_by_day(samples).items():
        temps = [s.temp for s in day_samples]
        low, high = min(temps), max(temps)
        representative = replace(day_samples[0], temp_min=low, temp_max=high)
        buckets.append(
            DailyBucket(day=day, representative=representative, temp_min=low, temp_max=high)
        )

    buckets.sort(key=lambda b: b.day)
    return buckets[:days]
