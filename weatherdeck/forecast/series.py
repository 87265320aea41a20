"""Pure helpers over a list of timestamped forecast samples."""

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from weatherdeck.models.common import to_epoch
from weatherdeck.models.weather import ForecastSample


def sort_chronologically(samples: Iterable[ForecastSample]) -> list[ForecastSample]:
    """Stable sort by timestamp, keeping the first of any duplicate timestamps."""
    ordered: list[ForecastSample] = []
    last_dt: int | None = None
    for sample in sorted(samples, key=lambda s: s.dt):
        if sample.dt == last_dt:
            continue
        ordered.append(sample)
        last_dt = sample.dt
    return ordered


def group_by_day(samples: Iterable[ForecastSample]) -> dict[date, list[ForecastSample]]:
    """Partition samples by UTC calendar day, days in order of first appearance."""
    groups: dict[date, list[ForecastSample]] = {}
    for sample in samples:
        groups.setdefault(sample.day, []).append(sample)
    return groups


def dedup_by_day(samples: Iterable[ForecastSample]) -> list[ForecastSample]:
    """First sample of each UTC calendar day."""
    return [day_samples[0] for day_samples in group_by_day(samples).values()]


def next_window(
    samples: Sequence[ForecastSample], now: datetime, limit: int
) -> list[ForecastSample]:
    """Up to ``limit`` samples strictly later than ``now``, in sequence order."""
    cutoff = to_epoch(now)
    window: list[ForecastSample] = []
    for sample in samples:
        if len(window) >= limit:
            break
        if sample.dt > cutoff:
            window.append(sample)
    return window
