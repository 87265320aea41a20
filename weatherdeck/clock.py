"""Wall clock of the searched location, refreshed on a fixed tick."""

import asyncio
import logging
from datetime import UTC, datetime, timedelta, timezone

from weatherdeck.models.weather import WeatherSnapshot
from weatherdeck.reactive.observable import StateCell, Subscription

logger = logging.getLogger(__name__)

DEFAULT_TICK_SECONDS = 1.0


def city_time_now(utc_offset_seconds: int, now: datetime | None = None) -> datetime:
    """Current time in a location ``utc_offset_seconds`` east of UTC.

    The device instant is normalized to UTC first, so the result does not
    depend on the device's own zone.
    """
    if now is None:
        now = datetime.now(UTC)
    elif now.tzinfo is None:
        now = now.astimezone()  # naive input is device-local
    return now.astimezone(timezone(timedelta(seconds=utc_offset_seconds)))


def device_time_now() -> datetime:
    return datetime.now().astimezone()


class ClockSynchronizer:
    """Publishes the current city time into ``time`` once per tick.

    Falls back to device-local time while no snapshot with a known offset is
    current.
    """

    def __init__(
        self,
        weather: StateCell[WeatherSnapshot | None],
        tick_seconds: float = DEFAULT_TICK_SECONDS,
    ):
        self.weather = weather
        self.tick_seconds = tick_seconds
        self.time: StateCell[datetime] = StateCell("city_time", device_time_now())
        self._loop: asyncio.AbstractEventLoop | None = None
        self._handle: asyncio.TimerHandle | None = None
        self._subscription: Subscription | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None

    def current(self) -> datetime:
        snapshot = self.weather.value
        if snapshot is not None and snapshot.utc_offset is not None:
            return city_time_now(snapshot.utc_offset)
        return device_time_now()

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        if self.running:
            return
        self._loop = loop or asyncio.get_running_loop()
        self._subscription = self.weather.subscribe(lambda _: self._refresh(), replay=False)
        self._tick()
        logger.debug("Clock started with %.1fs tick", self.tick_seconds)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        logger.debug("Clock stopped")

    def _refresh(self) -> None:
        self.time.set(self.current())

    def _tick(self) -> None:
        self._refresh()
        assert self._loop is not None
        self._handle = self._loop.call_later(self.tick_seconds, self._tick)
