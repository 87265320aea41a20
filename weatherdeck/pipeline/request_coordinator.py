"""Request coordinator: turns search input into current weather and forecast state.

City text is debounced, coordinates are de-duplicated, and every accepted
search gets a generation token. Results are applied only while their token is
still the latest of its channel, so a slow response can never overwrite state
produced by a newer search. A forecast is applied only while the snapshot it
was requested for is still current.
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

from weatherdeck.clock import DEFAULT_TICK_SECONDS, ClockSynchronizer
from weatherdeck.config.defaults import (
    CITY_SEARCH_FAILED,
    COORDINATE_SEARCH_FAILED,
    FORECAST_FAILED,
    GEOLOCATION_FAILED,
)
from weatherdeck.config.schema import AppConfig
from weatherdeck.errors import GeolocationError, NetworkError, NotFound, WeatherError
from weatherdeck.forecast.aggregator import DEFAULT_DAYS, DEFAULT_HOURS, aggregate
from weatherdeck.ingest.geolocation import UnsupportedGeolocator
from weatherdeck.ingest.openweather_client import OpenWeatherClient
from weatherdeck.ingest.response_cache import ResponseCache, coordinate_key
from weatherdeck.models.common import Coordinate, utc_now
from weatherdeck.models.search import (
    Channel,
    CityQuery,
    CoordinateQuery,
    NoticeKind,
    Notification,
    SearchQuery,
    SearchToken,
)
from weatherdeck.models.weather import ForecastSample, ForecastViews, WeatherSnapshot
from weatherdeck.reactive.debounce import Debouncer
from weatherdeck.reactive.observable import EventChannel, StateCell

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.5


class RequestCoordinator:
    def __init__(
        self,
        client: OpenWeatherClient,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        cache: ResponseCache | None = None,
        geolocator: Any = None,
        days: int = DEFAULT_DAYS,
        hours: int = DEFAULT_HOURS,
        tick_seconds: float = DEFAULT_TICK_SECONDS,
        dark_mode: bool = True,
        now: Callable[[], datetime] = utc_now,
    ):
        self.client = client
        self.cache = cache if cache is not None else ResponseCache()
        self.geolocator = geolocator or UnsupportedGeolocator()
        self.days = days
        self.hours = hours
        self._now = now

        self.weather: StateCell[WeatherSnapshot | None] = StateCell("weather", None)
        self.forecast_series: StateCell[tuple[ForecastSample, ...] | None] = StateCell(
            "forecast_series", None
        )
        self.forecast: StateCell[ForecastViews] = StateCell("forecast", ForecastViews.empty())
        self.loading: StateCell[bool] = StateCell("loading", False)
        self.dark_mode: StateCell[bool] = StateCell("dark_mode", dark_mode)
        self.notifications: EventChannel[Notification] = EventChannel("notifications")
        self.clock = ClockSynchronizer(self.weather, tick_seconds)

        self._debouncer: Debouncer[str] = Debouncer(self._accept_city, debounce_seconds)
        self._generations: dict[Channel, int] = {c: 0 for c in Channel}
        self._pending: set[SearchToken] = set()
        self._snapshot_generation = 0
        self._last_coordinates: Coordinate | None = None
        self._tasks: set[asyncio.Task] = set()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._closed = False

    @classmethod
    def from_config(
        cls, config: AppConfig, client: OpenWeatherClient, geolocator: Any = None
    ) -> "RequestCoordinator":
        return cls(
            client,
            debounce_seconds=config.search.debounce_ms / 1000,
            cache=ResponseCache(ttl_seconds=config.search.cache_ttl_seconds),
            geolocator=geolocator,
            days=config.forecast.daily_days,
            hours=config.forecast.hourly_window,
            tick_seconds=config.clock.tick_seconds,
            dark_mode=config.display.dark_mode,
        )

    @property
    def city_time(self) -> StateCell[datetime]:
        return self.clock.time

    # --- Lifecycle ---

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self.clock.start(self._loop)

    async def close(self) -> None:
        """Cancel timers and outstanding fetches. No state changes afterwards."""
        if self._closed:
            return
        self._closed = True
        self._debouncer.cancel()
        self.clock.stop()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self.cache.clear()
        self._pending.clear()
        logger.debug("Coordinator closed, %d tasks cancelled", len(tasks))

    async def __aenter__(self) -> "RequestCoordinator":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def settle(self) -> None:
        """Emit any debounced search now and wait until every fetch has finished."""
        if self._debouncer.has_pending:
            self._debouncer.flush()
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # --- Entry points ---

    def search_by_city(self, name: str) -> None:
        if self._closed:
            return
        text = name.strip()
        if not text:
            logger.debug("Ignoring blank city search")
            return
        self._debouncer.push(text)

    def search_by_coordinates(self, lat: float, lon: float) -> None:
        if self._closed:
            return
        pair = (lat, lon)
        if pair == self._last_coordinates:
            logger.debug("Ignoring repeated coordinates %s", pair)
            return
        self._last_coordinates = pair
        self._accept(CoordinateQuery(lat=lat, lon=lon))

    async def locate(self) -> None:
        """Search at the device position, if the device will tell us where it is."""
        try:
            lat, lon = await self.geolocator.get_current_position()
        except GeolocationError as e:
            self._notify(NoticeKind.GEOLOCATION, GEOLOCATION_FAILED, e)
            return
        self.search_by_coordinates(lat, lon)

    def toggle_theme(self) -> bool:
        self.dark_mode.set(not self.dark_mode.value)
        return self.dark_mode.value

    # --- Internals ---

    def _accept_city(self, name: str) -> None:
        if not self._closed:
            self._accept(CityQuery(name=name))

    def _accept(self, query: SearchQuery) -> None:
        channel = Channel.CITY if isinstance(query, CityQuery) else Channel.COORDINATES
        self._generations[channel] += 1
        token = SearchToken(channel=channel, generation=self._generations[channel])

        # A superseded request no longer holds the loading flag
        self._pending = {t for t in self._pending if t.channel != channel}
        self._pending.add(token)
        self.loading.set(True)

        logger.info("Search %s #%d: %s", channel, token.generation, query)
        self._spawn(self._run_search(token, query))

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _is_latest(self, token: SearchToken) -> bool:
        return not self._closed and self._generations[token.channel] == token.generation

    async def _run_search(self, token: SearchToken, query: SearchQuery) -> None:
        snapshot_generation: int | None = None
        try:
            try:
                snapshot = await self._fetch_weather(query)
            except Exception as e:
                self._apply_weather_failure(token, query, e)
                return
            snapshot_generation = self._apply_weather(token, snapshot)
        finally:
            self._settle(token)

        if snapshot_generation is not None:
            await self._run_forecast(token, snapshot, snapshot_generation)

    async def _fetch_weather(self, query: SearchQuery) -> WeatherSnapshot:
        if isinstance(query, CityQuery):
            return await self.client.fetch_current_weather(query)
        key = coordinate_key("weather", query.lat, query.lon)
        return await self.cache.get_or_fetch(
            key, lambda: self.client.fetch_current_weather(query)
        )

    async def _fetch_forecast(self, lat: float, lon: float) -> list[ForecastSample]:
        key = coordinate_key("forecast", lat, lon)
        return await self.cache.get_or_fetch(key, lambda: self.client.fetch_forecast(lat, lon))

    def _apply_weather(self, token: SearchToken, snapshot: WeatherSnapshot) -> int | None:
        if not self._is_latest(token):
            logger.info("Discarding stale %s result #%d", token.channel, token.generation)
            return None
        self._snapshot_generation += 1
        self.weather.set(snapshot)
        logger.info(
            "Weather for %s, %s: %.1f°, %s",
            snapshot.name, snapshot.country, snapshot.temp, snapshot.description,
        )
        return self._snapshot_generation

    def _apply_weather_failure(
        self, token: SearchToken, query: SearchQuery, error: Exception
    ) -> None:
        if not self._is_latest(token):
            logger.info("Discarding stale %s failure #%d", token.channel, token.generation)
            return
        # Any forecast still in flight belongs to the snapshot being cleared
        self._snapshot_generation += 1
        self.weather.set(None)
        self.forecast_series.set(None)
        self.forecast.set(ForecastViews.empty())

        if isinstance(query, CoordinateQuery):
            # Same position may be retried after a failure
            self._last_coordinates = None

        message = CITY_SEARCH_FAILED if isinstance(query, CityQuery) else COORDINATE_SEARCH_FAILED
        kind = NoticeKind.NOT_FOUND if isinstance(error, NotFound) else NoticeKind.NETWORK
        self._notify(kind, message, error)

    async def _run_forecast(
        self, token: SearchToken, snapshot: WeatherSnapshot, snapshot_generation: int
    ) -> None:
        try:
            samples = await self._fetch_forecast(snapshot.lat, snapshot.lon)
        except Exception as e:
            if self._owns_snapshot(token, snapshot_generation):
                self._notify(NoticeKind.NETWORK, FORECAST_FAILED, e)
            return

        if not self._owns_snapshot(token, snapshot_generation):
            logger.info("Discarding forecast for superseded snapshot of %s", snapshot.name)
            return

        views = aggregate(samples, self._now(), days=self.days, hours=self.hours)
        self.forecast_series.set(tuple(samples))
        self.forecast.set(views)
        logger.info(
            "Forecast for %s: %d samples, %d days, %d hourly",
            snapshot.name, len(samples), len(views.daily), len(views.hourly),
        )

    def _owns_snapshot(self, token: SearchToken, snapshot_generation: int) -> bool:
        return self._is_latest(token) and self._snapshot_generation == snapshot_generation

    def _settle(self, token: SearchToken) -> None:
        self._pending.discard(token)
        if not self._closed:
            self.loading.set(bool(self._pending))

    def _notify(self, kind: NoticeKind, message: str, error: Exception) -> None:
        if not isinstance(error, WeatherError):
            logger.error("Unexpected failure: %s", error, exc_info=error)
            error = NetworkError(str(error))
        else:
            logger.warning("%s (%s)", message, error)
        self.notifications.emit(Notification(kind=kind, message=message, error=error))
