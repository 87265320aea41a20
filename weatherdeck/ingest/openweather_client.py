"""OpenWeatherMap client with retry and rate limit handling."""

import asyncio
import logging
import os
from typing import Any

import httpx

from weatherdeck.config.defaults import API_KEY_ENV
from weatherdeck.config.schema import OPENWEATHER_BASE_URL, ProviderConfig
from weatherdeck.errors import InvalidInput, NetworkError, NotFound
from weatherdeck.ingest.parsers import parse_forecast, parse_weather
from weatherdeck.models.search import CityQuery, SearchQuery
from weatherdeck.models.weather import ForecastSample, WeatherSnapshot

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "weatherdeck/0.1.0"
# Unit labels in charts and reports assume metric values
PROVIDER_UNITS = "metric"


class OpenWeatherClient:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPENWEATHER_BASE_URL,
        timeout: float = 10.0,
        max_retries: int = 2,
        retry_base_delay: float = 1.0,
        http: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key or os.environ.get(API_KEY_ENV, "")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self._http = http or httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": DEFAULT_USER_AGENT}
        )
        self._owns_http = http is None

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "OpenWeatherClient":
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            retry_base_delay=config.retry_base_delay,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def fetch_current_weather(self, query: SearchQuery) -> WeatherSnapshot:
        """Current conditions for a city name or a coordinate pair."""
        if isinstance(query, CityQuery):
            if not query.name.strip():
                raise InvalidInput("City name is blank")
            params: dict[str, Any] = {"q": query.name}
        else:
            params = {"lat": query.lat, "lon": query.lon}
        raw = await self._get("/weather", params)
        return parse_weather(raw)

    async def fetch_forecast(self, lat: float, lon: float) -> list[ForecastSample]:
        """5-day forecast in 3-hour steps."""
        raw = await self._get("/forecast", {"lat": lat, "lon": lon})
        return parse_forecast(raw)

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict:
        """GET with retries on 503/429 and exponential backoff.

        404 raises NotFound; every other failure raises NetworkError.
        """
        url = f"{self.base_url}{endpoint}"
        params = {**params, "units": PROVIDER_UNITS, "appid": self.api_key}

        for attempt in range(self.max_retries + 1):
            try:
                resp = await self._http.get(url, params=params, timeout=self.timeout)
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    delay = self.retry_base_delay * (2**attempt)
                    logger.warning(
                        "OpenWeather request error, retrying in %.1fs: %s", delay, e
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error("OpenWeather request failed: %s %s", endpoint, e)
                raise NetworkError(f"Request failed: {e}") from e

            if resp.status_code in (503, 429) and attempt < self.max_retries:
                delay = self.retry_base_delay * (2**attempt)
                logger.warning(
                    "OpenWeather %s returned %d, retrying in %.1fs (attempt %d/%d)",
                    endpoint, resp.status_code, delay, attempt + 1, self.max_retries,
                )
                await asyncio.sleep(delay)
                continue
            if resp.status_code == 404:
                raise NotFound(_error_message(resp), resp.status_code)
            if resp.status_code >= 400:
                logger.error("OpenWeather %s -> %d", endpoint, resp.status_code)
                raise NetworkError(_error_message(resp), resp.status_code)
            try:
                return resp.json()
            except ValueError as e:
                raise NetworkError(f"Invalid JSON from {endpoint}") from e

        raise NetworkError(f"Retries exhausted for {endpoint}")


def _error_message(resp: httpx.Response) -> str:
    try:
        message = resp.json().get("message")
    except (ValueError, AttributeError):
        message = None
    return f"HTTP {resp.status_code}: {message or resp.reason_phrase}"
