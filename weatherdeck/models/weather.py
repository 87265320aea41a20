"""Current-weather and forecast data models consumed from the provider."""

from dataclasses import dataclass
from datetime import date, datetime

from weatherdeck.models.common import Coordinate, from_epoch, utc_day

ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{icon}@2x.png"


@dataclass(frozen=True)
class WeatherSnapshot:
    name: str
    country: str
    sunrise: int
    sunset: int
    temp: float
    feels_like: float
    humidity: int
    pressure: int
    icon: str
    description: str
    wind_speed: float
    utc_offset: int | None  # seconds east of UTC
    lat: float
    lon: float

    @property
    def coordinate(self) -> Coordinate:
        return (self.lat, self.lon)

    @property
    def icon_url(self) -> str:
        return ICON_URL_TEMPLATE.format(icon=self.icon)


@dataclass(frozen=True)
class ForecastSample:
    dt: int  # epoch seconds
    temp: float
    humidity: int
    pressure: int
    wind_speed: float
    icon: str
    description: str = ""
    temp_min: float | None = None
    temp_max: float | None = None

    @property
    def timestamp(self) -> datetime:
        return from_epoch(self.dt)

    @property
    def day(self) -> date:
        return utc_day(self.dt)


@dataclass(frozen=True)
class DailyBucket:
    day: date
    representative: ForecastSample
    temp_min: float
    temp_max: float


@dataclass(frozen=True)
class ForecastViews:
    daily: tuple[DailyBucket, ...]
    hourly: tuple[ForecastSample, ...]

    @classmethod
    def empty(cls) -> "ForecastViews":
        return cls(daily=(), hourly=())

    @property
    def is_empty(self) -> bool:
        return not self.daily and not self.hourly
