"""Search inputs, generation tokens and user-facing notifications."""

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from weatherdeck.errors import WeatherError


class Channel(StrEnum):
    CITY = "city"
    COORDINATES = "coordinates"


@dataclass(frozen=True)
class CityQuery:
    name: str


@dataclass(frozen=True)
class CoordinateQuery:
    lat: float
    lon: float


SearchQuery: TypeAlias = CityQuery | CoordinateQuery


@dataclass(frozen=True)
class SearchToken:
    """Generation id for one accepted search. Later generations supersede earlier ones."""

    channel: Channel
    generation: int


class NoticeKind(StrEnum):
    NOT_FOUND = "not_found"
    NETWORK = "network"
    GEOLOCATION = "geolocation"


@dataclass(frozen=True)
class Notification:
    kind: NoticeKind
    message: str
    error: WeatherError | None = None
