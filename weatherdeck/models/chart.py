"""Chart geometry value types."""

from dataclasses import dataclass

from weatherdeck.models.common import MetricKind


@dataclass(frozen=True)
class GraphScale:
    min: float
    max: float
    unit: str
    precision: int

    @property
    def span(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class SeriesPoint:
    time: int  # epoch seconds
    value: float
    icon: str | None = None


@dataclass(frozen=True)
class PlotPoint:
    x: float
    y: float


@dataclass(frozen=True)
class Chart:
    metric: MetricKind
    scale: GraphScale
    points: tuple[PlotPoint, ...]
    polyline: str
    polygon: str
    labels: tuple[str, ...]
