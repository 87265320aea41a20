"""Pydantic v2 configuration schema with strict validation."""

from pydantic import BaseModel, Field

OPENWEATHER_BASE_URL = "https://api.openweathermap.org/data/2.5"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = OPENWEATHER_BASE_URL
    api_key: str = ""
    timeout: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)


class SearchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=500, ge=0)
    cache_ttl_seconds: float = Field(default=60.0, ge=0.0)
    default_city: str = "London"


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    daily_days: int = Field(default=5, ge=1, le=5)
    hourly_window: int = Field(default=8, ge=1, le=40)


class ClockConfig(BaseModel):
    model_config = {"extra": "forbid"}

    tick_seconds: float = Field(default=1.0, gt=0.0)


class DisplayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    dark_mode: bool = True


class ChartGeometry(BaseModel):
    """Drawing area for one chart, in SVG user units (top-left origin)."""

    model_config = {"extra": "forbid"}

    x_origin: float = 50.0
    width: float = Field(default=1100.0, gt=0.0)
    x_step: float | None = None  # fixed spacing, overrides width
    y_bottom: float = 270.0
    height: float = Field(default=220.0, gt=0.0)
    baseline: float = 320.0


class ChartsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    hourly: ChartGeometry = ChartGeometry()
    daily: ChartGeometry = ChartGeometry(
        width=400.0, x_step=100.0, y_bottom=250.0, height=200.0, baseline=300.0
    )


class AppConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    search: SearchConfig = SearchConfig()
    forecast: ForecastConfig = ForecastConfig()
    clock: ClockConfig = ClockConfig()
    display: DisplayConfig = DisplayConfig()
    charts: ChartsConfig = ChartsConfig()
