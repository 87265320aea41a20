"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
import yaml

from weatherdeck.config.schema import AppConfig
from weatherdeck.ingest.parsers import parse_forecast, parse_weather
from weatherdeck.models.weather import ForecastSample, WeatherSnapshot

FIXTURE_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> dict:
    with open(FIXTURE_DIR / name) as f:
        return json.load(f)


@pytest.fixture(autouse=True)
def no_api_key_env(monkeypatch):
    """Keep a developer's real API key out of the tests."""
    monkeypatch.delenv("OPENWEATHER_API_KEY", raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def london_raw() -> dict:
    return load_fixture("owm_weather_london.json")


@pytest.fixture
def tokyo_raw() -> dict:
    return load_fixture("owm_weather_tokyo.json")


@pytest.fixture
def forecast_raw() -> dict:
    return load_fixture("owm_forecast_london.json")


@pytest.fixture
def london(london_raw: dict) -> WeatherSnapshot:
    return parse_weather(london_raw)


@pytest.fixture
def tokyo(tokyo_raw: dict) -> WeatherSnapshot:
    return parse_weather(tokyo_raw)


@pytest.fixture
def london_samples(forecast_raw: dict) -> list[ForecastSample]:
    return parse_forecast(forecast_raw)


@pytest.fixture
def default_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "from-file", "timeout": 5.0},
        "search": {"debounce_ms": 250, "default_city": "Paris"},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
