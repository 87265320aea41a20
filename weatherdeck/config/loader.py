"""YAML config loader with environment override and dotted-key lookup."""

import os
from pathlib import Path
from typing import Any

import yaml

from weatherdeck.config.defaults import API_KEY_ENV
from weatherdeck.config.schema import AppConfig


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate config from a YAML file.

    A missing path yields the defaults. The API key from the environment
    wins over the one in the file.
    """
    raw: dict[str, Any] = {}
    if path is not None and Path(path).exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        raw.setdefault("provider", {})["api_key"] = api_key

    return AppConfig(**raw)


def get_config_value(config: AppConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'search.debounce_ms'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict) and part in obj:
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def dump_config(config: AppConfig) -> str:
    """Render the config as YAML with the API key masked."""
    data = config.model_dump(mode="json")
    if data["provider"]["api_key"]:
        data["provider"]["api_key"] = "***"
    return yaml.safe_dump(data, sort_keys=False)
