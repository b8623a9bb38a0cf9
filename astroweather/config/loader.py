"""YAML config loader with environment fallback and runtime get/set."""

import json
import os
from pathlib import Path
from typing import Any

import yaml

from astroweather.config.schema import WeatherConfig

API_KEY_ENV = "ASTROSPHERIC_API_KEY"


def load_config(path: str | Path) -> WeatherConfig:
    """Load and validate config from a YAML file.

    A missing file yields the defaults. If no API key is set in the YAML,
    it is taken from the ASTROSPHERIC_API_KEY environment variable.
    """
    path = Path(path)
    raw: dict[str, Any] = {}
    if path.exists():
        with open(path) as f:
            raw = yaml.safe_load(f) or {}

    provider = raw.setdefault("provider", {}) or {}
    raw["provider"] = provider
    if not provider.get("api_key"):
        env_key = os.environ.get(API_KEY_ENV, "")
        if env_key:
            provider["api_key"] = env_key

    return WeatherConfig(**raw)


def save_config(config: WeatherConfig, path: str | Path) -> None:
    """Write config back to YAML.

    An API key that came from the environment is not written to disk.
    """
    data = json.loads(config.model_dump_json())
    if data["provider"]["api_key"] == os.environ.get(API_KEY_ENV):
        data["provider"]["api_key"] = ""
    with open(Path(path), "w") as f:
        yaml.safe_dump(data, f, sort_keys=False)


def get_config_value(config: WeatherConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'ops.refresh_period_seconds'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif isinstance(obj, dict):
            obj = obj[part]
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj


def set_config_value(config: WeatherConfig, dotted_key: str, value: Any) -> WeatherConfig:
    """Set a config value by dotted key path and re-validate.

    Returns a new WeatherConfig instance.
    """
    data = json.loads(config.model_dump_json())
    parts = dotted_key.split(".")
    target = data
    for part in parts[:-1]:
        target = target[part]
    if parts[-1] not in target:
        raise KeyError(f"Config key not found: {dotted_key}")
    old_value = target.get(parts[-1])
    if isinstance(old_value, bool) and isinstance(value, str):
        value = value.lower() in ("1", "true", "yes", "on")
    elif isinstance(old_value, int) and isinstance(value, str):
        value = int(value)
    elif isinstance(old_value, float) and isinstance(value, str):
        value = float(value)
    elif old_value is None and isinstance(value, str) and value.lower() in ("", "none", "null"):
        value = None
    target[parts[-1]] = value
    return WeatherConfig(**data)
