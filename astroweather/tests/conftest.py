"""Shared test fixtures."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from astroweather.config.schema import WeatherConfig
from astroweather.ingest.forecast_parser import parse_forecast
from astroweather.models.common import PROVIDER_SERIES, Metric

# Sample at hour h is BASE + h, in provider units.
SERIES_BASE: dict[Metric, float] = {
    Metric.CLOUD_COVER: 10.0,
    Metric.TEMPERATURE: 280.15,
    Metric.WIND_SPEED: 2.0,
    Metric.DEW_POINT: 270.15,
    Metric.WIND_DIRECTION: 90.0,
    Metric.SEEING: 1.0,
    Metric.TRANSPARENCY: 5.0,
}

START = datetime(2026, 2, 10, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def start_time() -> datetime:
    return START


@pytest.fixture
def make_payload():
    """Build a provider response dict; lengths can be overridden per metric."""

    def _make(
        start: str = "2026-02-10T12:00:00Z",
        hours: int = 82,
        credits: int | None = 12,
        lengths: dict[Metric, int] | None = None,
    ) -> dict:
        lengths = lengths or {}
        payload: dict = {"UTCStartTime": start}
        if credits is not None:
            payload["APICreditUsedToday"] = credits
        for metric, field_name in PROVIDER_SERIES.items():
            n = lengths.get(metric, hours)
            payload[field_name] = [
                {"Value": {"ActualValue": SERIES_BASE[metric] + h}}
                for h in range(n)
            ]
        return payload

    return _make


@pytest.fixture
def payload_bytes(make_payload) -> bytes:
    return json.dumps(make_payload()).encode()


@pytest.fixture
def record(payload_bytes):
    return parse_forecast(payload_bytes)


@pytest.fixture
def api_config() -> WeatherConfig:
    return WeatherConfig(
        provider={"api_key": "test-key", "base_url": "https://test-astro.example.com"},
        location={"latitude": 45.0, "longitude": -75.0},
    )


@pytest.fixture
def config_yaml_path(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    data = {
        "provider": {"api_key": "yaml-key"},
        "location": {"latitude": 45.0, "longitude": 285.0},
        "ops": {"refresh_period_seconds": 600},
    }
    path = tmp_path / "test_config.yaml"
    with open(path, "w") as f:
        yaml.dump(data, f)
    return path
