"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field

from astroweather.models.common import Mode


class MissingValuePolicy(StrEnum):
    ZERO_FILL = "zero-fill"
    REJECT = "reject"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = "https://astrosphericpublicaccess.azurewebsites.net"
    endpoint: str = "/api/GetForecastData_V1"
    connect_timeout: float = Field(default=5.0, gt=0.0)
    read_timeout: float = Field(default=15.0, gt=0.0)
    daily_credit_limit: int = Field(default=100, ge=1)
    credit_warning_threshold: int = Field(default=90, ge=0)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=360.0)
    snoop_device: str = "Telescope Simulator"


class OpsConfig(BaseModel):
    model_config = {"extra": "forbid"}

    refresh_period_seconds: int = Field(default=1800, ge=0, le=3600)
    forecast_max_age_seconds: int = Field(default=21600, ge=1)
    expected_hours: int = Field(default=82, ge=1)
    missing_value_policy: MissingValuePolicy = MissingValuePolicy.ZERO_FILL


class WeatherConfig(BaseModel):
    model_config = {"extra": "forbid"}

    mode: Mode = Mode.API
    provider: ProviderConfig = ProviderConfig()
    location: LocationConfig = LocationConfig()
    ops: OpsConfig = OpsConfig()
