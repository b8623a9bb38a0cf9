"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum


class Metric(StrEnum):
    CLOUD_COVER = "cloud_cover"
    TEMPERATURE = "temperature"
    WIND_SPEED = "wind_speed"
    DEW_POINT = "dew_point"
    WIND_DIRECTION = "wind_direction"
    SEEING = "seeing"
    TRANSPARENCY = "transparency"


# Provider array name for each metric in the forecast response.
PROVIDER_SERIES: dict[Metric, str] = {
    Metric.CLOUD_COVER: "RDPS_CloudCover",
    Metric.TEMPERATURE: "RDPS_Temperature",
    Metric.WIND_SPEED: "RDPS_WindVelocity",
    Metric.DEW_POINT: "RDPS_DewPoint",
    Metric.WIND_DIRECTION: "RDPS_WindDirection",
    Metric.SEEING: "Astrospheric_Seeing",
    Metric.TRANSPARENCY: "Astrospheric_Transparency",
}


class Mode(StrEnum):
    API = "api"
    SIMULATED = "simulated"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()
