"""Forecast record and per-tick result models."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from astroweather.models.common import Metric


class TickStatus(StrEnum):
    OK = "OK"
    BUSY = "BUSY"
    ALERT = "ALERT"


class FailureKind(StrEnum):
    MISSING_PREREQUISITE = "MISSING_PREREQUISITE"
    TRANSPORT = "TRANSPORT"
    PARSE = "PARSE"
    OUT_OF_RANGE = "OUT_OF_RANGE"


@dataclass(frozen=True)
class ForecastRecord:
    """One accepted forecast: hourly samples in provider units.

    Temperature and dew point are Kelvin, wind speed is m/s. Every series has
    the same length; the parser refuses to build a record otherwise.
    """

    start_time: datetime  # UTC, index 0
    series: Mapping[Metric, tuple[float, ...]]  # read-only view
    credits_used_today: int | None = None

    @property
    def hours(self) -> int:
        lengths = {len(samples) for samples in self.series.values()}
        return lengths.pop() if len(lengths) == 1 else 0


@dataclass(frozen=True)
class TickResult:
    status: TickStatus
    values: dict[Metric, float] = field(default_factory=dict)
    hour_index: int | None = None
    failure: FailureKind | None = None
    message: str = ""
    advisories: list[str] = field(default_factory=list)
    summary: str = ""

    @property
    def ok(self) -> bool:
        return self.status == TickStatus.OK
