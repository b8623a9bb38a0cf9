"""Maps wall-clock time onto an hour of a cached forecast."""

from datetime import datetime, timedelta

from astroweather.models.common import Metric
from astroweather.models.forecast import ForecastRecord

KELVIN_OFFSET = 273.15
MS_TO_KPH = 3.6
ONE_HOUR = timedelta(hours=1)


class RangeError(Exception):
    """Raised when 'now' falls outside the forecast window."""

    def __init__(self, hour_index: int, hours: int):
        super().__init__(
            f"Current time outside forecast range. Offset: {hour_index}"
        )
        self.hour_index = hour_index
        self.hours = hours


def hour_index(record: ForecastRecord, now: datetime) -> int:
    # timedelta // timedelta floors, so 1s before start is -1, not 0
    return (now - record.start_time) // ONE_HOUR


def convert(metric: Metric, raw: float) -> float:
    """Convert a provider-unit sample to display units."""
    if metric in (Metric.TEMPERATURE, Metric.DEW_POINT):
        return raw - KELVIN_OFFSET
    if metric == Metric.WIND_SPEED:
        return raw * MS_TO_KPH
    return raw


def value_at(record: ForecastRecord, metric: Metric, now: datetime) -> float:
    index = _checked_index(record, now)
    return convert(metric, record.series[metric][index])


def values_at(record: ForecastRecord, now: datetime) -> tuple[int, dict[Metric, float]]:
    """Index every metric at 'now'. Returns (hour index, display values)."""
    index = _checked_index(record, now)
    values = {
        metric: convert(metric, samples[index])
        for metric, samples in record.series.items()
    }
    return index, values


def _checked_index(record: ForecastRecord, now: datetime) -> int:
    index = hour_index(record, now)
    if index < 0 or index >= record.hours:
        raise RangeError(index, record.hours)
    return index
