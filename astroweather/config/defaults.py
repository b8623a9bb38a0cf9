"""Default metric display specs and simulated-mode readings."""

from dataclasses import dataclass

from astroweather.models.common import Metric


@dataclass(frozen=True)
class MetricSpec:
    label: str
    unit: str
    minimum: float
    maximum: float


METRIC_SPECS: dict[Metric, MetricSpec] = {
    Metric.CLOUD_COVER: MetricSpec("Cloud Cover", "%", 0, 100),
    Metric.TEMPERATURE: MetricSpec("Temperature", "C", -50, 50),
    Metric.WIND_SPEED: MetricSpec("Wind Speed", "kph", 0, 200),
    Metric.DEW_POINT: MetricSpec("Dew Point", "C", -50, 50),
    Metric.WIND_DIRECTION: MetricSpec("Wind Direction", "°", 0, 360),
    Metric.SEEING: MetricSpec("Seeing", "", 0, 5),
    Metric.TRANSPARENCY: MetricSpec("Transparency", "", 0, 30),
}

# Readings reported in simulated mode, already in display units.
SIMULATED_READINGS: dict[Metric, float] = {
    Metric.CLOUD_COVER: 50.0,
    Metric.TEMPERATURE: 20.0,
    Metric.WIND_SPEED: 10.0,
    Metric.DEW_POINT: 10.0,
    Metric.WIND_DIRECTION: 180.0,
    Metric.SEEING: 2.5,
    Metric.TRANSPARENCY: 15.0,
}
