"""Output formatters for tick results."""

import json

from astroweather.config.defaults import METRIC_SPECS
from astroweather.models.common import Metric
from astroweather.models.forecast import TickResult


def format_summary_line(values: dict[Metric, float]) -> str:
    """One-line weather summary."""
    return (
        f"Cloud: {values[Metric.CLOUD_COVER]:.2f}%, "
        f"Temp: {values[Metric.TEMPERATURE]:.2f}C, "
        f"Wind: {values[Metric.WIND_SPEED]:.2f}kph, "
        f"Dew: {values[Metric.DEW_POINT]:.2f}C, "
        f"Dir: {values[Metric.WIND_DIRECTION]:.2f}°, "
        f"See: {values[Metric.SEEING]:.2f}, "
        f"Trans: {values[Metric.TRANSPARENCY]:.2f}"
    )


def format_result_text(r: TickResult) -> str:
    """Plain text block for the CLI."""
    lines = [f"Status: {r.status}"]
    if r.failure is not None:
        lines.append(f"Failure: {r.failure} - {r.message}")
    if r.hour_index is not None:
        lines.append(f"Forecast hour: {r.hour_index}")
    for metric, value in r.values.items():
        spec = METRIC_SPECS[metric]
        unit = f" {spec.unit}" if spec.unit else ""
        lines.append(f"  {spec.label}: {value:.2f}{unit}")
    for advisory in r.advisories:
        lines.append(f"Advisory: {advisory}")
    return "\n".join(lines)


def format_result_json(r: TickResult) -> str:
    """JSON rendering for programmatic consumption."""
    data = {
        "status": r.status.value,
        "failure": r.failure.value if r.failure else None,
        "message": r.message,
        "hour_index": r.hour_index,
        "values": {m.value: v for m, v in r.values.items()},
        "advisories": r.advisories,
        "summary": r.summary,
    }
    return json.dumps(data, indent=2)
