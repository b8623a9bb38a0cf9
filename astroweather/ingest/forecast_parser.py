"""Forecast parser: validates a provider response into a ForecastRecord."""

import json
import logging
from datetime import UTC, datetime
from types import MappingProxyType

from astroweather.config.schema import MissingValuePolicy
from astroweather.models.common import PROVIDER_SERIES, Metric
from astroweather.models.forecast import ForecastRecord

logger = logging.getLogger(__name__)

EXPECTED_HOURS = 82
UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class ParseError(Exception):
    kind = "parse"


class MalformedPayloadError(ParseError):
    kind = "malformed"


class BadTimestampError(ParseError):
    kind = "bad_timestamp"


class MissingSeriesError(ParseError):
    kind = "missing_series"


class MissingValueError(ParseError):
    kind = "missing_value"


class LengthMismatchError(ParseError):
    kind = "length_mismatch"


def parse_utc_datetime(value: str) -> datetime:
    """Parse 'YYYY-MM-DDThh:mm:ssZ' as an aware UTC datetime.

    The host timezone never enters into it.
    """
    try:
        return datetime.strptime(value, UTC_FORMAT).replace(tzinfo=UTC)
    except (TypeError, ValueError) as e:
        raise BadTimestampError(f"Invalid UTCStartTime: {value!r}") from e


def parse_forecast(
    raw: bytes | str,
    expected_hours: int = EXPECTED_HOURS,
    missing_value_policy: MissingValuePolicy = MissingValuePolicy.ZERO_FILL,
) -> ForecastRecord:
    """Decode a forecast response. All seven series must be expected_hours long."""
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedPayloadError(f"JSON parsing error: {e}") from e
    if not isinstance(data, dict):
        raise MalformedPayloadError(
            f"Expected a JSON object, got {type(data).__name__}"
        )

    if "UTCStartTime" not in data:
        raise BadTimestampError("Missing UTCStartTime")
    start_time = parse_utc_datetime(data["UTCStartTime"])

    credits = data.get("APICreditUsedToday")
    if credits is not None and (isinstance(credits, bool) or not isinstance(credits, int)):
        logger.warning("Ignoring non-integer APICreditUsedToday: %r", credits)
        credits = None
    if credits is not None:
        logger.info("API credits used today: %d", credits)

    series: dict[Metric, tuple[float, ...]] = {}
    for metric, field_name in PROVIDER_SERIES.items():
        entries = data.get(field_name)
        if not isinstance(entries, list):
            raise MissingSeriesError(f"Missing forecast series {field_name}")
        series[metric] = tuple(
            _sample_value(entry, field_name, hour, missing_value_policy)
            for hour, entry in enumerate(entries)
        )

    mismatched = {
        PROVIDER_SERIES[m]: len(samples)
        for m, samples in series.items()
        if len(samples) != expected_hours
    }
    if mismatched:
        raise LengthMismatchError(
            f"Forecast data length mismatch, expected {expected_hours} hours: "
            + ", ".join(f"{k}={v}" for k, v in mismatched.items())
        )

    logger.info(
        "Parsed forecast for %d hours starting at %s",
        expected_hours, start_time.strftime(UTC_FORMAT),
    )
    return ForecastRecord(
        start_time=start_time,
        series=MappingProxyType(series),
        credits_used_today=credits,
    )


def credit_advisory(
    credits_used: int | None, threshold: int = 90, daily_limit: int = 100
) -> str | None:
    """Advisory message once usage reaches the warning threshold, else None."""
    if credits_used is None or credits_used < threshold:
        return None
    return (
        f"API credits used today: {credits_used}, "
        f"approaching daily limit of {daily_limit}"
    )


def _sample_value(
    entry: object, field_name: str, hour: int, policy: MissingValuePolicy
) -> float:
    """Read entry.Value.ActualValue for one hour."""
    value = None
    if isinstance(entry, dict) and isinstance(entry.get("Value"), dict):
        value = entry["Value"].get("ActualValue")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    if policy == MissingValuePolicy.REJECT:
        raise MissingValueError(
            f"{field_name}[{hour}] has no numeric ActualValue: {value!r}"
        )
    logger.warning(
        "%s[%d] has no numeric ActualValue (%r), using 0.0", field_name, hour, value
    )
    return 0.0
