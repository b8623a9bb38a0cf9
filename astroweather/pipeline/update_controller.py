"""Update controller: one forecast refresh-and-lookup pass per tick."""

import logging
from datetime import datetime

from astroweather.config.defaults import SIMULATED_READINGS
from astroweather.config.schema import WeatherConfig
from astroweather.ingest import indexer
from astroweather.ingest.astrospheric_client import AstrosphericClient, TransportError
from astroweather.ingest.forecast_parser import (
    ParseError,
    credit_advisory,
    parse_forecast,
)
from astroweather.ingest.indexer import RangeError
from astroweather.ingest.location import Location, LocationTracker
from astroweather.ingest.staleness import ForecastCache
from astroweather.models.common import Metric, Mode
from astroweather.models.forecast import FailureKind, TickResult, TickStatus
from astroweather.reporting.formatters import format_summary_line

logger = logging.getLogger(__name__)


class UpdateController:
    """Owns the forecast cache and drives it from an external timer.

    tick() never retries within a call; every failure marks the cache invalid
    and the next tick tries again.
    """

    def __init__(
        self,
        config: WeatherConfig,
        client: AstrosphericClient | None = None,
        location: LocationTracker | None = None,
    ):
        self.config = config
        self.client = client or AstrosphericClient(
            base_url=config.provider.base_url,
            endpoint=config.provider.endpoint,
            connect_timeout=config.provider.connect_timeout,
            read_timeout=config.provider.read_timeout,
        )
        if location is None:
            location = LocationTracker(snoop_device=config.location.snoop_device)
            lat, lon = config.location.latitude, config.location.longitude
            if lat is not None and lon is not None:
                location.set_location(lat, lon)
        self.location = location
        self.location.subscribe(self.on_location_changed)
        self.cache = ForecastCache(config.ops.forecast_max_age_seconds)
        self.last_result: TickResult | None = None

    @property
    def api_key(self) -> str:
        return self.config.provider.api_key

    def set_api_key(self, api_key: str) -> None:
        self.config = self.config.model_copy(
            update={"provider": self.config.provider.model_copy(update={"api_key": api_key})}
        )
        self.cache.invalidate("API key changed")

    def set_mode(self, mode: Mode) -> None:
        self.config = self.config.model_copy(update={"mode": mode})
        logger.info("Mode updated to: %s", mode)
        self.cache.invalidate("mode changed")

    def on_location_changed(self, location: Location) -> None:
        self.cache.invalidate(
            f"location changed to {location.latitude:.4f}, {location.longitude:.4f}"
        )

    def tick(self, now: datetime) -> TickResult:
        result = self._tick(now)
        self.last_result = result
        return result

    def _tick(self, now: datetime) -> TickResult:
        # Both modes wait for a location first
        if not self.location.received:
            logger.info("Waiting for location data")
            return TickResult(
                status=TickStatus.BUSY,
                failure=FailureKind.MISSING_PREREQUISITE,
                message="Waiting for location data",
            )

        if self.config.mode == Mode.SIMULATED:
            logger.info("Updating weather in simulated mode")
            return self._ready(dict(SIMULATED_READINGS), None, [])

        prerequisite = self._check_prerequisites()
        if prerequisite is not None:
            return prerequisite

        advisories: list[str] = []
        if self.cache.is_stale(now):
            logger.info("Fetching new forecast data")
            try:
                raw = self.client.fetch(self.location.location, self.api_key)
            except TransportError as e:
                self.cache.invalidate("fetch failed")
                return self._failed(FailureKind.TRANSPORT, str(e))
            try:
                record = parse_forecast(
                    raw,
                    expected_hours=self.config.ops.expected_hours,
                    missing_value_policy=self.config.ops.missing_value_policy,
                )
            except ParseError as e:
                self.cache.invalidate(f"parse failed ({e.kind})")
                return self._failed(FailureKind.PARSE, str(e))
            self.cache.store(record, now)

            advisory = credit_advisory(
                record.credits_used_today,
                self.config.provider.credit_warning_threshold,
                self.config.provider.daily_credit_limit,
            )
            if advisory:
                logger.warning(advisory)
                advisories.append(advisory)

        record = self.cache.current()
        assert record is not None
        try:
            hour, values = indexer.values_at(record, now)
        except RangeError as e:
            self.cache.invalidate("current time outside forecast range")
            return self._failed(FailureKind.OUT_OF_RANGE, str(e), advisories=advisories)

        result = self._ready(values, hour, advisories)
        logger.info(
            "Weather updated for hour %d: Cloud=%.2f%%, Temp=%.2fC, Wind=%.2fkph",
            hour,
            values[Metric.CLOUD_COVER],
            values[Metric.TEMPERATURE],
            values[Metric.WIND_SPEED],
        )
        return result

    def _check_prerequisites(self) -> TickResult | None:
        if not self.api_key:
            return self._failed(
                FailureKind.MISSING_PREREQUISITE, "API key is not set"
            )
        if self.location.location.is_unset:
            return self._failed(
                FailureKind.MISSING_PREREQUISITE,
                "Location is not set; configure it or snoop it from a telescope",
            )
        return None

    def _ready(
        self, values: dict[Metric, float], hour: int | None, advisories: list[str]
    ) -> TickResult:
        return TickResult(
            status=TickStatus.OK,
            values=values,
            hour_index=hour,
            advisories=advisories,
            summary=format_summary_line(values),
        )

    def _failed(
        self, kind: FailureKind, message: str, advisories: list[str] | None = None
    ) -> TickResult:
        logger.error("Weather update failed (%s): %s", kind, message)
        return TickResult(
            status=TickStatus.ALERT,
            failure=kind,
            message=message,
            advisories=advisories or [],
        )
