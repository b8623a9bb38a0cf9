"""Forecast cache and its refresh policy."""

import logging
from datetime import datetime, timedelta

from astroweather.models.forecast import ForecastRecord

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 6 * 3600


class ForecastCache:
    """Most recently accepted forecast plus the time it was fetched.

    A record is served only while the cache is valid. Invalidation keeps the
    old record in memory but forces a refresh on the next check.
    """

    def __init__(self, max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS):
        self.max_age = timedelta(seconds=max_age_seconds)
        self._record: ForecastRecord | None = None
        self._fetched_at: datetime | None = None
        self._valid = False

    @property
    def valid(self) -> bool:
        return self._valid

    @property
    def fetched_at(self) -> datetime | None:
        return self._fetched_at

    def is_stale(self, now: datetime) -> bool:
        if self._record is None or self._fetched_at is None or not self._valid:
            return True
        return now - self._fetched_at >= self.max_age

    def store(self, record: ForecastRecord, now: datetime) -> None:
        self._record, self._fetched_at = record, now
        self._valid = True

    def invalidate(self, reason: str) -> None:
        if self._valid:
            logger.info("Forecast invalidated: %s", reason)
        self._valid = False

    def current(self) -> ForecastRecord | None:
        return self._record if self._valid else None

    def age_seconds(self, now: datetime) -> float | None:
        if self._fetched_at is None:
            return None
        return (now - self._fetched_at).total_seconds()
