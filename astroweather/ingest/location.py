"""Observer location: manual coordinates and snooped mount broadcasts."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float  # degrees east, either [-180, 180] or [0, 360]

    @property
    def normalized_longitude(self) -> float:
        return normalize_longitude(self.longitude)

    @property
    def is_unset(self) -> bool:
        return self.latitude == 0.0 and self.longitude == 0.0


def normalize_longitude(longitude: float) -> float:
    """Map a [0, 360] longitude onto [-180, 180]."""
    if longitude > 180.0:
        return longitude - 360.0
    return longitude


class LocationTracker:
    """Holds the current observer location.

    Listeners are called with the new Location each time it changes, from
    either a manual update or a GEOGRAPHIC_COORD broadcast snooped from
    snoop_device. Broadcasts from any other device are dropped; an empty
    snoop_device disables snooping.
    """

    def __init__(self, location: Location | None = None, snoop_device: str = ""):
        self._location = location
        self.snoop_device = snoop_device
        self._listeners: list[Callable[[Location], None]] = []

    @property
    def location(self) -> Location | None:
        return self._location

    @property
    def received(self) -> bool:
        return self._location is not None

    def subscribe(self, listener: Callable[[Location], None]) -> None:
        self._listeners.append(listener)

    def set_location(self, latitude: float, longitude: float) -> Location:
        if not -90.0 <= latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {latitude}")
        if not -180.0 <= longitude <= 360.0:
            raise ValueError(f"Longitude out of range: {longitude}")
        self._location = Location(latitude, longitude)
        logger.info("Location updated: Latitude=%.4f, Longitude=%.4f", latitude, longitude)
        for listener in self._listeners:
            listener(self._location)
        return self._location

    def apply_snooped(self, device: str, values: Mapping[str, float]) -> bool:
        """Apply a snooped coordinate broadcast with LAT and LONG elements.

        Broadcasts from devices other than snoop_device and incomplete
        broadcasts are ignored. Returns True if the location changed.
        """
        if not self.snoop_device or device != self.snoop_device:
            logger.debug("Ignoring GEOGRAPHIC_COORD from unsnooped device %s", device)
            return False
        lat = values.get("LAT")
        lon = values.get("LONG")
        if lat is None or lon is None:
            logger.warning(
                "Snooped GEOGRAPHIC_COORD from %s incomplete: LAT=%s, LONG=%s",
                device,
                "found" if lat is not None else "missing",
                "found" if lon is not None else "missing",
            )
            return False
        logger.info("Snooped location from %s", device)
        self.set_location(float(lat), float(lon))
        return True
