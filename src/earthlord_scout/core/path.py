"""GPS path recording with time and distance throttling."""

import logging
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from .selection import haversine_distance
from earthlord_scout.models import Coordinate

logger = logging.getLogger(__name__)

SpeedLevel = Literal["normal", "moderate", "high"]

MODERATE_SPEED_KMH = 15.0
HIGH_SPEED_KMH = 30.0


class PathRecorder:
    """Collects a territory path from a stream of location fixes.

    A fix is kept only if at least ``min_interval_s`` seconds have passed
    since the last kept fix and it lies at least ``min_distance_m`` meters away.
    """

    def __init__(self, min_interval_s: float = 2.0, min_distance_m: float = 5.0):
        self.min_interval_s = min_interval_s
        self.min_distance_m = min_distance_m
        self._points: list[Coordinate] = []
        self._last_time: datetime | None = None

    @property
    def coordinates(self) -> list[Coordinate]:
        return list(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def start(self) -> None:
        self.clear()
        logger.debug("Path recording started")

    def clear(self) -> None:
        self._points = []
        self._last_time = None

    def extend(self, coordinates: list[Coordinate]) -> None:
        """Append already-filtered points unconditionally."""
        self._points.extend(coordinates)

    def offer(self, coordinate: Coordinate, timestamp: datetime) -> bool:
        """Record the fix if it passes both thresholds. Returns whether it was kept."""
        if self._last_time is not None:
            if (timestamp - self._last_time).total_seconds() < self.min_interval_s:
                return False
        if self._points:
            if haversine_distance(self._points[-1], coordinate) < self.min_distance_m:
                return False
        self._points.append(coordinate)
        self._last_time = timestamp
        logger.debug("Recorded point #%d: (%.6f, %.6f)", len(self._points), coordinate.lat, coordinate.lon)
        return True


class SpeedReading(BaseModel):
    speed_kmh: float
    level: SpeedLevel
    warning: str | None = None


class SpeedMonitor:
    """Flags fixes that imply travel too fast for accurate territory tracing."""

    def __init__(
        self,
        moderate_kmh: float = MODERATE_SPEED_KMH,
        high_kmh: float = HIGH_SPEED_KMH,
    ):
        self.moderate_kmh = moderate_kmh
        self.high_kmh = high_kmh
        self._last: tuple[Coordinate, datetime] | None = None

    def reset(self) -> None:
        self._last = None

    def update(self, coordinate: Coordinate, timestamp: datetime) -> SpeedReading | None:
        """Speed since the previous fix, or None for the first fix or a non-advancing clock."""
        previous, self._last = self._last, (coordinate, timestamp)
        if previous is None:
            return None
        elapsed = (timestamp - previous[1]).total_seconds()
        if elapsed <= 0:
            return None
        speed_kmh = haversine_distance(previous[0], coordinate) / elapsed * 3.6
        if speed_kmh > self.high_kmh:
            return SpeedReading(
                speed_kmh=speed_kmh, level="high",
                warning=f"Moving too fast ({speed_kmh:.0f} km/h), GPS tracking will be inaccurate",
            )
        if speed_kmh > self.moderate_kmh:
            return SpeedReading(
                speed_kmh=speed_kmh, level="moderate",
                warning=f"Moving quickly ({speed_kmh:.0f} km/h), slow down for accurate tracking",
            )
        return SpeedReading(speed_kmh=speed_kmh, level="normal")
