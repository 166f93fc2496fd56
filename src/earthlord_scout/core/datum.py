"""Datum corrections between raw GPS (WGS-84) and map display datums."""

import math
from abc import ABC, abstractmethod
from typing import Sequence

from earthlord_scout.models import Coordinate, Datum


class DatumCorrection(ABC):
    """Maps a raw WGS-84 coordinate into a map provider's display datum."""

    target_datum: Datum

    @abstractmethod
    def correct(self, coordinate: Coordinate) -> Coordinate:
        ...

    def correct_many(self, coordinates: Sequence[Coordinate]) -> list[Coordinate]:
        return [self.correct(c) for c in coordinates]


class IdentityCorrection(DatumCorrection):
    """For providers that render WGS-84 directly."""

    target_datum: Datum = "wgs84"

    def correct(self, coordinate: Coordinate) -> Coordinate:
        return coordinate.model_copy(update={"datum": self.target_datum})


class Wgs84ToGcj02(DatumCorrection):
    """WGS-84 to GCJ-02, the obfuscated datum required by maps of mainland China.

    Coordinates outside the rough China bounding box are returned unshifted
    (relabelled as GCJ-02, which is identical to WGS-84 there).
    Offsets are typically 100-700 m.
    """

    target_datum: Datum = "gcj02"

    # Krasovsky 1940 ellipsoid
    SEMI_MAJOR_AXIS = 6378245.0
    ECCENTRICITY_SQ = 0.00669342162296594323

    def __init__(self, inverse_tolerance: float = 1e-9, max_iterations: int = 30):
        self.inverse_tolerance = inverse_tolerance
        self.max_iterations = max_iterations

    @staticmethod
    def is_out_of_china(lat: float, lon: float) -> bool:
        return not (72.004 <= lon <= 137.8347 and 0.8293 <= lat <= 55.8271)

    @staticmethod
    def _transform_lat(x: float, y: float) -> float:
        ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
        ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
        ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
        ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
        return ret

    @staticmethod
    def _transform_lon(x: float, y: float) -> float:
        ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
        ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
        ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
        ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
        return ret

    def offset(self, lat: float, lon: float) -> tuple[float, float]:
        """(dlat, dlon) in degrees to add to a WGS-84 coordinate."""
        if self.is_out_of_china(lat, lon):
            return 0.0, 0.0
        a = self.SEMI_MAJOR_AXIS
        ee = self.ECCENTRICITY_SQ
        dlat = self._transform_lat(lon - 105.0, lat - 35.0)
        dlon = self._transform_lon(lon - 105.0, lat - 35.0)
        rad_lat = math.radians(lat)
        magic = 1 - ee * math.sin(rad_lat) ** 2
        sqrt_magic = math.sqrt(magic)
        dlat = (dlat * 180.0) / ((a * (1 - ee)) / (magic * sqrt_magic) * math.pi)
        dlon = (dlon * 180.0) / (a / sqrt_magic * math.cos(rad_lat) * math.pi)
        return dlat, dlon

    def correct(self, coordinate: Coordinate) -> Coordinate:
        dlat, dlon = self.offset(coordinate.lat, coordinate.lon)
        return Coordinate(
            lat=coordinate.lat + dlat,
            lon=coordinate.lon + dlon,
            datum=self.target_datum,
        )

    def invert(self, coordinate: Coordinate) -> Coordinate:
        """Recover the WGS-84 coordinate for a GCJ-02 one by fixed-point iteration."""
        lat, lon = coordinate.lat, coordinate.lon
        for _ in range(self.max_iterations):
            dlat, dlon = self.offset(lat, lon)
            next_lat = coordinate.lat - dlat
            next_lon = coordinate.lon - dlon
            converged = (
                abs(next_lat - lat) < self.inverse_tolerance
                and abs(next_lon - lon) < self.inverse_tolerance
            )
            lat, lon = next_lat, next_lon
            if converged:
                break
        return Coordinate(lat=lat, lon=lon, datum="wgs84")


def correction_for(datum: Datum) -> DatumCorrection:
    """Default correction for a display datum."""
    if datum == "gcj02":
        return Wgs84ToGcj02()
    return IdentityCorrection()
