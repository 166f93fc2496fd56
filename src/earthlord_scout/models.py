"""Pydantic domain models for coordinates, POIs and peers."""

import math
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Datum = Literal["wgs84", "gcj02"]


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    datum: Datum = "wgs84"

    def is_close(self, other: "Coordinate", epsilon: float = 1e-6) -> bool:
        """Planar distance in degrees is within epsilon."""
        return math.hypot(self.lat - other.lat, self.lon - other.lon) <= epsilon

    def as_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lon": self.lon}


class POIStatus(str, Enum):
    UNDISCOVERED = "undiscovered"
    DISCOVERED = "discovered"
    LOOTED = "looted"


class POIType(str, Enum):
    SUPERMARKET = "supermarket"
    HOSPITAL = "hospital"
    GAS_STATION = "gas_station"
    PHARMACY = "pharmacy"
    FACTORY = "factory"
    WAREHOUSE = "warehouse"
    SCHOOL = "school"
    MALL = "mall"
    STORE = "store"
    RESTAURANT = "restaurant"
    CAFE = "cafe"
    CONVENIENCE = "convenience"
    RUIN = "ruin"

    @property
    def danger_level(self) -> int:
        """1 (safe) to 5 (deadly); drives loot rarity downstream."""
        return _DANGER_LEVELS[self]


_DANGER_LEVELS = {
    POIType.CAFE: 1,
    POIType.STORE: 2,
    POIType.CONVENIENCE: 2,
    POIType.RESTAURANT: 2,
    POIType.SUPERMARKET: 2,
    POIType.MALL: 2,
    POIType.SCHOOL: 2,
    POIType.GAS_STATION: 3,
    POIType.PHARMACY: 3,
    POIType.WAREHOUSE: 3,
    POIType.RUIN: 3,
    POIType.FACTORY: 4,
    POIType.HOSPITAL: 4,
}


class PointOfInterest(BaseModel):
    id: str
    name: str
    type: POIType = POIType.RUIN
    coordinate: Coordinate
    status: POIStatus = POIStatus.UNDISCOVERED
    has_resources: bool = True
    description: str = ""

    @property
    def is_looted(self) -> bool:
        return self.status == POIStatus.LOOTED


class PlayerLocation(BaseModel):
    """A peer's last reported position as returned by the location backend."""
    user_id: str
    lat: float = Field(ge=-90, le=90)
    lon: float = Field(ge=-180, le=180)
    is_online: bool = True
    accuracy: float | None = Field(default=None, ge=0)


class Territory(BaseModel):
    """A claimed territory owned by some player, as loaded from storage."""
    id: str
    user_id: str
    name: str | None = None
    path: list[Coordinate] = Field(min_length=3)
    area: float = Field(default=0.0, ge=0)
    point_count: int | None = None
    is_active: bool = True
