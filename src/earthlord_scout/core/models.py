"""Pydantic return models for core computation functions."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from earthlord_scout.models import Coordinate, PointOfInterest
from .density import DensityTier

MIN_POLYGON_POINTS = 3


class SelectedPOI(BaseModel):
    poi: PointOfInterest
    distance_m: float = Field(ge=0)


class ExplorationSelection(BaseModel):
    """Return type for explore."""
    tier: DensityTier
    peer_count: int = Field(ge=0)
    requested_count: int = Field(ge=0)
    pois: list[SelectedPOI] = []

    @model_validator(mode="after")
    def selection_within_requested(self) -> "ExplorationSelection":
        if len(self.pois) > self.requested_count:
            raise ValueError(
                f"Selected {len(self.pois)} POIs but only {self.requested_count} were requested"
            )
        return self


class BoundingBox(BaseModel):
    min_lat: float = Field(ge=-90, le=90)
    max_lat: float = Field(ge=-90, le=90)
    min_lon: float = Field(ge=-180, le=180)
    max_lon: float = Field(ge=-180, le=180)


class InsufficientPoints(BaseModel):
    """Rejection returned by build_polygon for paths that cannot enclose an area."""
    point_count: int = Field(ge=0)
    minimum: int = MIN_POLYGON_POINTS

    @property
    def reason(self) -> str:
        return (
            f"At least {self.minimum} points are needed to build a territory, "
            f"got {self.point_count}"
        )


class TerritoryPolygon(BaseModel):
    """Return type for build_polygon.

    ``render_coordinates`` is the closed ring in the display datum;
    ``raw_coordinates`` is the same ring before datum correction.
    """
    render_coordinates: list[Coordinate]
    raw_coordinates: list[Coordinate]
    area: float = Field(ge=0)
    point_count: int = Field(ge=MIN_POLYGON_POINTS)

    @field_validator("render_coordinates", "raw_coordinates")
    @classmethod
    def ring_must_have_min_points(cls, v: list[Coordinate]) -> list[Coordinate]:
        if len(v) < MIN_POLYGON_POINTS:
            raise ValueError(f"Ring needs at least {MIN_POLYGON_POINTS} coordinates, got {len(v)}")
        return v

    @model_validator(mode="after")
    def rings_must_match(self) -> "TerritoryPolygon":
        if len(self.render_coordinates) != len(self.raw_coordinates):
            raise ValueError(
                f"Render ring has {len(self.render_coordinates)} coordinates but raw ring has "
                f"{len(self.raw_coordinates)}"
            )
        return self

    @property
    def bbox(self) -> BoundingBox:
        lats = [c.lat for c in self.raw_coordinates]
        lons = [c.lon for c in self.raw_coordinates]
        return BoundingBox(min_lat=min(lats), max_lat=max(lats), min_lon=min(lons), max_lon=max(lons))

    def to_wkt(self) -> str:
        """PostGIS EWKT of the raw ring. WKT order is lon before lat."""
        points = ", ".join(f"{c.lon} {c.lat}" for c in self.raw_coordinates)
        return f"SRID=4326;POLYGON(({points}))"

    def to_storage_record(self) -> dict:
        bbox = self.bbox
        return {
            "path": [c.as_dict() for c in self.raw_coordinates],
            "polygon": self.to_wkt(),
            "bbox_min_lat": bbox.min_lat,
            "bbox_max_lat": bbox.max_lat,
            "bbox_min_lon": bbox.min_lon,
            "bbox_max_lon": bbox.max_lon,
            "area": self.area,
            "point_count": self.point_count,
        }


class TerritoryValidation(BaseModel):
    """Return type for validate_territory."""
    passed: bool
    area: float = Field(ge=0)
    self_intersecting: bool = False
    issues: list[str] = []


class CollisionResult(BaseModel):
    has_collision: bool = False
    collision_type: Literal["none", "point_in_territory", "path_cross_territory"] = "none"
    territory_id: str | None = None
    message: str = ""

    @classmethod
    def safe(cls) -> "CollisionResult":
        return cls()
