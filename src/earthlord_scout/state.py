"""Session state for the earthlord-scout MCP server.

Holds everything for the current player session: location, nearby peer
count, POI catalog, the last exploration, the path being recorded, the
built territory and other players' territories.
"""

from typing import Optional, Literal
from pydantic import BaseModel, Field, ConfigDict, model_validator

from earthlord_scout.core.models import ExplorationSelection, TerritoryPolygon, TerritoryValidation
from earthlord_scout.core.nearby import BackendConfig
from earthlord_scout.core.path import PathRecorder, SpeedMonitor
from earthlord_scout.models import Coordinate, PointOfInterest, Territory


class ExplorationParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    search_radius_m: float = Field(default=1000.0, gt=0, le=50_000)
    closure_epsilon: float = Field(default=1e-6, gt=0, le=0.01)
    min_area_m2: float = Field(default=100.0, ge=0)
    max_area_m2: float = Field(default=10_000_000.0, gt=0)
    display_datum: Literal["wgs84", "gcj02"] = "gcj02"

    @model_validator(mode="after")
    def check_area_limits(self) -> "ExplorationParams":
        if self.max_area_m2 <= self.min_area_m2:
            raise ValueError(
                f"max_area_m2 ({self.max_area_m2}) must be greater than min_area_m2 ({self.min_area_m2})"
            )
        return self


class RecorderParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    min_interval_s: float = Field(default=2.0, ge=0)
    min_distance_m: float = Field(default=5.0, ge=0)


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    location: Optional[Coordinate] = None
    peer_count: Optional[int] = Field(default=None, ge=0)
    pois: list[PointOfInterest] = []
    poi_source: str = ""
    exploration: Optional[ExplorationSelection] = None
    recorder: PathRecorder = Field(default_factory=PathRecorder)
    speed_monitor: SpeedMonitor = Field(default_factory=SpeedMonitor)
    path_started_at: Optional[str] = None
    territory: Optional[TerritoryPolygon] = None
    validation: Optional[TerritoryValidation] = None
    territories: list[Territory] = []
    params: ExplorationParams = Field(default_factory=ExplorationParams)
    recorder_params: RecorderParams = Field(default_factory=RecorderParams)
    backend: BackendConfig = Field(default_factory=BackendConfig.from_env)

    def clear_territory(self) -> None:
        self.territory = None
        self.validation = None

    def summary(self) -> dict:
        return {
            "location": {
                "location_set": True,
                "lat": self.location.lat,
                "lon": self.location.lon,
            } if self.location else {"location_set": False},
            "density": {
                "peer_count": self.peer_count,
                "tier": self.exploration.tier.value if self.exploration else None,
            },
            "pois": {
                "catalog_size": len(self.pois),
                "source": self.poi_source or None,
                "looted": sum(1 for p in self.pois if p.is_looted),
                "selected": (
                    [s.poi.id for s in self.exploration.pois] if self.exploration else []
                ),
            },
            "path": {
                "points": len(self.recorder),
                "started_at": self.path_started_at,
            },
            "territory": {
                "built": self.territory is not None,
                "area_m2": round(self.territory.area, 2) if self.territory else None,
                "point_count": self.territory.point_count if self.territory else None,
                "validated": self.validation.passed if self.validation else None,
                "other_territories": len(self.territories),
            },
            "params": self.params.model_dump(),
            "recorder": self.recorder_params.model_dump(),
            "backend": {
                "configured": self.backend.is_configured,
                "user_id": self.backend.user_id,
            },
        }


# Global session state, one per MCP server process
state = SessionState()
