"""Territory polygons built from recorded GPS paths.

A recorded path is closed into a ring, corrected into the map's display
datum for rendering, and measured on the uncorrected ring. Validation and
collision checks against other players' territories are separate steps.
"""

import logging
from typing import Sequence

import numpy as np

from .datum import DatumCorrection, Wgs84ToGcj02
from .models import (
    MIN_POLYGON_POINTS,
    CollisionResult,
    InsufficientPoints,
    TerritoryPolygon,
    TerritoryValidation,
)
from .selection import EARTH_RADIUS_M
from earthlord_scout.models import Coordinate, Territory

logger = logging.getLogger(__name__)

DEFAULT_CLOSURE_EPSILON = 1e-6
MIN_TERRITORY_AREA_M2 = 100.0
MAX_TERRITORY_AREA_M2 = 10_000_000.0


def close_ring(path: Sequence[Coordinate], epsilon: float = DEFAULT_CLOSURE_EPSILON) -> list[Coordinate]:
    """Append the first coordinate when the path does not already end there."""
    ring = list(path)
    if ring and not ring[0].is_close(ring[-1], epsilon):
        ring.append(ring[0])
    return ring


def ring_area(ring: Sequence[Coordinate]) -> float:
    """Spherical-excess area (m²) enclosed by a ring of lat/lon coordinates.

    Works for open or closed rings; the closing edge is implied.
    """
    if len(ring) < MIN_POLYGON_POINTS:
        return 0.0
    lats = np.radians(np.array([c.lat for c in ring], dtype=np.float64))
    lons = np.radians(np.array([c.lon for c in ring], dtype=np.float64))
    next_lats = np.roll(lats, -1)
    next_lons = np.roll(lons, -1)
    total = np.sum((next_lons - lons) * (2 + np.sin(lats) + np.sin(next_lats)))
    return float(abs(total * EARTH_RADIUS_M * EARTH_RADIUS_M / 2))


def build_polygon(
    path: Sequence[Coordinate],
    correction: DatumCorrection | None = None,
    closure_epsilon: float = DEFAULT_CLOSURE_EPSILON,
) -> TerritoryPolygon | InsufficientPoints:
    """Turn a recorded path into a closed, area-bearing territory polygon.

    Args:
        path: Raw WGS-84 coordinates in walking order.
        correction: Display datum correction. Default: WGS-84 -> GCJ-02.
        closure_epsilon: Planar tolerance (degrees) under which the first and
            last points count as the same point.

    Returns:
        TerritoryPolygon, or InsufficientPoints when the path has fewer than
        three coordinates. Self-intersecting and collinear paths are accepted.
    """
    if len(path) < MIN_POLYGON_POINTS:
        logger.debug("Rejecting territory path with %d point(s)", len(path))
        return InsufficientPoints(point_count=len(path))

    correction = correction or Wgs84ToGcj02()
    raw_ring = close_ring(path, closure_epsilon)
    render_ring = correction.correct_many(raw_ring)
    area = ring_area(raw_ring)

    logger.debug(
        "Built territory: %d input points, %d ring points, %.2f m²",
        len(path), len(raw_ring), area,
    )
    return TerritoryPolygon(
        render_coordinates=render_ring,
        raw_coordinates=raw_ring,
        area=area,
        point_count=len(path),
    )


def _ccw(a: Coordinate, b: Coordinate, c: Coordinate) -> bool:
    return (c.lat - a.lat) * (b.lon - a.lon) > (b.lat - a.lat) * (c.lon - a.lon)


def segments_intersect(p1: Coordinate, p2: Coordinate, p3: Coordinate, p4: Coordinate) -> bool:
    return _ccw(p1, p3, p4) != _ccw(p2, p3, p4) and _ccw(p1, p2, p3) != _ccw(p1, p2, p4)


def has_self_intersection(
    ring: Sequence[Coordinate], closure_epsilon: float = DEFAULT_CLOSURE_EPSILON,
) -> bool:
    """True when two non-adjacent segments of the ring cross.

    A ring whose ends lie within closure_epsilon counts as closed.
    """
    n_segments = len(ring) - 1
    if n_segments < 3:
        return False
    closed = ring[0].is_close(ring[-1], closure_epsilon)
    for i in range(n_segments):
        for j in range(i + 2, n_segments):
            # first and last segments of a closed ring share a vertex
            if closed and i == 0 and j == n_segments - 1:
                continue
            if segments_intersect(ring[i], ring[i + 1], ring[j], ring[j + 1]):
                return True
    return False


def validate_territory(
    polygon: TerritoryPolygon,
    min_area: float = MIN_TERRITORY_AREA_M2,
    max_area: float = MAX_TERRITORY_AREA_M2,
    closure_epsilon: float = DEFAULT_CLOSURE_EPSILON,
) -> TerritoryValidation:
    """Check a built territory against the claim rules.

    Reports every failing rule rather than stopping at the first one.
    """
    issues = []
    if polygon.area < min_area:
        issues.append(f"Territory area too small ({polygon.area:.0f}m², minimum {min_area:.0f}m²)")
    if polygon.area > max_area:
        issues.append(f"Territory area too large ({polygon.area:.0f}m², maximum {max_area:.0f}m²)")
    crossing = has_self_intersection(polygon.raw_coordinates, closure_epsilon)
    if crossing:
        issues.append("Territory path crosses itself")
    return TerritoryValidation(
        passed=not issues,
        area=polygon.area,
        self_intersecting=crossing,
        issues=issues,
    )


def point_in_polygon(point: Coordinate, polygon: Sequence[Coordinate]) -> bool:
    """Ray casting test; rings with fewer than three points contain nothing."""
    if len(polygon) < MIN_POLYGON_POINTS:
        return False
    inside = False
    x, y = point.lon, point.lat
    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i].lon, polygon[i].lat
        xj, yj = polygon[j].lon, polygon[j].lat
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def _others(territories: Sequence[Territory], user_id: str) -> list[Territory]:
    return [t for t in territories if t.user_id.lower() != user_id.lower()]


def check_point_collision(
    point: Coordinate, territories: Sequence[Territory], user_id: str,
) -> CollisionResult:
    """Is the point inside a territory owned by another player?"""
    for territory in _others(territories, user_id):
        if point_in_polygon(point, territory.path):
            logger.info("Start point lies inside territory %s", territory.id)
            return CollisionResult(
                has_collision=True,
                collision_type="point_in_territory",
                territory_id=territory.id,
                message="Cannot start a claim inside another player's territory",
            )
    return CollisionResult.safe()


def check_path_collision(
    path: Sequence[Coordinate], territories: Sequence[Territory], user_id: str,
) -> CollisionResult:
    """Does the path cross into or through another player's territory?"""
    if len(path) < 2:
        return CollisionResult.safe()
    others = _others(territories, user_id)
    for start, end in zip(path, path[1:]):
        for territory in others:
            ring = territory.path
            for k in range(len(ring)):
                if segments_intersect(start, end, ring[k], ring[(k + 1) % len(ring)]):
                    logger.info("Path crosses the boundary of territory %s", territory.id)
                    return CollisionResult(
                        has_collision=True,
                        collision_type="path_cross_territory",
                        territory_id=territory.id,
                        message="Path cannot cross another player's territory",
                    )
            if point_in_polygon(end, ring):
                logger.info("Path enters territory %s", territory.id)
                return CollisionResult(
                    has_collision=True,
                    collision_type="point_in_territory",
                    territory_id=territory.id,
                    message="Path cannot enter another player's territory",
                )
    return CollisionResult.safe()
