"""Distance-ranked POI selection."""

import logging
import math
import random
from typing import Sequence

import numpy as np

from .density import classify, pick_random_count
from .models import ExplorationSelection, SelectedPOI
from earthlord_scout.models import Coordinate, PointOfInterest

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    lat1, lon1 = math.radians(a.lat), math.radians(a.lon)
    lat2, lon2 = math.radians(b.lat), math.radians(b.lon)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def haversine_distances(origin: Coordinate, coords: Sequence[Coordinate]) -> np.ndarray:
    """Vectorized great-circle distances (m) from origin to each coordinate."""
    if not coords:
        return np.zeros(0)
    lats = np.radians(np.array([c.lat for c in coords], dtype=np.float64))
    lons = np.radians(np.array([c.lon for c in coords], dtype=np.float64))
    lat0 = math.radians(origin.lat)
    lon0 = math.radians(origin.lon)
    h = (
        np.sin((lats - lat0) / 2) ** 2
        + math.cos(lat0) * np.cos(lats) * np.sin((lons - lon0) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * np.arcsin(np.minimum(1.0, np.sqrt(h)))


def _ranked(origin: Coordinate, candidates: Sequence[PointOfInterest]) -> list[SelectedPOI]:
    eligible = [poi for poi in candidates if not poi.is_looted]
    distances = haversine_distances(origin, [poi.coordinate for poi in eligible])
    # mergesort is stable: equal distances keep input order
    order = np.argsort(distances, kind="mergesort")
    return [SelectedPOI(poi=eligible[i], distance_m=float(distances[i])) for i in order]


def select_pois(
    origin: Coordinate,
    candidates: Sequence[PointOfInterest],
    desired_count: int,
) -> list[PointOfInterest]:
    """Return up to desired_count non-looted POIs, nearest first."""
    if desired_count <= 0 or not candidates:
        return []
    ranked = _ranked(origin, candidates)
    return [entry.poi for entry in ranked[:desired_count]]


def explore(
    origin: Coordinate,
    candidates: Sequence[PointOfInterest],
    peer_count: int,
    rng: random.Random | None = None,
) -> ExplorationSelection:
    """Classify density, pick a POI count for it and select the nearest POIs."""
    tier = classify(peer_count)
    count = pick_random_count(tier, rng)
    ranked = _ranked(origin, candidates) if candidates else []
    chosen = ranked[:count]
    logger.debug(
        "Exploration at (%.6f, %.6f): %s tier, %d requested, %d selected of %d candidates",
        origin.lat, origin.lon, tier.value, count, len(chosen), len(candidates),
    )
    return ExplorationSelection(
        tier=tier,
        peer_count=max(peer_count, 0),
        requested_count=count,
        pois=chosen,
    )
