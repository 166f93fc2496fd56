"""Nearby-player density tiers and the POI counts they unlock."""

import logging
import random
from enum import Enum

logger = logging.getLogger(__name__)


class DensityTier(str, Enum):
    SOLITARY = "solitary"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _ORDER.index(self)

    @property
    def poi_count_range(self) -> tuple[int, int]:
        """Inclusive (low, high) number of POIs to surface."""
        return _POI_COUNT_RANGES[self]

    @property
    def label(self) -> str:
        return _LABELS[self][0]

    @property
    def description(self) -> str:
        return _LABELS[self][1]


_ORDER = [DensityTier.SOLITARY, DensityTier.LOW, DensityTier.MEDIUM, DensityTier.HIGH]

_POI_COUNT_RANGES = {
    DensityTier.SOLITARY: (1, 1),
    DensityTier.LOW: (2, 3),
    DensityTier.MEDIUM: (4, 6),
    DensityTier.HIGH: (7, 10),
}

_LABELS = {
    DensityTier.SOLITARY: ("Solitary", "No other explorers nearby"),
    DensityTier.LOW: ("Low density", "A few explorers nearby"),
    DensityTier.MEDIUM: ("Medium density", "Plenty of explorers nearby"),
    DensityTier.HIGH: ("High density", "A popular exploration area"),
}

# Upper bound (inclusive) of peer counts for each tier below HIGH.
LOW_MAX_PEERS = 5
MEDIUM_MAX_PEERS = 20


def classify(peer_count: int) -> DensityTier:
    """Bucket a nearby active peer count into a density tier.

    Negative counts are clamped to zero.
    """
    if peer_count < 0:
        logger.debug("Clamping negative peer count %d to 0", peer_count)
        peer_count = 0
    if peer_count == 0:
        return DensityTier.SOLITARY
    if peer_count <= LOW_MAX_PEERS:
        return DensityTier.LOW
    if peer_count <= MEDIUM_MAX_PEERS:
        return DensityTier.MEDIUM
    return DensityTier.HIGH


def recommended_count(tier: DensityTier) -> int:
    """Midpoint (floored) of the tier's POI count range."""
    low, high = tier.poi_count_range
    return (low + high) // 2


def pick_random_count(tier: DensityTier, rng: random.Random | None = None) -> int:
    """Uniformly random POI count within the tier's inclusive range.

    Pass a seeded ``random.Random`` for reproducible picks.
    """
    low, high = tier.poi_count_range
    count = (rng or random).randint(low, high)
    logger.debug("Density %s -> showing %d POI(s)", tier.value, count)
    return count
