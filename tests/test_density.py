"""Tests for density tiers."""
import random

import pytest

from earthlord_scout.core.density import (
    DensityTier, classify, pick_random_count, recommended_count,
)


@pytest.mark.parametrize("count,expected", [
    (0, DensityTier.SOLITARY),
    (1, DensityTier.LOW),
    (5, DensityTier.LOW),
    (6, DensityTier.MEDIUM),
    (20, DensityTier.MEDIUM),
    (21, DensityTier.HIGH),
    (10_000, DensityTier.HIGH),
])
def test_classify_boundaries(count, expected):
    assert classify(count) == expected


def test_negative_count_clamped_to_solitary():
    assert classify(-3) == DensityTier.SOLITARY


def test_classify_is_monotonic():
    ranks = [classify(n).rank for n in range(0, 60)]
    assert ranks == sorted(ranks)


def test_ranges():
    assert DensityTier.SOLITARY.poi_count_range == (1, 1)
    assert DensityTier.LOW.poi_count_range == (2, 3)
    assert DensityTier.MEDIUM.poi_count_range == (4, 6)
    assert DensityTier.HIGH.poi_count_range == (7, 10)


@pytest.mark.parametrize("tier", list(DensityTier))
def test_range_is_valid_interval(tier):
    low, high = tier.poi_count_range
    assert 1 <= low <= high


@pytest.mark.parametrize("tier,expected", [
    (DensityTier.SOLITARY, 1),
    (DensityTier.LOW, 2),
    (DensityTier.MEDIUM, 5),
    (DensityTier.HIGH, 8),
])
def test_recommended_count(tier, expected):
    assert recommended_count(tier) == expected
    low, high = tier.poi_count_range
    assert low <= recommended_count(tier) <= high


def test_solitary_scenario():
    assert recommended_count(classify(0)) == 1


@pytest.mark.parametrize("tier", list(DensityTier))
def test_pick_random_count_within_range(tier):
    rng = random.Random(42)
    low, high = tier.poi_count_range
    picks = {pick_random_count(tier, rng) for _ in range(200)}
    assert picks <= set(range(low, high + 1))
    # inclusive of both bounds
    assert low in picks and high in picks


def test_pick_random_count_is_reproducible_with_seed():
    a = [pick_random_count(DensityTier.HIGH, random.Random(7)) for _ in range(5)]
    b = [pick_random_count(DensityTier.HIGH, random.Random(7)) for _ in range(5)]
    assert a == b


def test_labels_present():
    for tier in DensityTier:
        assert tier.label
        assert tier.description
