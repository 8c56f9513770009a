"""Weighted-bucket sampling for per-row fade personalities.

A tier table is a sequence of ``FadeTier(weight, low, high)``. One uniform
draw picks the tier (weights are normalized), a second picks a value inside
the tier's range. Discrete tiers read as fast/medium/slow rows rather than
the noise of a single uniform range.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class FadeTier:
    weight: float
    low: float
    high: float


TierTable = Tuple[FadeTier, ...]

# How fast a point's opacity decays behind the wave (x speed)
DEFAULT_MULTIPLIER_TIERS: TierTable = (
    FadeTier(0.25, 15.0, 20.0),  # near-instant
    FadeTier(0.25, 6.0, 9.0),
    FadeTier(0.25, 2.0, 4.0),
    FadeTier(0.25, 0.5, 1.0),  # very slow
)

# Trail length, in units of the active column width
DEFAULT_LENGTH_TIERS: TierTable = (
    FadeTier(0.3, 0.3, 0.5),
    FadeTier(0.3, 0.8, 1.2),
    FadeTier(0.4, 1.5, 2.5),
)

JITTER_LOW = 0.8
JITTER_HIGH = 1.2


def validate_tiers(table: Sequence[FadeTier]) -> TierTable:
    table = tuple(table)
    if not table:
        raise ValueError("tier table must not be empty")
    for tier in table:
        if tier.weight < 0:
            raise ValueError(f"tier weight must be non-negative: {tier}")
        if tier.high < tier.low:
            raise ValueError(f"tier range is inverted: {tier}")
    if sum(t.weight for t in table) <= 0:
        raise ValueError("tier weights must sum to a positive value")
    return table


def sample_tiers(table: Sequence[FadeTier], n: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """Draw ``n`` values, one tier choice and one in-range value each."""
    table = validate_tiers(table)
    rng = rng if rng is not None else np.random.default_rng()
    if n <= 0:
        return np.zeros(0, dtype=np.float64)
    weights = np.array([t.weight for t in table], dtype=np.float64)
    edges = np.cumsum(weights / weights.sum())
    edges[-1] = 1.0
    picks = np.searchsorted(edges, rng.random(n), side="right")
    picks = np.minimum(picks, len(table) - 1)
    lows = np.array([t.low for t in table])[picks]
    highs = np.array([t.high for t in table])[picks]
    return lows + rng.random(n) * (highs - lows)


def jitter(n: int, rng: Optional[np.random.Generator] = None) -> np.ndarray:
    rng = rng if rng is not None else np.random.default_rng()
    return JITTER_LOW + rng.random(n) * (JITTER_HIGH - JITTER_LOW)
