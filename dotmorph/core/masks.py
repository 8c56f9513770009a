from __future__ import annotations

import logging
import math
from typing import Callable

import numpy as np

logger = logging.getLogger(__name__)

# (t, x, y) -> weight; > 0 means the location belongs to the shape
ShapeMask = Callable[[float, float, float], float]

OPACITY_FLOOR = 0.2
OPACITY_LIT = 1.0


def clamp_opacity(x):
    return np.clip(x, OPACITY_FLOOR, OPACITY_LIT)


def normalized_coords(cols: np.ndarray, rows: np.ndarray, n_cols: int, n_rows: int):
    """Map integer grid indices onto [0, 1] x [0, 1].

    A single column or row maps to 0 instead of dividing by zero.
    """
    x = cols.astype(np.float64) / max(1, n_cols - 1)
    y = rows.astype(np.float64) / max(1, n_rows - 1)
    return x, y


def evaluate_membership(mask: ShapeMask, xs: np.ndarray, ys: np.ndarray, t: float = 0.0) -> np.ndarray:
    """Evaluate ``mask`` at every (x, y) and return a boolean membership array.

    A point whose evaluation raises or yields NaN is treated as outside the
    shape; the rest of the batch is still evaluated.
    """
    out = np.zeros(len(xs), dtype=bool)
    failures = 0
    for i, (x, y) in enumerate(zip(xs, ys)):
        try:
            value = float(mask(t, float(x), float(y)))
        except Exception as exc:
            failures += 1
            if failures == 1:
                logger.warning("Shape mask failed at (%.3f, %.3f): %s", x, y, exc)
            continue
        if math.isnan(value):
            failures += 1
            continue
        out[i] = value > 0
    if failures:
        logger.warning("Shape mask: %d of %d points treated as outside", failures, len(xs))
    return out
