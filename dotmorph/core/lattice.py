from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

import numpy as np

from .masks import OPACITY_FLOOR, normalized_coords
from .tiers import DEFAULT_LENGTH_TIERS, DEFAULT_MULTIPLIER_TIERS, FadeTier, jitter, sample_tiers

logger = logging.getLogger(__name__)


@dataclass
class LatticeParams:
    spacing: float = 20.0
    dot_radius: float = 2.0

    def __post_init__(self):
        if self.spacing <= 0:
            raise ValueError(f"spacing must be positive, got {self.spacing}")
        if self.dot_radius < 0:
            raise ValueError(f"dot_radius must be non-negative, got {self.dot_radius}")


@dataclass(frozen=True)
class GridPoint:
    x: float
    y: float
    col: int
    row: int
    opacity: float
    in_current_shape: bool
    in_next_shape: bool
    was_in_previous_shape: bool
    fade_length: float
    fade_multiplier: float


class Lattice:
    """Row-major grid of dots, centered in a ``width`` x ``height`` canvas.

    Per-point state lives in parallel numpy arrays. Geometry and fade
    parameters are fixed at construction; only ``opacity`` and the
    membership flags change afterwards, and only through the engine.
    """

    def __init__(
        self,
        width: float,
        height: float,
        params: Optional[LatticeParams] = None,
        active_column_width: float = 20.0,
        multiplier_tiers: Sequence[FadeTier] = DEFAULT_MULTIPLIER_TIERS,
        length_tiers: Sequence[FadeTier] = DEFAULT_LENGTH_TIERS,
        rng: Optional[np.random.Generator] = None,
    ):
        self.params = params or LatticeParams()
        self.width = float(width)
        self.height = float(height)
        spacing = self.params.spacing
        self.columns = max(0, int(self.width // spacing))
        self.rows = max(0, int(self.height // spacing))
        rng = rng if rng is not None else np.random.default_rng()

        n = self.columns * self.rows
        rows, cols = np.divmod(np.arange(n), max(1, self.columns))
        self.col = cols.astype(np.int64)
        self.row = rows.astype(np.int64)

        offset_x = (self.width - (self.columns - 1) * spacing) / 2
        offset_y = (self.height - (self.rows - 1) * spacing) / 2
        self.x = offset_x + self.col * spacing
        self.y = offset_y + self.row * spacing
        self.u, self.v = normalized_coords(self.col, self.row, self.columns, self.rows)

        row_multipliers = sample_tiers(multiplier_tiers, self.rows, rng)
        row_lengths = sample_tiers(length_tiers, self.rows, rng)
        self.fade_multiplier = row_multipliers[self.row] * jitter(n, rng) if n else np.zeros(0)
        self.fade_length = row_lengths[self.row] * float(active_column_width) if n else np.zeros(0)

        self.opacity = np.full(n, OPACITY_FLOOR, dtype=np.float64)
        self.in_current_shape = np.zeros(n, dtype=bool)
        self.in_next_shape = np.zeros(n, dtype=bool)
        self.was_in_previous_shape = np.zeros(n, dtype=bool)

        logger.debug("Lattice %dx%d (%d points) for %.0fx%.0f canvas",
                     self.columns, self.rows, n, self.width, self.height)

    def __len__(self) -> int:
        return len(self.opacity)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def positions(self) -> np.ndarray:
        return np.column_stack((self.x, self.y))

    def points(self) -> Iterator[GridPoint]:
        for i in range(len(self)):
            yield GridPoint(
                x=float(self.x[i]),
                y=float(self.y[i]),
                col=int(self.col[i]),
                row=int(self.row[i]),
                opacity=float(self.opacity[i]),
                in_current_shape=bool(self.in_current_shape[i]),
                in_next_shape=bool(self.in_next_shape[i]),
                was_in_previous_shape=bool(self.was_in_previous_shape[i]),
                fade_length=float(self.fade_length[i]),
                fade_multiplier=float(self.fade_multiplier[i]),
            )
