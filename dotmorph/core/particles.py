from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# (x, y, width, height)
Bounds = Tuple[float, float, float, float]


class Silhouette(Protocol):
    bounds: Bounds

    def contains(self, x: float, y: float) -> bool:
        ...


@dataclass(frozen=True)
class Particle:
    x: float
    y: float
    home_x: float
    home_y: float
    vx: float
    vy: float
    scale: float


class ParticleField:
    """Particles at rest on their home positions.

    ``home`` is fixed for the lifetime of the field; ``position``,
    ``velocity`` and ``scale`` are advanced by the physics engine.
    """

    def __init__(self, homes: np.ndarray):
        homes = np.asarray(homes, dtype=np.float64).reshape(-1, 2)
        self.home = homes.copy()
        self.home.setflags(write=False)
        self.position = homes.copy()
        self.velocity = np.zeros_like(homes)
        self.scale = np.ones(len(homes), dtype=np.float64)

    @classmethod
    def empty(cls) -> "ParticleField":
        return cls(np.zeros((0, 2)))

    def __len__(self) -> int:
        return len(self.home)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    def particles(self) -> Iterator[Particle]:
        for i in range(len(self)):
            yield Particle(
                x=float(self.position[i, 0]),
                y=float(self.position[i, 1]),
                home_x=float(self.home[i, 0]),
                home_y=float(self.home[i, 1]),
                vx=float(self.velocity[i, 0]),
                vy=float(self.velocity[i, 1]),
                scale=float(self.scale[i]),
            )


def grid_centers(bounds: Bounds, spacing: float) -> np.ndarray:
    """Cell centers of a ``spacing`` grid laid over ``bounds``, row-major."""
    if spacing <= 0:
        raise ValueError(f"spacing must be positive, got {spacing}")
    x0, y0, width, height = bounds
    cols = max(0, int(width // spacing))
    rows = max(0, int(height // spacing))
    if cols == 0 or rows == 0:
        return np.zeros((0, 2))
    yy, xx = np.mgrid[0:rows, 0:cols].astype(np.float64)
    cx = x0 + (xx.ravel() + 0.5) * spacing
    cy = y0 + (yy.ravel() + 0.5) * spacing
    return np.column_stack((cx, cy))


def sample_silhouette(silhouette: Optional[Silhouette], spacing: float = 15.0) -> ParticleField:
    """One particle per grid cell whose center lies inside ``silhouette``.

    A missing silhouette, degenerate bounds, or a ``contains`` that raises
    leaves the affected cells empty rather than failing.
    """
    if silhouette is None:
        logger.warning("No silhouette available; particle field is empty")
        return ParticleField.empty()

    centers = grid_centers(silhouette.bounds, spacing)
    keep = np.zeros(len(centers), dtype=bool)
    failures = 0
    for i, (x, y) in enumerate(centers):
        try:
            keep[i] = bool(silhouette.contains(float(x), float(y)))
        except Exception as exc:
            failures += 1
            if failures == 1:
                logger.warning("Silhouette test failed at (%.1f, %.1f): %s", x, y, exc)
    if failures:
        logger.warning("Silhouette: %d of %d cells treated as outside", failures, len(centers))

    field = ParticleField(centers[keep])
    logger.info("Sampled %d particles from %d cells", len(field), len(centers))
    return field
