from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from ..core.particles import Bounds


class MaskSilhouette:
    """Fill test backed by a boolean raster covering ``bounds``.

    Pixel ``[j, i]`` covers the unit square starting at
    ``(x0 + i, y0 + j)`` in silhouette coordinates.
    """

    def __init__(self, mask: np.ndarray, origin: Tuple[float, float] = (0.0, 0.0)):
        self.mask = np.asarray(mask, dtype=bool)
        h, w = self.mask.shape
        self.bounds: Bounds = (float(origin[0]), float(origin[1]), float(w), float(h))

    @classmethod
    def from_gray(cls, gray: np.ndarray, threshold: float = 0.5, origin=(0.0, 0.0)) -> "MaskSilhouette":
        return cls(np.asarray(gray, dtype=np.float32) >= threshold, origin)

    def contains(self, x: float, y: float) -> bool:
        x0, y0, w, h = self.bounds
        i = int(math.floor(x - x0))
        j = int(math.floor(y - y0))
        if 0 <= i < w and 0 <= j < h:
            return bool(self.mask[j, i])
        return False


def _raster(width: int, height: int):
    img = Image.new("L", (max(1, int(width)), max(1, int(height))), 0)
    return img, ImageDraw.Draw(img, "L")


def polygon_silhouette(points: Sequence[Tuple[float, float]], width: int, height: int) -> MaskSilhouette:
    img, d = _raster(width, height)
    if len(points) >= 3:
        d.polygon([(float(x), float(y)) for x, y in points], fill=255)
    return MaskSilhouette(np.array(img) > 0)


def pie_silhouette(size: int = 1200, radius_frac: float = 0.42, gap_deg: float = 60.0) -> MaskSilhouette:
    """Disc with one wedge removed, centered in a ``size`` square."""
    img, d = _raster(size, size)
    r = size * radius_frac
    c = size / 2
    box = (c - r, c - r, c + r, c + r)
    d.pieslice(box, start=gap_deg / 2, end=360 - gap_deg / 2, fill=255)
    return MaskSilhouette(np.array(img) > 0)


def delta_silhouette(size: int = 1200, inset_frac: float = 0.1) -> MaskSilhouette:
    """Upward triangle inset from the edges of a ``size`` square."""
    m = size * inset_frac
    pts = [(size / 2, m), (size - m, size - m), (m, size - m)]
    return polygon_silhouette(pts, size, size)


SILHOUETTES = {
    "pie": pie_silhouette,
    "delta": delta_silhouette,
}
