from __future__ import annotations

from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from ..core.lattice import Lattice
from ..core.particles import ParticleField

RGB = Tuple[int, int, int]


def blend(fg: RGB, bg: RGB, alpha: np.ndarray) -> np.ndarray:
    """Per-dot color of ``fg`` at ``alpha`` over ``bg``, as uint8 rows."""
    a = np.clip(np.asarray(alpha, dtype=np.float32), 0.0, 1.0)[:, None]
    out = np.asarray(bg, dtype=np.float32) * (1 - a) + np.asarray(fg, dtype=np.float32) * a
    return np.clip(out + 0.5, 0, 255).astype(np.uint8)


def render_lattice(
    lattice: Lattice,
    size: Tuple[int, int] | None = None,
    fg: RGB = (255, 255, 255),
    bg: RGB = (0, 0, 0),
    draw_cells: bool = False,
) -> Image.Image:
    """Paint every dot at its current opacity."""
    w, h = size or (int(lattice.width), int(lattice.height))
    img = Image.new("RGB", (max(1, w), max(1, h)), color=bg)
    if lattice.is_empty:
        return img
    draw = ImageDraw.Draw(img)
    r = lattice.params.dot_radius
    half = lattice.params.spacing / 2
    colors = blend(fg, bg, lattice.opacity)
    for x, y, c in zip(lattice.x, lattice.y, colors):
        if draw_cells:
            draw.rectangle((x - half, y - half, x + half, y + half), outline=(221, 221, 221))
        draw.ellipse((x - r, y - r, x + r, y + r), fill=tuple(int(v) for v in c))
    return img


def render_particles(
    field: ParticleField,
    size: Tuple[int, int],
    particle_size: float = 4.0,
    fg: RGB = (51, 51, 51),
    bg: RGB = (255, 255, 255),
) -> Image.Image:
    """Paint particles as discs of radius ``particle_size * scale``."""
    w, h = size
    img = Image.new("RGB", (max(1, int(w)), max(1, int(h))), color=bg)
    draw = ImageDraw.Draw(img)
    radii = particle_size * field.scale
    for (x, y), r in zip(field.position, radii):
        draw.ellipse((x - r, y - r, x + r, y + r), fill=fg)
    return img


def to_frame(img: Image.Image) -> np.ndarray:
    return np.array(img.convert("RGB"))
