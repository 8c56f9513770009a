"""Chart-like shape masks over normalized space.

Each mask maps ``(t, x, y)`` with ``x, y`` in [0, 1] to a weight; values
above zero are inside the shape. ``t`` is accepted for the mask protocol
but none of the built-in shapes animate over time.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, Optional

from .masks import ShapeMask

BARS = ((0.1, 0.6), (0.3, 0.4), (0.5, 0.8), (0.7, 0.5), (0.9, 0.7))  # (center, height)
BAR_WIDTH = 0.15
PIE_RADIUS = 0.4


def line_chart(t: float, x: float, y: float) -> float:
    # filled region below a sine curve, with a thin soft edge
    line = 0.7 - 0.4 * math.sin(x * math.pi * 2)
    edge = 0.01
    d = y - line
    if d > edge:
        return 1.0
    if d > 0:
        return d / edge
    return 0.0


def bar_chart(t: float, x: float, y: float) -> float:
    for pos, height in BARS:
        if abs(x - pos) < BAR_WIDTH / 2:
            return 0.0 if y > 1 - height else 1.0
    return 0.0


def pie_chart(t: float, x: float, y: float) -> float:
    dx = x - 0.5
    dy = y - 0.5
    if math.hypot(dx, dy) > PIE_RADIUS:
        return 0.0
    angle = math.atan2(dy, dx) % (2 * math.pi)
    quadrant = int(angle // (math.pi / 2)) % 4
    # alternate quadrants are filled
    return 1.0 if quadrant % 2 == 0 else 0.0


class ShapeLibrary:
    def __init__(self, shapes: Optional[Dict[str, ShapeMask]] = None):
        self._shapes: Dict[str, ShapeMask] = {}
        for name, mask in (shapes or {}).items():
            self.add(name, mask)

    @classmethod
    def default(cls) -> "ShapeLibrary":
        return cls({"lineChart": line_chart, "barChart": bar_chart, "pieChart": pie_chart})

    def add(self, name: str, mask: ShapeMask) -> None:
        if not callable(mask):
            raise TypeError(f"shape {name!r} is not callable")
        self._shapes[name] = mask

    def get(self, name: str) -> ShapeMask:
        try:
            return self._shapes[name]
        except KeyError:
            raise KeyError(f"unknown shape {name!r}") from None

    def evaluate(self, name: str, t: float, x: float, y: float) -> float:
        mask = self._shapes.get(name)
        if mask is None:
            return 0.0
        return mask(t, x, y)

    def names(self) -> Iterable[str]:
        return list(self._shapes)

    def __contains__(self, name) -> bool:
        return name in self._shapes

    def __len__(self) -> int:
        return len(self._shapes)
