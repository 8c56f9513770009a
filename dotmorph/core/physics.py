from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .particles import ParticleField

logger = logging.getLogger(__name__)


@dataclass
class PhysicsParams:
    gravity: float = 0.1  # spring pull toward home, per frame
    influence_radius: float = 150.0
    max_scale: float = 2.5
    push_force: float = 0.5
    damping: float = 0.9
    scale_rate: float = 0.15
    particle_size: float = 4.0

    def __post_init__(self):
        if not 0 < self.damping <= 1:
            raise ValueError(f"damping must be in (0, 1], got {self.damping}")
        if self.gravity < 0 or self.push_force < 0:
            raise ValueError("gravity and push_force must be non-negative")
        if self.influence_radius < 0:
            raise ValueError("influence_radius must be non-negative")
        if not 0 < self.scale_rate <= 1:
            raise ValueError(f"scale_rate must be in (0, 1], got {self.scale_rate}")
        if self.max_scale < 0:
            raise ValueError("max_scale must be non-negative")


class ParticleFieldEngine:
    """Pointer repulsion plus a damped spring back to each particle's home.

    Explicit Euler, one step per rendered frame. Stable for small gravity
    and damping below one.
    """

    def __init__(self, field: ParticleField, params: Optional[PhysicsParams] = None):
        self.field = field
        self.params = params or PhysicsParams()
        self.pointer: Optional[Tuple[float, float]] = None
        self.frame = 0

    def set_pointer(self, x: Optional[float], y: Optional[float] = None) -> None:
        """Record the latest pointer position; ``None`` means no pointer."""
        if x is None or y is None:
            self.pointer = None
        else:
            self.pointer = (float(x), float(y))

    def reset(self, field: ParticleField) -> None:
        self.field = field
        self.frame = 0

    def step(self) -> None:
        f = self.field
        self.frame += 1
        if f.is_empty:
            return
        p = self.params
        target_scale = np.ones(len(f))

        if self.pointer is not None and p.influence_radius > 0:
            d = np.asarray(self.pointer) - f.position
            distance = np.hypot(d[:, 0], d[:, 1])
            near = distance < p.influence_radius
            influence = np.where(near, 1.0 - distance / p.influence_radius, 0.0)

            push = near & (distance > 0)
            safe = np.where(push, distance, 1.0)
            impulse = d / safe[:, None] * (p.push_force * influence)[:, None]
            f.velocity -= np.where(push[:, None], impulse, 0.0)

            target_scale = np.where(near, 1.0 + (p.max_scale - 1.0) * influence, 1.0)

        f.scale += (target_scale - f.scale) * p.scale_rate
        np.maximum(f.scale, 0.0, out=f.scale)

        f.velocity += (f.home - f.position) * p.gravity
        f.velocity *= p.damping
        f.position += f.velocity
