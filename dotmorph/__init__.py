"""dotmorph: dot grids that sweep between shapes and particle clouds that dodge the pointer."""

from .core.grid_wave import EngineState, GridWaveEngine, SweepParams, TransitionHandle
from .core.lattice import GridPoint, Lattice, LatticeParams
from .core.particles import Particle, ParticleField, sample_silhouette
from .core.physics import ParticleFieldEngine, PhysicsParams

__version__ = "0.1.0"

__all__ = [
    "EngineState",
    "GridPoint",
    "GridWaveEngine",
    "Lattice",
    "LatticeParams",
    "Particle",
    "ParticleField",
    "ParticleFieldEngine",
    "PhysicsParams",
    "SweepParams",
    "TransitionHandle",
    "sample_silhouette",
]
