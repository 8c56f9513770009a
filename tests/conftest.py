"""
Shared fixtures for dotmorph tests.

Provides seeded generators, single-tier fade tables (so fade values are
predictable), a handful of shape masks, and small engines.
"""
import numpy as np
import pytest

from dotmorph.core.grid_wave import GridWaveEngine, SweepParams
from dotmorph.core.lattice import LatticeParams
from dotmorph.core.tiers import FadeTier

FPS = 60


def run_for(engine, seconds, fps=FPS):
    """Step ``engine`` for ``seconds`` worth of frames, plus one to absorb float drift."""
    frames = int(round(seconds * fps)) + 1
    for _ in range(frames):
        engine.step(1.0 / fps)
    return frames


# ── Masks ───────────────────────────────────────────────────────────────

def nothing(t, x, y):
    return 0


def everything(t, x, y):
    return 1


def first_column(t, x, y):
    return 1 if x == 0 else 0


def left_half(t, x, y):
    return 1 if x < 0.5 else 0


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def fixed_tiers():
    """Multiplier 1.0 and trail length 1.0 x band width for every row."""
    return (FadeTier(1.0, 1.0, 1.0),), (FadeTier(1.0, 1.0, 1.0),)


@pytest.fixture
def small_engine(rng):
    """4x4 lattice, band of 4 columns, 1s sweep, 0.5s hold."""
    params = SweepParams(flow_duration=1.0, pause_duration=0.5, active_column_width=4)
    return GridWaveEngine.for_canvas(80, 80, params, LatticeParams(spacing=20), rng=rng)


@pytest.fixture
def wide_engine(rng):
    """30x6 lattice with a narrow band so fade tails are visible mid-sweep."""
    params = SweepParams(flow_duration=1.0, pause_duration=0.25, active_column_width=3)
    return GridWaveEngine.for_canvas(300, 60, params, LatticeParams(spacing=10), rng=rng)
