"""Headless frame export.

Runs either engine on a fixed timeline (``t = frame / fps``) and writes the
rendered frames to a GIF.

Usage:
    python -m dotmorph grid -o grid.gif [--width 800 --height 400]
    python -m dotmorph particles -o pie.gif --silhouette pie
"""
from __future__ import annotations

import argparse
import logging
import math
import sys
from typing import Callable, Iterator, List, Optional, Sequence

import numpy as np

from .config import Config, load_config, physics_preset
from .core.grid_wave import GridWaveEngine
from .core.particles import sample_silhouette
from .core.physics import ParticleFieldEngine
from .core.sequencer import ShapeSequencer
from .core.shapes import ShapeLibrary
from .logging_config import setup_logging
from .utils.image_ops import render_lattice, render_particles, to_frame
from .utils.silhouette import SILHOUETTES

logger = logging.getLogger(__name__)


def run_frames(step: Callable[[int], None], render: Callable[[], np.ndarray], frames: int) -> Iterator[np.ndarray]:
    """Call ``step`` then ``render`` once per frame."""
    for i in range(frames):
        step(i)
        yield render()


def orbit_pointer(i: int, frames: int, center: float, radius: float):
    """Pointer circling the center for two thirds of the clip, then gone."""
    if i >= frames * 2 // 3:
        return None
    a = 2 * math.pi * i / max(1, frames * 2 // 3)
    return center + radius * math.cos(a), center + radius * math.sin(a)


def write_gif(path: str, frames: List[np.ndarray], fps: int) -> None:
    import imageio.v3 as iio

    iio.imwrite(path, frames, extension=".gif", duration=1000.0 / max(1, fps), loop=0)
    logger.info("Wrote %d frames to %s", len(frames), path)


def export_grid(cfg: Config, width: int, height: int, fps: int, frames: Optional[int], out: str, seed: Optional[int]) -> int:
    rng = np.random.default_rng(seed)
    engine = GridWaveEngine.for_canvas(width, height, cfg.sweep, cfg.lattice, rng=rng)
    if engine.lattice.is_empty:
        logger.warning("Canvas %dx%d holds no dots at spacing %s", width, height, cfg.lattice.spacing)
    sequencer = ShapeSequencer(engine, ShapeLibrary.default(), cfg.sequence)
    sequencer.start()

    if frames is None:
        cycle = cfg.sweep.flow_duration + cfg.sweep.pause_duration
        frames = max(1, int(round(cycle * len(cfg.sequence) * fps)))
    dt = 1.0 / fps
    out_frames = list(run_frames(
        lambda i: engine.step(dt),
        lambda: to_frame(render_lattice(engine.lattice, (width, height))),
        frames,
    ))
    write_gif(out, out_frames, fps)
    return 0


def export_particles(cfg: Config, silhouette: str, size: int, spacing: float, fps: int, frames: int, out: str) -> int:
    shape = SILHOUETTES[silhouette](size)
    engine = ParticleFieldEngine(sample_silhouette(shape, spacing), cfg.physics)
    if engine.field.is_empty:
        logger.warning("Silhouette %r produced no particles", silhouette)

    def step(i):
        pointer = orbit_pointer(i, frames, size / 2, size / 4)
        engine.set_pointer(*(pointer or (None, None)))
        engine.step()

    out_frames = list(run_frames(
        step,
        lambda: to_frame(render_particles(engine.field, (size, size), cfg.physics.particle_size)),
        frames,
    ))
    write_gif(out, out_frames, fps)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="dotmorph", description="Render dot-grid and particle animations to GIF.")
    parser.add_argument('-c', '--config', help='JSON file with parameter overrides.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('--log-file', help='Also write logs to this file.')
    sub = parser.add_subparsers(dest='command', required=True)

    grid = sub.add_parser('grid', help='Sweep a dot grid through the shape sequence.')
    grid.add_argument('-o', '--output', default='grid.gif')
    grid.add_argument('--width', type=int, default=800)
    grid.add_argument('--height', type=int, default=400)
    grid.add_argument('--fps', type=int, default=30)
    grid.add_argument('--frames', type=int, help='Frame count (default: one pass over the sequence).')
    grid.add_argument('--seed', type=int, help='Seed for the fade tiers.')

    particles = sub.add_parser('particles', help='Push a sampled silhouette around with an orbiting pointer.')
    particles.add_argument('-o', '--output', default='particles.gif')
    particles.add_argument('--silhouette', choices=sorted(SILHOUETTES), default='delta')
    particles.add_argument('--preset', help='Physics preset (defaults to the silhouette name).')
    particles.add_argument('--size', type=int, default=600)
    particles.add_argument('--spacing', type=float, default=15.0)
    particles.add_argument('--fps', type=int, default=30)
    particles.add_argument('--frames', type=int, default=180)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        cfg = load_config(args.config) if args.config else Config()
        if args.fps <= 0:
            raise ValueError("--fps must be positive")
        if args.frames is not None and args.frames <= 0:
            raise ValueError("--frames must be positive")
        if args.command == 'grid':
            return export_grid(cfg, args.width, args.height, args.fps, args.frames, args.output, args.seed)
        if args.preset or not args.config:
            cfg.physics = physics_preset(args.preset or args.silhouette)
        return export_particles(cfg, args.silhouette, args.size, args.spacing, args.fps, args.frames, args.output)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return 1


if __name__ == '__main__':
    sys.exit(main())
