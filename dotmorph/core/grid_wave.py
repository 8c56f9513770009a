"""Sweep transitions across a dot lattice.

A single scalar, the wave position, travels across the column axis at a
constant rate. Points the wave has passed take the target shape (members
snap lit, non-members fade out along their row's trail), points inside the
band are lit, points ahead of it keep showing the previous shape.

The engine owns its ``Lattice`` and is advanced explicitly with
``step(dt)``; nothing else writes to the lattice while it runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence

import numpy as np

from .lattice import Lattice, LatticeParams
from .masks import OPACITY_FLOOR, OPACITY_LIT, ShapeMask, clamp_opacity, evaluate_membership
from .tiers import DEFAULT_LENGTH_TIERS, DEFAULT_MULTIPLIER_TIERS, FadeTier, validate_tiers

logger = logging.getLogger(__name__)

DIRECTIONS = ("forward", "reverse")


class EngineState(Enum):
    IDLE = "idle"
    SWEEPING = "sweeping"
    HOLDING = "holding"


@dataclass
class SweepParams:
    flow_duration: float = 2.0  # seconds for the wave to cross the grid
    pause_duration: float = 2.0  # seconds the finished shape is held
    active_column_width: float = 20.0  # columns lit by the leading band
    direction: str = "forward"  # forward: left to right

    def __post_init__(self):
        if self.flow_duration < 0 or self.pause_duration < 0:
            raise ValueError("durations must be non-negative")
        if self.active_column_width < 0:
            raise ValueError("active_column_width must be non-negative")
        if self.direction not in DIRECTIONS:
            raise ValueError(f"direction must be one of {DIRECTIONS}, got {self.direction!r}")

    @property
    def sign(self) -> int:
        return 1 if self.direction == "forward" else -1


class TransitionHandle:
    """Completion token returned by ``activate`` and ``transition``.

    The handle is done once the hold after the sweep has elapsed, or
    immediately when a newer request cancels it. Done-callbacks run
    synchronously inside the engine's ``step`` (or the cancelling call).
    """

    def __init__(self, kind: str):
        self.kind = kind
        self._done = False
        self._cancelled = False
        self._callbacks: List[Callable[["TransitionHandle"], None]] = []

    def __repr__(self):
        status = "cancelled" if self._cancelled else ("done" if self._done else "pending")
        return f"<TransitionHandle {self.kind} {status}>"

    @property
    def done(self) -> bool:
        return self._done

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_done_callback(self, fn: Callable[["TransitionHandle"], None]) -> None:
        if self._done:
            fn(self)
        else:
            self._callbacks.append(fn)

    def _finish(self, cancelled: bool = False) -> None:
        if self._done:
            return
        self._done = True
        self._cancelled = cancelled
        callbacks, self._callbacks = self._callbacks, []
        for fn in callbacks:
            try:
                fn(self)
            except Exception:
                logger.exception("Transition callback %r failed", fn)


class GridWaveEngine:
    def __init__(
        self,
        lattice: Lattice,
        params: Optional[SweepParams] = None,
        multiplier_tiers: Sequence[FadeTier] = DEFAULT_MULTIPLIER_TIERS,
        length_tiers: Sequence[FadeTier] = DEFAULT_LENGTH_TIERS,
        rng: Optional[np.random.Generator] = None,
    ):
        self.lattice = lattice
        self.params = params or SweepParams()
        self.multiplier_tiers = validate_tiers(multiplier_tiers)
        self.length_tiers = validate_tiers(length_tiers)
        self._rng = rng
        self._state = EngineState.IDLE
        self._handle: Optional[TransitionHandle] = None
        self._elapsed = 0.0
        self._wave = self._wave_start
        # membership shown ahead of the wave during the current sweep
        self._ahead = lattice.in_current_shape

    @classmethod
    def for_canvas(
        cls,
        width: float,
        height: float,
        params: Optional[SweepParams] = None,
        lattice_params: Optional[LatticeParams] = None,
        multiplier_tiers: Sequence[FadeTier] = DEFAULT_MULTIPLIER_TIERS,
        length_tiers: Sequence[FadeTier] = DEFAULT_LENGTH_TIERS,
        rng: Optional[np.random.Generator] = None,
    ) -> "GridWaveEngine":
        params = params or SweepParams()
        lattice = Lattice(
            width,
            height,
            lattice_params,
            active_column_width=params.active_column_width,
            multiplier_tiers=multiplier_tiers,
            length_tiers=length_tiers,
            rng=rng,
        )
        return cls(lattice, params, multiplier_tiers, length_tiers, rng)

    # -- state -------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def handle(self) -> Optional[TransitionHandle]:
        return self._handle

    @property
    def wave_progress(self) -> float:
        return self._wave

    @property
    def _wave_start(self) -> float:
        w = self.params.active_column_width
        return -w if self.params.sign > 0 else self.lattice.columns + w

    @property
    def _wave_end(self) -> float:
        w = self.params.active_column_width
        return self.lattice.columns + w if self.params.sign > 0 else -w

    # -- requests ----------------------------------------------------------

    def activate(self, mask: ShapeMask) -> TransitionHandle:
        """Sweep the lattice into ``mask``; ahead of the wave the previous target stays visible."""
        lat = self.lattice
        member = evaluate_membership(mask, lat.u, lat.v)
        return self._begin("activate", member, member, ahead_from_previous=True)

    def transition(self, current_mask: ShapeMask, next_mask: ShapeMask) -> TransitionHandle:
        """Sweep from ``current_mask`` to ``next_mask``."""
        lat = self.lattice
        current = evaluate_membership(current_mask, lat.u, lat.v)
        target = evaluate_membership(next_mask, lat.u, lat.v)
        return self._begin("transition", current, target, ahead_from_previous=False)

    def cancel(self) -> None:
        """Drop the in-flight transition; opacities stay where they are."""
        self._state = EngineState.IDLE
        self._release(self._detach())

    def resize(self, width: float, height: float) -> None:
        """Discard the lattice and build a new one for the given canvas."""
        old = self._detach()
        self._state = EngineState.IDLE
        self.lattice = Lattice(
            width,
            height,
            self.lattice.params,
            active_column_width=self.params.active_column_width,
            multiplier_tiers=self.multiplier_tiers,
            length_tiers=self.length_tiers,
            rng=self._rng,
        )
        self._wave = self._wave_start
        self._release(old)

    def _detach(self) -> Optional[TransitionHandle]:
        handle, self._handle = self._handle, None
        return handle

    @staticmethod
    def _release(handle: Optional[TransitionHandle]) -> None:
        # callbacks may issue new requests, so this runs after engine state is consistent
        if handle is not None and not handle.done:
            logger.debug("Cancelling %r", handle)
            handle._finish(cancelled=True)

    def _begin(self, kind: str, current: np.ndarray, target: np.ndarray, ahead_from_previous: bool) -> TransitionHandle:
        old = self._detach()
        lat = self.lattice
        lat.was_in_previous_shape = lat.in_next_shape.copy()
        lat.in_current_shape = current
        lat.in_next_shape = target
        self._ahead = lat.was_in_previous_shape if ahead_from_previous else lat.in_current_shape

        handle = TransitionHandle(kind)
        self._handle = handle
        self._state = EngineState.SWEEPING
        self._elapsed = 0.0
        self._wave = self._wave_start
        self._apply_wave(self._wave)
        logger.debug("Started %s over %d points (%d in target)", kind, len(lat), int(target.sum()))
        self._release(old)
        return handle

    # -- per frame ---------------------------------------------------------

    def step(self, dt: float) -> None:
        """Advance the engine clock by ``dt`` seconds and update opacities."""
        if dt < 0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        if self._state is EngineState.IDLE:
            return
        self._elapsed += dt
        flow = self.params.flow_duration

        if self._state is EngineState.SWEEPING:
            if self._elapsed < flow:
                frac = self._elapsed / flow
                self._wave = self._wave_start + (self._wave_end - self._wave_start) * frac
                self._apply_wave(self._wave)
                return
            self._wave = self._wave_end
            self._settle()
            self._state = EngineState.HOLDING
            logger.debug("Sweep finished, holding for %.2fs", self.params.pause_duration)

        if self._state is EngineState.HOLDING and self._elapsed - flow >= self.params.pause_duration:
            handle, self._handle = self._handle, None
            self._state = EngineState.IDLE
            if handle is not None:
                handle._finish()

    def _apply_wave(self, wave: float) -> None:
        lat = self.lattice
        if lat.is_empty:
            return
        w = self.params.active_column_width
        # signed lead of the wave past each column; >= 0 means the wave has passed
        lead = (wave - lat.col) * self.params.sign

        fade_length = np.maximum(lat.fade_length, 1e-9)
        fading = np.maximum(OPACITY_FLOOR, 1.0 - (lead / fade_length) * lat.fade_multiplier)
        fading = np.where(lead <= lat.fade_length, fading, OPACITY_FLOOR)
        behind = np.where(lat.in_next_shape, OPACITY_LIT, fading)
        ahead = np.where(self._ahead, OPACITY_LIT, OPACITY_FLOOR)

        opacity = np.where(lead >= 0, behind, np.where(lead >= -w, OPACITY_LIT, ahead))
        lat.opacity[:] = clamp_opacity(opacity)

    def _settle(self) -> None:
        lat = self.lattice
        lat.opacity[:] = np.where(lat.in_next_shape, OPACITY_LIT, OPACITY_FLOOR)
