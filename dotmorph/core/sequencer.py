from __future__ import annotations

import logging
from typing import Optional, Sequence

from .grid_wave import GridWaveEngine, TransitionHandle
from .shapes import ShapeLibrary

logger = logging.getLogger(__name__)

DEFAULT_SEQUENCE = ("lineChart", "barChart", "pieChart")


class ShapeSequencer:
    """Loops the engine through a fixed list of shape names.

    Each cycle transitions from the current shape to the next one; when the
    engine reports the transition done the index advances and the next
    cycle starts. A cancelled handle (someone else retriggered the engine)
    stops the loop.
    """

    def __init__(
        self,
        engine: GridWaveEngine,
        library: Optional[ShapeLibrary] = None,
        sequence: Sequence[str] = DEFAULT_SEQUENCE,
    ):
        if not sequence:
            raise ValueError("sequence must name at least one shape")
        self.engine = engine
        self.library = library or ShapeLibrary.default()
        self.sequence = tuple(sequence)
        self.index = 0
        self.cycles = 0
        self.running = False
        self._handle: Optional[TransitionHandle] = None

    @property
    def current_shape(self) -> str:
        return self.sequence[self.index]

    @property
    def next_shape(self) -> str:
        return self.sequence[(self.index + 1) % len(self.sequence)]

    def start(self) -> Optional[TransitionHandle]:
        self.running = True
        return self._schedule()

    def stop(self) -> None:
        self.running = False

    def _schedule(self) -> Optional[TransitionHandle]:
        for _ in range(len(self.sequence)):
            current, nxt = self.current_shape, self.next_shape
            if current in self.library and nxt in self.library:
                self._handle = None
                handle = self.engine.transition(self.library.get(current), self.library.get(nxt))
                self._handle = handle
                handle.add_done_callback(self._on_done)
                logger.debug("Cycle %d: %s -> %s", self.cycles, current, nxt)
                return handle
            logger.warning("Skipping %s -> %s: shape not registered", current, nxt)
            self.index = (self.index + 1) % len(self.sequence)
        logger.error("No registered shapes in sequence %s; stopping", self.sequence)
        self.running = False
        return None

    def _on_done(self, handle: TransitionHandle) -> None:
        if handle is not self._handle:
            return
        self._handle = None
        if handle.cancelled:
            self.running = False
            return
        self.index = (self.index + 1) % len(self.sequence)
        self.cycles += 1
        if self.running:
            self._schedule()
