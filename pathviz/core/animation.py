# pathviz/core/animation.py
#!/usr/bin/env python3
"""
Replays a finished search onto the grid's presentation flags.

Two phases, back to back:
    visit  -> is_visited for each cell of visited_order, every visit_cadence_ms
    path   -> is_path for each cell of path, every path_cadence_ms

Nothing here sleeps on its own. The owner's frame loop calls tick(now_ms)
and every step whose due time has passed is applied, one at a time and in
order; step n+1 is due one cadence after step n. cancel() is honoured at
the next step boundary and leaves applied flags alone.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from pathviz.core.grid import Grid
from pathviz.core.types import Coord

logger = logging.getLogger(__name__)

VISIT = "visit"
PATH = "path"


@dataclass
class AnimationFrame:
    phase: str            # "visit" | "path"
    index: int            # position within the phase
    coord: Coord
    grid: Grid


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class Animation:
    def __init__(self, grid: Grid, visited_order: Sequence[Coord], path: Sequence[Coord],
                 visit_cadence_ms: float, path_cadence_ms: float,
                 on_step: Optional[Callable[[AnimationFrame], None]] = None,
                 on_done: Optional[Callable[[bool], None]] = None,
                 clock: Optional[Callable[[], float]] = None):
        self.grid = grid
        self.visited_order: List[Coord] = list(visited_order)
        self.path: List[Coord] = list(path)
        self.visit_cadence_ms = max(0.0, float(visit_cadence_ms))
        self.path_cadence_ms = max(0.0, float(path_cadence_ms))
        self.on_step = on_step
        self.on_done = on_done
        self.clock = clock or _monotonic_ms

        self.applied = 0
        self.cancelled = False
        self.finished = False
        self._steps = self.timeline()
        self._pending: Optional[Tuple[str, int, Coord, float]] = None
        self._last_ms = self.clock()

    # -------------------- schedule --------------------

    def timeline(self) -> Iterator[Tuple[str, int, Coord, float]]:
        """(phase, index, coord, delay_ms) for every step, in play order."""
        for i, c in enumerate(self.visited_order):
            yield VISIT, i, c, self.visit_cadence_ms
        for i, c in enumerate(self.path):
            yield PATH, i, c, self.path_cadence_ms

    @property
    def active(self) -> bool:
        return not (self.finished or self.cancelled)

    @property
    def phase(self) -> Optional[str]:
        if not self.active:
            return None
        if self._pending is not None:
            return self._pending[0]
        return VISIT if self.applied < len(self.visited_order) else PATH

    @property
    def total_steps(self) -> int:
        return len(self.visited_order) + len(self.path)

    # -------------------- driving --------------------

    def tick(self, now_ms: Optional[float] = None) -> int:
        """Apply every step that is due at now_ms; returns how many were applied."""
        if not self.active:
            return 0
        now = self.clock() if now_ms is None else now_ms
        count = 0
        while self.active:
            if self._pending is None:
                self._pending = next(self._steps, None)
                if self._pending is None:
                    self._finish(cancelled=False)
                    break
            phase, index, coord, delay = self._pending
            due = self._last_ms + delay
            if now < due:
                break
            self._pending = None
            self._last_ms = due
            self._apply(phase, index, coord)
            count += 1
        return count

    def play(self, sleep: Callable[[float], None] = time.sleep) -> None:
        """Blocking playback for callers without a frame loop."""
        while self.active:
            self.tick()
            if self.active and self._pending is not None:
                wait_ms = self._last_ms + self._pending[3] - self.clock()
                if wait_ms > 0:
                    sleep(wait_ms / 1000.0)

    def cancel(self) -> None:
        if not self.active:
            return
        logger.debug("animation cancelled after %d/%d steps",
                     self.applied, self.total_steps)
        self._finish(cancelled=True)

    # -------------------- internals --------------------

    def _apply(self, phase: str, index: int, coord: Coord) -> None:
        cell = self.grid.cell(coord)
        if not (cell.is_start or cell.is_end):
            if phase == VISIT:
                cell.is_visited = True
            else:
                cell.is_path = True
        self.applied += 1
        if self.on_step is not None:
            self.on_step(AnimationFrame(phase, index, coord, self.grid))

    def _finish(self, cancelled: bool) -> None:
        self.cancelled = cancelled
        self.finished = not cancelled
        if self.on_done is not None:
            self.on_done(cancelled)


def schedule_animation(grid: Grid, visited_order: Sequence[Coord], path: Sequence[Coord],
                       visit_cadence_ms: float, path_cadence_ms: float,
                       on_step: Optional[Callable[[AnimationFrame], None]] = None,
                       on_done: Optional[Callable[[bool], None]] = None,
                       clock: Optional[Callable[[], float]] = None) -> Animation:
    """Start a replay; the returned Animation is also the cancel handle."""
    return Animation(grid, visited_order, path, visit_cadence_ms, path_cadence_ms,
                     on_step=on_step, on_done=on_done, clock=clock)
