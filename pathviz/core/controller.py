# pathviz/core/controller.py
#!/usr/bin/env python3
"""
Edit gate between input devices and the grid model.

Every edit is validated on its own (a drag is just many edits); anything
invalid, or anything arriving while a run is busy, is dropped silently.
"""

import logging
from typing import Callable, Optional

from pathviz.core.grid import Grid
from pathviz.core.types import Coord, Edit, PAINT, MOVE_START, MOVE_END

logger = logging.getLogger(__name__)

MODES = ("wall", "start", "end")


class InteractionController:
    def __init__(self, grid: Grid, is_busy: Optional[Callable[[], bool]] = None):
        self.grid = grid
        self.is_busy = is_busy or (lambda: False)
        self.mode = "wall"
        self._stroke_value: Optional[bool] = None   # wall value painted by the current drag

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"unknown edit mode {mode!r}, expected one of {MODES}")
        self.mode = mode

    # -------------------- single edits --------------------

    def apply(self, edit: Edit) -> bool:
        """Route one edit to the grid; True when the grid actually changed."""
        if self.is_busy():
            logger.debug("edit %s rejected: run in progress", edit)
            return False
        g = self.grid
        before = (g.start, g.end, g.is_wall(edit.coord))
        if edit.kind == PAINT:
            g.set_wall(edit.coord, edit.enabled)
        elif edit.kind == MOVE_START:
            g.move_start(edit.coord)
        elif edit.kind == MOVE_END:
            g.move_end(edit.coord)
        else:
            raise ValueError(f"unknown edit kind {edit.kind!r}")
        return (g.start, g.end, g.is_wall(edit.coord)) != before

    # -------------------- mouse strokes --------------------

    def press(self, c: Coord) -> bool:
        if self.mode == "wall":
            # the first cell decides whether this stroke draws or erases
            self._stroke_value = not self.grid.is_wall(c)
        return self._edit_for(c)

    def drag(self, c: Coord) -> bool:
        if self.mode == "wall" and self._stroke_value is None:
            return False
        return self._edit_for(c)

    def release(self) -> None:
        self._stroke_value = None

    @property
    def stroking(self) -> bool:
        return self._stroke_value is not None

    def _edit_for(self, c: Coord) -> bool:
        if self.mode == "start":
            return self.apply(Edit(MOVE_START, c))
        if self.mode == "end":
            return self.apply(Edit(MOVE_END, c))
        return self.apply(Edit(PAINT, c, self._stroke_value))
