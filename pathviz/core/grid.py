# pathviz/core/grid.py
#!/usr/bin/env python3
"""
Grid model, the single source of truth for walls, markers and
per-cell search metadata.

Roles are exclusive: a cell is at most one of start / end / wall.
Every mutator below silently rejects edits that would break that rule,
because drag-painting routinely crosses invalid cells.
"""

import logging
from dataclasses import dataclass
from typing import List, Iterator

from pathviz.core.types import Cell, Coord

logger = logging.getLogger(__name__)

ROWS = 20
COLS = 40

# up, down, left, right; the search tie-break depends on this order
DIRS4: List[Coord] = [(-1, 0), (1, 0), (0, -1), (0, 1)]


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[List[Cell]]       # [row][col]
    start: Coord
    end: Coord

    # -------------------- queries --------------------

    def in_bounds(self, c: Coord) -> bool:
        r, col = c
        return 0 <= r < self.rows and 0 <= col < self.cols

    def cell(self, c: Coord) -> Cell:
        r, col = c
        return self.cells[r][col]

    def is_wall(self, c: Coord) -> bool:
        return self.in_bounds(c) and self.cell(c).is_wall

    def iter_cells(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def walls(self) -> List[Coord]:
        return [c.coord for c in self.iter_cells() if c.is_wall]

    def neighbors(self, c: Coord) -> List[Coord]:
        """In-bounds 4-neighbours of c, always in up/down/left/right order."""
        r, col = c
        out: List[Coord] = []
        for dr, dc in DIRS4:
            n = (r + dr, col + dc)
            if self.in_bounds(n):
                out.append(n)
        return out

    # -------------------- edits --------------------

    def set_wall(self, c: Coord, on: bool = True) -> "Grid":
        if not self.in_bounds(c) or c == self.start or c == self.end:
            logger.debug("wall edit rejected at %s", c)
            return self
        self.cell(c).is_wall = bool(on)
        return self

    def move_start(self, c: Coord) -> "Grid":
        if not self._can_hold_marker(c, other=self.end):
            logger.debug("start move rejected at %s", c)
            return self
        self.cell(self.start).is_start = False
        self.cell(c).is_start = True
        self.start = c
        return self

    def move_end(self, c: Coord) -> "Grid":
        if not self._can_hold_marker(c, other=self.start):
            logger.debug("end move rejected at %s", c)
            return self
        self.cell(self.end).is_end = False
        self.cell(c).is_end = True
        self.end = c
        return self

    def _can_hold_marker(self, c: Coord, other: Coord) -> bool:
        return self.in_bounds(c) and c != other and not self.cell(c).is_wall

    # -------------------- resets --------------------

    def reset_search_fields(self) -> "Grid":
        """Clear flags, scores and back-links; walls and markers stay."""
        for cell in self.iter_cells():
            cell.clear_search()
        return self

    def clear_walls(self) -> "Grid":
        for cell in self.iter_cells():
            cell.is_wall = False
        return self

    def reset(self, start: Coord, end: Coord) -> "Grid":
        """Back to a blank board with the markers at start / end."""
        _check_markers(self.rows, self.cols, start, end)
        self.reset_search_fields()
        self.clear_walls()
        self.cell(self.start).is_start = False
        self.cell(self.end).is_end = False
        self.start, self.end = start, end
        self.cell(start).is_start = True
        self.cell(end).is_end = True
        return self


def _check_markers(rows: int, cols: int, start: Coord, end: Coord) -> None:
    sr, sc = start
    er, ec = end
    if not (0 <= sr < rows and 0 <= sc < cols):
        raise ValueError(f"start {start} out of bounds for {rows}x{cols} grid")
    if not (0 <= er < rows and 0 <= ec < cols):
        raise ValueError(f"end {end} out of bounds for {rows}x{cols} grid")
    if start == end:
        raise ValueError(f"start and end must differ, both at {start}")


def create_grid(rows: int = ROWS, cols: int = COLS,
                start: Coord = (5, 5), end: Coord = (15, 35)) -> Grid:
    if rows <= 0 or cols <= 0:
        raise ValueError(f"grid dimensions must be positive, got {rows}x{cols}")
    start, end = tuple(start), tuple(end)
    _check_markers(rows, cols, start, end)
    cells = [[Cell(r, c) for c in range(cols)] for r in range(rows)]
    cells[start[0]][start[1]].is_start = True
    cells[end[0]][end[1]].is_end = True
    return Grid(rows, cols, cells, start, end)
