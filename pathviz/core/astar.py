# pathviz/core/astar.py
#!/usr/bin/env python3
"""
A* over the grid model, one expansion per step(), or run() to completion.

Stepping API (shared by anything driving a best-first search):
- init(grid, start, end) - reset() - step() -> StepResult - run() -> SearchResult

Heuristic:
- Manhattan distance, edge cost is always 1.

Tie-breaking in the PQ:
- (f, seq, cell): lower f, then the cell that entered the open set first.
  seq is handed out once, on discovery, and reused when a cell's score
  improves, so the pick matches a linear scan for the first minimum of an
  insertion-ordered open list. Traces are reproducible run to run.

Per-cell scores and back-links live on the grid; the open/closed sets and
the visitation trace belong to the AStarSearch object and die with it.
"""

import heapq
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from pathviz.core.grid import Grid
from pathviz.core.heuristic import manhattan
from pathviz.core.types import (
    Coord, StepResult, SearchResult, SearchBusyError,
    IDLE, RUNNING, SUCCEEDED, EXHAUSTED,
)

logger = logging.getLogger(__name__)


@dataclass
class AStarSearch:
    name: str = "A*"

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Coord] = None
    end: Optional[Coord] = None
    open_pq: List[Tuple[float, int, Coord]] = field(default_factory=list)  # (f, seq, cell)
    open_set: Set[Coord] = field(default_factory=set)
    closed_set: Set[Coord] = field(default_factory=set)
    order: Dict[Coord, int] = field(default_factory=dict)   # first-discovery seq
    visited_order: List[Coord] = field(default_factory=list)
    path: List[Coord] = field(default_factory=list)
    popped_count: int = 0
    status: str = IDLE
    seq: int = 0

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Optional[Coord] = None,
             end: Optional[Coord] = None) -> "AStarSearch":
        """Bind to a grid; start/end default to the grid's markers."""
        self.grid = grid
        self.start = tuple(start) if start is not None else grid.start
        self.end = tuple(end) if end is not None else grid.end
        self.reset()
        return self

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.grid is None:
            return
        self.grid.reset_search_fields()
        self.open_pq.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.order.clear()
        self.visited_order = []
        self.path = []
        self.popped_count = 0
        self.seq = 0
        self.status = RUNNING

        s = self.grid.cell(self.start)
        s.g_score = 0
        s.f_score = manhattan(self.start, self.end)
        self._open(self.start)

    # -------------------- helpers --------------------

    def _open(self, c: Coord) -> None:
        if c not in self.order:
            self.order[c] = self.seq
            self.seq += 1
        self.open_set.add(c)
        heapq.heappush(self.open_pq, (self.grid.cell(c).f_score, self.order[c], c))

    def _pop_best(self) -> Optional[Coord]:
        while self.open_pq:
            f, _, c = heapq.heappop(self.open_pq)
            # stale entry: already expanded, or superseded by a better f
            if c in self.open_set and f == self.grid.cell(c).f_score:
                self.open_set.remove(c)
                return c
        return None

    def _reconstruct_path(self) -> List[Coord]:
        path: List[Coord] = []
        cur = self.end
        while cur != self.start:
            path.append(cur)
            cur = self.grid.cell(cur).previous_node
            if cur is None:
                break
        path.reverse()
        return path

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE A* expansion:
          - Take the open cell with the lowest f (first inserted on ties).
          - If it is the end, rebuild the path and finish.
          - Else relax its neighbours with unit edge cost.
        """
        if self.grid is None:
            return StepResult(status=IDLE, metrics={"algo": self.name})

        if self.status in (SUCCEEDED, EXHAUSTED):
            return StepResult(status=self.status, path=list(self.path),
                              metrics=self._metrics())

        u = self._pop_best()
        if u is None:
            self.status = EXHAUSTED
            return StepResult(status=EXHAUSTED, metrics=self._metrics())

        # Finalize u
        self.popped_count += 1
        self.closed_set.add(u)

        if u == self.end:
            self.status = SUCCEEDED
            self.path = self._reconstruct_path()
            return StepResult(status=SUCCEEDED, current=u, path=list(self.path),
                              metrics=self._metrics())

        visited_now: List[Coord] = []
        if u != self.start:
            self.visited_order.append(u)
            visited_now.append(u)

        g_u = self.grid.cell(u).g_score
        opened_now: List[Coord] = []
        for v in self.grid.neighbors(u):
            if v in self.closed_set or self.grid.is_wall(v):
                continue
            alt = g_u + 1
            known = v in self.open_set
            cv = self.grid.cell(v)
            if not known or alt < cv.g_score:
                cv.g_score = alt
                cv.f_score = alt + manhattan(v, self.end)
                cv.previous_node = u
                self._open(v)
                if not known:
                    opened_now.append(v)

        return StepResult(status=RUNNING, current=u, visited=visited_now,
                          opened=opened_now, metrics=self._metrics())

    def run(self) -> SearchResult:
        """Step until the end is reached or the open set runs dry."""
        res = self.step()
        while res.status == RUNNING:
            res = self.step()
        return SearchResult(status=res.status,
                            visited_order=list(self.visited_order),
                            path=list(self.path),
                            metrics=self._metrics())

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "visited": len(self.visited_order),
            "path_len": len(self.path),
        }


class SearchEngine:
    """Single-flight owner of search runs: idle -> running -> succeeded|exhausted."""

    def __init__(self, algo_factory=AStarSearch):
        self.algo_factory = algo_factory
        self.state = IDLE
        self.last_result: Optional[SearchResult] = None

    @property
    def is_running(self) -> bool:
        return self.state == RUNNING

    def run(self, grid: Grid, start: Optional[Coord] = None,
            end: Optional[Coord] = None) -> SearchResult:
        if self.is_running:
            raise SearchBusyError("a search is already running")
        self.state = RUNNING
        try:
            search = self.algo_factory().init(grid, start, end)
            result = search.run()
        except Exception:
            self.state = IDLE
            raise
        self.state = result.status
        self.last_result = result
        if result.found:
            logger.info("%s reached %s: path_len=%d visited=%d",
                        search.name, search.end, len(result.path),
                        len(result.visited_order))
        else:
            logger.info("%s found no path from %s to %s (visited=%d)",
                        search.name, search.start, search.end,
                        len(result.visited_order))
        return result


def run_search(grid: Grid, start: Optional[Coord] = None,
               end: Optional[Coord] = None) -> SearchResult:
    return SearchEngine().run(grid, start, end)
