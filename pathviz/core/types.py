# pathviz/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any
from math import inf

Coord = Tuple[int, int]  # (row, col)

# search states
IDLE = "idle"
RUNNING = "running"
SUCCEEDED = "succeeded"
EXHAUSTED = "exhausted"

# edit kinds understood by the interaction controller
PAINT = "paint"
MOVE_START = "move-start"
MOVE_END = "move-end"


@dataclass
class Cell:
    row: int
    col: int
    is_start: bool = False
    is_end: bool = False
    is_wall: bool = False
    is_visited: bool = False
    is_path: bool = False
    g_score: float = inf
    f_score: float = inf
    previous_node: Optional[Coord] = None   # coordinate, not a Cell

    @property
    def coord(self) -> Coord:
        return (self.row, self.col)

    def clear_search(self) -> None:
        self.is_visited = False
        self.is_path = False
        self.g_score = inf
        self.f_score = inf
        self.previous_node = None


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "succeeded" | "exhausted"
    current: Optional[Coord] = None
    visited: List[Coord] = field(default_factory=list)
    opened: List[Coord] = field(default_factory=list)
    path: Optional[List[Coord]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchResult:
    status: str                   # "succeeded" | "exhausted"
    visited_order: List[Coord] = field(default_factory=list)
    path: List[Coord] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.status == SUCCEEDED


@dataclass(frozen=True)
class Edit:
    kind: str                     # "paint" | "move-start" | "move-end"
    coord: Coord
    enabled: bool = True          # paint only


class SearchBusyError(RuntimeError):
    """Raised when a run is requested while another one is in flight."""
