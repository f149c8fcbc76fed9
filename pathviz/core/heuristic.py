# pathviz/core/heuristic.py
#!/usr/bin/env python3
from pathviz.core.types import Coord


def manhattan(a: Coord, b: Coord) -> int:
    """Admissible and consistent for 4-connected, unit-cost grids."""
    (ar, ac), (br, bc) = a, b
    return abs(ar - br) + abs(ac - bc)
