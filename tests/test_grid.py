import copy

import pytest

from pathviz.core.grid import create_grid, ROWS, COLS


def test_create_grid_defaults():
    g = create_grid()
    assert (g.rows, g.cols) == (ROWS, COLS) == (20, 40)
    assert g.cell((5, 5)).is_start and g.start == (5, 5)
    assert g.cell((15, 35)).is_end and g.end == (15, 35)
    starts = [c.coord for c in g.iter_cells() if c.is_start]
    ends = [c.coord for c in g.iter_cells() if c.is_end]
    assert starts == [(5, 5)] and ends == [(15, 35)]
    assert g.walls() == []


@pytest.mark.parametrize("start,end", [
    ((0, 0), (0, 0)),
    ((-1, 0), (2, 2)),
    ((0, 0), (3, 0)),
])
def test_create_grid_rejects_bad_markers(start, end):
    with pytest.raises(ValueError):
        create_grid(3, 3, start, end)


def test_set_wall_ignores_markers():
    g = create_grid(3, 3, (0, 0), (2, 2))
    g.set_wall((0, 0), True).set_wall((2, 2), True).set_wall((1, 1), True)
    assert g.walls() == [(1, 1)]
    g.set_wall((1, 1), False)
    assert g.walls() == []
    g.set_wall((7, 7), True)  # out of bounds: ignored
    assert g.walls() == []


def test_move_start_onto_wall_is_rejected():
    g = create_grid(3, 3, (0, 0), (2, 2))
    g.set_wall((1, 1), True)
    g.move_start((1, 1))
    assert g.start == (0, 0)
    assert g.cell((0, 0)).is_start
    assert not g.cell((1, 1)).is_start


def test_move_marker_onto_other_marker_is_rejected():
    g = create_grid(3, 3, (0, 0), (2, 2))
    g.move_start((2, 2))
    g.move_end((0, 0))
    assert (g.start, g.end) == ((0, 0), (2, 2))
    assert g.cell((2, 2)).is_end and not g.cell((2, 2)).is_start


def test_move_clears_previous_holder():
    g = create_grid(3, 3, (0, 0), (2, 2))
    g.move_start((0, 2)).move_end((2, 0))
    assert g.start == (0, 2) and g.end == (2, 0)
    assert not g.cell((0, 0)).is_start
    assert not g.cell((2, 2)).is_end
    assert [c.coord for c in g.iter_cells() if c.is_start] == [(0, 2)]
    assert [c.coord for c in g.iter_cells() if c.is_end] == [(2, 0)]


def test_neighbors_fixed_order():
    g = create_grid(3, 3, (0, 0), (2, 2))
    assert g.neighbors((1, 1)) == [(0, 1), (2, 1), (1, 0), (1, 2)]
    assert g.neighbors((0, 0)) == [(1, 0), (0, 1)]
    assert g.neighbors((2, 2)) == [(1, 2), (2, 1)]


def test_reset_search_fields_is_idempotent():
    g = create_grid(4, 4, (0, 0), (3, 3))
    g.set_wall((1, 1), True)
    c = g.cell((2, 2))
    c.is_visited = c.is_path = True
    c.g_score, c.f_score, c.previous_node = 3, 5, (2, 1)

    once = copy.deepcopy(g.reset_search_fields())
    twice = g.reset_search_fields()
    assert once == twice
    assert twice.cell((2, 2)).previous_node is None
    assert twice.cell((2, 2)).g_score == float("inf")
    assert twice.walls() == [(1, 1)]
    assert twice.cell((0, 0)).is_start and twice.cell((3, 3)).is_end


def test_reset_restores_blank_board():
    g = create_grid(4, 4, (0, 0), (3, 3))
    g.set_wall((1, 1), True).move_start((0, 3)).move_end((3, 0))
    g.reset((0, 0), (3, 3))
    assert g.walls() == []
    assert (g.start, g.end) == ((0, 0), (3, 3))
    assert [c.coord for c in g.iter_cells() if c.is_start] == [(0, 0)]
    assert [c.coord for c in g.iter_cells() if c.is_end] == [(3, 3)]
