import pytest

from pathviz.core.astar import AStarSearch, SearchEngine, run_search
from pathviz.core.grid import create_grid
from pathviz.core.heuristic import manhattan
from pathviz.core.types import SearchBusyError, RUNNING, SUCCEEDED, EXHAUSTED


def linear_scan_astar(grid, start, end):
    """Plain list-based A*: first minimum f in insertion order wins."""
    g = {start: 0}
    f = {start: manhattan(start, end)}
    prev = {}
    open_list, closed, visited = [start], set(), []
    while open_list:
        best = 0
        for i, c in enumerate(open_list):
            if f[c] < f[open_list[best]]:
                best = i
        cur = open_list.pop(best)
        closed.add(cur)
        if cur == end:
            path = []
            while cur != start:
                path.append(cur)
                cur = prev[cur]
            return visited, path[::-1]
        if cur not in (start, end):
            visited.append(cur)
        for n in grid.neighbors(cur):
            if n in closed or grid.is_wall(n):
                continue
            alt = g[cur] + 1
            if n not in open_list or alt < g[n]:
                g[n] = alt
                f[n] = alt + manhattan(n, end)
                prev[n] = cur
                if n not in open_list:
                    open_list.append(n)
    return visited, []


def assert_contiguous(start, path):
    prev = start
    for c in path:
        assert manhattan(prev, c) == 1
        prev = c


def test_three_by_three_example():
    g = create_grid(3, 3, (0, 0), (2, 2))
    res = run_search(g)
    assert res.status == SUCCEEDED and res.found
    assert res.path == [(1, 0), (2, 0), (2, 1), (2, 2)]
    assert res.visited_order == [(1, 0), (0, 1), (2, 0), (1, 1), (0, 2), (2, 1), (1, 2)]
    assert res.metrics["path_len"] == 4


def test_open_grid_path_is_manhattan_optimal():
    g = create_grid()
    res = run_search(g)
    assert len(res.path) == manhattan(g.start, g.end) == 40
    assert res.path[-1] == g.end
    assert_contiguous(g.start, res.path)


def test_detour_around_wall():
    g = create_grid(5, 5, (0, 0), (0, 4))
    for r in range(4):
        g.set_wall((r, 2), True)
    res = run_search(g)
    assert res.found
    assert len(res.path) == 12
    assert (4, 2) in res.path
    assert_contiguous(g.start, res.path)
    assert not any(g.is_wall(c) for c in res.path)


def test_visited_order_excludes_markers_and_duplicates():
    g = create_grid(10, 10, (1, 1), (8, 7))
    for r in range(1, 9):
        g.set_wall((r, 4), True)
    res = run_search(g)
    assert g.start not in res.visited_order
    assert g.end not in res.visited_order
    assert len(res.visited_order) == len(set(res.visited_order))


def test_start_equals_end():
    g = create_grid(3, 3, (0, 0), (2, 2))
    res = run_search(g, (1, 1), (1, 1))
    assert res.status == SUCCEEDED
    assert res.path == [] and res.visited_order == []


def test_enclosed_end_is_exhausted():
    g = create_grid(5, 5, (0, 0), (2, 2))
    for c in g.neighbors((2, 2)):
        g.set_wall(c, True)
    res = run_search(g)
    assert res.status == EXHAUSTED
    assert not res.found
    assert res.path == []
    assert len(res.visited_order) == 25 - 4 - 2


def test_deterministic_traces():
    g = create_grid()
    for r in range(3, 18):
        g.set_wall((r, 20), True)
    a = run_search(g)
    b = run_search(g)
    assert a.visited_order == b.visited_order
    assert a.path == b.path


def test_matches_linear_scan_tie_break():
    g = create_grid()
    for r in range(0, 16):
        g.set_wall((r, 12), True)
    for r in range(4, 20):
        g.set_wall((r, 25), True)
    for c in range(13, 23):
        g.set_wall((9, c), True)
    res = run_search(g)
    visited, path = linear_scan_astar(g, g.start, g.end)
    assert res.found
    assert res.visited_order == visited
    assert res.path == path


def test_search_writes_scores_not_flags():
    g = create_grid(3, 3, (0, 0), (2, 2))
    res = run_search(g)
    assert g.cell((2, 2)).g_score == len(res.path)
    assert g.cell((2, 2)).previous_node == (2, 1)
    assert g.cell((0, 0)).g_score == 0
    assert not any(c.is_visited or c.is_path for c in g.iter_cells())


def test_rerun_resets_previous_scores():
    g = create_grid(3, 3, (0, 0), (2, 2))
    run_search(g)
    for c in g.neighbors((2, 2)):
        g.set_wall(c, True)
    res = run_search(g)
    assert res.status == EXHAUSTED
    assert g.cell((2, 2)).previous_node is None
    assert g.cell((2, 2)).g_score == float("inf")


def test_step_api_expands_one_cell_at_a_time():
    g = create_grid(3, 3, (0, 0), (2, 2))
    algo = AStarSearch().init(g)
    first = algo.step()
    assert first.status == RUNNING
    assert first.current == (0, 0)
    assert first.visited == []
    assert first.opened == [(1, 0), (0, 1)]
    second = algo.step()
    assert second.current == (1, 0) and second.visited == [(1, 0)]
    res = algo.run()
    assert res.status == SUCCEEDED
    # terminal state is sticky
    assert algo.step().status == SUCCEEDED


def test_engine_states_and_single_flight():
    g = create_grid(3, 3, (0, 0), (2, 2))
    engine = SearchEngine()
    assert engine.state == "idle"
    engine.run(g)
    assert engine.state == SUCCEEDED and not engine.is_running
    assert engine.last_result.found

    engine.state = RUNNING
    with pytest.raises(SearchBusyError):
        engine.run(g)
