import pytest

from algorithms import run_pathfinding
from algorithms.astar import astar
from algorithms.bfs import bfs
from algorithms.dfs import dfs
from algorithms.dijkstra import dijkstra
from algorithms.search import manhattan
from algorithms.step import PathfindingLog
from model.cell import Cell
from model.grid import Grid

SEARCHES = ["dijkstra", "astar", "bfs", "dfs"]


def positions(states):
    return [s.pos for s in states]


def assert_valid_path(log, grid):
    path = positions(log.path)
    assert path[0] == grid.start.pos
    assert path[-1] == grid.end.pos
    assert len(set(path)) == len(path)
    for (x1, y1), (x2, y2) in zip(path, path[1:]):
        assert abs(x1 - x2) + abs(y1 - y2) == 1
    assert not set(path) & set(grid.walls())


def test_bfs_on_open_3x3(open_grid):
    log = bfs(open_grid, open_grid.start, open_grid.end)
    assert positions(log.visited_order) == [
        (0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2), (2, 1), (1, 2), (2, 2),
    ]
    assert positions(log.path) == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    assert [s.distance for s in log.path] == [0, 1, 2, 3, 4]


def test_dijkstra_on_open_3x3(open_grid):
    log = dijkstra(open_grid, open_grid.start, open_grid.end)
    assert len(log.visited_order) == 9
    assert positions(log.path) == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    assert [s.distance for s in log.path] == [0, 1, 2, 3, 4]


@pytest.mark.parametrize("kind", ["dijkstra", "bfs", "astar"])
def test_shortest_path_length(kind, maze):
    log = run_pathfinding(kind, maze)
    assert len(log.path) == 7
    assert_valid_path(log, maze)


@pytest.mark.parametrize("kind", SEARCHES)
def test_every_search_finds_a_valid_path(kind, maze):
    log = run_pathfinding(kind, maze)
    assert log.found
    assert_valid_path(log, maze)
    assert log.visited_order[0].is_start
    assert maze.end.pos in positions(log.visited_order)


def test_bfs_visit_distances_never_decrease(maze):
    log = bfs(maze, maze.start, maze.end)
    distances = [s.distance for s in log.visited_order]
    assert distances == sorted(distances)


def test_astar_scores(maze):
    log = astar(maze, maze.start, maze.end)
    for state in log.visited_order:
        assert state.f == state.g + state.h
        assert state.h == manhattan(state.pos, maze.end.pos)
    assert log.path[-1].g == len(bfs(maze, maze.start, maze.end).path) - 1


def test_astar_explores_no_more_than_dijkstra(maze):
    a = astar(maze, maze.start, maze.end)
    d = dijkstra(maze, maze.start, maze.end)
    assert len(a.visited_order) <= len(d.visited_order)


def test_dfs_follows_neighbour_order(maze):
    log = dfs(maze, maze.start, maze.end)
    assert positions(log.path) == [
        (0, 0), (1, 0), (1, 1), (0, 1), (0, 2), (0, 3),
        (1, 3), (2, 3), (2, 2), (3, 2), (3, 3),
    ]
    assert [s.distance for s in log.path] == list(range(11))


def test_dfs_tries_up_first():
    grid = Grid.from_ascii("...\n.S.\n.E.")
    log = dfs(grid, grid.start, grid.end)
    assert positions(log.visited_order)[:2] == [(1, 1), (1, 0)]


def test_dfs_survives_long_corridor():
    width = 60
    rows = []
    for y in range(40):
        if y % 2 == 0:
            rows.append("." * width)
        elif y % 4 == 1:
            rows.append("#" * (width - 1) + ".")
        else:
            rows.append("." + "#" * (width - 1))
    grid = Grid.from_ascii("\n".join(rows))
    grid.set_start(0, 0)
    grid.set_end(0, 39)
    log = dfs(grid, grid.start, grid.end)
    assert log.found
    assert len(log.path) > 1000


@pytest.mark.parametrize("kind", SEARCHES)
def test_unreachable_end_gives_empty_path(kind, walled_off):
    log = run_pathfinding(kind, walled_off)
    assert log.path == ()
    assert not log.found
    assert len(log.visited_order) == 6


@pytest.mark.parametrize("kind", SEARCHES)
def test_bad_endpoints_give_empty_log(kind, maze):
    assert len(run_pathfinding(kind, maze, maze.start, Cell(10, 10))) == 0
    assert len(run_pathfinding(kind, maze, maze.cell(2, 0), maze.end)) == 0
    empty = Grid(4)
    log = run_pathfinding(kind, empty)
    assert isinstance(log, PathfindingLog)
    assert len(log) == 0


@pytest.mark.parametrize("kind", SEARCHES)
def test_caller_grid_is_not_modified(kind, maze):
    before = maze.to_dict()
    run_pathfinding(kind, maze)
    assert maze.to_dict() == before


@pytest.mark.parametrize("kind", SEARCHES)
def test_same_grid_same_log(kind, maze):
    assert run_pathfinding(kind, maze).to_dict() == run_pathfinding(kind, maze).to_dict()


def test_unknown_search_falls_back_to_dijkstra(maze):
    assert run_pathfinding("teleport", maze).algorithm == "dijkstra"


def test_log_serialises_infinity_as_none(open_grid):
    data = bfs(open_grid, open_grid.start, open_grid.end).to_dict()
    assert data["domain"] == "pathfinding"
    assert data["visited_order"][0]["g"] is None
    assert data["visited_order"][0]["distance"] == 0
    again = PathfindingLog.from_dict(data)
    assert again == bfs(open_grid, open_grid.start, open_grid.end)
