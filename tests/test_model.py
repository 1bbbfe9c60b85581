import math

import pytest

from model import Cell, Grid, generate_random_array


def test_cells_compare_by_coordinates():
    a, b = Cell(1, 2), Cell(1, 2)
    b.is_wall = True
    assert a == b
    assert hash(a) == hash(b)
    assert a != Cell(2, 1)


def test_new_cell_has_infinite_scores():
    cell = Cell(0, 0)
    assert cell.distance == math.inf
    assert (cell.g, cell.h, cell.f) == (math.inf, math.inf, math.inf)


def test_cell_dict_uses_none_for_infinity():
    cell = Cell(3, 4)
    data = cell.to_dict()
    assert data["distance"] is None
    assert Cell.from_dict(data).distance == math.inf


def test_neighbours_order_is_up_right_down_left():
    grid = Grid(3)
    assert [c.pos for c in grid.neighbours(1, 1)] == [(1, 0), (2, 1), (1, 2), (0, 1)]


def test_corner_neighbours_stay_in_bounds():
    grid = Grid(3)
    assert [c.pos for c in grid.neighbours(0, 0)] == [(1, 0), (0, 1)]
    assert [c.pos for c in grid.neighbours(2, 2)] == [(2, 1), (1, 2)]


def test_cell_outside_grid_raises():
    with pytest.raises(IndexError):
        Grid(3).cell(3, 0)


def test_set_start_moves_marker_and_clears_wall():
    grid = Grid(4)
    grid.set_start(0, 0)
    grid.toggle_wall(2, 2)
    grid.set_start(2, 2)
    assert not grid.cell(0, 0).is_start
    assert grid.cell(2, 2).is_start
    assert not grid.cell(2, 2).is_wall
    assert grid.start.pos == (2, 2)


def test_start_and_end_are_never_walled():
    grid = Grid(3)
    grid.set_start(0, 0)
    grid.set_end(2, 2)
    assert grid.toggle_wall(0, 0) is False
    assert grid.toggle_wall(2, 2) is False
    assert grid.walls() == []


def test_toggle_wall_flips():
    grid = Grid(3)
    assert grid.toggle_wall(1, 1) is True
    assert grid.walls() == [(1, 1)]
    assert grid.toggle_wall(1, 1) is False
    assert grid.walls() == []


def test_from_ascii(maze):
    assert (maze.width, maze.height) == (4, 4)
    assert maze.start.pos == (0, 0)
    assert maze.end.pos == (3, 3)
    assert (2, 0) in maze.walls()
    assert (1, 2) in maze.walls()


def test_from_ascii_rejects_ragged_and_empty_text():
    with pytest.raises(ValueError):
        Grid.from_ascii("S..\n..")
    with pytest.raises(ValueError):
        Grid.from_ascii("   ")


def test_generate_places_distant_endpoints():
    for seed in range(20):
        grid = Grid.generate(15, seed=seed)
        start, end = grid.find_start_and_end()
        assert start is not None and end is not None
        assert start != end
        assert abs(start.x - end.x) + abs(start.y - end.y) >= 5


def test_generate_is_deterministic_with_seed():
    assert Grid.generate(10, seed=7).to_dict() == Grid.generate(10, seed=7).to_dict()


def test_generate_rejects_tiny_grid():
    with pytest.raises(ValueError):
        Grid.generate(1)


def test_reset_search_state_keeps_structure(maze):
    cell = maze.cell(1, 1)
    cell.is_visited, cell.is_path, cell.distance, cell.f = True, True, 3, 7
    maze.reset_search_state()
    assert not cell.is_visited and not cell.is_path
    assert cell.distance == math.inf and cell.f == math.inf
    assert maze.start.pos == (0, 0)
    assert (2, 0) in maze.walls()


def test_grid_dict_round_trip(maze):
    copy = Grid.from_dict(maze.to_dict())
    assert copy.to_dict() == maze.to_dict()
    assert copy.walls() == maze.walls()


def test_random_array_values_and_seed():
    values = generate_random_array(50, seed=1)
    assert len(values) == 50
    assert all(1 <= v <= 100 for v in values)
    assert values == generate_random_array(50, seed=1)
