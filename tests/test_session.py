import json

import pytest

from engine.playback import PlaybackState
from engine.scheduler import PollingScheduler
from engine.session import MISSING_ENDPOINTS, VisualizerSession
from model.grid import Grid
from utils.config_loader import Preferences


@pytest.fixture
def session(scheduler, renderer):
    return VisualizerSession(Preferences(), scheduler, renderer, seed=7)


@pytest.fixture
def path_session(scheduler, renderer):
    prefs = Preferences(algorithm_type="pathfinding", grid_size=5)
    return VisualizerSession(prefs, scheduler, renderer, seed=7)


def test_defaults(session):
    assert session.algorithm_type == "sorting"
    assert session.algorithm == "bubble"
    assert len(session.array) == 50
    assert all(1 <= v <= 100 for v in session.array)
    assert session.engine is session.sorting
    assert session.engine.state == PlaybackState.STOPPED
    assert session.stats() == {"comparisons": 0, "swaps": 0}


def test_seeded_sessions_generate_the_same_data():
    a = VisualizerSession(seed=3)
    b = VisualizerSession(seed=3)
    assert a.array == b.array
    assert a.grid.to_dict() == b.grid.to_dict()


def test_select_type(session):
    assert session.select_type("pathfinding") is True
    assert session.engine is session.pathfinding
    assert session.algorithm == "dijkstra"
    start, end = session.grid.find_start_and_end()
    assert start is not None and end is not None
    assert session.select_type("graphs") is False
    assert session.algorithm_type == "pathfinding"


def test_select_type_stops_running_engine(session, scheduler):
    session.play()
    assert session.sorting.is_playing
    session.select_type("pathfinding")
    assert session.sorting.is_stopped
    assert scheduler.pending == 0


def test_select_algorithm_checks_domain(session):
    assert session.select_algorithm("merge") is True
    assert session.algorithm == "merge"
    assert session.select_algorithm("astar") is False
    session.select_type("pathfinding")
    assert session.select_algorithm("astar") is True
    assert session.select_algorithm("quick") is False
    assert session.algorithm == "astar"


def test_select_pathfinding_algorithm_regenerates_grid(path_session):
    before = path_session.grid
    path_session.select_algorithm("bfs")
    assert path_session.grid is not before


def test_play_sorts_the_array(session, scheduler, renderer):
    session.select_algorithm("quick")
    assert session.play() is True
    scheduler.run_all()
    assert session.engine.is_stopped
    assert renderer.frames[-1]["data"] == sorted(session.array)
    assert session.engine.current_step_index == session.engine.total_steps
    assert session.stats()["comparisons"] > 0


def test_play_twice_is_refused(session):
    assert session.play() is True
    assert session.play() is False


def test_play_resumes_when_paused(session):
    session.play()
    session.pause()
    index = session.engine.current_step_index
    assert session.play() is True
    assert session.engine.is_playing
    assert session.engine.current_step_index == index + 1


def test_pathfinding_play_marks_grid(path_session, scheduler):
    assert path_session.play() is True
    scheduler.run_all()
    log = path_session.engine.log
    assert path_session.stats() == {
        "visited_nodes": len(log.visited_order),
        "path_length": len(log.path),
    }
    visited = [c for c in path_session.grid if c.is_visited]
    assert len(visited) == len(log.visited_order)


def test_grid_edits_refused_while_running(path_session):
    x, y = next(c.pos for c in path_session.grid if not (c.is_start or c.is_end))
    path_session.play()
    assert path_session.toggle_wall(x, y) is False
    path_session.pause()
    assert path_session.toggle_wall(x, y) is False
    assert path_session.set_start(x, y) is False
    path_session.pathfinding.stop()
    assert path_session.toggle_wall(x, y) is True
    assert path_session.grid.cell(x, y).is_wall


def test_grid_edit_drops_half_stepped_run(path_session):
    path_session.step()
    assert path_session.engine.current_step_index == 1
    x, y = next(c.pos for c in path_session.grid if not (c.is_start or c.is_end))
    path_session.toggle_wall(x, y)
    assert path_session.engine.log is None
    assert path_session.engine.current_step_index == 0


def test_missing_endpoint_sets_notice(path_session):
    path_session.grid = Grid(5)
    path_session.grid.set_start(0, 0)
    assert path_session.play() is False
    assert path_session.notice == MISSING_ENDPOINTS
    assert path_session.engine.is_stopped

    path_session.set_end(4, 4)
    assert path_session.play() is True
    assert path_session.notice is None


def test_step_bootstraps_a_run(session):
    assert session.step() is True
    assert session.engine.is_stopped
    assert session.engine.current_step_index == 1
    assert session.engine.total_steps > 1
    assert session.step() is True
    assert session.engine.current_step_index == 2


def test_set_speed(session):
    assert session.set_speed(5) is True
    assert session.sorting.speed == 5
    assert session.pathfinding.speed == 5
    assert session.set_speed("2") is True
    assert session.preferences.speed == 2
    for bad in (0, 6, "fast", None, True):
        assert session.set_speed(bad) is False
    assert session.preferences.speed == 2


def test_set_array_size(session):
    assert session.set_array_size(10) is True
    assert len(session.array) == 10
    assert session.set_array_size(4) is False
    assert session.set_array_size(101) is False
    assert len(session.array) == 10


def test_set_grid_size(session):
    assert session.set_grid_size(8) is True
    assert session.grid.width == session.grid.height == 8
    assert session.set_grid_size(51) is False
    assert session.grid.width == 8


def test_toggle_theme(session):
    assert session.toggle_theme() == "dark"
    assert session.sorting.theme == "dark"
    assert session.pathfinding.theme == "dark"
    assert session.toggle_theme() == "light"


def test_reset_generates_new_data(session, scheduler):
    before = list(session.array)
    session.play()
    scheduler.advance(50)
    session.reset()
    assert session.engine.is_stopped
    assert session.engine.log is None
    assert session.stats() == {"comparisons": 0, "swaps": 0}
    assert session.array != before


def test_snapshot_is_json_ready(session, path_session, scheduler):
    session.play()
    sorting = json.loads(json.dumps(session.snapshot()))
    assert sorting["state"] == "playing"
    assert sorting["current_step"] == 1
    assert sorting["speed"] == {"level": 3, "label": "Normal", "multiplier": 15}
    assert sorting["algorithm_info"]["key"] == "bubble"
    assert len(sorting["array"]) == 50
    assert "grid" not in sorting

    path_session.play()
    scheduler.run_all()
    pathfinding = json.loads(json.dumps(path_session.snapshot()))
    assert pathfinding["grid"]["width"] == 5
    assert "array" not in pathfinding


def test_idle_gap_before_play_is_not_replayed():
    now = [0.0]
    scheduler = PollingScheduler(clock=lambda: now[0])
    vs = VisualizerSession(Preferences(), scheduler, seed=1)

    now[0] += 30.0
    assert vs.play() is True
    now[0] += 0.05
    scheduler.tick()
    assert vs.engine.is_playing
    assert vs.engine.current_step_index == 4
