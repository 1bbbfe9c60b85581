import asyncio
import logging

import pytest

from algorithms.bfs import bfs
from algorithms.bubble_sort import bubble_sort
from algorithms.step import CellState, SortingLog, Step, StepKind
from engine.playback import (
    PathfindingPlayback,
    PlaybackState,
    SortingPlayback,
    speed_level,
    speed_multiplier,
    step_delay_ms,
)
from engine.scheduler import AsyncioScheduler, ManualScheduler, PollingScheduler


def sorting_engine(scheduler, renderer=None, speed=3, loader=None):
    return SortingPlayback(scheduler, renderer, speed, log_loader=loader)


# ---------------------------------------------------------------------------
# Speed
# ---------------------------------------------------------------------------
def test_speed_levels():
    assert [speed_multiplier(level) for level in range(1, 6)] == [1, 5, 15, 30, 60]
    assert speed_level(1) == ("Very Slow", 1)
    assert speed_level(5) == ("Very Fast", 60)


@pytest.mark.parametrize("level", [0, 6, None, "fast"])
def test_unknown_speed_is_normal(level):
    assert speed_level(level) == ("Normal", 15)


def test_step_delay():
    assert step_delay_ms(1) == 200
    assert step_delay_ms(3) == pytest.approx(200 / 15)
    assert step_delay_ms(5) == pytest.approx(200 / 60)


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------
def test_manual_scheduler_orders_by_due_time():
    sched, fired = ManualScheduler(), []
    sched.call_later(20, lambda: fired.append("b"))
    sched.call_later(10, lambda: fired.append("a"))
    sched.call_later(20, lambda: fired.append("c"))
    assert sched.advance(15) == 1
    assert sched.advance(5) == 2
    assert fired == ["a", "b", "c"]


def test_manual_scheduler_fires_chained_callbacks_in_window():
    sched, fired = ManualScheduler(), []

    def first():
        fired.append(1)
        sched.call_later(5, lambda: fired.append(2))

    sched.call_later(5, first)
    sched.advance(10)
    assert fired == [1, 2]
    assert sched.pending == 0


def test_cancelled_handle_never_fires():
    sched, fired = ManualScheduler(), []
    handle = sched.call_later(5, lambda: fired.append(1))
    handle.cancel()
    assert sched.pending == 0
    sched.advance(10)
    assert fired == []


def test_polling_scheduler_follows_clock():
    now = [100.0]
    sched, fired = PollingScheduler(clock=lambda: now[0]), []
    sched.call_later(10, lambda: fired.append(1))
    now[0] += 0.005
    assert sched.tick() == 0
    now[0] += 0.006
    assert sched.tick() == 1
    assert fired == [1]


def test_polling_scheduler_does_not_replay_idle_time():
    now = [0.0]
    sched = PollingScheduler(clock=lambda: now[0])
    engine = SortingPlayback(sched)

    now[0] += 30.0
    engine.play(bubble_sort(list(range(30, 0, -1))))
    now[0] += 0.05
    sched.tick()
    # first step on play, then one every 200 / 15 ms
    assert engine.current_step_index == 4
    assert engine.is_playing

    engine.pause()
    now[0] += 60.0
    engine.resume()
    assert engine.current_step_index == 5
    now[0] += 0.01
    sched.tick()
    assert engine.current_step_index == 5


# ---------------------------------------------------------------------------
# Engine state machine
# ---------------------------------------------------------------------------
def test_play_applies_first_step_immediately(scheduler, renderer):
    log = bubble_sort([5, 3, 1, 4, 2])
    engine = sorting_engine(scheduler, renderer)

    assert engine.play(log) is True
    assert engine.state == PlaybackState.PLAYING
    assert engine.current_step_index == 1
    assert engine.comparisons == 1
    assert renderer.messages == ["Comparing 5 and 3"]
    assert scheduler.pending == 1


def test_full_run_counts_and_stops(scheduler, renderer):
    log = bubble_sort([5, 3, 1, 4, 2])
    engine = sorting_engine(scheduler, renderer)
    engine.play(log)

    while engine.is_playing:
        scheduler.advance(engine.delay_ms)
        assert scheduler.pending <= 1

    assert engine.state == PlaybackState.STOPPED
    assert engine.current_step_index == len(log)
    assert engine.log is log
    assert len(renderer.frames) == len(log)
    assert engine.comparisons == sum(1 for s in log.steps if s.kind == StepKind.COMPARISON)
    assert engine.swaps == sum(1 for s in log.steps if s.kind == StepKind.SWAP)
    assert renderer.frames[-1]["data"] == [1, 2, 3, 4, 5]


def test_play_only_from_stopped(scheduler):
    engine = sorting_engine(scheduler)
    log = bubble_sort([3, 2, 1])
    engine.play(log)
    assert engine.play(log) is False
    engine.pause()
    assert engine.play(log) is False


def test_empty_log_is_nothing_to_animate(scheduler):
    engine = sorting_engine(scheduler)
    assert engine.play(SortingLog("bubble")) is False
    assert engine.play(None) is False
    assert engine.is_stopped
    assert scheduler.pending == 0


def test_pause_and_resume(scheduler):
    engine = sorting_engine(scheduler)
    engine.play(bubble_sort([4, 3, 2, 1]))
    scheduler.advance(engine.delay_ms)
    assert engine.current_step_index == 2

    assert engine.pause() is True
    assert engine.is_paused
    assert scheduler.pending == 0
    scheduler.advance(10_000)
    assert engine.current_step_index == 2

    assert engine.pause() is False
    assert engine.resume() is True
    assert engine.is_playing
    assert engine.current_step_index == 3
    assert engine.resume() is False


def test_step_while_paused_keeps_paused(scheduler):
    engine = sorting_engine(scheduler)
    engine.play(bubble_sort([3, 1, 2]))
    engine.pause()
    assert engine.step() is True
    assert engine.current_step_index == 2
    assert engine.is_paused
    assert scheduler.pending == 0


def test_step_refused_while_playing(scheduler):
    engine = sorting_engine(scheduler)
    engine.play(bubble_sort([3, 1, 2]))
    assert engine.step() is False
    assert engine.current_step_index == 1


def test_step_from_stopped_bootstraps_through_loader(scheduler):
    calls = []

    def loader():
        calls.append(1)
        return bubble_sort([2, 1])

    engine = sorting_engine(scheduler, loader=loader)
    assert engine.step() is True
    assert engine.is_stopped
    assert engine.current_step_index == 1
    assert engine.comparisons == 1

    assert engine.step() is True
    assert engine.current_step_index == 2
    assert len(calls) == 1


def test_step_from_stopped_without_loader(scheduler):
    assert sorting_engine(scheduler).step() is False


def test_step_after_finished_run_starts_over(scheduler):
    engine = sorting_engine(scheduler, loader=lambda: bubble_sort([2, 1]))
    engine.play(bubble_sort([2, 1]))
    scheduler.run_all()
    assert engine.is_stopped
    assert engine.comparisons == 1

    engine.step()
    assert engine.current_step_index == 1
    assert engine.comparisons == 1


def test_stop_is_idempotent(scheduler):
    engine = sorting_engine(scheduler)
    engine.play(bubble_sort([5, 4, 3]))
    scheduler.advance(engine.delay_ms)
    counters = engine.counters()

    engine.stop()
    engine.stop()
    assert engine.is_stopped
    assert engine.log is None
    assert engine.current_step_index == 0
    assert engine.total_steps == 0
    assert scheduler.pending == 0
    assert engine.counters() == counters

    engine.reset_counters()
    assert engine.counters() == {"comparisons": 0, "swaps": 0}


def test_speed_change_applies_to_next_delay(scheduler):
    engine = sorting_engine(scheduler, speed=1)
    engine.play(bubble_sort([5, 4, 3, 2, 1]))
    engine.set_speed(5)

    scheduler.advance(199)
    assert engine.current_step_index == 1
    scheduler.advance(1)
    assert engine.current_step_index == 2
    scheduler.advance(4)
    assert engine.current_step_index == 3


def test_unknown_step_kind_is_skipped(scheduler, renderer, caplog):
    log = SortingLog("bubble", (
        Step(kind="teleport", indices=(0,), array=(1, 2)),
        Step(kind=StepKind.COMPARISON, indices=(0, 1), array=(1, 2), message="Comparing 1 and 2"),
    ))
    engine = sorting_engine(scheduler, renderer)
    with caplog.at_level(logging.WARNING):
        engine.play(log)
        scheduler.run_all()

    assert "teleport" in caplog.text
    assert engine.comparisons == 1
    assert renderer.messages == ["Comparing 1 and 2"]
    assert engine.current_step_index == 2


def test_renderer_failure_does_not_stop_playback(scheduler, broken_renderer):
    log = bubble_sort([3, 2, 1])
    engine = sorting_engine(scheduler, broken_renderer)
    engine.play(log)
    scheduler.run_all()
    assert broken_renderer.calls == len(log)
    assert engine.current_step_index == len(log)
    assert engine.last_message == log.steps[-1].message


def test_renderer_receives_theme_and_context(scheduler, renderer):
    engine = sorting_engine(scheduler, renderer)
    engine.theme = "dark"
    engine.play(bubble_sort([2, 1]))
    frame = renderer.frames[0]
    assert frame["theme"] == "dark"
    assert frame["highlight"] == [0, 1]
    assert frame["context"]["domain"] == "sorting"


# ---------------------------------------------------------------------------
# Pathfinding playback
# ---------------------------------------------------------------------------
def test_pathfinding_playback_marks_grid(scheduler, renderer, open_grid):
    log = bfs(open_grid, open_grid.start, open_grid.end)
    engine = PathfindingPlayback(scheduler, renderer)
    engine.play(log)
    scheduler.run_all()

    assert engine.visited_nodes == 9
    assert engine.path_length == 5
    assert engine.counters() == {"visited_nodes": 9, "path_length": 5}
    assert all(open_grid.cell(*s.pos).is_path for s in log.path)
    assert all(open_grid.cell(*s.pos).is_visited for s in log.visited_order)
    assert open_grid.cell(2, 2).distance == 4

    messages = renderer.messages
    assert messages[0] == "Starting from source node"
    assert messages[1] == "Exploring node (1,0) - level: 1"
    assert messages[8] == "Destination reached!"
    assert messages[9] == "Building path from destination to source"
    assert messages[-1] == "Building path - step 5 of 5"


def test_pathfinding_messages_per_algorithm():
    state = CellState(2, 3, distance=4, g=4, h=2, f=6)
    P = PathfindingPlayback
    assert P._visit_message("dfs", state) == "Exploring node (2,3) - depth: 4"
    assert P._visit_message("astar", state) == "Visiting node (2,3) - g=4 h=2 f=6"
    assert P._visit_message("dijkstra", state) == "Visiting node (2,3) with distance 4 from start"


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------
def test_asyncio_scheduler_drives_engine():
    log = bubble_sort([3, 1, 2])

    async def run():
        engine = SortingPlayback(AsyncioScheduler(), speed=5)
        engine.play(log)
        for _ in range(200):
            if engine.is_stopped:
                break
            await asyncio.sleep(0.01)
        return engine

    engine = asyncio.run(run())
    assert engine.is_stopped
    assert engine.current_step_index == len(log)
