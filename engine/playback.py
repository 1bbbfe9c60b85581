"""
playback.py — Step-Log Playback Engine
=======================================
A PlaybackEngine replays a finished log one step at a time.  It knows
nothing about how the log was produced; the per-domain subclasses only
decide what "applying" one step means (counters, cell flags, message).

State machine:
    STOPPED  →  play(log)  →  PLAYING
    PLAYING  →  pause()    →  PAUSED
    PAUSED   →  resume()   →  PLAYING
    PLAYING  →  (end of log) → STOPPED   (log & cursor kept for display)
    any      →  stop()     →  STOPPED   (log cleared, cursor 0)

    step() applies exactly one step from STOPPED or PAUSED and leaves
    the state where it was.

Timing:
    Automatic advancement goes through the Scheduler.  Every scheduled
    callback carries the generation number current when it was queued;
    pause / stop / end-of-log bump the generation, so a callback that
    fires after being cancelled finds a stale number and does nothing.
    At most one callback is pending per engine.

    delay = max(1, 200 / multiplier) ms, the multiplier being read when
    the NEXT step is scheduled, so a speed change mid-run only affects
    the delays that follow it.

Renderer:
    Any object with
        render(data, highlight, message, *, theme, context) -> Any
    called once per applied step.  Exceptions from it are logged and the
    run carries on.
"""

import math
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union

from algorithms.step import (
    COMPARISON_KINDS,
    SWAP_KINDS,
    CellState,
    PathfindingLog,
    SortingLog,
    Step,
    StepKind,
)
from engine.scheduler import Scheduler
from utils.logger import get_logger

logger = get_logger(__name__)

Log = Union[SortingLog, PathfindingLog]


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED  = "paused"


# ---------------------------------------------------------------------------
# Speed levels (label, multiplier)
# ---------------------------------------------------------------------------
SPEED_LEVELS: Dict[int, Tuple[str, int]] = {
    1: ("Very Slow", 1),
    2: ("Slow",      5),
    3: ("Normal",    15),
    4: ("Fast",      30),
    5: ("Very Fast", 60),
}
DEFAULT_SPEED    = 3
BASE_INTERVAL_MS = 200


def speed_level(level: Any) -> Tuple[str, int]:
    """(label, multiplier) for a level; anything unknown is Normal."""
    return SPEED_LEVELS.get(level, SPEED_LEVELS[DEFAULT_SPEED])


def speed_multiplier(level: Any) -> int:
    return speed_level(level)[1]


def step_delay_ms(level: Any) -> float:
    return max(1.0, BASE_INTERVAL_MS / speed_multiplier(level))


# ---------------------------------------------------------------------------
# Base engine
# ---------------------------------------------------------------------------
class PlaybackEngine:
    """
    Attributes:
        scheduler  : Source of deferred callbacks.
        renderer   : Receives every applied step (may be None).
        log_loader : Zero-arg callable returning a fresh log; used by
                     step() when there is nothing loaded to step through.
        theme      : Passed through to the renderer ("light" / "dark").
        last_message, last_highlight : What the most recent step showed.
    """

    domain = ""

    def __init__(
        self,
        scheduler: Scheduler,
        renderer: Any = None,
        speed: int = DEFAULT_SPEED,
        log_loader: Optional[Callable[[], Optional[Log]]] = None,
        theme: str = "light",
    ):
        self.scheduler  = scheduler
        self.renderer   = renderer
        self.log_loader = log_loader
        self.theme      = theme
        self.speed      = speed if speed in SPEED_LEVELS else DEFAULT_SPEED

        self._state:      PlaybackState  = PlaybackState.STOPPED
        self._log:        Optional[Log]  = None
        self._cursor:     int            = 0
        self._handle:     Any            = None
        self._generation: int            = 0

        self.last_message:   str = ""
        self.last_highlight: Any = None
        self.reset_counters()

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def play(self, log: Optional[Log]) -> bool:
        """Load `log` and start animating it.  Only from STOPPED."""
        if self._state != PlaybackState.STOPPED:
            return False
        if log is None or len(log) == 0:
            logger.info(f"{self.domain}: nothing to animate")
            return False

        self._load(log)
        self.reset_counters()
        self._set_state(PlaybackState.PLAYING)
        self._run(self._generation)
        return True

    def pause(self) -> bool:
        if self._state != PlaybackState.PLAYING:
            return False
        self._cancel_pending()
        self._set_state(PlaybackState.PAUSED)
        return True

    def resume(self) -> bool:
        if self._state != PlaybackState.PAUSED:
            return False
        self._set_state(PlaybackState.PLAYING)
        self._run(self._generation)
        return True

    def step(self) -> bool:
        """Apply exactly one step.  Returns False when nothing was applied."""
        if self._state == PlaybackState.PLAYING:
            return False

        if self._state == PlaybackState.STOPPED and self._exhausted():
            if self.log_loader is None:
                return False
            log = self.log_loader()
            if log is None or len(log) == 0:
                logger.info(f"{self.domain}: nothing to step through")
                return False
            self._load(log)
            self.reset_counters()

        if self._exhausted():
            return False
        self._apply_next()
        return True

    def stop(self) -> None:
        """Back to STOPPED with no log.  Safe to call in any state, any number of times."""
        self._cancel_pending()
        self._log    = None
        self._cursor = 0
        if self._state != PlaybackState.STOPPED:
            self._set_state(PlaybackState.STOPPED)

    def set_speed(self, level: int) -> None:
        self.speed = level if level in SPEED_LEVELS else DEFAULT_SPEED

    def reset_counters(self) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def is_paused(self) -> bool:
        return self._state == PlaybackState.PAUSED

    @property
    def is_stopped(self) -> bool:
        return self._state == PlaybackState.STOPPED

    @property
    def log(self) -> Optional[Log]:
        return self._log

    @property
    def current_step_index(self) -> int:
        return self._cursor

    @property
    def total_steps(self) -> int:
        return len(self._log) if self._log is not None else 0

    @property
    def delay_ms(self) -> float:
        return step_delay_ms(self.speed)

    def counters(self) -> Dict[str, int]:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _load(self, log: Log) -> None:
        self._cancel_pending()
        self._log    = log
        self._cursor = 0

    def _exhausted(self) -> bool:
        return self._log is None or self._cursor >= len(self._log)

    def _set_state(self, state: PlaybackState) -> None:
        logger.debug(f"{self.domain}: {self._state.value} -> {state.value}")
        self._state = state

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self, generation: int) -> None:
        """One tick of automatic advancement."""
        if generation != self._generation or self._state != PlaybackState.PLAYING:
            return
        self._handle = None

        if self._exhausted():
            self._finish()
            return

        self._apply_next()

        if self._exhausted():
            self._finish()
            return

        token = self._generation
        self._handle = self.scheduler.call_later(self.delay_ms, lambda: self._run(token))

    def _finish(self) -> None:
        self._cancel_pending()
        self._set_state(PlaybackState.STOPPED)

    def _apply_next(self) -> None:
        index = self._cursor
        self._cursor += 1
        self._apply(index)

    def _apply(self, index: int) -> None:
        raise NotImplementedError

    def _render(self, data: Any, highlight: Any, message: str, context: Dict[str, Any]) -> None:
        self.last_message   = message
        self.last_highlight = highlight
        if self.renderer is None:
            return
        try:
            self.renderer.render(data, highlight, message, theme=self.theme, context=context)
        except Exception:
            logger.exception(f"{self.domain}: renderer failed on step {self._cursor - 1}")


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------
class SortingPlayback(PlaybackEngine):
    domain = "sorting"

    def reset_counters(self) -> None:
        self.comparisons = 0
        self.swaps       = 0

    def counters(self) -> Dict[str, int]:
        return {"comparisons": self.comparisons, "swaps": self.swaps}

    def _apply(self, index: int) -> None:
        step: Step = self._log[index]

        if not isinstance(step.kind, StepKind):
            logger.warning(f"Unknown step type: {step.kind_name}")
            return

        if step.kind in COMPARISON_KINDS:
            self.comparisons += 1
        if step.kind in SWAP_KINDS:
            self.swaps += 1

        self._render(
            list(step.array),
            list(step.indices),
            step.message,
            {
                "domain":           self.domain,
                "algorithm":        self._log.algorithm,
                "kind":             step.kind_name,
                "sorted_positions": step.sorted_positions,
                "partition_ranges": step.partition_ranges or (),
                "merge_ranges":     step.merge_ranges or (),
                "step_index":       index,
            },
        )


# ---------------------------------------------------------------------------
# Pathfinding
# ---------------------------------------------------------------------------
def _fmt(value: float) -> str:
    if value == math.inf:
        return "∞"
    return str(int(value)) if float(value).is_integer() else str(value)


class PathfindingPlayback(PlaybackEngine):
    """
    Replays `visited_order ++ path`, marking the cells of the log's grid
    as it goes.  The grid belongs to the engine while PLAYING / PAUSED.
    """

    domain = "pathfinding"

    def reset_counters(self) -> None:
        self.visited_nodes = 0
        self.path_length   = 0

    def counters(self) -> Dict[str, int]:
        return {"visited_nodes": self.visited_nodes, "path_length": self.path_length}

    def _apply(self, index: int) -> None:
        log: PathfindingLog = self._log
        n_visited = len(log.visited_order)

        if index < n_visited:
            state = log.visited_order[index]
            self.visited_nodes += 1
            cell = self._grid_cell(log, state)
            if cell is not None:
                cell.is_visited = True
                cell.distance   = state.distance
                cell.g, cell.h, cell.f = state.g, state.h, state.f
            message = self._visit_message(log.algorithm, state)
        else:
            path_index = index - n_visited
            state = log.path[path_index]
            self.path_length += 1
            cell = self._grid_cell(log, state)
            if cell is not None:
                cell.is_path = True
            if path_index == 0:
                message = "Building path from destination to source"
            else:
                message = f"Building path - step {path_index + 1} of {len(log.path)}"

        self._render(
            log.grid,
            state.pos,
            message,
            {
                "domain":     self.domain,
                "algorithm":  log.algorithm,
                "step_index": index,
                "in_path":    index >= n_visited,
            },
        )

    @staticmethod
    def _grid_cell(log: PathfindingLog, state: CellState):
        grid = log.grid
        if grid is None or not grid.in_bounds(state.x, state.y):
            return None
        return grid.cell(state.x, state.y)

    @staticmethod
    def _visit_message(algorithm: str, state: CellState) -> str:
        if state.is_start:
            return "Starting from source node"
        if state.is_end:
            return "Destination reached!"
        where = f"({state.x},{state.y})"
        if algorithm == "dfs":
            return f"Exploring node {where} - depth: {_fmt(state.distance)}"
        if algorithm == "bfs":
            return f"Exploring node {where} - level: {_fmt(state.distance)}"
        if algorithm == "astar":
            return f"Visiting node {where} - g={_fmt(state.g)} h={_fmt(state.h)} f={_fmt(state.f)}"
        return f"Visiting node {where} with distance {_fmt(state.distance)} from start"
