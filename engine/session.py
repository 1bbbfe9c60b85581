"""
session.py — One User's Visualizer
===================================
VisualizerSession is the controller behind the UI: it owns the current
array, the current grid, the chosen algorithms and both playback
engines, and turns button presses into engine calls.

    s = VisualizerSession(Preferences(), ManualScheduler(), renderer)
    s.select_type("pathfinding")
    s.toggle_wall(3, 4)
    s.play()

Only the engine of the active algorithm type is driven.  While that
engine is PLAYING or PAUSED its grid belongs to it, so grid edits are
refused until it is STOPPED again.
"""

import random
from typing import Any, Dict, List, Optional

from algorithms import PATHFINDING, SORTING, get_algorithm, run_pathfinding, run_sorting
from algorithms.step import PathfindingLog, SortingLog
from engine.playback import (
    PathfindingPlayback,
    PlaybackEngine,
    SortingPlayback,
    speed_level,
)
from engine.scheduler import ManualScheduler, Scheduler
from model.grid import Grid
from model.sequence import generate_random_array
from utils.config_loader import (
    ALGORITHM_TYPES,
    ARRAY_SIZE_RANGE,
    GRID_SIZE_RANGE,
    PATHFINDING_KEYS,
    SORTING_KEYS,
    SPEED_RANGE,
    Preferences,
)
from utils.logger import get_logger

logger = get_logger(__name__)

MISSING_ENDPOINTS = "Please set both start and end points before running the algorithm."
GRID_HINT         = "Click and drag to draw walls. Shift+Click to set start. Ctrl+Click to set end."


class VisualizerSession:
    """
    Attributes:
        preferences : Current Preferences (mutated by the setters).
        array       : Values shown in the sorting view.
        grid        : Grid shown in the pathfinding view.
        sorting     : SortingPlayback engine.
        pathfinding : PathfindingPlayback engine.
        notice      : Last user-facing warning, or None.
    """

    def __init__(
        self,
        preferences: Optional[Preferences] = None,
        scheduler: Optional[Scheduler] = None,
        renderer: Any = None,
        seed: Optional[int] = None,
    ):
        self.preferences = preferences or Preferences()
        self.scheduler   = scheduler or ManualScheduler()
        self.renderer    = renderer
        self.notice: Optional[str] = None
        self._rng = random.Random(seed)

        theme = self.preferences.theme
        self.sorting = SortingPlayback(
            self.scheduler, renderer, self.preferences.speed,
            log_loader=self._load_sorting_log, theme=theme,
        )
        self.pathfinding = PathfindingPlayback(
            self.scheduler, renderer, self.preferences.speed,
            log_loader=self._load_pathfinding_log, theme=theme,
        )

        self.array: List[int] = []
        self.grid:  Grid      = Grid(self.preferences.grid_size)
        self._generate_array()
        self._generate_grid()

    # ==================================================================
    # ACTIVE VIEW
    # ==================================================================
    @property
    def algorithm_type(self) -> str:
        return self.preferences.algorithm_type

    @property
    def algorithm(self) -> str:
        return self.preferences.selected_algorithm

    @property
    def engine(self) -> PlaybackEngine:
        if self.algorithm_type == PATHFINDING:
            return self.pathfinding
        return self.sorting

    # ==================================================================
    # CONFIGURATION
    # ==================================================================
    def select_type(self, algorithm_type: str) -> bool:
        """Switch between sorting and pathfinding; fresh data for the new view."""
        if algorithm_type not in ALGORITHM_TYPES:
            return False
        self.engine.stop()
        self.preferences.algorithm_type = algorithm_type
        self.generate_data()
        return True

    def select_algorithm(self, key: str) -> bool:
        """
        Choose the algorithm for the active view.  A new pathfinding
        algorithm starts on a fresh grid.
        """
        if self.algorithm_type == SORTING:
            if key not in SORTING_KEYS:
                return False
            self.preferences.sorting_algorithm = key
        else:
            if key not in PATHFINDING_KEYS:
                return False
            self.preferences.pathfinding_algorithm = key
            self.pathfinding.stop()
            self.pathfinding.reset_counters()
            self._generate_grid()
        return True

    def set_array_size(self, size: Any) -> bool:
        size = _in_range(size, ARRAY_SIZE_RANGE)
        if size is None:
            return False
        self.preferences.array_size = size
        self.sorting.stop()
        self.sorting.reset_counters()
        self._generate_array()
        return True

    def set_grid_size(self, size: Any) -> bool:
        size = _in_range(size, GRID_SIZE_RANGE)
        if size is None:
            return False
        self.preferences.grid_size = size
        self.pathfinding.stop()
        self.pathfinding.reset_counters()
        self._generate_grid()
        return True

    def set_speed(self, level: Any) -> bool:
        """Takes effect on the next scheduled step, even mid-run."""
        level = _in_range(level, SPEED_RANGE)
        if level is None:
            return False
        self.preferences.speed = level
        self.sorting.set_speed(level)
        self.pathfinding.set_speed(level)
        return True

    def toggle_theme(self) -> str:
        self.preferences.dark_mode = not self.preferences.dark_mode
        theme = self.preferences.theme
        self.sorting.theme     = theme
        self.pathfinding.theme = theme
        return theme

    # ==================================================================
    # DATA
    # ==================================================================
    def generate_data(self) -> None:
        """New random array or grid for the active view."""
        self.engine.stop()
        self.engine.reset_counters()
        self.notice = None
        if self.algorithm_type == SORTING:
            self._generate_array()
        else:
            self._generate_grid()

    def _generate_array(self) -> None:
        self.array = generate_random_array(
            self.preferences.array_size, seed=self._rng.randrange(2 ** 32)
        )

    def _generate_grid(self) -> None:
        self.grid = Grid.generate(self.preferences.grid_size, seed=self._rng.randrange(2 ** 32))

    # ==================================================================
    # PLAYBACK
    # ==================================================================
    def play(self) -> bool:
        """Resume when paused, otherwise run the algorithm and animate it."""
        engine = self.engine
        if engine.is_playing:
            return False
        if engine.is_paused:
            return engine.resume()

        engine.stop()
        log = engine.log_loader()
        if log is None:
            return False
        return engine.play(log)

    def pause(self) -> bool:
        return self.engine.pause()

    def step(self) -> bool:
        return self.engine.step()

    def reset(self) -> None:
        """Stop, then start over on brand-new data."""
        self.generate_data()

    def _load_sorting_log(self) -> SortingLog:
        self.notice = None
        return run_sorting(self.preferences.sorting_algorithm, self.array)

    def _load_pathfinding_log(self) -> Optional[PathfindingLog]:
        self.grid.reset_search_state()
        start, end = self.grid.find_start_and_end()
        if start is None or end is None:
            self.notice = MISSING_ENDPOINTS
            logger.info("pathfinding: start or end missing, nothing to run")
            return None
        self.notice = None
        return run_pathfinding(self.preferences.pathfinding_algorithm, self.grid, start, end)

    # ==================================================================
    # GRID EDITS  (only while the pathfinding engine is stopped)
    # ==================================================================
    def toggle_wall(self, x: int, y: int) -> bool:
        if not self._grid_editable():
            return False
        self.grid.toggle_wall(x, y)
        return True

    def set_start(self, x: int, y: int) -> bool:
        if not self._grid_editable():
            return False
        self.grid.set_start(x, y)
        return True

    def set_end(self, x: int, y: int) -> bool:
        if not self._grid_editable():
            return False
        self.grid.set_end(x, y)
        return True

    def _grid_editable(self) -> bool:
        if not self.pathfinding.is_stopped:
            return False
        # a half-stepped run no longer matches the grid
        self.pathfinding.stop()
        return True

    # ==================================================================
    # READ-ONLY VIEWS
    # ==================================================================
    def stats(self) -> Dict[str, int]:
        return self.engine.counters()

    def snapshot(self) -> Dict[str, Any]:
        """JSON-ready picture of everything the page shows."""
        engine = self.engine
        info   = get_algorithm(self.algorithm)
        label, multiplier = speed_level(self.preferences.speed)
        data: Dict[str, Any] = {
            "algorithm_type": self.algorithm_type,
            "algorithm":      self.algorithm,
            "algorithm_info": info.to_dict() if info else None,
            "state":          engine.state.value,
            "current_step":   engine.current_step_index,
            "total_steps":    engine.total_steps,
            "stats":          engine.counters(),
            "message":        engine.last_message,
            "highlight":      engine.last_highlight,
            "notice":         self.notice,
            "speed":          {"level": self.preferences.speed, "label": label, "multiplier": multiplier},
            "theme":          self.preferences.theme,
            "preferences":    self.preferences.to_dict(),
        }
        if self.algorithm_type == SORTING:
            data["array"] = list(self.array)
        else:
            data["grid"] = self.grid.to_dict()
        return data


def _in_range(value: Any, bounds) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    lo, hi = bounds
    return number if lo <= number <= hi else None
