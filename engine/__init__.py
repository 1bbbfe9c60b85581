"""
engine/
-------
Playback layer.

    from engine import VisualizerSession, SortingPlayback, ManualScheduler
"""

from engine.scheduler import AsyncioScheduler, ManualScheduler, PollingScheduler, Scheduler
from engine.playback  import (
    BASE_INTERVAL_MS,
    SPEED_LEVELS,
    PathfindingPlayback,
    PlaybackEngine,
    PlaybackState,
    SortingPlayback,
    speed_level,
    speed_multiplier,
    step_delay_ms,
)
from engine.session   import VisualizerSession

__all__ = [
    "Scheduler",
    "ManualScheduler",
    "PollingScheduler",
    "AsyncioScheduler",
    "PlaybackState",
    "PlaybackEngine",
    "SortingPlayback",
    "PathfindingPlayback",
    "SPEED_LEVELS",
    "BASE_INTERVAL_MS",
    "speed_level",
    "speed_multiplier",
    "step_delay_ms",
    "VisualizerSession",
]
