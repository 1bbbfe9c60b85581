"""
scheduler.py — Deferred Callbacks for Playback
===============================================
The playback engine never sleeps; it asks a Scheduler to call it back
after a delay and keeps the returned handle so it can cancel.

    handle = scheduler.call_later(13.3, engine._advance)
    handle.cancel()

Three implementations:
  • ManualScheduler   – virtual millisecond clock moved by advance(ms).
                        Fully deterministic; what the tests drive.
  • PollingScheduler  – a ManualScheduler whose clock follows
                        time.monotonic().  Nothing fires until tick() is
                        called, which the web app does on every poll.
                        Scheduling onto an empty queue restarts the
                        wall-clock reference, so idle gaps never fire.
  • AsyncioScheduler  – thin wrapper over loop.call_later.
"""

import asyncio
import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple


class Handle:
    """A pending callback.  cancel() is idempotent."""

    __slots__ = ("due", "callback", "cancelled")

    def __init__(self, due: float, callback: Callable[[], None]):
        self.due       = due
        self.callback  = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Interface: call_later(delay_ms, callback) -> object with cancel()."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]):
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Manual (virtual clock)
# ---------------------------------------------------------------------------
class ManualScheduler(Scheduler):
    """
    Attributes:
        now : Virtual time in milliseconds.
    """

    def __init__(self):
        self.now: float = 0.0
        self._queue: List[Tuple[float, int, Handle]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Handle:
        handle = Handle(self.now + max(0.0, delay_ms), callback)
        heapq.heappush(self._queue, (handle.due, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, ms: float) -> int:
        """
        Move the clock forward by `ms`, firing every callback that falls
        due on the way (ties in scheduling order).  Callbacks scheduled
        by a callback fire too if they land inside the window.
        Returns the number of callbacks fired.
        """
        target = self.now + ms
        fired  = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.now = due
            handle.cancelled = True
            handle.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self, limit: int = 100_000) -> int:
        """Fire callbacks until nothing is pending (or `limit` is hit)."""
        fired = 0
        while fired < limit:
            live = [entry for entry in self._queue if not entry[2].cancelled]
            if not live:
                break
            next_due = min(entry[0] for entry in live)
            fired += self.advance(next_due - self.now)
        return fired


# ---------------------------------------------------------------------------
# Polling (wall clock, fired on tick)
# ---------------------------------------------------------------------------
class PollingScheduler(ManualScheduler):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self._clock     = clock
        self._last_tick = clock()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> Handle:
        # idle time since the last tick must not be replayed
        if not self.pending:
            self._last_tick = self._clock()
        return super().call_later(delay_ms, callback)

    def tick(self) -> int:
        """Catch the virtual clock up with real time."""
        current = self._clock()
        elapsed_ms = (current - self._last_tick) * 1000.0
        self._last_tick = current
        return self.advance(max(0.0, elapsed_ms))


# ---------------------------------------------------------------------------
# asyncio
# ---------------------------------------------------------------------------
class AsyncioScheduler(Scheduler):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)
