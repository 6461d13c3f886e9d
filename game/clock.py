"""Cooperative single-threaded scheduler for the countdown and outcome-display delays.

Nothing runs in the background: the owner calls advance(seconds) (the UI does so
from wall-clock time on each rerun, tests do so directly) and due callbacks run
in due-time order on the caller's thread. A cancelled handle never fires.
"""

import itertools
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class TimerHandle:
    id: int
    due: float
    callback: Callable[[], None]
    interval: Optional[float] = None
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class CallbackScheduler:
    now: float = 0.0
    _handles: list[TimerHandle] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=itertools.count)

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        h = TimerHandle(id=next(self._ids), due=self.now + max(0.0, delay), callback=callback)
        self._handles.append(h)
        return h

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError("interval must be positive")
        h = TimerHandle(id=next(self._ids), due=self.now + interval, callback=callback, interval=interval)
        self._handles.append(h)
        return h

    def cancel(self, handle: Optional[TimerHandle]) -> None:
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for h in self._handles:
            h.cancel()
        self._handles.clear()

    def pending(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move time forward, firing due callbacks in order. Returns the number fired."""
        target = self.now + max(0.0, seconds)
        fired = 0
        while True:
            live = [h for h in self._handles if not h.cancelled and h.due <= target]
            if not live:
                break
            h = min(live, key=lambda x: (x.due, x.id))
            self.now = h.due
            if h.interval is not None:
                h.due += h.interval
            else:
                h.cancelled = True
            h.callback()
            fired += 1
        self._handles = [h for h in self._handles if not h.cancelled]
        self.now = target
        return fired
