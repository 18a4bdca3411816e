from __future__ import annotations

import threading
import time
from collections import deque
from typing import Callable


class SlidingWindowLimiter:
    """Per-key request limiter over a trailing time window. ``max_events <= 0`` disables it."""

    def __init__(
        self,
        max_events: int,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_events = max_events
        self.window_seconds = window_seconds
        self._clock = clock
        self._events: dict[str, deque[float]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        if self.max_events <= 0:
            return True
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            q = self._events.setdefault(key, deque())
            while q and q[0] <= cutoff:
                q.popleft()
            if len(q) >= self.max_events:
                return False
            q.append(now)
            return True

    def _sweep(self, cutoff: float) -> None:
        # Drop keys whose newest event has left the window.
        stale = [key for key, q in self._events.items() if not q or q[-1] <= cutoff]
        for key in stale:
            del self._events[key]
