#!/usr/bin/env python3
"""Last-traffic timestamp shared by a session's read loop and watchdog.

The read side stamps the clock for every inbound frame; the watchdog
reads how long the connection has been silent. Reads and writes go
through a lock because frame callbacks and the watchdog are separate
activities.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


class TrafficClock:
    """Monotonic timestamp of the most recent inbound frame.

    Args:
        now: Monotonic clock function, replaceable in tests.
    """

    def __init__(self, now: Callable[[], float] = time.monotonic) -> None:
        self._now = now
        self._lock = threading.Lock()
        self._last = now()

    def touch(self) -> None:
        """Record traffic at the current time."""
        stamp = self._now()
        with self._lock:
            self._last = stamp

    @property
    def last(self) -> float:
        with self._lock:
            return self._last

    def idle_for(self) -> float:
        """Seconds since the last recorded traffic."""
        return self._now() - self.last

    def expired(self, timeout: float) -> bool:
        """True if no traffic was seen for more than timeout seconds."""
        return self.idle_for() > timeout
