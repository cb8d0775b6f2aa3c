#!/usr/bin/env python3
"""Idle watchdog for a live session."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ntfyclip.client_constants import WATCHDOG_TICK

if TYPE_CHECKING:
    from ntfyclip.traffic import TrafficClock

logger = logging.getLogger(__name__)

# Shortest sleep between two checks, so a deadline hit exactly does not spin.
MIN_SLEEP: float = 0.01


async def watch_idle(
    traffic: TrafficClock,
    timeout: float,
    tick: float = WATCHDOG_TICK,
) -> float:
    """Wait until no traffic has been seen for more than timeout seconds.

    Idle time is measured from the most recent frame, not from the start
    of the watch. The watchdog wakes at least every tick seconds and
    sooner when the deadline is closer.

    Args:
        traffic: Clock stamped by the read side.
        timeout: Allowed silence in seconds.
        tick: Longest sleep between checks in seconds.

    Returns:
        The idle time observed when the timeout was detected.
    """
    while True:
        idle = traffic.idle_for()
        if idle > timeout:
            logger.debug("No traffic for %.1fs (limit %.1fs)", idle, timeout)
            return idle
        await asyncio.sleep(max(min(tick, timeout - idle), MIN_SLEEP))
