#!/usr/bin/env python3
"""Detached clipboard deliveries.

The read loop must never wait on a clipboard command: a hung xclip would
otherwise stall frame reception and, with it, liveness tracking. The
dispatcher starts each delivery as its own task and only keeps a
reference so the task is not garbage collected while running.

Deliveries are not ordered. When messages arrive in quick succession the
last process to finish wins the clipboard.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from ntfyclip.clipboard_io import safe_deliver

logger = logging.getLogger(__name__)

Deliver = Callable[[bytes], Awaitable[object]]


class DeliveryDispatcher:
    """Run clipboard deliveries as background tasks.

    Attributes:
        deliver: Coroutine function performing one delivery.
        pending: Deliveries that have not finished yet.
    """

    def __init__(self, deliver: Deliver = safe_deliver) -> None:
        self.deliver = deliver
        self.pending: set[asyncio.Task] = set()

    def dispatch(self, text: str) -> asyncio.Task:
        """Start delivering text without waiting for it."""
        task = asyncio.create_task(self.deliver(text.encode("utf-8")))
        self.pending.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self.pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Clipboard delivery failed: %r", exc)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for pending deliveries, cancelling any left at timeout."""
        if not self.pending:
            return
        _, still_pending = await asyncio.wait(set(self.pending), timeout=timeout)
        for task in still_pending:
            task.cancel()
        if still_pending:
            await asyncio.gather(*still_pending, return_exceptions=True)
