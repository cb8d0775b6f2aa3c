#!/usr/bin/env python3
"""Client entry point for ntfyclip.

This module runs the session supervisor until SIGINT or SIGTERM arrives.
Shutdown cancels the supervisor task, which interrupts whatever it is
waiting on (dial, frame read, idle check or cooldown) immediately, then
gives in-flight clipboard deliveries a short grace period.

See supervisor.py for the restart policy.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from contextlib import suppress
from typing import TYPE_CHECKING

from ntfyclip.client_constants import SHUTDOWN_DELIVERY_TIMEOUT
from ntfyclip.dispatch import DeliveryDispatcher
from ntfyclip.supervisor import run_supervisor

if TYPE_CHECKING:
    from ntfyclip.config import Settings

logger = logging.getLogger(__name__)


async def run_client(
    settings: Settings,
    shutdown_requested: asyncio.Event | None = None,
    dispatcher: DeliveryDispatcher | None = None,
) -> None:
    """Forward messages for settings.topic to the clipboard until shutdown.

    Args:
        settings: Settings shared by all sessions.
        shutdown_requested: Event that stops the client when set; signal
            handlers for SIGINT and SIGTERM set it.
        dispatcher: Clipboard dispatcher; a default one is created if
            omitted.

    Raises:
        Exception: Whatever unexpected error ended the supervisor.
    """
    if shutdown_requested is None:
        shutdown_requested = asyncio.Event()
    if dispatcher is None:
        dispatcher = DeliveryDispatcher()

    # Register signal handlers for clean shutdown
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        # Not available on Windows; KeyboardInterrupt covers Ctrl+C there
        with suppress(NotImplementedError):
            loop.add_signal_handler(signum, shutdown_requested.set)

    supervisor_task = asyncio.create_task(run_supervisor(settings, dispatcher))
    shutdown_task = asyncio.create_task(shutdown_requested.wait())
    try:
        done, _ = await asyncio.wait(
            {supervisor_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        supervisor_task.cancel()
        shutdown_task.cancel()
        await asyncio.gather(supervisor_task, shutdown_task, return_exceptions=True)
        await dispatcher.drain(SHUTDOWN_DELIVERY_TIMEOUT)
        for signum in (signal.SIGINT, signal.SIGTERM):
            with suppress(NotImplementedError):
                loop.remove_signal_handler(signum)

    if supervisor_task in done:
        supervisor_task.result()
    logger.info("Shutdown requested, exiting")
