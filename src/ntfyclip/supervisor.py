#!/usr/bin/env python3
"""Session supervisor for ntfyclip.

This module restarts sessions forever using tenacity. Every termination
reason (dial failure, idle timeout, server close, transport error) leads
to the same fixed cooldown followed by a fresh session; there is no
backoff growth and no retry limit. Sessions turn unexpected errors into a
termination reason, so only cancellation (process shutdown) ends the loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from tenacity import AsyncRetrying, RetryCallState, retry_if_result, stop_never, wait_fixed

from ntfyclip.client_constants import COOLDOWN
from ntfyclip.session import Session
from ntfyclip.session_state import TerminationReason

if TYPE_CHECKING:
    from ntfyclip.config import Settings
    from ntfyclip.dispatch import DeliveryDispatcher

logger = logging.getLogger(__name__)

SessionFactory = Callable[["Settings", "DeliveryDispatcher"], Session]


def is_restartable(reason: object) -> bool:
    """Return True for any session termination reason."""
    return isinstance(reason, TerminationReason)


def log_restart(retry_state: RetryCallState) -> None:
    """Log the termination reason before the cooldown."""
    reason = retry_state.outcome.result()
    delay = retry_state.next_action.sleep if retry_state.next_action else 0
    logger.warning(
        "Session %d ended with %s, reconnecting in %gs",
        retry_state.attempt_number,
        reason.value,
        delay,
    )


async def run_session(
    settings: Settings,
    dispatcher: DeliveryDispatcher,
    session_factory: SessionFactory = Session,
) -> TerminationReason:
    """Create a fresh session and run it to termination."""
    session = session_factory(settings, dispatcher)
    return await session.run()


async def run_supervisor(
    settings: Settings,
    dispatcher: DeliveryDispatcher,
    session_factory: SessionFactory = Session,
    cooldown: float = COOLDOWN,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Run sessions back to back, forever.

    Args:
        settings: Shared, read-only settings passed to every session.
        dispatcher: Clipboard dispatcher passed to every session.
        session_factory: Builds a Session from settings and dispatcher.
        cooldown: Seconds to wait between sessions.
        sleep: Coroutine function used for the cooldown.

    Note:
        This function never returns normally - it runs until cancelled.
    """
    retrying = AsyncRetrying(
        wait=wait_fixed(cooldown),
        stop=stop_never,
        retry=retry_if_result(is_restartable),
        before_sleep=log_restart,
        sleep=sleep,
        reraise=True,
    )
    logger.info("Subscribing to %s", settings.url)
    await retrying(run_session, settings, dispatcher, session_factory)
