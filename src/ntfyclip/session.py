#!/usr/bin/env python3
"""One WebSocket session with the ntfy server.

A Session dials the topic, then runs two tasks side by side: the read
loop, which receives frames and hands matching messages to the clipboard
dispatcher, and the idle watchdog, which ends the session when the
server has been silent for longer than the idle timeout. Whichever task
finishes first decides the termination reason and the other is
cancelled. A Session runs once and is then discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from websockets.exceptions import (
    ConnectionClosed,
    ConnectionClosedOK,
    WebSocketException,
)

from ntfyclip.connection import dial
from ntfyclip.protocol import ProtocolError, decode_frame
from ntfyclip.session_state import SessionPhase, SessionState, TerminationReason
from ntfyclip.session_watchdog import watch_idle

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from websockets.asyncio.client import ClientConnection

    from ntfyclip.config import Settings
    from ntfyclip.dispatch import DeliveryDispatcher
    from ntfyclip.traffic import TrafficClock

    Dial = Callable[[Settings, TrafficClock], Awaitable[ClientConnection]]

logger = logging.getLogger(__name__)


def classify_close(exc: ConnectionClosed) -> TerminationReason:
    """Map a websockets close exception to a termination reason.

    A close frame from the server ends the session normally whatever its
    code, and so does a stream that ends cleanly without one. websockets
    chains the socket error as __cause__ when the stream was cut, and
    records our own close frame in exc.sent when the client failed the
    connection first; both are transport errors.
    """
    if isinstance(exc, ConnectionClosedOK):
        return TerminationReason.NORMAL_CLOSE
    if exc.rcvd is not None and exc.rcvd_then_sent is not False:
        return TerminationReason.NORMAL_CLOSE
    if exc.rcvd is None and exc.sent is None and exc.__cause__ is None:
        return TerminationReason.NORMAL_CLOSE
    return TerminationReason.TRANSPORT_ERROR


class Session:
    """A single dial-read-terminate cycle.

    Args:
        settings: Shared, read-only settings.
        dispatcher: Starts clipboard deliveries without blocking reads.
        dialer: Coroutine function opening the connection; defaults to
            connection.dial.
    """

    def __init__(
        self,
        settings: Settings,
        dispatcher: DeliveryDispatcher,
        dialer: Dial | None = None,
    ) -> None:
        self.settings = settings
        self.dispatcher = dispatcher
        self._dial = dialer or dial
        self.state = SessionState()

    async def run(self) -> TerminationReason:
        """Run the session to termination.

        Returns:
            Why the session ended.

        Raises:
            RuntimeError: If the session has already been run.
        """
        if self.state.phase is not SessionPhase.NEW:
            raise RuntimeError("Session instances cannot be reused")
        settings = self.settings

        self.state.phase = SessionPhase.DIALING
        try:
            ws = await self._dial(settings, self.state.traffic)
        except (OSError, TimeoutError, WebSocketException) as e:
            return self._terminate(TerminationReason.DIAL_ERROR, e)
        except Exception as e:
            logger.exception("Unexpected error dialing %s", settings.server)
            return self._terminate(TerminationReason.DIAL_ERROR, e)

        self.state.phase = SessionPhase.AUTHENTICATED
        logger.info(
            "Connected to %s with topic=%s and timeout=%gs",
            settings.server,
            settings.topic,
            settings.idle_timeout,
        )
        try:
            reason, error = await self._run_connected(ws)
        except Exception as e:
            logger.exception(
                "Unexpected error in session for topic=%s", settings.topic
            )
            reason, error = TerminationReason.TRANSPORT_ERROR, e
        finally:
            await ws.close(code=1000, reason="bye")
        return self._terminate(reason, error)

    async def _run_connected(
        self, ws: ClientConnection
    ) -> tuple[TerminationReason, BaseException | None]:
        """Race the read loop against the idle watchdog."""
        traffic = self.state.traffic
        traffic.touch()
        self.state.phase = SessionPhase.READING

        read_task = asyncio.create_task(self._read_loop(ws))
        watchdog_task = asyncio.create_task(
            watch_idle(traffic, self.settings.idle_timeout)
        )
        try:
            done, _ = await asyncio.wait(
                {read_task, watchdog_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            read_task.cancel()
            watchdog_task.cancel()
            await asyncio.gather(read_task, watchdog_task, return_exceptions=True)

        if read_task in done:
            return read_task.result()
        idle = watchdog_task.result()
        return TerminationReason.IDLE_TIMEOUT, TimeoutError(
            f"no traffic in the last {idle:.1f}s"
        )

    async def _read_loop(
        self, ws: ClientConnection
    ) -> tuple[TerminationReason, BaseException | None]:
        """Receive frames until the connection closes."""
        while True:
            try:
                data = await ws.recv()
            except ConnectionClosed as e:
                return classify_close(e), e
            except OSError as e:
                return TerminationReason.TRANSPORT_ERROR, e
            self.handle_frame(data)

    def handle_frame(self, data: str | bytes) -> None:
        """Decode one data frame and dispatch its message, if any.

        Malformed frames are logged and dropped; they never end the
        session.
        """
        topic = self.settings.topic
        try:
            text = decode_frame(data, topic)
        except ProtocolError as e:
            self.state.dropped += 1
            logger.warning("Dropping malformed frame on topic=%s: %s", topic, e)
            return
        if text is None:
            logger.debug("Ignoring non-message frame on topic=%s", topic)
            return
        logger.debug("WS received message: event=message, topic=%s", topic)
        self.state.delivered += 1
        self.dispatcher.dispatch(text)

    def _terminate(
        self, reason: TerminationReason, error: BaseException | None
    ) -> TerminationReason:
        self.state.phase = SessionPhase.TERMINATED
        self.state.reason = reason
        self.state.detail = str(error) if error is not None else ""
        level = logging.INFO if reason is TerminationReason.NORMAL_CLOSE else logging.WARNING
        logger.log(
            level,
            "Session for topic=%s on %s ended: %s%s",
            self.settings.topic,
            self.settings.server,
            reason.value,
            f" ({self.state.detail})" if self.state.detail else "",
        )
        return reason
