#!/usr/bin/env python3
"""WebSocket connection to an ntfy topic.

This module dials the topic's /ws endpoint with the websockets library.
TrafficConnection hooks into the connection's frame processing so that
every inbound frame, control frames included, stamps the session's
TrafficClock before the library handles it. Pings from the server are
answered by the library with exactly one pong each; the client never
sends pings of its own (ping_interval=None), because the server's pings
are the liveness signal.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from websockets.asyncio.client import ClientConnection, connect
from websockets.frames import Frame, Opcode

from ntfyclip.client_constants import CLOSE_TIMEOUT, DIAL_TIMEOUT

if TYPE_CHECKING:
    from websockets.client import ClientProtocol
    from websockets.protocol import Event

    from ntfyclip.config import Settings
    from ntfyclip.traffic import TrafficClock

logger = logging.getLogger(__name__)


class TrafficConnection(ClientConnection):
    """ClientConnection that records inbound traffic on a TrafficClock."""

    def __init__(
        self,
        protocol: ClientProtocol,
        *,
        traffic: TrafficClock,
        **kwargs,
    ) -> None:
        self.traffic = traffic
        super().__init__(protocol, **kwargs)

    def process_event(self, event: Event) -> None:
        """Stamp the traffic clock for each frame, then process it."""
        if isinstance(event, Frame):
            self.traffic.touch()
            if event.opcode is Opcode.PING:
                logger.debug("Ping received, answering with pong")
        super().process_event(event)


async def dial(
    settings: Settings,
    traffic: TrafficClock,
    open_timeout: float = DIAL_TIMEOUT,
) -> TrafficConnection:
    """Open the WebSocket for settings.topic.

    The bearer token, if any, is sent once in the opening handshake.

    Args:
        settings: Connection settings.
        traffic: Clock stamped for every inbound frame.
        open_timeout: Bound on TCP connect, TLS and handshake, in seconds.

    Returns:
        The open connection.

    Raises:
        OSError: If the TCP or TLS connection fails.
        TimeoutError: If the handshake does not finish within open_timeout.
        websockets.exceptions.WebSocketException: If the URI is invalid or
            the server rejects the handshake.
    """
    logger.debug("Dialing %s", settings.url)
    return await connect(
        settings.url,
        additional_headers=settings.headers or None,
        open_timeout=open_timeout,
        ping_interval=None,
        close_timeout=CLOSE_TIMEOUT,
        create_connection=functools.partial(TrafficConnection, traffic=traffic),
    )
