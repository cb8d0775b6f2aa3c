#!/usr/bin/env python3
"""Pytest fixtures and helpers for ntfyclip tests.

Provides settings fixtures, a scripted fake WebSocket connection for
session unit tests, and a local websockets server for integration tests.
"""

import asyncio
import json
import socket
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import pytest
from websockets.asyncio.server import ServerConnection, serve
from websockets.frames import Frame, Opcode

from ntfyclip.config import Settings
from ntfyclip.dispatch import DeliveryDispatcher

PROXY_VARIABLES = (
    "http_proxy",
    "https_proxy",
    "all_proxy",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
)


def envelope(message: str | None = "hello", topic: str = "alerts", event: str = "message") -> str:
    """Encode an ntfy envelope as the server would send it."""
    document = {"id": "sPs71M8A2T", "time": 1643935928, "event": event, "topic": topic}
    if message is not None:
        document["message"] = message
    return json.dumps(document)


def unused_port() -> int:
    """Return a local TCP port nothing is listening on."""
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


class RecordingDeliver:
    """Delivery coroutine that records payloads instead of running commands."""

    def __init__(self) -> None:
        self.payloads: list[bytes] = []

    async def __call__(self, payload: bytes) -> bool:
        self.payloads.append(payload)
        return True


class FakeConnection:
    """Scripted stand-in for a websockets ClientConnection.

    recv() returns (or raises) the scripted items in order, stamping the
    traffic clock for each one as the real connection does for every
    frame. Once the script is exhausted recv() blocks until push() adds
    another item.
    """

    def __init__(self, script: list) -> None:
        self.script = list(script)
        self.arrived = asyncio.Event()
        self.traffic = None
        self.closed_with: list[tuple[int, str]] = []

    async def recv(self):
        while not self.script:
            self.arrived.clear()
            await self.arrived.wait()
        item = self.script.pop(0)
        if self.traffic is not None:
            self.traffic.touch()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self, code: int = 1000, reason: str = "") -> None:
        self.closed_with.append((code, reason))

    def push(self, item) -> None:
        """Deliver item to a pending or future recv()."""
        self.script.append(item)
        self.arrived.set()


def fake_dialer(connection: FakeConnection):
    """Build a dialer returning connection, wired to the session's clock."""

    async def dialer(settings, traffic):
        connection.traffic = traffic
        return connection

    return dialer


class RecordingServerConnection(ServerConnection):
    """Server-side connection that records the control frames it receives."""

    def __init__(self, *args, **kwargs) -> None:
        self.control_frames: list[Opcode] = []
        super().__init__(*args, **kwargs)

    def process_event(self, event) -> None:
        if isinstance(event, Frame) and event.opcode in (Opcode.PING, Opcode.PONG):
            self.control_frames.append(event.opcode)
        super().process_event(event)


@asynccontextmanager
async def ntfy_server(handler) -> AsyncIterator[int]:
    """Run handler as a local WebSocket server and yield its port.

    The server never pings on its own; handlers receive a
    RecordingServerConnection.
    """
    async with serve(
        handler,
        "127.0.0.1",
        0,
        ping_interval=None,
        create_connection=RecordingServerConnection,
    ) as server:
        yield server.sockets[0].getsockname()[1]


@pytest.fixture
def settings() -> Settings:
    """Settings for topic "alerts" with a short idle timeout."""
    return Settings(topic="alerts", server="127.0.0.1", secure=False, idle_timeout=0.3)


@pytest.fixture
def recorder() -> RecordingDeliver:
    return RecordingDeliver()


@pytest.fixture
def dispatcher(recorder: RecordingDeliver) -> DeliveryDispatcher:
    """Dispatcher whose deliveries are recorded, not executed."""
    return DeliveryDispatcher(deliver=recorder)


@pytest.fixture
def no_proxy(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure local test connections are not routed through a proxy."""
    for name in PROXY_VARIABLES:
        monkeypatch.delenv(name, raising=False)
