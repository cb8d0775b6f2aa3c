#!/usr/bin/env python3
"""Runtime settings for ntfyclip.

Settings are read once at startup (from the environment or the command
line) into an immutable Settings record which is then passed by reference
to every session the supervisor creates.

Recognized environment variables:
    SERVER   ntfy server host name (default: ntfy.sh)
    SCHEME   ws or wss (default: wss)
    TOPIC    topic to subscribe to (required)
    TOKEN    optional access token sent as a bearer credential
    TIMEOUT  idle timeout in seconds (default: 120)
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_SERVER: str = "ntfy.sh"
DEFAULT_SCHEME: str = "wss"
DEFAULT_IDLE_TIMEOUT: float = 120.0

SCHEMES: tuple[str, ...] = ("ws", "wss")


class ConfigError(ValueError):
    """Raised when the settings cannot be built. Fatal at startup."""


@dataclass(frozen=True)
class Settings:
    """Immutable connection settings.

    Attributes:
        topic: The ntfy topic to subscribe to.
        server: Server host name, optionally with a port.
        secure: True for wss://, False for ws://.
        token: Bearer token for the handshake, or None.
        idle_timeout: Seconds without any inbound frame before the
            connection is considered dead.
    """

    topic: str
    server: str = DEFAULT_SERVER
    secure: bool = True
    token: str | None = None
    idle_timeout: float = DEFAULT_IDLE_TIMEOUT

    @property
    def scheme(self) -> str:
        return "wss" if self.secure else "ws"

    @property
    def url(self) -> str:
        """WebSocket endpoint for the subscribed topic."""
        return f"{self.scheme}://{self.server}/{self.topic}/ws"

    @property
    def headers(self) -> dict[str, str]:
        """Extra handshake headers (the bearer credential, if any)."""
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"Settings(topic={self.topic!r}, server={self.server!r}, "
            f"secure={self.secure!r}, token={token!r}, "
            f"idle_timeout={self.idle_timeout!r})"
        )


def parse_timeout(raw: str | int | float | None) -> float:
    """Parse an idle timeout in seconds.

    Missing, unparsable and non-positive values fall back to
    DEFAULT_IDLE_TIMEOUT.
    """
    if raw is None or raw == "":
        return DEFAULT_IDLE_TIMEOUT
    try:
        seconds = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_IDLE_TIMEOUT
    if seconds <= 0:
        return DEFAULT_IDLE_TIMEOUT
    return float(seconds)


def load_settings(
    topic: str | None,
    server: str | None = None,
    scheme: str | None = None,
    token: str | None = None,
    timeout: str | int | float | None = None,
) -> Settings:
    """Build Settings from raw string values.

    Args:
        topic: Topic name. Required.
        server: Server host; empty selects DEFAULT_SERVER.
        scheme: "ws" or "wss"; empty selects DEFAULT_SCHEME.
        token: Access token; empty means no authentication.
        timeout: Idle timeout in seconds, see parse_timeout().

    Returns:
        The immutable Settings record.

    Raises:
        ConfigError: If the topic is missing or the scheme is unknown.
    """
    if not topic:
        raise ConfigError("TOPIC environment variable is required")
    if "/" in topic:
        raise ConfigError(f"Invalid topic {topic!r}: must not contain '/'")

    scheme = (scheme or DEFAULT_SCHEME).lower()
    if scheme not in SCHEMES:
        raise ConfigError(f"Invalid scheme {scheme!r}: expected ws or wss")

    return Settings(
        topic=topic,
        server=server or DEFAULT_SERVER,
        secure=scheme == "wss",
        token=token or None,
        idle_timeout=parse_timeout(timeout),
    )


def settings_from_env(environ: Mapping[str, str]) -> Settings:
    """Build Settings from an environment mapping such as os.environ."""
    return load_settings(
        topic=environ.get("TOPIC"),
        server=environ.get("SERVER"),
        scheme=environ.get("SCHEME"),
        token=environ.get("TOKEN"),
        timeout=environ.get("TIMEOUT"),
    )
