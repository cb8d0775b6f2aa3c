#!/usr/bin/env python3
"""Per-session state.

Each Session owns one SessionState; nothing in it outlives the session or
is shared with the next one.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ntfyclip.traffic import TrafficClock


class SessionPhase(enum.Enum):
    """Lifecycle of one session. Transitions only move forward."""

    NEW = "new"
    DIALING = "dialing"
    AUTHENTICATED = "authenticated"
    READING = "reading"
    TERMINATED = "terminated"


class TerminationReason(enum.Enum):
    """Why a session ended. Every reason leads to a restart."""

    NORMAL_CLOSE = "normal close"
    IDLE_TIMEOUT = "idle timeout"
    TRANSPORT_ERROR = "transport error"
    # Malformed frames are dropped, so no session currently ends this way.
    PROTOCOL_ERROR = "protocol error"
    DIAL_ERROR = "dial error"


@dataclass
class SessionState:
    """State for one connection.

    Attributes:
        traffic: Last-traffic clock shared by the read loop and watchdog.
        phase: Current lifecycle phase.
        reason: Termination reason once phase is TERMINATED.
        detail: Error text accompanying the reason, if any.
        delivered: Number of messages dispatched to the clipboard.
        dropped: Number of frames dropped as malformed.
    """

    traffic: TrafficClock = field(default_factory=TrafficClock)
    phase: SessionPhase = SessionPhase.NEW
    reason: TerminationReason | None = None
    detail: str = ""
    delivered: int = 0
    dropped: int = 0
