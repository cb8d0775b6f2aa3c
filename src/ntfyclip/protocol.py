#!/usr/bin/env python3
"""
ntfy WebSocket message envelopes.

Every text frame the ntfy server sends on /<topic>/ws is a JSON object
with at least an "event" discriminator ("open", "keepalive", "message",
...) and the "topic" it belongs to. Message events additionally carry the
notification body in "message". Attachments and other media arrive as
message events without a "message" field, which this client ignores.

Example:
    {"id":"sPs71M8A2T","time":1643935928,"event":"message",
     "topic":"alerts","message":"hello"}

Fields not listed in Envelope are ignored so that new server fields never
break decoding.
"""
from __future__ import annotations

import json
from dataclasses import dataclass

# Event name of payload-bearing envelopes.
MESSAGE_EVENT: str = "message"


class ProtocolError(Exception):
    """
    Exception raised for malformed frame content.

    A ProtocolError only ever drops the offending frame; it never ends
    the connection.
    """

    pass


class DecodeError(ProtocolError):
    """Raised when a frame is not a well-formed envelope document."""

    pass


@dataclass(frozen=True)
class Envelope:
    """
    One decoded ntfy event.

    Attributes:
        event: Event type ("message", "open", "keepalive", ...).
        topic: Topic the event was published to.
        message: Text payload, or None for events without one.
    """

    event: str
    topic: str
    message: str | None = None


def parse_envelope(raw: str | bytes) -> Envelope:
    """
    Parse a raw frame into an Envelope.

    Args:
        raw: Frame payload, text or UTF-8 bytes.

    Returns:
        The decoded Envelope.

    Raises:
        DecodeError: If the frame is not a JSON object or a known field
            has the wrong type. Missing fields decode as empty.
    """
    try:
        document = json.loads(raw)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"Invalid JSON frame: {e}") from e
    if not isinstance(document, dict):
        raise DecodeError(f"Expected a JSON object, got {type(document).__name__}")

    event = document.get("event", "")
    topic = document.get("topic", "")
    if not isinstance(event, str) or not isinstance(topic, str):
        raise DecodeError("Envelope fields 'event' and 'topic' must be strings")

    message = document.get("message")
    if message is not None and not isinstance(message, str):
        raise DecodeError(f"Expected string 'message', got {type(message).__name__}")
    return Envelope(event=event, topic=topic, message=message)


def decode_frame(raw: str | bytes, topic: str) -> str | None:
    """
    Extract the text payload of a frame addressed to topic.

    Args:
        raw: Frame payload, text or UTF-8 bytes.
        topic: The subscribed topic.

    Returns:
        The message text when the envelope is a "message" event for
        topic and carries a message; None otherwise.

    Raises:
        DecodeError: If the frame is not a well-formed envelope.
    """
    envelope = parse_envelope(raw)
    if envelope.topic != topic or envelope.event != MESSAGE_EVENT:
        return None
    return envelope.message
