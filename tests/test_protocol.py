#!/usr/bin/env python3
"""
Unit tests for ntfy envelope decoding.
"""
import json

import pytest

from conftest import envelope
from ntfyclip.protocol import (
    DecodeError,
    Envelope,
    ProtocolError,
    decode_frame,
    parse_envelope,
)


def test_parse_envelope_ignores_unknown_fields() -> None:
    """Test fields the client does not know about are ignored."""
    raw = json.dumps(
        {"id": "x", "time": 1, "expires": 2, "event": "message", "topic": "alerts",
         "message": "hi", "priority": 4, "tags": ["warning"]}
    )

    assert parse_envelope(raw) == Envelope(event="message", topic="alerts", message="hi")


def test_parse_envelope_without_message() -> None:
    """Test events without a body decode with message None."""
    assert parse_envelope(envelope(None, event="open")).message is None


def test_decode_matching_message() -> None:
    """Test a message event for the subscribed topic yields its text."""
    assert decode_frame(envelope("hello"), "alerts") == "hello"


@pytest.mark.parametrize(
    "text",
    ["héllo wörld", "日本語のテキスト", "emoji 🎉🚀", "line one\nline two\ttab", "  padded  "],
)
def test_decode_preserves_text_exactly(text: str) -> None:
    """Test message text is returned unchanged, including Unicode."""
    assert decode_frame(envelope(text), "alerts") == text


def test_decode_accepts_bytes() -> None:
    """Test binary frames carrying UTF-8 JSON are decoded."""
    assert decode_frame(envelope("bytes ✓").encode("utf-8"), "alerts") == "bytes ✓"


def test_decode_other_topic_returns_none() -> None:
    """Test messages for another topic are not delivered."""
    assert decode_frame(envelope("hello", topic="other"), "alerts") is None


@pytest.mark.parametrize("event", ["open", "keepalive", "poll_request", "message_delete"])
def test_decode_non_message_event_returns_none(event: str) -> None:
    """Test events other than "message" are not delivered."""
    assert decode_frame(envelope("hello", event=event), "alerts") is None


def test_decode_message_event_without_body_returns_none() -> None:
    """Test a matching message event without text is a no-op."""
    assert decode_frame(envelope(None), "alerts") is None


def test_decode_empty_message_is_delivered() -> None:
    """Test an empty string is a present message, not a missing one."""
    assert decode_frame(envelope(""), "alerts") == ""


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "{\"event\": \"message\"",
        "",
        b"\x80\x81{}",
        "[1, 2, 3]",
        "\"just a string\"",
        "{\"event\": 1, \"topic\": \"alerts\"}",
        "{\"event\": \"message\", \"topic\": \"alerts\", \"message\": {\"nested\": true}}",
    ],
)
def test_decode_malformed_raises_decode_error(raw) -> None:
    """Test malformed frames raise DecodeError."""
    with pytest.raises(DecodeError):
        decode_frame(raw, "alerts")


def test_decode_error_is_protocol_error() -> None:
    """Test DecodeError can be handled as a ProtocolError."""
    assert issubclass(DecodeError, ProtocolError)


def test_missing_topic_field_never_matches() -> None:
    """Test an envelope without topic is ignored rather than delivered."""
    assert decode_frame("{\"event\": \"message\", \"message\": \"x\"}", "alerts") is None
