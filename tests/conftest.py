"""Shared fixtures for the message-mapping test suite."""

import pytest

from message_mapping.bus.memory_bus import MemoryMessageBus
from message_mapping.core.message import Message, MessageBuilder


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

@pytest.fixture
def text_message() -> Message:
    """String payload with a mix of string and non-string headers."""
    return (
        MessageBuilder.with_payload("hello")
        .set_header("priority", 3)
        .set_header("source", "api")
        .set_header("region", "eu-west")
        .build()
    )


@pytest.fixture
def make_message():
    """Factory: ``make_message(payload, **headers)``."""
    def _make(payload="hello", **headers) -> Message:
        return MessageBuilder.with_payload(payload).copy_headers(headers).build()
    return _make


# ---------------------------------------------------------------------------
# Message bus
# ---------------------------------------------------------------------------

@pytest.fixture
def memory_bus() -> MemoryMessageBus:
    """Return a fresh MemoryMessageBus instance."""
    return MemoryMessageBus()
