"""Enumerations used across message mapping."""

from enum import Enum


class BindingKind(str, Enum):
    HEADER_VALUE = "header_value"
    HEADER_MAP = "header_map"
    # The single parameter that receives the Message itself or its payload.
    MESSAGE_OR_PAYLOAD = "message_or_payload"


class SlotResolution(str, Enum):
    """How a message-or-payload parameter was filled for one call."""

    MESSAGE = "message"
    PAYLOAD = "payload"
    HEADERS = "headers"
    STRING_HEADERS = "string_headers"
    FALLBACK_PAYLOAD = "fallback_payload"
