"""Custom exception hierarchy for message mapping."""

from __future__ import annotations

from typing import Any


class MessagingError(Exception):
    """Base exception for all messaging errors."""


# --- Registration ---
class BindingDefinitionError(MessagingError):
    """A handler signature cannot be bound to messages.

    Raised once, when the handler is registered.
    """

    def __init__(
        self,
        reason: str,
        *,
        handler: Any = None,
        index: int | None = None,
        parameter: str | None = None,
    ):
        self.reason = reason
        self.handler = handler
        self.index = index
        self.parameter = parameter
        super().__init__(_describe(reason, handler, index, "parameter", parameter))


# --- Per-invocation ---
class MessageMappingError(MessagingError):
    """Conversion between a message and handler arguments failed."""

    def __init__(
        self,
        reason: str,
        *,
        handler: Any = None,
        index: int | None = None,
        key: str | None = None,
        message: Any = None,
    ):
        self.reason = reason
        self.handler = handler
        self.index = index
        self.key = key
        self.message = message
        super().__init__(_describe(reason, handler, index, "key", key))


class RequiredHeaderMissingError(MessageMappingError):
    """A required header has no value."""


class NullPayloadError(MessageMappingError):
    """Payload is None where a payload is mandatory."""


class MissingPayloadError(MessageMappingError):
    """No argument supplied either a Message or a payload."""


class ArityMismatchError(MessageMappingError):
    """Argument count does not match the handler's parameter count."""


class NonStringHeaderKeyError(MessageMappingError):
    """A header map contains a key that is not a string."""


class MultipleMessageOrPayloadError(MessageMappingError):
    """More than one argument claimed the message/payload role."""


class PayloadTypeMismatchError(MessageMappingError):
    """Payload does not fit the declared parameter type (strict mode only)."""


# --- Dispatch ---
class MessageDeliveryError(MessagingError):
    """Bus could not accept a subscription or a message."""


def _describe(
    reason: str,
    handler: Any,
    index: int | None,
    label: str,
    detail: str | None,
) -> str:
    parts = [reason]
    if handler is not None:
        parts.append(f"handler={_handler_name(handler)}")
    if index is not None:
        parts.append(f"index={index}")
    if detail is not None:
        parts.append(f"{label}={detail!r}")
    if len(parts) == 1:
        return reason
    return f"{parts[0]} [{', '.join(parts[1:])}]"


def _handler_name(handler: Any) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)
