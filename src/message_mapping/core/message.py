"""Message model: immutable payload plus a read-only header map.

``Message`` is a frozen Pydantic model like the rest of the event schemas.
Identity (``message_id``) and creation time live on the model itself, not in
the header map, so headers only ever hold what producers put there.
``MessageBuilder`` is the only supported way to derive a new message from
an existing one.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import NonStringHeaderKeyError, NullPayloadError


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class MessageHeaders(Mapping[str, Any]):
    """Read-only, string-keyed header map."""

    __slots__ = ("_headers",)

    def __init__(self, headers: Mapping[Any, Any] | None = None) -> None:
        data: dict[str, Any] = {}
        for key, value in (headers or {}).items():
            if not isinstance(key, str):
                raise NonStringHeaderKeyError(
                    f"header keys must be strings, got {type(key).__name__}",
                    key=repr(key),
                )
            data[key] = value
        self._headers = data

    def __getitem__(self, key: str) -> Any:
        return self._headers[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._headers)

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"MessageHeaders({self._headers!r})"

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable copy of all headers."""
        return dict(self._headers)

    def string_values(self) -> dict[str, str]:
        """Return a copy holding only the headers whose value is a ``str``."""
        return {k: v for k, v in self._headers.items() if isinstance(v, str)}


class Message(BaseModel):
    """An immutable payload paired with its headers."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    payload: Any
    headers: MessageHeaders = Field(default_factory=MessageHeaders)
    message_id: str = Field(default_factory=_uuid)
    timestamp: datetime = Field(default_factory=_now)

    @field_validator("payload")
    @classmethod
    def _payload_present(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("message payload must not be None")
        return value

    @field_validator("headers", mode="before")
    @classmethod
    def _wrap_headers(cls, value: Any) -> Any:
        if value is None:
            return MessageHeaders()
        if isinstance(value, Mapping) and not isinstance(value, MessageHeaders):
            return MessageHeaders(value)
        return value


class MessageBuilder:
    """Builds new ``Message`` instances.

    Usage::

        msg = MessageBuilder.with_payload(order).set_header("priority", 3).build()
        copy = MessageBuilder.from_message(msg).copy_headers_if_absent(extra).build()
    """

    def __init__(self, payload: Any, headers: Mapping[str, Any] | None = None) -> None:
        if payload is None:
            raise NullPayloadError("payload must not be None")
        self._payload = payload
        self._headers: dict[str, Any] = dict(headers or {})

    @classmethod
    def with_payload(cls, payload: Any) -> MessageBuilder:
        return cls(payload)

    @classmethod
    def from_message(cls, message: Message) -> MessageBuilder:
        """Start from an existing message's payload and headers."""
        return cls(message.payload, message.headers)

    def set_header(self, key: str, value: Any) -> MessageBuilder:
        _check_key(key)
        if value is None:
            self._headers.pop(key, None)
        else:
            self._headers[key] = value
        return self

    def copy_headers(self, headers: Mapping[str, Any] | None) -> MessageBuilder:
        """Copy all entries, overwriting existing headers."""
        for key, value in (headers or {}).items():
            self.set_header(key, value)
        return self

    def copy_headers_if_absent(self, headers: Mapping[str, Any] | None) -> MessageBuilder:
        """Copy only the entries whose key is not already present."""
        for key, value in (headers or {}).items():
            _check_key(key)
            if key not in self._headers:
                self.set_header(key, value)
        return self

    def build(self) -> Message:
        return Message(payload=self._payload, headers=MessageHeaders(self._headers))


def _check_key(key: Any) -> None:
    if not isinstance(key, str):
        raise NonStringHeaderKeyError(
            f"header keys must be strings, got {type(key).__name__}",
            key=repr(key),
        )
