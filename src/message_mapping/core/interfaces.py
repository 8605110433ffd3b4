"""Protocol interfaces for message mapping.

Module boundaries are defined here as Protocol classes so that mappers
and buses can be swapped without changing callers.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

from .message import Message

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

@runtime_checkable
class MessageMapper(Protocol[T]):
    """Converts between ``T`` and ``Message``."""

    def to_message(self, obj: T) -> Message: ...

    def from_message(self, message: Message | None) -> T | None: ...


# ---------------------------------------------------------------------------
# Message Bus
# ---------------------------------------------------------------------------

@runtime_checkable
class IMessageBus(Protocol):
    """Publish/subscribe message bus."""

    async def publish(self, topic: str, message: Message) -> Any: ...

    async def subscribe(
        self,
        topic: str,
        group: str,
        handler: Callable[..., Any],
    ) -> Any: ...

    async def start(self) -> None: ...
    async def stop(self) -> None: ...
