"""In-memory message bus for testing and in-process dispatch.

No external dependencies. Handlers are called sequentially in publish order.
Each handler is wrapped in a ``HandlerInvoker`` at subscribe time, so a
signature that cannot be bound is rejected before any message flows.

- Optional error callback for handler failures
- Per-topic/group error counters
- Dead-letter tracking for failed messages
"""

from __future__ import annotations

import logging
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from message_mapping.core.config import MappingConfig
from message_mapping.core.errors import MessageDeliveryError, MessageMappingError
from message_mapping.core.message import Message
from message_mapping.mapping.discovery import ParameterDiscoverer
from message_mapping.mapping.invoker import HandlerInvoker
from message_mapping.observability.logger import reset_message_id, set_message_id

logger = logging.getLogger(__name__)


@dataclass
class MemoryDeadLetter:
    """Record of a handler failure in the memory bus."""

    topic: str
    group: str
    message_id: str
    handler: str
    error: str
    mapping_failure: bool = False
    timestamp: float = field(default_factory=time.monotonic)


class MemoryMessageBus:
    """In-memory message bus. Safe within a single asyncio event loop."""

    def __init__(
        self,
        on_handler_error: Callable[
            [str, str, str, Exception], None
        ] | None = None,
        config: MappingConfig | None = None,
        discoverer: ParameterDiscoverer | None = None,
    ) -> None:
        # topic → list of (group, invoker)
        self._handlers: dict[str, list[tuple[str, HandlerInvoker]]] = defaultdict(list)
        self._history: list[tuple[str, Message]] = []
        self._running = False
        self._stopped = False
        self._on_handler_error = on_handler_error
        self._config = config
        self._discoverer = discoverer

        # Observability
        self._error_counts: dict[str, int] = defaultdict(int)
        self._dead_letters: list[MemoryDeadLetter] = []
        self._messages_processed: int = 0

    async def start(self) -> None:
        self._running = True
        self._stopped = False

    async def stop(self) -> None:
        self._running = False
        self._stopped = True

    @property
    def running(self) -> bool:
        return self._running

    async def publish(self, topic: str, message: Message) -> list[Any]:
        """Deliver *message* to every handler subscribed to the topic.

        Returns the non-None handler results in subscription order.
        """
        if self._stopped:
            raise MessageDeliveryError(
                f"cannot publish to '{topic}': bus is stopped"
            )
        self._history.append((topic, message))
        token = set_message_id(message.message_id)
        try:
            return await self._dispatch(topic, message)
        finally:
            reset_message_id(token)

    async def _dispatch(self, topic: str, message: Message) -> list[Any]:
        results: list[Any] = []
        for group, invoker in self._handlers.get(topic, []):
            try:
                result = await invoker.invoke(message)
                self._messages_processed += 1
            except Exception as exc:
                self._record_failure(topic, group, invoker, message, exc)
                continue
            if result is not None:
                results.append(result)
        return results

    async def subscribe(
        self,
        topic: str,
        group: str,
        handler: Callable[..., Any],
    ) -> HandlerInvoker:
        """Subscribe a handler to a topic with a consumer group name.

        Raises:
            BindingDefinitionError: the handler's signature cannot be bound.
            MessageDeliveryError: the bus has been stopped.
        """
        if self._stopped:
            raise MessageDeliveryError(
                f"cannot subscribe to '{topic}': bus is stopped"
            )
        invoker = HandlerInvoker(handler, self._discoverer, self._config)
        self._handlers[topic].append((group, invoker))
        logger.debug(
            "Subscribed %s to topic=%s group=%s", invoker.name, topic, group,
        )
        return invoker

    def _record_failure(
        self,
        topic: str,
        group: str,
        invoker: HandlerInvoker,
        message: Message,
        exc: Exception,
    ) -> None:
        error_key = f"{topic}/{group}"
        self._error_counts[error_key] += 1
        self._dead_letters.append(
            MemoryDeadLetter(
                topic=topic,
                group=group,
                message_id=message.message_id,
                handler=invoker.name,
                error=str(exc),
                mapping_failure=isinstance(exc, MessageMappingError),
            )
        )
        logger.exception(
            "Handler error on topic=%s group=%s handler=%s",
            topic,
            group,
            invoker.name,
        )

        # Fire external error callback
        if self._on_handler_error is not None:
            try:
                self._on_handler_error(topic, group, message.message_id, exc)
            except Exception:
                logger.warning(
                    "on_handler_error callback failed",
                    exc_info=True,
                )

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    def get_error_counts(self) -> dict[str, int]:
        """Return per-topic/group error counts."""
        return dict(self._error_counts)

    @property
    def dead_letters(self) -> list[MemoryDeadLetter]:
        """Access the dead-letter list (read-only snapshot)."""
        return list(self._dead_letters)

    @property
    def messages_processed(self) -> int:
        """Total messages successfully processed."""
        return self._messages_processed

    def clear_dead_letters(self) -> list[MemoryDeadLetter]:
        """Drain the dead-letter list and return all entries."""
        drained = self._dead_letters[:]
        self._dead_letters.clear()
        return drained

    # ------------------------------------------------------------------
    # Testing helpers
    # ------------------------------------------------------------------

    def get_history(self, topic: str | None = None) -> list[tuple[str, Message]]:
        """Get message history, optionally filtered by topic. For testing."""
        if topic is None:
            return list(self._history)
        return [(t, m) for t, m in self._history if t == topic]

    def clear_history(self) -> None:
        """Clear message history. For testing."""
        self._history.clear()
