"""Messaging gateway: publish a message built from plain call arguments.

The gateway is described by a *signature* callable whose body is never
run. Its parameters say which argument becomes the payload and which
become headers::

    def place_order(order: Order, priority: Annotated[int, Header()]) -> None: ...

    gateway = MessagingGateway(bus, "orders", place_order)
    await gateway.send(order, 3)
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from message_mapping.core.config import MappingConfig
from message_mapping.core.interfaces import IMessageBus
from message_mapping.core.message import Message
from message_mapping.mapping.discovery import ParameterDiscoverer
from message_mapping.mapping.mapper import MethodParameterMessageMapper

logger = logging.getLogger(__name__)


class MessagingGateway:
    def __init__(
        self,
        bus: IMessageBus,
        topic: str,
        signature: Callable[..., Any],
        discoverer: ParameterDiscoverer | None = None,
        config: MappingConfig | None = None,
    ) -> None:
        self._bus = bus
        self._topic = topic
        self._mapper = MethodParameterMessageMapper(signature, discoverer, config)

    @property
    def topic(self) -> str:
        return self._topic

    def build(self, *args: Any) -> Message:
        """Compose the outbound message without publishing it."""
        return self._mapper.to_message(args)

    async def send(self, *args: Any) -> Message:
        """Build a message from *args*, publish it, and return it."""
        message = self.build(*args)
        await self._bus.publish(self._topic, message)
        logger.debug(
            "Gateway sent message_id=%s to topic=%s", message.message_id, self._topic,
        )
        return message
