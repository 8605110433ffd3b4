"""Invoke a handler with arguments mapped from a message."""

from __future__ import annotations

import inspect
from typing import Any, Callable

from message_mapping.core.config import MappingConfig
from message_mapping.core.message import Message

from .discovery import ParameterDiscoverer
from .mapper import MethodParameterMessageMapper


class HandlerInvoker:
    """A handler paired with the mapper built for its signature.

    Construction analyzes the signature, so definition errors surface when
    the handler is registered rather than on the first message.
    """

    def __init__(
        self,
        handler: Callable[..., Any],
        discoverer: ParameterDiscoverer | None = None,
        config: MappingConfig | None = None,
    ) -> None:
        self.mapper = MethodParameterMessageMapper(handler, discoverer, config)
        self.handler = handler

    @property
    def name(self) -> str:
        return getattr(self.handler, "__qualname__", type(self.handler).__name__)

    async def invoke(self, message: Message) -> Any:
        """Map *message* to arguments and call the handler.

        Mapping errors and handler exceptions propagate to the caller.
        """
        args = self.mapper.from_message(message)
        result = self.handler(*args)
        if inspect.isawaitable(result):
            result = await result
        return result
