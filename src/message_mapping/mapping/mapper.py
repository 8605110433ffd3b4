"""Maps messages to handler arguments and handler arguments to messages.

Parameters are matched against the message payload and its headers:

- ``Annotated[T, Header("name")]`` receives that header's value. Without a
  name the parameter's own name is used.
- ``Annotated[T, Headers()]`` receives all headers as a dict.
- The one remaining parameter receives the Message itself when its type
  accepts a Message, otherwise the payload. A parameter typed as a plain
  mapping (or as ``Properties``) that cannot hold the payload receives the
  headers (or only the string-valued headers) instead.

In the other direction ``to_message`` folds header arguments back into
the headers of the outbound message.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from message_mapping.core.config import MappingConfig
from message_mapping.core.enums import BindingKind, SlotResolution
from message_mapping.core.errors import (
    ArityMismatchError,
    MessageMappingError,
    MissingPayloadError,
    MultipleMessageOrPayloadError,
    NonStringHeaderKeyError,
    NullPayloadError,
    PayloadTypeMismatchError,
    RequiredHeaderMissingError,
)
from message_mapping.core.message import Message, MessageBuilder

from .analyzer import ParameterBinding, analyze_signature
from .discovery import ParameterDiscoverer
from .typecheck import accepts, is_generic_mapping, is_properties

logger = logging.getLogger(__name__)


class MethodParameterMessageMapper:
    """Bidirectional mapper for one handler signature.

    The signature is analyzed in the constructor; ``from_message`` and
    ``to_message`` only read the resulting bindings.
    """

    def __init__(
        self,
        handler: Callable[..., Any],
        discoverer: ParameterDiscoverer | None = None,
        config: MappingConfig | None = None,
    ) -> None:
        if handler is None:
            raise TypeError("handler must not be None")
        self._handler = handler
        self._config = config or MappingConfig()
        self._bindings = analyze_signature(handler, discoverer, self._config)

    @property
    def handler(self) -> Callable[..., Any]:
        return self._handler

    @property
    def bindings(self) -> tuple[ParameterBinding, ...]:
        return self._bindings

    # ------------------------------------------------------------------
    # Message -> arguments
    # ------------------------------------------------------------------

    def from_message(self, message: Message | None) -> list[Any] | None:
        if message is None:
            return None
        if message.payload is None:
            raise NullPayloadError(
                "message payload must not be None",
                handler=self._handler,
                message=message,
            )

        args: list[Any] = []
        for binding in self._bindings:
            if binding.kind is BindingKind.HEADER_VALUE:
                args.append(self._header_value(binding, message))
            elif binding.kind is BindingKind.HEADER_MAP:
                args.append(message.headers.to_dict())
            else:
                resolution, value = self._resolve_slot(binding, message)
                logger.debug(
                    "Parameter %d of %s bound as %s",
                    binding.index,
                    getattr(self._handler, "__qualname__", self._handler),
                    resolution.value,
                )
                args.append(value)
        return args

    def _header_value(self, binding: ParameterBinding, message: Message) -> Any:
        value = message.headers.get(binding.key)
        if value is None and binding.required:
            raise RequiredHeaderMissingError(
                f"required header '{binding.key}' not available",
                handler=self._handler,
                index=binding.index,
                key=binding.key,
                message=message,
            )
        return value

    def _resolve_slot(
        self, binding: ParameterBinding, message: Message
    ) -> tuple[SlotResolution, Any]:
        declared = binding.declared_type
        if accepts(declared, type(message)):
            return SlotResolution.MESSAGE, message
        if accepts(declared, type(message.payload)):
            return SlotResolution.PAYLOAD, message.payload
        if is_generic_mapping(declared):
            return SlotResolution.HEADERS, message.headers.to_dict()
        if is_properties(declared):
            return SlotResolution.STRING_HEADERS, message.headers.string_values()
        if self._config.strict_payload_types:
            raise PayloadTypeMismatchError(
                f"payload of type {type(message.payload).__name__} "
                f"does not match declared type {declared!r}",
                handler=self._handler,
                index=binding.index,
                key=binding.name,
                message=message,
            )
        return SlotResolution.FALLBACK_PAYLOAD, message.payload

    # ------------------------------------------------------------------
    # Arguments -> message
    # ------------------------------------------------------------------

    def to_message(self, args: Sequence[Any]) -> Message:
        expected = len(self._bindings)
        if not args or len(args) != expected:
            raise ArityMismatchError(
                f"wrong number of arguments: expected {expected}, "
                f"received {len(args) if args is not None else 0}",
                handler=self._handler,
            )

        message: Message | None = None
        payload: Any = None
        headers: dict[str, Any] = {}
        for binding, value in zip(self._bindings, args):
            if binding.kind is BindingKind.HEADER_VALUE:
                if value is not None:
                    headers[binding.key] = value
                elif binding.required:
                    raise RequiredHeaderMissingError(
                        f"header '{binding.key}' is required",
                        handler=self._handler,
                        index=binding.index,
                        key=binding.key,
                    )
            elif binding.kind is BindingKind.HEADER_MAP:
                if value is not None:
                    self._collect_header_map(binding, value, headers)
            elif isinstance(value, Message):
                if message is not None:
                    raise MultipleMessageOrPayloadError(
                        "more than one Message argument supplied",
                        handler=self._handler,
                        index=binding.index,
                    )
                message = value
            else:
                if value is None:
                    raise NullPayloadError(
                        "payload object must not be None",
                        handler=self._handler,
                        index=binding.index,
                        key=binding.name,
                    )
                payload = value

        if message is not None:
            if not headers:
                return message
            return MessageBuilder.from_message(message).copy_headers_if_absent(headers).build()
        if payload is None:
            raise MissingPayloadError(
                "no parameter available for Message or payload",
                handler=self._handler,
            )
        return MessageBuilder.with_payload(payload).copy_headers(headers).build()

    def _collect_header_map(
        self, binding: ParameterBinding, value: Any, headers: dict[str, Any]
    ) -> None:
        if not isinstance(value, Mapping):
            raise MessageMappingError(
                f"Headers argument must be a mapping, got {type(value).__name__}",
                handler=self._handler,
                index=binding.index,
                key=binding.name,
            )
        for key, item in value.items():
            if not isinstance(key, str):
                raise NonStringHeaderKeyError(
                    "mapping passed as Headers must have str keys",
                    handler=self._handler,
                    index=binding.index,
                    key=repr(key),
                )
            # None entries add nothing, same as an absent optional header.
            if item is not None:
                headers[key] = item
