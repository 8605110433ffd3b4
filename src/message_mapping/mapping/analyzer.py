"""Signature analysis: one ParameterBinding per handler parameter.

Runs once per handler, when the handler is registered. The result is a
tuple and never changes afterwards, so any number of concurrent
conversions may read it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from message_mapping.core.config import MappingConfig
from message_mapping.core.enums import BindingKind
from message_mapping.core.errors import BindingDefinitionError

from .annotations import Header, Headers
from .discovery import DiscoveredParameter, ParameterDiscoverer, SignatureParameterDiscoverer
from .typecheck import accepts

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterBinding:
    """The role a single handler parameter plays during conversion."""

    index: int
    kind: BindingKind
    declared_type: Any = Any
    name: str | None = None
    key: str | None = None  # HEADER_VALUE only
    required: bool = False  # HEADER_VALUE only


def analyze_signature(
    handler: Callable[..., Any],
    discoverer: ParameterDiscoverer | None = None,
    config: MappingConfig | None = None,
) -> tuple[ParameterBinding, ...]:
    """Classify every parameter of *handler*.

    Raises:
        BindingDefinitionError: more than one message-or-payload parameter,
            a header with no resolvable name, or a ``Headers`` parameter
            whose type cannot hold a dict.
    """
    discoverer = discoverer or SignatureParameterDiscoverer()
    config = config or MappingConfig()

    bindings: list[ParameterBinding] = []
    slot_index: int | None = None
    for param in discoverer.discover(handler):
        marker = _last_marker(param.annotations)
        if isinstance(marker, Header):
            bindings.append(_header_binding(handler, param, marker, config))
        elif isinstance(marker, Headers):
            if not accepts(param.declared_type, dict):
                raise BindingDefinitionError(
                    "parameter marked Headers must accept a dict",
                    handler=handler,
                    index=param.index,
                    parameter=param.name,
                )
            bindings.append(
                ParameterBinding(
                    index=param.index,
                    kind=BindingKind.HEADER_MAP,
                    declared_type=param.declared_type,
                    name=param.name,
                )
            )
        else:
            if slot_index is not None:
                raise BindingDefinitionError(
                    "only one Message or payload parameter is allowed "
                    f"(already bound at index {slot_index})",
                    handler=handler,
                    index=param.index,
                    parameter=param.name,
                )
            slot_index = param.index
            bindings.append(
                ParameterBinding(
                    index=param.index,
                    kind=BindingKind.MESSAGE_OR_PAYLOAD,
                    declared_type=param.declared_type,
                    name=param.name,
                )
            )

    logger.debug(
        "Analyzed handler %s: %s",
        getattr(handler, "__qualname__", handler),
        [b.kind.value for b in bindings],
    )
    return tuple(bindings)


def _last_marker(annotations: tuple[Any, ...]) -> Header | Headers | None:
    found = None
    for item in annotations:
        if isinstance(item, type) and item in (Header, Headers):
            item = item()  # bare ``Annotated[str, Header]``
        if isinstance(item, (Header, Headers)):
            found = item
    return found


def _header_binding(
    handler: Callable[..., Any],
    param: DiscoveredParameter,
    marker: Header,
    config: MappingConfig,
) -> ParameterBinding:
    key = marker.name
    if not key.strip():
        if param.name is None:
            raise BindingDefinitionError(
                "no header name specified and parameter name not available",
                handler=handler,
                index=param.index,
            )
        key = param.name
    required = (
        config.header_required_default if marker.required is None else marker.required
    )
    return ParameterBinding(
        index=param.index,
        kind=BindingKind.HEADER_VALUE,
        declared_type=param.declared_type,
        name=param.name,
        key=key,
        required=required,
    )
