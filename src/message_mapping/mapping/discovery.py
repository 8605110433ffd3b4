"""Parameter discovery: names, declared types and markers of a handler."""

from __future__ import annotations

import inspect
import typing
from dataclasses import dataclass
from typing import Any, Annotated, Callable, Protocol, runtime_checkable

from message_mapping.core.errors import BindingDefinitionError

_POSITIONAL = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


@dataclass(frozen=True)
class DiscoveredParameter:
    index: int
    name: str | None
    declared_type: Any  # Annotated metadata already stripped
    annotations: tuple[Any, ...] = ()


@runtime_checkable
class ParameterDiscoverer(Protocol):
    """Supplies per-parameter names and markers for a handler."""

    def discover(self, handler: Callable[..., Any]) -> list[DiscoveredParameter]: ...


class SignatureParameterDiscoverer:
    """Discovers parameters through ``inspect.signature`` and type hints.

    Bound methods are inspected without ``self``. Keyword-only and
    variadic parameters cannot be filled from a positional argument list
    and are rejected.
    """

    def discover(self, handler: Callable[..., Any]) -> list[DiscoveredParameter]:
        try:
            signature = inspect.signature(handler)
        except (TypeError, ValueError) as exc:
            raise BindingDefinitionError(
                f"cannot inspect handler signature: {exc}", handler=handler,
            ) from exc

        hints = _type_hints(handler, signature)
        discovered: list[DiscoveredParameter] = []
        for index, param in enumerate(signature.parameters.values()):
            if param.kind not in _POSITIONAL:
                raise BindingDefinitionError(
                    f"{param.kind.description} parameters cannot be bound positionally",
                    handler=handler,
                    index=index,
                    parameter=param.name,
                )
            raw = hints.get(param.name, param.annotation)
            declared_type, markers = split_annotated(raw)
            discovered.append(
                DiscoveredParameter(
                    index=index,
                    name=param.name,
                    declared_type=declared_type,
                    annotations=markers,
                )
            )
        return discovered


def split_annotated(annotation: Any) -> tuple[Any, tuple[Any, ...]]:
    """Split ``Annotated[T, *meta]`` into ``(T, meta)``.

    A missing annotation is reported as ``Any``.
    """
    if annotation is inspect.Parameter.empty:
        return Any, ()
    if typing.get_origin(annotation) is Annotated:
        base, *meta = typing.get_args(annotation)
        return base, tuple(meta)
    return annotation, ()


def _type_hints(
    handler: Callable[..., Any], signature: inspect.Signature
) -> dict[str, Any]:
    target = inspect.unwrap(handler)
    if inspect.isclass(target):
        target = target.__init__
    elif not (inspect.isfunction(target) or inspect.ismethod(target)):
        # Callable instances carry their hints on __call__.
        target = getattr(type(target), "__call__", target)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError) as exc:
        unresolved = [
            name for name, param in signature.parameters.items()
            if isinstance(param.annotation, str)
        ]
        if not unresolved:
            # Nothing is postponed; the signature already holds real types.
            return {}
        # A string annotation hides its Header/Headers markers.
        raise BindingDefinitionError(
            f"cannot resolve type hints of parameter(s) {', '.join(unresolved)}: {exc}",
            handler=handler,
            parameter=unresolved[0],
        ) from exc
