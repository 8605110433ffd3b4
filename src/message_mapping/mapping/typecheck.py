"""Declared-type checks used to resolve the message-or-payload parameter."""

from __future__ import annotations

import collections.abc
import types
import typing
from typing import Any, TypeVar, Union

_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)
_OPEN_VALUE_TYPES = (Any, object)


def accepts(declared: Any, candidate: type) -> bool:
    """True if a value of type ``candidate`` may be passed as ``declared``.

    Handles ``Any``/``object``, unions, parameterized generics (checked by
    origin only) and ``TypeVar`` bounds/constraints.
    """
    if declared in _OPEN_VALUE_TYPES:
        return True
    if isinstance(declared, TypeVar):
        if declared.__bound__ is not None:
            return accepts(declared.__bound__, candidate)
        if declared.__constraints__:
            return any(accepts(c, candidate) for c in declared.__constraints__)
        return True

    origin = typing.get_origin(declared)
    if origin is Union or origin is types.UnionType:
        return any(accepts(arg, candidate) for arg in typing.get_args(declared))
    if origin is typing.Annotated:
        return accepts(typing.get_args(declared)[0], candidate)
    if origin is typing.Literal:
        return False
    if origin is not None:
        declared = origin

    if declared is None or declared is type(None):
        return candidate is type(None)
    if not isinstance(declared, type):
        return False
    try:
        return issubclass(candidate, declared)
    except TypeError:
        # Protocols without runtime_checkable and similar.
        return False


def is_generic_mapping(declared: Any) -> bool:
    """True for a plain key/value mapping: ``dict``, ``Mapping[str, Any]``..."""
    if declared in _MAPPING_ORIGINS:
        return True
    if typing.get_origin(declared) not in _MAPPING_ORIGINS:
        return False
    args = typing.get_args(declared)
    if not args:
        return True
    if len(args) != 2:
        return False
    key, value = args
    return key in (str, Any, object) and value in _OPEN_VALUE_TYPES


def is_properties(declared: Any) -> bool:
    """True for a string-keyed, string-valued mapping such as ``Properties``."""
    if typing.get_origin(declared) not in _MAPPING_ORIGINS:
        return False
    return typing.get_args(declared) == (str, str)
