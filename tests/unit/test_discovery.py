"""Test parameter discovery through inspect.signature and type hints."""

import functools
from typing import Annotated, Any

import pytest

from message_mapping.core.errors import BindingDefinitionError
from message_mapping.mapping.annotations import Header, Headers
from message_mapping.mapping.discovery import (
    ParameterDiscoverer,
    SignatureParameterDiscoverer,
    split_annotated,
)


def handler(
    x: Annotated[int, Header("x"), "note"],
    headers: Annotated[dict, Headers()],
    body,
    /,
) -> None: ...


class CallableHandler:
    def __call__(self, priority: Annotated[int, Header()], body: str) -> None: ...


def forward_ref(body: "UndefinedType") -> None: ...  # noqa: F821


def decorated_target(x: Annotated[int, Header("x")], body: str) -> None: ...


@functools.wraps(decorated_target)
def decorated(*args, **kwargs):
    return decorated_target(*args, **kwargs)


def keyword_variadic(body: str, **extra: Any) -> None: ...


@pytest.fixture
def discoverer() -> SignatureParameterDiscoverer:
    return SignatureParameterDiscoverer()


class TestSignatureParameterDiscoverer:
    def test_satisfies_protocol(self, discoverer):
        assert isinstance(discoverer, ParameterDiscoverer)

    def test_positional_only_and_markers(self, discoverer):
        x, headers, body = discoverer.discover(handler)
        assert (x.index, x.name, x.declared_type) == (0, "x", int)
        assert x.annotations == (Header("x"), "note")
        assert headers.annotations == (Headers(),)
        assert body.declared_type is Any
        assert body.annotations == ()

    def test_callable_instance(self, discoverer):
        priority, body = discoverer.discover(CallableHandler())
        assert priority.name == "priority"
        assert priority.annotations == (Header(),)
        assert body.declared_type is str

    def test_unresolvable_forward_reference_rejected(self, discoverer):
        with pytest.raises(BindingDefinitionError, match="cannot resolve type hints") as info:
            discoverer.discover(forward_ref)
        assert info.value.parameter == "body"
        assert isinstance(info.value.__cause__, NameError)

    def test_wrapped_function_uses_wrapped_signature(self, discoverer):
        x, body = discoverer.discover(decorated)
        assert x.annotations == (Header("x"),)
        assert body.name == "body"

    def test_var_keyword_rejected(self, discoverer):
        with pytest.raises(BindingDefinitionError, match="variadic keyword") as info:
            discoverer.discover(keyword_variadic)
        assert info.value.parameter == "extra"

    def test_uninspectable_callable(self, discoverer):
        with pytest.raises(BindingDefinitionError, match="cannot inspect"):
            discoverer.discover(42)


class TestSplitAnnotated:
    def test_plain_type(self):
        assert split_annotated(str) == (str, ())

    def test_annotated(self):
        assert split_annotated(Annotated[str, Header("a")]) == (str, (Header("a"),))