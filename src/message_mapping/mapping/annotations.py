"""Parameter markers used inside ``typing.Annotated``.

Example::

    async def on_order(
        order: Order,
        priority: Annotated[int, Header("priority", required=False)],
        trace: Annotated[str, Header()],             # key = "trace"
        headers: Annotated[dict[str, Any], Headers()],
    ) -> None: ...
"""

from __future__ import annotations

from dataclasses import dataclass

# String-keyed, string-valued property set. A message-or-payload parameter
# declared with exactly this type receives only the string-valued headers.
Properties = dict[str, str]


@dataclass(frozen=True)
class Header:
    """Bind a parameter to a single header value.

    ``name`` defaults to the parameter's own name. ``required=None`` defers
    to ``MappingConfig.header_required_default``.
    """

    name: str = ""
    required: bool | None = None


@dataclass(frozen=True)
class Headers:
    """Bind a mapping parameter to the full header map."""
