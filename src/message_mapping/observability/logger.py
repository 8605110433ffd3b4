"""Structured JSON logging with message-id correlation.

Uses structlog for structured logging with JSON output. A bus or gateway
binds the id of the message being processed so that every log entry
emitted while handling it carries ``message_id``.

The library modules log through ``logging.getLogger(__name__)``; those
records are rendered by the same structlog processor chain, so they carry
``message_id`` as well.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar, Token
from typing import Any

import structlog

# Context var for message_id propagation
_message_id: ContextVar[str] = ContextVar("message_id", default="")


def get_message_id() -> str:
    """Get the id of the message currently being handled ("" if none)."""
    return _message_id.get()


def set_message_id(message_id: str) -> Token[str]:
    """Bind *message_id* to the current context.

    Returns the token to pass to ``reset_message_id`` once the message
    has been handled.
    """
    return _message_id.set(message_id)


def reset_message_id(token: Token[str]) -> None:
    """Restore the message id that was bound before ``set_message_id``."""
    _message_id.reset(token)


def _add_message_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add message_id when one is bound."""
    mid = get_message_id()
    if mid:
        event_dict["message_id"] = mid
    return event_dict


def _shared_processors() -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_message_id,
        structlog.processors.TimeStamper(fmt="iso"),
    ]


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    @property
    def stream(self) -> Any:
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:
        pass


def setup_logging(level: str = "INFO", format: str = "json") -> None:
    """Route structlog and stdlib logging through one renderer.

    Args:
        level: Log level name; unknown names fall back to INFO.
        format: "json" for machine-readable lines, anything else for
            the console renderer.
    """
    renderer: Any
    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    final: list[Any] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if format == "json":
        final.append(structlog.processors.format_exc_info)
    final.append(renderer)

    handler = _StderrHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=final,
        )
    )
    root = logging.getLogger()
    # Re-running setup replaces the previous handler instead of stacking.
    for existing in [h for h in root.handlers if isinstance(h, _StderrHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)
