"""CLI entry point for message mapping tools."""

from __future__ import annotations

import importlib
import sys
from typing import Any, Callable

import click

from .core.config import load_settings
from .core.errors import BindingDefinitionError


@click.group()
@click.option("--config", default=None, help="Config file path (TOML)")
@click.pass_context
def main(ctx: click.Context, config: str | None) -> None:
    """Message mapping tools."""
    from .observability.logger import setup_logging

    settings = load_settings(config_path=config)
    setup_logging(
        level=settings.observability.log_level,
        format=settings.observability.log_format,
    )
    ctx.obj = settings


@main.command()
@click.argument("target")
@click.pass_obj
def describe(settings: Any, target: str) -> None:
    """Show how each parameter of TARGET (module:callable) is bound."""
    from .mapping.analyzer import analyze_signature
    from .observability.logger import get_logger

    log = get_logger(__name__)
    handler = _load_target(target)
    try:
        bindings = analyze_signature(handler, config=settings.mapping)
    except BindingDefinitionError as exc:
        log.warning(
            "binding_definition_failed", target=target, index=exc.index, error=exc.reason,
        )
        click.echo(f"error: {exc}", err=True)
        sys.exit(1)

    log.debug("signature_analyzed", target=target, parameters=len(bindings))
    click.echo(f"{target}: {len(bindings)} parameter(s)")
    for b in bindings:
        detail = ""
        if b.key is not None:
            detail = f" key={b.key!r} required={b.required}"
        click.echo(
            f"  [{b.index}] {b.name or '?'}: {b.kind.value}"
            f" type={_type_name(b.declared_type)}{detail}"
        )


def _load_target(target: str) -> Callable[..., Any]:
    module_name, sep, attr_path = target.partition(":")
    if not sep or not attr_path:
        raise click.BadParameter("expected 'module:callable'", param_hint="TARGET")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise click.BadParameter(str(exc), param_hint="TARGET") from exc
    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise click.BadParameter(
                f"{module_name} has no attribute {attr_path!r}", param_hint="TARGET",
            ) from exc
    if not callable(obj):
        raise click.BadParameter(f"{target} is not callable", param_hint="TARGET")
    return obj


def _type_name(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return repr(tp).replace("typing.", "")


if __name__ == "__main__":
    main()
