#!/usr/bin/env python3
"""
binding_synth.cli.cli

Typer-based CLI for generating typed host bindings from scripted modules.

Examples
--------
Generate bindings for a Python module next to the source:

    binding-synth generate scripts/hello_world.py

Generate from a JSON signature manifest into a directory:

    binding-synth generate signatures.json --out-dir Generated

Print the converter registrations a module needs:

    binding-synth resolve scripts/hello_world.py
"""

from __future__ import annotations

import logging
import traceback
from pathlib import Path

import typer

from binding_synth.errors import BindingError

app = typer.Typer(
    name="binding-synth",
    help="Generate statically-typed host bindings for scripted modules.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)

CONVERTER_MODULE_HELP = "Converter extension module import path or file path (repeatable)."
RETURN_TYPES_HELP = "Also register converters for return shapes."


def _configure_logging(debug: bool, verbose: bool) -> None:
    """Configure root logging for CLI runs."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _print_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly error and return the process exit code."""
    typer.echo(f"✗ {type(exc).__name__}: {exc}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks and debug logs."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logs."),
) -> None:
    """Initialize shared CLI state."""
    _configure_logging(debug, verbose)
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("generate")
def generate_cmd(
    ctx: typer.Context,
    sources: list[Path] = typer.Argument(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="Python modules (.py) or JSON signature manifests (.json).",
    ),
    out_dir: Path | None = typer.Option(
        None, "--out-dir", "-o", help="Directory for generated .py.cs files (default: next to source)."
    ),
    namespace: str = typer.Option(
        "Python.Generated", "--namespace", help="Host namespace for generated types."
    ),
    include_return_types: bool = typer.Option(
        False, "--include-return-types", help=RETURN_TYPES_HELP
    ),
    converter_module: list[str] | None = typer.Option(
        None, "--converter-module", help=CONVERTER_MODULE_HELP
    ),
    workers: int | None = typer.Option(
        None, "--workers", min=1, help="Parallel workers for multi-module generation."
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Exit non-zero when any function was skipped."
    ),
) -> None:
    """Generate interface + adapter bindings for each scripted module."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from binding_synth.api import generate_bindings_from_files

        results = generate_bindings_from_files(
            source_paths=sources,
            output_dir=out_dir,
            namespace=namespace,
            include_return_types=include_return_types,
            converter_modules=converter_module,
            max_workers=workers,
        )
    except BindingError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    except Exception as exc:
        logger.exception("unexpected error during binding generation")
        raise typer.Exit(code=_print_error(exc, debug))

    failed = False
    for result in results:
        for diagnostic in result.unit.report():
            typer.echo(diagnostic.format(), err=diagnostic.is_error)
        if result.output_path is not None:
            typer.echo(f"✓ Saved: {result.output_path}")
        if not result.unit.generated or (strict and result.unit.has_errors):
            failed = True
    if failed:
        raise typer.Exit(code=1)


@app.command("resolve")
def resolve_cmd(
    ctx: typer.Context,
    source: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        dir_okay=False,
        help="Python module (.py) or JSON signature manifest (.json).",
    ),
    include_return_types: bool = typer.Option(
        False, "--include-return-types", help=RETURN_TYPES_HELP
    ),
    converter_module: list[str] | None = typer.Option(
        None, "--converter-module", help=CONVERTER_MODULE_HELP
    ),
) -> None:
    """Print the converter registration statements a module needs."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from binding_synth.api import resolve_file_converters

        statements = resolve_file_converters(
            source,
            include_return_types=include_return_types,
            converter_modules=converter_module,
        )
    except BindingError as exc:
        raise typer.Exit(code=_print_error(exc, debug))
    except Exception as exc:
        logger.exception("unexpected error during converter resolution")
        raise typer.Exit(code=_print_error(exc, debug))

    for statement in statements:
        typer.echo(statement)


@app.command("converters")
def converters_cmd(
    ctx: typer.Context,
    converter_module: list[str] | None = typer.Option(
        None, "--converter-module", help=CONVERTER_MODULE_HELP
    ),
) -> None:
    """List the converter table: shape -> converter (kind)."""
    debug: bool = bool(ctx.obj.get("debug", False))

    try:
        from binding_synth.converters.registry import create_default_table

        table = create_default_table(converter_module)
    except BindingError as exc:
        raise typer.Exit(code=_print_error(exc, debug))

    for spec in table.specs():
        implied = ", ".join(req.identity for req in spec.implies)
        suffix = f" [implies {implied}]" if implied else ""
        typer.echo(f"{spec.shape_name} -> {spec.converter_name} ({spec.kind}){suffix}")


if __name__ == "__main__":
    app()
