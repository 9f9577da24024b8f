"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

from binding_synth.application.options import GenerationOptions
from binding_synth.application.ports import (
    BindingSink,
    CallSiteRenderer,
    ConversionRegistry,
    SignatureSource,
)
from binding_synth.application.results import (
    BindingUnit,
    Diagnostic,
    DiagnosticCode,
    GenerationResult,
    Severity,
)
from binding_synth.model import FunctionSignature


def build_generation_options(
    *,
    namespace: str = "Python.Generated",
    include_return_types: bool = False,
    converter_modules: Iterable[str] | None = None,
    max_workers: int | None = None,
) -> GenerationOptions:
    """Build typed generation options via lazy use-case import."""
    from binding_synth.application.use_cases import build_generation_options as _impl

    return _impl(
        namespace=namespace,
        include_return_types=include_return_types,
        converter_modules=converter_modules,
        max_workers=max_workers,
    )


def generate_binding(
    *,
    module_name: str,
    functions: Sequence[FunctionSignature] | None,
    namespace: str | None = None,
    options: GenerationOptions | None = None,
    renderer: CallSiteRenderer | None = None,
) -> BindingUnit:
    """Render bindings for one module via lazy use-case import."""
    from binding_synth.application.use_cases import generate_binding as _impl

    return _impl(
        module_name=module_name,
        functions=functions,
        namespace=namespace,
        options=options,
        renderer=renderer,
    )


def generate_from_sources(
    *,
    source_paths: Iterable[Path],
    options: GenerationOptions | None = None,
    source: SignatureSource | None = None,
    sink: BindingSink | None = None,
) -> list[GenerationResult]:
    """Render bindings for source files via lazy use-case import."""
    from binding_synth.application.use_cases import generate_from_sources as _impl

    return _impl(
        source_paths=source_paths,
        options=options,
        source=source,
        sink=sink,
    )


__all__ = [
    "BindingSink",
    "BindingUnit",
    "CallSiteRenderer",
    "ConversionRegistry",
    "Diagnostic",
    "DiagnosticCode",
    "GenerationOptions",
    "GenerationResult",
    "Severity",
    "SignatureSource",
    "build_generation_options",
    "generate_binding",
    "generate_from_sources",
]
