"""Top-level API for synthesizing typed host bindings of scripted modules."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from binding_synth.model import (
    VOID,
    FunctionSignature,
    Generic,
    ParameterSignature,
    Primitive,
    TypeShape,
    parse_shape,
)

if TYPE_CHECKING:
    from binding_synth.application.results import BindingUnit, GenerationResult
    from binding_synth.resolver import ConverterManifest

__version__ = "0.1.0"


def generate_binding(
    module_name: str,
    functions: Sequence[FunctionSignature],
    namespace: str | None = None,
    include_return_types: bool = False,
) -> BindingUnit:
    """Render interface, adapter and converter registrations for a module.

    Parameters
    ----------
    module_name : str
        Scripted module identifier, e.g. ``"hello_world"``.
    functions : Sequence[FunctionSignature]
        Parsed signatures in declaration order.
    namespace : str, optional
        Host namespace; defaults to ``Python.Generated``.
    include_return_types : bool, default=False
        Also register converters for return shapes.

    Returns
    -------
    BindingUnit
        Rendered unit with per-function diagnostics.
    """
    from .application.use_cases import build_generation_options, generate_binding as _impl

    return _impl(
        module_name=module_name,
        functions=functions,
        namespace=namespace,
        options=build_generation_options(include_return_types=include_return_types),
    )


def resolve_converters(
    functions: Sequence[FunctionSignature],
    include_return_types: bool = False,
) -> ConverterManifest:
    """Resolve the encoder/decoder manifest for a signature set.

    Returns
    -------
    ConverterManifest
        Deduplicated encoders and decoders in first-seen order.
    """
    from .application.use_cases import resolve_module_converters as _impl

    return _impl(functions=functions, include_return_types=include_return_types)


def generate_bindings_from_files(
    source_paths: Iterable[Path],
    output_dir: Path | None = None,
    *,
    namespace: str = "Python.Generated",
    include_return_types: bool = False,
    converter_modules: Iterable[str] | None = None,
) -> list[GenerationResult]:
    """Generate binding files for Python modules or JSON signature manifests."""
    from .api import generate_bindings_from_files as _impl

    return _impl(
        source_paths=source_paths,
        output_dir=output_dir,
        namespace=namespace,
        include_return_types=include_return_types,
        converter_modules=converter_modules,
    )


__all__ = [
    "VOID",
    "FunctionSignature",
    "Generic",
    "ParameterSignature",
    "Primitive",
    "TypeShape",
    "parse_shape",
    "generate_binding",
    "resolve_converters",
    "generate_bindings_from_files",
]
