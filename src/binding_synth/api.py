"""Public file-based generation API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from typing import Optional

from binding_synth.application.results import GenerationResult
from binding_synth.application.use_cases import build_generation_options
from binding_synth.application.use_cases import generate_from_sources
from binding_synth.application.use_cases import resolve_module_converters
from binding_synth.converters.registry import create_default_table
from binding_synth.infrastructure.output import DirectoryBindingSink, SiblingBindingSink
from binding_synth.infrastructure.sources import select_source


def generate_bindings_from_files(
    source_paths: Iterable[Path],
    output_dir: Optional[Path] = None,
    namespace: str = "Python.Generated",
    include_return_types: bool = False,
    converter_modules: Optional[Iterable[str]] = None,
    max_workers: Optional[int] = None,
) -> list[GenerationResult]:
    """Generate ``<TypeName>.py.cs`` files for scripted modules or manifests.

    When ``output_dir`` is omitted each unit is written next to its source.
    """
    options = build_generation_options(
        namespace=namespace,
        include_return_types=include_return_types,
        converter_modules=converter_modules,
        max_workers=max_workers,
    )
    sink = DirectoryBindingSink(output_dir) if output_dir is not None else SiblingBindingSink()
    return generate_from_sources(
        source_paths=list(source_paths),
        options=options,
        sink=sink,
    )


def resolve_file_converters(
    source_path: Path,
    include_return_types: bool = False,
    converter_modules: Optional[Iterable[str]] = None,
) -> list[str]:
    """Return the registration statements a source file needs.

    Raises
    ------
    MalformedSignatureError
        If the file cannot be parsed.
    UnsupportedShapeError
        If any parameter uses a shape without a converter.
    """
    signatures = select_source(source_path).load(source_path)
    manifest = resolve_module_converters(
        functions=signatures.functions,
        include_return_types=include_return_types,
        table=create_default_table(converter_modules),
    )
    return manifest.registration_statements()
