"""Application use-cases orchestrating binding generation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from binding_synth.application.options import DEFAULT_NAMESPACE, GenerationOptions
from binding_synth.application.ports import BindingSink, CallSiteRenderer, SignatureSource
from binding_synth.application.results import (
    BindingUnit,
    Diagnostic,
    DiagnosticCode,
    GenerationResult,
    Severity,
)
from binding_synth.converters.registry import ConverterTable, create_default_table
from binding_synth.emitter import BindingEmitter
from binding_synth.errors import (
    DuplicateFunctionError,
    MalformedSignatureError,
    UnsupportedShapeError,
)
from binding_synth.infrastructure.sources import select_source
from binding_synth.model import (
    FunctionSignature,
    Generic,
    ModuleSignatures,
    ParameterSignature,
    Primitive,
    TypeShape,
)
from binding_synth.naming import (
    GENERIC_NAMES,
    module_type_name,
    normalize_shape,
    pascal_case,
)
from binding_synth.resolver import ConverterManifest, ConverterResolver, ManifestBuilder

logger = logging.getLogger(__name__)


def generate_binding(
    *,
    module_name: str,
    functions: Sequence[FunctionSignature] | None,
    namespace: str | None = None,
    options: GenerationOptions | None = None,
    table: ConverterTable | None = None,
    renderer: CallSiteRenderer | None = None,
) -> BindingUnit:
    """Use-case: render bindings for one scripted module.

    Functions with unsupported shapes or duplicate names are skipped with a
    diagnostic; malformed input aborts the module with a single diagnostic.
    No ``BindingError`` escapes this function.
    """
    options = options or GenerationOptions()
    namespace = namespace or options.namespace or DEFAULT_NAMESPACE
    type_name = module_type_name(module_name) if module_name else ""
    table = table or create_default_table(options.converter_modules)

    try:
        normalized = _normalize_input(module_name, functions, table)
    except MalformedSignatureError as exc:
        logger.error("Malformed signatures for module %r: %s", module_name, exc)
        return BindingUnit(
            module_name=module_name or "",
            namespace=namespace,
            type_name=type_name,
            diagnostics=(
                Diagnostic(
                    code=DiagnosticCode.MALFORMED_INPUT,
                    severity=Severity.ERROR,
                    message=f"{module_name or '<unnamed>'}: {exc}",
                    module_name=module_name or None,
                ),
            ),
        )

    resolver = ConverterResolver(table)
    builder = ManifestBuilder()
    diagnostics: list[Diagnostic] = []
    accepted: list[FunctionSignature] = []
    raw_names: set[str] = set()
    method_names: dict[str, str] = {}

    for function in normalized:
        method_name = pascal_case(function.name)
        if function.name in raw_names or method_name in method_names:
            exc = DuplicateFunctionError(function.name, method_names.get(method_name))
            logger.warning("Skipping %s.%s: %s", module_name, function.name, exc)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.DUPLICATE_FUNCTION,
                    severity=Severity.ERROR,
                    message=f"{module_name}: {exc}",
                    module_name=module_name,
                    function_name=function.name,
                )
            )
            continue
        raw_names.add(function.name)
        method_names[method_name] = function.name

        try:
            requirements = resolver.requirements_for_function(
                function, include_return=options.include_return_types
            )
        except UnsupportedShapeError as exc:
            logger.warning("Skipping %s.%s: %s", module_name, function.name, exc)
            diagnostics.append(
                Diagnostic(
                    code=DiagnosticCode.UNSUPPORTED_SHAPE,
                    severity=Severity.ERROR,
                    message=f"{module_name}.{function.name}: unsupported parameter shape. {exc}",
                    module_name=module_name,
                    function_name=function.name,
                    shape=exc.shape_name,
                )
            )
            continue
        builder.add_all(requirements)
        accepted.append(function)

    manifest = builder.build()
    if not options.include_return_types:
        diagnostics.extend(_check_return_shapes(module_name, accepted, manifest, resolver))

    emitted = BindingEmitter(renderer).emit(
        module_name=module_name,
        type_name=type_name,
        namespace=namespace,
        functions=accepted,
        manifest=manifest,
    )
    logger.info(
        "Generated %s: %d function(s), %d converter(s), %d diagnostic(s)",
        type_name,
        len(accepted),
        len(manifest.encoders),
        len(diagnostics),
    )
    return BindingUnit(
        module_name=module_name,
        namespace=namespace,
        type_name=type_name,
        interface_text=emitted.interface_text,
        adapter_text=emitted.adapter_text,
        registrations=emitted.registrations,
        diagnostics=tuple(diagnostics),
        functions=tuple(accepted),
        manifest=manifest,
        source_text=emitted.source_text,
    )


def generate_bindings(
    modules: Iterable[ModuleSignatures],
    options: GenerationOptions | None = None,
    table: ConverterTable | None = None,
    renderer: CallSiteRenderer | None = None,
) -> list[BindingUnit]:
    """Use-case: render several modules independently, in input order."""
    options = options or GenerationOptions()
    table = table or create_default_table(options.converter_modules)
    module_list = list(modules)

    def _one(module: ModuleSignatures) -> BindingUnit:
        return generate_binding(
            module_name=module.module_name,
            functions=module.functions,
            namespace=module.namespace,
            options=options,
            table=table,
            renderer=renderer,
        )

    if options.max_workers == 1 or len(module_list) <= 1:
        return [_one(module) for module in module_list]
    with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
        return list(pool.map(_one, module_list))


def generate_from_sources(
    *,
    source_paths: Iterable[Path],
    options: GenerationOptions | None = None,
    source: SignatureSource | None = None,
    sink: BindingSink | None = None,
    table: ConverterTable | None = None,
    renderer: CallSiteRenderer | None = None,
) -> list[GenerationResult]:
    """Use-case: load signatures from files, render, and optionally write.

    A source that cannot be loaded yields a unit carrying a malformed-input
    diagnostic; the remaining sources are still processed.
    """
    options = options or GenerationOptions()
    table = table or create_default_table(options.converter_modules)
    paths = list(source_paths)

    loaded: list[ModuleSignatures | None] = []
    failures: dict[int, BindingUnit] = {}
    for index, path in enumerate(paths):
        try:
            loaded.append((source or select_source(path)).load(path))
        except MalformedSignatureError as exc:
            logger.error("Unable to load signatures from %s: %s", path, exc)
            loaded.append(None)
            failures[index] = BindingUnit(
                module_name=path.stem,
                namespace=options.namespace,
                type_name=module_type_name(path.stem),
                diagnostics=(
                    Diagnostic(
                        code=DiagnosticCode.MALFORMED_INPUT,
                        severity=Severity.ERROR,
                        message=f"{path}: {exc}",
                        module_name=path.stem,
                    ),
                ),
            )

    units = iter(
        generate_bindings(
            [module for module in loaded if module is not None],
            options=options,
            table=table,
            renderer=renderer,
        )
    )

    results: list[GenerationResult] = []
    for index, path in enumerate(paths):
        unit = failures[index] if index in failures else next(units)
        output_path = sink.write(unit, path) if sink is not None and unit.generated else None
        if output_path is not None:
            logger.info("Wrote %s", output_path)
        results.append(GenerationResult(unit=unit, source_path=path, output_path=output_path))
    return results


def resolve_module_converters(
    *,
    functions: Sequence[FunctionSignature],
    include_return_types: bool = False,
    table: ConverterTable | None = None,
) -> ConverterManifest:
    """Use-case: resolve the converter manifest for normalized signatures.

    Raises
    ------
    UnsupportedShapeError
        On the first shape without a converter.
    """
    table = table or create_default_table()
    normalized = _normalize_input("<manifest>", functions, table)
    return ConverterResolver(table).resolve(
        normalized, include_return_types=include_return_types
    )


def build_generation_options(
    *,
    namespace: str = DEFAULT_NAMESPACE,
    include_return_types: bool = False,
    converter_modules: Iterable[str] | None = None,
    max_workers: int | None = None,
) -> GenerationOptions:
    """Build typed option object from command/API params."""
    if max_workers is not None and max_workers < 1:
        raise ValueError("max_workers must be >= 1")
    return GenerationOptions(
        namespace=namespace.strip() or DEFAULT_NAMESPACE,
        include_return_types=include_return_types,
        converter_modules=tuple(converter_modules or ()),
        max_workers=max_workers,
    )


def _normalize_input(
    module_name: str | None,
    functions: Sequence[FunctionSignature] | None,
    table: ConverterTable,
) -> list[FunctionSignature]:
    """Check structural validity and map scripted names to host names."""
    if not module_name or not module_name.strip():
        raise MalformedSignatureError("Module name is required.")
    if functions is None:
        raise MalformedSignatureError("Signature list is missing.")

    normalized: list[FunctionSignature] = []
    for function in functions:
        if not isinstance(function, FunctionSignature):
            raise MalformedSignatureError(
                f"Expected FunctionSignature, got {type(function).__name__}."
            )
        if not function.name or not function.name.strip():
            raise MalformedSignatureError("Function name cannot be empty.")
        positions = [param.position for param in function.parameters]
        if len(set(positions)) != len(positions):
            raise MalformedSignatureError(
                f"Function '{function.name}' has repeated parameter positions."
            )
        parameters = []
        for param in function.parameters:
            if not isinstance(param, ParameterSignature) or not param.name:
                raise MalformedSignatureError(
                    f"Function '{function.name}' has an invalid parameter."
                )
            parameters.append(
                ParameterSignature(
                    name=param.name,
                    shape=_normalize_checked(param.shape, function.name, table),
                    position=param.position,
                )
            )
        normalized.append(
            FunctionSignature(
                name=function.name,
                parameters=tuple(parameters),
                return_shape=_normalize_checked(function.return_shape, function.name, table),
            )
        )
    return normalized


def _normalize_checked(shape: TypeShape, function_name: str, table: ConverterTable) -> TypeShape:
    if not isinstance(shape, Primitive | Generic):
        raise MalformedSignatureError(
            f"Function '{function_name}' has a shape of type {type(shape).__name__}."
        )
    normalized = normalize_shape(shape)
    _check_generic_arity(normalized, function_name, table)
    return normalized


def _check_generic_arity(shape: TypeShape, function_name: str, table: ConverterTable) -> None:
    # a bare `list` or `IEnumerable` annotation parses as a primitive
    bare = isinstance(shape, Primitive) or not shape.args
    if bare and (shape.name in GENERIC_NAMES or table.knows(shape.name)):
        raise MalformedSignatureError(
            f"Function '{function_name}' uses generic '{shape.name}' without type arguments."
        )
    if isinstance(shape, Primitive):
        return
    for arg in shape.args:
        if not isinstance(arg, Primitive | Generic):
            raise MalformedSignatureError(
                f"Function '{function_name}' has a shape of type {type(arg).__name__}."
            )
        _check_generic_arity(arg, function_name, table)


def _check_return_shapes(
    module_name: str,
    functions: Sequence[FunctionSignature],
    manifest: ConverterManifest,
    resolver: ConverterResolver,
) -> list[Diagnostic]:
    """Flag return shapes whose converters the parameter scan did not register."""
    diagnostics: list[Diagnostic] = []
    for function in functions:
        shape = function.return_shape
        if not isinstance(shape, Generic):
            continue
        try:
            missing = [
                req.identity
                for req in resolver.requirements_for_shape(shape)
                if not manifest.covers(req)
            ]
        except UnsupportedShapeError as exc:
            missing = [f"{exc.shape_name} (no converter)"]
        if not missing:
            continue
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.UNREGISTERED_RETURN_SHAPE,
                severity=Severity.WARNING,
                message=(
                    f"{module_name}.{function.name}: return shape {shape.render()} "
                    f"needs converters not registered by parameters: {', '.join(missing)}"
                ),
                module_name=module_name,
                function_name=function.name,
                shape=shape.name,
            )
        )
    return diagnostics
