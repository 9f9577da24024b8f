"""Signature sources: JSON manifests and Python modules."""

from __future__ import annotations

import ast
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from binding_synth.errors import MalformedSignatureError
from binding_synth.model import (
    VOID,
    FunctionSignature,
    Generic,
    ModuleSignatures,
    ParameterSignature,
    Primitive,
    TypeShape,
    parse_shape,
)
from binding_synth.schemas import ModuleManifestConfig

logger = logging.getLogger(__name__)

UNTYPED = Primitive("object")
TUPLE_NAMES = frozenset({"tuple", "Tuple", "typing.Tuple"})


class ManifestSignatureSource:
    """Load signatures from a JSON manifest validated by pydantic."""

    def load(self, source_path: Path) -> ModuleSignatures:
        try:
            raw = json.loads(source_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise MalformedSignatureError(
                f"Unable to read signature manifest {source_path}: {exc}"
            ) from exc
        try:
            config = ModuleManifestConfig.model_validate(raw)
        except ValidationError as exc:
            raise MalformedSignatureError(
                f"Invalid signature manifest {source_path}: {exc}"
            ) from exc
        return config.to_signatures()


class PythonSignatureSource:
    """Read top-level function signatures from a Python module.

    Only public functions are bound. Positional parameters are kept; a
    missing annotation maps to ``object``. Union annotations become a
    ``Union`` generic so the resolver reports them per function.
    """

    def load(self, source_path: Path) -> ModuleSignatures:
        try:
            text = source_path.read_text(encoding="utf-8")
            tree = ast.parse(text, filename=str(source_path))
        except (OSError, SyntaxError) as exc:
            raise MalformedSignatureError(f"Unable to parse {source_path}: {exc}") from exc

        functions: list[FunctionSignature] = []
        for node in tree.body:
            if not isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
                continue
            if node.name.startswith("_"):
                logger.debug("Skipping private function %s", node.name)
                continue
            functions.append(_signature_from_def(node))
        return ModuleSignatures(module_name=source_path.stem, functions=tuple(functions))


def _signature_from_def(node: ast.FunctionDef | ast.AsyncFunctionDef) -> FunctionSignature:
    positional = [*node.args.posonlyargs, *node.args.args]
    if node.args.vararg or node.args.kwarg or node.args.kwonlyargs:
        logger.debug("Only positional parameters of %s are bound", node.name)
    parameters = tuple(
        ParameterSignature(
            name=arg.arg,
            shape=UNTYPED if arg.annotation is None else shape_from_annotation(arg.annotation),
            position=index,
        )
        for index, arg in enumerate(positional)
    )
    return_shape = VOID if node.returns is None else shape_from_annotation(node.returns)
    return FunctionSignature(name=node.name, parameters=parameters, return_shape=return_shape)


def shape_from_annotation(node: ast.expr) -> TypeShape:
    """Convert an annotation expression into a ``TypeShape``.

    Expressions with no shape counterpart (``Callable[[int], int]``,
    ``Literal[1]``) become an argument-less generic named after their source
    text. No converter matches it, so only the annotated function is skipped.
    ``tuple[X, ...]`` drops the ellipsis; the tuple converter is shared anyway.
    """
    if isinstance(node, ast.Name):
        return Primitive(node.id)
    if isinstance(node, ast.Attribute):
        return Primitive(ast.unparse(node))
    if isinstance(node, ast.Constant):
        if node.value is None:
            return Primitive("None")
        if isinstance(node.value, str):
            return _shape_from_string(node.value)
    if isinstance(node, ast.Subscript):
        name = ast.unparse(node.value)
        elements = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
        if name in TUPLE_NAMES:
            elements = [item for item in elements if not _is_ellipsis(item)]
        if elements:
            return Generic(name, tuple(shape_from_annotation(item) for item in elements))
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return Generic(
            "Union",
            (shape_from_annotation(node.left), shape_from_annotation(node.right)),
        )
    logger.debug("No shape for annotation %s", ast.unparse(node))
    return Generic(ast.unparse(node))


def _shape_from_string(text: str) -> TypeShape:
    try:
        return parse_shape(text)
    except MalformedSignatureError:
        pass
    # forward references such as "int | None" are Python expressions
    try:
        return shape_from_annotation(ast.parse(text.strip(), mode="eval").body)
    except SyntaxError:
        return Generic(text.strip() or "<empty>")


def _is_ellipsis(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and node.value is Ellipsis


def select_source(source_path: Path) -> ManifestSignatureSource | PythonSignatureSource:
    """Pick a signature source by file suffix."""
    if source_path.suffix.lower() == ".json":
        return ManifestSignatureSource()
    return PythonSignatureSource()
