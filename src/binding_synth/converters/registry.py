"""Converter table and extension discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import ModuleType

from pydantic import ValidationError

from binding_synth.converters.base import ConverterRequirement, ConverterSpec
from binding_synth.converters.builtins import BUILTIN_CONVERTERS
from binding_synth.errors import ConverterTableError, UnsupportedShapeError
from binding_synth.model import Generic
from binding_synth.schemas import ConverterSpecConfig

logger = logging.getLogger(__name__)


class ConverterTable:
    """Registry mapping generic shape names to converter specs."""

    def __init__(self) -> None:
        self._specs: dict[str, ConverterSpec] = {}

    def register(self, spec: ConverterSpec | Mapping[str, object]) -> None:
        """Register a converter spec by shape name.

        Parameters
        ----------
        spec : ConverterSpec | Mapping[str, object]
            Spec instance, or a raw mapping validated through
            ``ConverterSpecConfig``.

        Raises
        ------
        ConverterTableError
            If the converter spec is invalid.
        """
        if not isinstance(spec, ConverterSpec):
            spec = _spec_from_mapping(spec)
        shape_name = spec.shape_name.strip()
        if not shape_name or not spec.converter_name.strip():
            raise ConverterTableError(
                "Converter spec must define a non-empty 'shape_name' and 'converter_name'."
            )
        if shape_name in self._specs:
            logger.debug("Replacing converter for %s", shape_name)
        self._specs[shape_name] = spec

    def names(self) -> list[str]:
        """Return registered shape names, sorted."""
        return sorted(self._specs.keys())

    def specs(self) -> list[ConverterSpec]:
        """Return registered specs ordered by shape name."""
        return [self._specs[name] for name in self.names()]

    def knows(self, shape_name: str) -> bool:
        """Check whether ``shape_name`` has a converter."""
        return shape_name in self._specs

    def get(self, shape_name: str) -> ConverterSpec:
        """Get spec by shape name.

        Raises
        ------
        ConverterTableError
            If no converter is registered for ``shape_name``.
        """
        try:
            return self._specs[shape_name]
        except KeyError as exc:
            raise ConverterTableError(
                f"Unknown shape '{shape_name}'. Known shapes: {', '.join(self.names())}"
            ) from exc

    def lookup(self, shape: Generic, root: Generic | None = None) -> ConverterSpec:
        """Resolve the converter spec for a generic shape.

        Parameters
        ----------
        shape : Generic
            Generic shape being resolved.
        root : Generic | None, optional
            Outermost shape containing ``shape``; used in the error message.

        Raises
        ------
        UnsupportedShapeError
            If the table has no entry for ``shape.name``.
        """
        spec = self._specs.get(shape.name)
        if spec is None:
            raise UnsupportedShapeError(shape.name, (root or shape).render())
        return spec

    def load_module(self, module_or_path: str) -> None:
        """Load converter specs from a module name or file path.

        .. warning::
            This executes code from the specified module. Only load converter
            extensions from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _spec_from_mapping(raw: Mapping[str, object]) -> ConverterSpec:
    try:
        config = ConverterSpecConfig.model_validate(dict(raw))
    except ValidationError as exc:
        raise ConverterTableError(f"Invalid converter spec: {exc}") from exc
    return ConverterSpec(
        shape_name=config.shape_name,
        converter_name=config.converter_name,
        kind=config.kind,
        parameterized=config.parameterized,
        implies=tuple(ConverterRequirement(name) for name in config.implies),
    )


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import module by import path or filesystem path.

    .. warning::
        This function executes arbitrary Python code from the specified
        module or file. Only use it with explicit user intent (e.g. the
        ``--converter-module`` CLI flag).

    Raises
    ------
    ConverterTableError
        If import cannot be completed.
    """
    candidate = Path(module_or_path)
    if candidate.exists():
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise ConverterTableError(f"Unable to load converter module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise ConverterTableError(
            f"Unable to import converter module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, table: ConverterTable) -> None:
    """Register converter definitions found in module."""
    if hasattr(module, "register_converters"):
        module.register_converters(table)
        return

    specs_obj = getattr(module, "CONVERTERS", None)
    if specs_obj is not None:
        for spec in specs_obj:
            table.register(spec)
        return

    spec_obj = getattr(module, "CONVERTER", None)
    if spec_obj is not None:
        table.register(spec_obj)
        return

    raise ConverterTableError(
        "Converter module must expose register_converters(table), CONVERTERS, or CONVERTER."
    )


def create_default_table(
    extra_modules: Iterable[str] | None = None,
) -> ConverterTable:
    """Create the converter table with built-ins and optional extensions.

    Parameters
    ----------
    extra_modules : Iterable[str] | None, optional
        Additional converter modules to load.

    Returns
    -------
    ConverterTable
        Table seeded with the sequence, map and tuple converters.
    """
    table = ConverterTable()
    for spec in BUILTIN_CONVERTERS:
        table.register(spec)
    for module in extra_modules or []:
        table.load_module(module)
    return table
