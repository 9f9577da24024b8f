"""Typed option objects shared across generation use-cases."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_NAMESPACE = "Python.Generated"


@dataclass(frozen=True)
class GenerationOptions:
    """Binding generation configuration.

    Parameters
    ----------
    namespace : str
        Host namespace for generated types when the module does not name one.
    include_return_types : bool
        Also resolve converters for return shapes. When ``False`` only
        parameters are scanned and uncovered return shapes are reported.
    converter_modules : tuple[str, ...]
        Extra converter modules loaded into the converter table.
    max_workers : int | None
        Worker count for multi-module generation; ``None`` lets the executor
        decide.
    """

    namespace: str = DEFAULT_NAMESPACE
    include_return_types: bool = False
    converter_modules: tuple[str, ...] = ()
    max_workers: int | None = None
