"""Exception hierarchy for binding synthesis."""

from __future__ import annotations


class BindingError(Exception):
    """Base error for binding generation failures."""

    exit_code = 1


class UnsupportedShapeError(BindingError):
    """A generic shape has no converter mapping.

    Parameters
    ----------
    shape_name : str
        Generic name that could not be mapped (e.g. ``Custom``).
    shape : str
        Fully rendered offending shape (e.g. ``Custom<long>``).
    """

    exit_code = 2

    def __init__(self, shape_name: str, shape: str) -> None:
        self.shape_name = shape_name
        self.shape = shape
        super().__init__(f"No converter for {shape_name} (in {shape})")


class MalformedSignatureError(BindingError):
    """Upstream signature input is structurally invalid."""

    exit_code = 3


class DuplicateFunctionError(BindingError):
    """Two signatures of one module resolve to the same name."""

    exit_code = 4

    def __init__(self, name: str, first: str | None = None) -> None:
        self.name = name
        self.first = first
        if first is not None and first != name:
            message = f"Function '{name}' collides with '{first}'"
        else:
            message = f"Duplicate function name '{name}'"
        super().__init__(message)


class ConverterTableError(BindingError):
    """Converter table lookup or extension loading failed."""

    exit_code = 5
