"""Converter specs and requirement identities."""

from __future__ import annotations

from dataclasses import dataclass

from binding_synth.model import Generic


@dataclass(frozen=True)
class ConverterRequirement:
    """Fully instantiated converter identity.

    Parameters
    ----------
    converter_name : str
        Host converter type, e.g. ``ListConverter``.
    type_args : str, default=""
        Rendered type argument list including brackets, e.g. ``<long>``.
        Empty for unparameterized converters such as ``TupleConverter``.
    """

    converter_name: str
    type_args: str = ""

    @property
    def identity(self) -> str:
        """Rendered identity, e.g. ``DictionaryConverter<string, long>``."""
        return f"{self.converter_name}{self.type_args}"

    def __str__(self) -> str:
        return self.identity


@dataclass(frozen=True)
class ConverterSpec:
    """Mapping from a generic shape name to the converter that marshals it.

    Parameters
    ----------
    shape_name : str
        Host generic name handled by this converter (``IEnumerable``).
    converter_name : str
        Host converter type name (``ListConverter``).
    kind : str
        Shape family, e.g. ``sequence``, ``map`` or ``tuple``.
    parameterized : bool, default=True
        Whether the converter identity carries the shape's type arguments.
        Unparameterized converters are shared by every shape of that name.
    implies : tuple[ConverterRequirement, ...], default=()
        Converters the host converter needs internally.
    """

    shape_name: str
    converter_name: str
    kind: str
    parameterized: bool = True
    implies: tuple[ConverterRequirement, ...] = ()

    def requirement_for(self, shape: Generic) -> ConverterRequirement:
        """Build the requirement identity for ``shape``."""
        if not self.parameterized:
            return ConverterRequirement(self.converter_name)
        return ConverterRequirement(self.converter_name, shape.type_argument_list())
