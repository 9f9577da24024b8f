"""Built-in converter specs shipped with the Python.NET runtime helpers."""

from __future__ import annotations

from binding_synth.converters.base import ConverterRequirement, ConverterSpec

TUPLE_REQUIREMENT = ConverterRequirement("TupleConverter")

SEQUENCE_CONVERTER = ConverterSpec(
    shape_name="IEnumerable",
    converter_name="ListConverter",
    kind="sequence",
)

# DictionaryConverter marshals each entry as a tuple, so the tuple
# converter has to be registered alongside it.
MAP_CONVERTER = ConverterSpec(
    shape_name="IReadOnlyDictionary",
    converter_name="DictionaryConverter",
    kind="map",
    implies=(TUPLE_REQUIREMENT,),
)

TUPLE_CONVERTER = ConverterSpec(
    shape_name="Tuple",
    converter_name="TupleConverter",
    kind="tuple",
    parameterized=False,
)

BUILTIN_CONVERTERS: tuple[ConverterSpec, ...] = (
    SEQUENCE_CONVERTER,
    MAP_CONVERTER,
    TUPLE_CONVERTER,
)
