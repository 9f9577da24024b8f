"""Name and shape normalization between scripted and host conventions."""

from __future__ import annotations

from binding_synth.model import Generic, Primitive, TypeShape

# Scripted annotation names -> host primitive names.
PRIMITIVE_NAMES: dict[str, str] = {
    "int": "long",
    "float": "double",
    "str": "string",
    "bool": "bool",
    "bytes": "byte[]",
    "None": "void",
    "NoneType": "void",
    "object": "PyObject",
    "typing.Any": "PyObject",
    "Any": "PyObject",
}

# Scripted generic names -> host generic names understood by the converter table.
GENERIC_NAMES: dict[str, str] = {
    "list": "IEnumerable",
    "List": "IEnumerable",
    "typing.List": "IEnumerable",
    "Sequence": "IEnumerable",
    "typing.Sequence": "IEnumerable",
    "collections.abc.Sequence": "IEnumerable",
    "Iterable": "IEnumerable",
    "typing.Iterable": "IEnumerable",
    "dict": "IReadOnlyDictionary",
    "Dict": "IReadOnlyDictionary",
    "typing.Dict": "IReadOnlyDictionary",
    "Mapping": "IReadOnlyDictionary",
    "typing.Mapping": "IReadOnlyDictionary",
    "collections.abc.Mapping": "IReadOnlyDictionary",
    "tuple": "Tuple",
    "typing.Tuple": "Tuple",
}

CSHARP_KEYWORDS = frozenset(
    {
        "abstract", "as", "base", "bool", "break", "byte", "case", "catch",
        "char", "checked", "class", "const", "continue", "decimal", "default",
        "delegate", "do", "double", "else", "enum", "event", "explicit",
        "extern", "false", "finally", "fixed", "float", "for", "foreach",
        "goto", "if", "implicit", "in", "int", "interface", "internal", "is",
        "lock", "long", "namespace", "new", "null", "object", "operator",
        "out", "override", "params", "private", "protected", "public",
        "readonly", "ref", "return", "sbyte", "sealed", "short", "sizeof",
        "stackalloc", "static", "string", "struct", "switch", "this", "throw",
        "true", "try", "typeof", "uint", "ulong", "unchecked", "unsafe",
        "ushort", "using", "virtual", "void", "volatile", "while",
    }
)


def normalize_shape(shape: TypeShape) -> TypeShape:
    """Map scripted annotation names onto host type names.

    Unknown names pass through unchanged so the resolver can report them.
    """
    if isinstance(shape, Primitive):
        return Primitive(PRIMITIVE_NAMES.get(shape.name, shape.name))
    return Generic(
        GENERIC_NAMES.get(shape.name, shape.name),
        tuple(normalize_shape(arg) for arg in shape.args),
    )


def pascal_case(name: str) -> str:
    """Convert a scripted identifier to PascalCase.

    Examples:
        hello_world -> HelloWorld
        format_name -> FormatName
        fooBar -> FooBar
    """
    return "".join(part[0].upper() + part[1:] for part in name.split("_") if part)


def module_type_name(module_name: str) -> str:
    """Derive the host type name for a scripted module.

    ``pkg.my_module`` becomes ``MyModule``.
    """
    return pascal_case(module_name.rsplit(".", 1)[-1])


def safe_identifier(name: str) -> str:
    """Escape host keywords used as parameter names."""
    if name in CSHARP_KEYWORDS:
        return f"@{name}"
    return name
