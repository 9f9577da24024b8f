"""Unit tests for converter table lookup and extension loading."""

from __future__ import annotations

import types
from pathlib import Path

import pytest

from binding_synth.converters.base import ConverterRequirement, ConverterSpec
from binding_synth.converters.registry import (
    ConverterTable,
    _import_module_or_path,
    _register_from_module,
    create_default_table,
)
from binding_synth.errors import ConverterTableError, UnsupportedShapeError
from binding_synth.model import Generic, Primitive


def _spec(shape_name: str = "ISet", converter_name: str = "SetConverter") -> ConverterSpec:
    return ConverterSpec(shape_name=shape_name, converter_name=converter_name, kind="set")


def test_default_table_has_builtins() -> None:
    """Seed the table with sequence, map and tuple converters."""
    table = create_default_table()
    assert table.names() == ["IEnumerable", "IReadOnlyDictionary", "Tuple"]
    assert table.get("IReadOnlyDictionary").implies == (ConverterRequirement("TupleConverter"),)


def test_register_requires_names() -> None:
    """Reject specs without shape or converter name."""
    table = ConverterTable()
    with pytest.raises(ConverterTableError, match="non-empty"):
        table.register(_spec(shape_name="  "))


def test_register_validates_mappings() -> None:
    """Wrap pydantic validation errors as ConverterTableError."""
    table = ConverterTable()
    with pytest.raises(ConverterTableError, match="Invalid converter spec"):
        table.register({"shape_name": "ISet"})


def test_register_from_mapping() -> None:
    """Build specs from raw mappings."""
    table = ConverterTable()
    table.register(
        {
            "shape_name": "ISet",
            "converter_name": "SetConverter",
            "implies": ["TupleConverter"],
        }
    )
    spec = table.get("ISet")
    assert spec.kind == "custom"
    assert spec.implies == (ConverterRequirement("TupleConverter"),)


def test_get_unknown_shape_raises() -> None:
    """Raise clear error for unknown shape lookup."""
    with pytest.raises(ConverterTableError, match="Unknown shape"):
        ConverterTable().get("missing")


def test_lookup_unknown_generic_raises_unsupported_shape() -> None:
    """Report the offending name and the outermost shape."""
    table = create_default_table()
    inner = Generic("Custom", (Primitive("long"),))
    root = Generic("IEnumerable", (inner,))
    with pytest.raises(UnsupportedShapeError) as excinfo:
        table.lookup(inner, root=root)
    assert excinfo.value.shape_name == "Custom"
    assert excinfo.value.shape == "IEnumerable<Custom<long>>"


def test_requirement_identity_includes_type_arguments() -> None:
    """Parameterized converters carry the rendered argument list."""
    table = create_default_table()
    shape = Generic("IEnumerable", (Primitive("long"),))
    assert table.lookup(shape).requirement_for(shape).identity == "ListConverter<long>"
    tuple_shape = Generic("Tuple", (Primitive("long"), Primitive("string")))
    assert table.lookup(tuple_shape).requirement_for(tuple_shape).identity == "TupleConverter"


def test_import_module_by_path_and_register(tmp_path: Path) -> None:
    """Load converter module from file path and register its CONVERTER."""
    module_file = tmp_path / "set_converters.py"
    module_file.write_text(
        "from binding_synth.converters.base import ConverterSpec\n"
        "CONVERTER = ConverterSpec(shape_name='ISet', converter_name='SetConverter', kind='set')\n",
        encoding="utf-8",
    )
    table = ConverterTable()
    _register_from_module(_import_module_or_path(str(module_file)), table)
    assert table.get("ISet").converter_name == "SetConverter"


def test_import_module_invalid_path_spec_raises(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Raise ConverterTableError when file exists but import spec is invalid."""
    module_file = tmp_path / "set_converters.py"
    module_file.write_text("x = 1\n", encoding="utf-8")
    monkeypatch.setattr(
        "binding_synth.converters.registry.importlib.util.spec_from_file_location",
        lambda *_args, **_kwargs: None,
    )
    with pytest.raises(ConverterTableError, match="Unable to load converter module"):
        _import_module_or_path(str(module_file))


def test_import_module_by_name_failure_raises() -> None:
    """Raise ConverterTableError when import path cannot be imported."""
    with pytest.raises(ConverterTableError, match="Unable to import converter module"):
        _import_module_or_path("module.that.does.not.exist")


def test_register_from_module_uses_hook() -> None:
    """Prefer register_converters(table) when available."""
    table = ConverterTable()
    module = types.SimpleNamespace(register_converters=lambda t: t.register(_spec()))
    _register_from_module(module, table)
    assert table.names() == ["ISet"]


def test_register_from_module_with_converters_list() -> None:
    """Register every entry of CONVERTERS."""
    table = ConverterTable()
    module = types.SimpleNamespace(
        CONVERTERS=[_spec("ISet"), {"shape_name": "IList", "converter_name": "ListConverter"}]
    )
    _register_from_module(module, table)
    assert table.names() == ["IList", "ISet"]


def test_register_from_module_requires_contract() -> None:
    """Raise when the module exposes no registration contract."""
    with pytest.raises(ConverterTableError, match="must expose"):
        _register_from_module(types.SimpleNamespace(), ConverterTable())


def test_create_default_table_loads_extra_modules(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Load extra modules passed into create_default_table."""
    loaded: list[str] = []

    def fake_load_module(self: ConverterTable, module: str) -> None:
        loaded.append(module)

    monkeypatch.setattr(ConverterTable, "load_module", fake_load_module)
    table = create_default_table(extra_modules=["a.b", "c.d"])
    assert "IEnumerable" in table.names()
    assert loaded == ["a.b", "c.d"]
