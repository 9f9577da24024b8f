"""Integration tests running the CLI against real source files."""

from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from binding_synth.cli import cli as cli_module

runner = CliRunner()

HELLO_WORLD = '''
def add(a: int, b: int) -> int:
    return a + b


def greet(name: str) -> None:
    print(f"hello {name}")


def word_counts(lines: list[str]) -> dict[str, int]:
    return {}
'''


def _write_hello(tmp_path: Path) -> Path:
    source = tmp_path / "hello_world.py"
    source.write_text(HELLO_WORLD, encoding="utf-8")
    return source


def _write_manifest(tmp_path: Path) -> Path:
    manifest = tmp_path / "mixed.json"
    manifest.write_text(
        json.dumps(
            {
                "module": "mixed_tools",
                "namespace": "Acme.Tools",
                "functions": [
                    {"name": "f", "parameters": [{"name": "x", "type": "IEnumerable<long>"}]},
                    {
                        "name": "g",
                        "parameters": [
                            {"name": "y", "type": "IReadOnlyDictionary<string, IEnumerable<long>>"}
                        ],
                    },
                    {"name": "h", "parameters": [{"name": "z", "type": "Custom<long>"}]},
                ],
            }
        ),
        encoding="utf-8",
    )
    return manifest


def test_cli_help_smoke() -> None:
    """Verify root help output renders successfully."""
    result = runner.invoke(cli_module.app, ["--help"])
    assert result.exit_code == 0
    assert "Generate statically-typed host bindings" in result.output


def test_generate_python_module_into_directory(tmp_path: Path) -> None:
    """Write a complete binding unit for a Python module."""
    source = _write_hello(tmp_path)
    out_dir = tmp_path / "Generated"
    result = runner.invoke(cli_module.app, ["generate", str(source), "-o", str(out_dir)])
    assert result.exit_code == 0, result.output

    generated = out_dir / "HelloWorld.py.cs"
    text = generated.read_text(encoding="utf-8")
    assert text.startswith("// <auto-generated/>")
    assert "namespace Python.Generated" in text
    assert "long Add(long a, long b);" in text
    assert "void Greet(string name);" in text
    assert (
        "IReadOnlyDictionary<string, long> WordCounts(IEnumerable<string> lines);" in text
    )
    assert "PyObjectConversions.RegisterEncoder(new ListConverter<string>());" in text
    assert 'module = Py.Import("hello_world");' in text
    # return shape of word_counts is not covered by parameters
    assert "BSG005 warning" in result.output
    assert f"Saved: {generated}" in result.output


def test_generate_next_to_source_by_default(tmp_path: Path) -> None:
    """Without --out-dir the unit lands beside its source."""
    source = _write_hello(tmp_path)
    result = runner.invoke(
        cli_module.app, ["generate", str(source), "--include-return-types"]
    )
    assert result.exit_code == 0, result.output
    text = (tmp_path / "HelloWorld.py.cs").read_text(encoding="utf-8")
    assert "new DictionaryConverter<string, long>()" in text
    assert "new TupleConverter()" in text
    assert "BSG005" not in result.output


def test_generate_manifest_skips_unsupported_function(tmp_path: Path) -> None:
    """The unsupported function is reported and left out of the unit."""
    manifest = _write_manifest(tmp_path)
    out_dir = tmp_path / "out"
    result = runner.invoke(cli_module.app, ["generate", str(manifest), "-o", str(out_dir)])
    assert result.exit_code == 0, result.output
    assert "BSG001 error: mixed_tools.h" in result.output

    text = (out_dir / "MixedTools.py.cs").read_text(encoding="utf-8")
    assert "namespace Acme.Tools" in text
    assert "void F(IEnumerable<long> x);" in text
    assert "void G(IReadOnlyDictionary<string, IEnumerable<long>> y);" in text
    assert " H(" not in text
    encoders = [
        line.strip()
        for line in text.splitlines()
        if "RegisterEncoder" in line
    ]
    assert encoders == [
        "PyObjectConversions.RegisterEncoder(new ListConverter<long>());",
        "PyObjectConversions.RegisterEncoder(new DictionaryConverter<string, IEnumerable<long>>());",
        "PyObjectConversions.RegisterEncoder(new TupleConverter());",
    ]

    strict = runner.invoke(
        cli_module.app, ["generate", str(manifest), "-o", str(out_dir), "--strict"]
    )
    assert strict.exit_code == 1


def test_generate_continues_past_broken_source(tmp_path: Path) -> None:
    """A broken module fails the run but other modules are still written."""
    broken = tmp_path / "broken.py"
    broken.write_text("def f(:\n", encoding="utf-8")
    source = _write_hello(tmp_path)
    out_dir = tmp_path / "out"
    result = runner.invoke(
        cli_module.app, ["generate", str(broken), str(source), "-o", str(out_dir), "--workers", "2"]
    )
    assert result.exit_code == 1
    assert "BSG004 error" in result.output
    assert (out_dir / "HelloWorld.py.cs").exists()
    assert not (out_dir / "Broken.py.cs").exists()


def test_resolve_python_module(tmp_path: Path) -> None:
    """Print registrations for parameter shapes."""
    source = _write_hello(tmp_path)
    result = runner.invoke(cli_module.app, ["resolve", str(source)])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "PyObjectConversions.RegisterEncoder(new ListConverter<string>());",
        "PyObjectConversions.RegisterDecoder(new ListConverter<string>());",
    ]


def test_resolve_unsupported_manifest_fails(tmp_path: Path) -> None:
    """Resolution of a whole module is strict."""
    manifest = _write_manifest(tmp_path)
    result = runner.invoke(cli_module.app, ["resolve", str(manifest)])
    assert result.exit_code == 2
    assert "No converter for Custom" in result.output


def test_converter_extension_module(tmp_path: Path) -> None:
    """Extension modules add shapes usable by generate."""
    extension = tmp_path / "set_converters.py"
    extension.write_text(
        "CONVERTERS = [\n"
        "    {'shape_name': 'ISet', 'converter_name': 'SetConverter', 'kind': 'set'},\n"
        "]\n",
        encoding="utf-8",
    )
    manifest = tmp_path / "sets.json"
    manifest.write_text(
        json.dumps(
            {
                "module": "sets",
                "functions": [{"name": "unique", "parameters": [{"name": "s", "type": "ISet<long>"}]}],
            }
        ),
        encoding="utf-8",
    )

    listed = runner.invoke(
        cli_module.app, ["converters", "--converter-module", str(extension)]
    )
    assert "ISet -> SetConverter (set)" in listed.output

    result = runner.invoke(
        cli_module.app, ["resolve", str(manifest), "--converter-module", str(extension)]
    )
    assert result.exit_code == 0, result.output
    assert "PyObjectConversions.RegisterEncoder(new SetConverter<long>());" in result.output
