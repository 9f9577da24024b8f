"""Unit tests for binding source rendering."""

from __future__ import annotations

from binding_synth.codegen import CodeGen
from binding_synth.emitter import BindingEmitter, method_declaration, parameter_list
from binding_synth.resolver import ConverterManifest, resolve_converters


def _hello_world(fn):
    return [
        fn("add", ("a", "long"), ("b", "long"), returns="long"),
        fn("greet", ("name", "string")),
    ]


def test_interface_lists_one_declaration_per_function(fn) -> None:
    """Render the capability interface in declaration order."""
    text = BindingEmitter().interface_text("HelloWorld", _hello_world(fn))
    assert text == (
        "public interface IHelloWorld\n"
        "{\n"
        "    long Add(long a, long b);\n"
        "    void Greet(string name);\n"
        "}"
    )


def test_keyword_parameters_are_escaped(fn) -> None:
    """Host keywords used as parameter names get an @ prefix."""
    function = fn("format_name", ("string", "string"), ("class", "long"), returns="string")
    assert parameter_list(function) == "(string @string, long @class)"
    assert method_declaration(function) == "string FormatName(string @string, long @class)"


def test_empty_module_renders_empty_interface() -> None:
    """A module without functions still yields a valid interface."""
    assert BindingEmitter().interface_text("Empty", []) == "public interface IEmpty\n{\n}"


def test_adapter_delegates_through_module(fn) -> None:
    """Adapter methods call the scripted function and convert the result."""
    text = BindingEmitter().adapter_text("hello_world", "HelloWorld", _hello_world(fn), [])
    assert "public static class HelloWorldExtensions" in text
    assert "private static readonly IHelloWorld instance = new HelloWorldInternal();" in text
    assert "public static IHelloWorld HelloWorld(this IPythonEnvironment env)" in text
    assert "private class HelloWorldInternal : IHelloWorld" in text
    assert 'this.module.GetAttr("add");' in text
    assert "__underlyingPythonFunc.Call(a_pyObject, b_pyObject);" in text
    assert "return __result_pyObject.As<long>();" in text
    assert 'module = Py.Import("hello_world");' in text
    # greet returns void
    assert text.count("return __result_pyObject") == 1


def test_adapter_converts_escaped_parameters(fn) -> None:
    """Conversion locals keep the raw name, calls use the escaped one."""
    text = BindingEmitter().adapter_text(
        "m", "M", [fn("echo", ("string", "string"), returns="string")], []
    )
    assert "using PyObject string_pyObject = @string.ToPython();" in text


def test_registrations_precede_module_import(fn) -> None:
    """The constructor registers converters before importing the module."""
    functions = [fn("f", ("x", "IEnumerable<long>"))]
    manifest = resolve_converters(functions)
    emitted = BindingEmitter().emit(
        module_name="lists",
        type_name="Lists",
        namespace="Python.Generated",
        functions=functions,
        manifest=manifest,
    )
    source = emitted.source_text
    encoder = source.index("PyObjectConversions.RegisterEncoder(new ListConverter<long>());")
    decoder = source.index("PyObjectConversions.RegisterDecoder(new ListConverter<long>());")
    assert encoder < decoder < source.index('module = Py.Import("lists");')
    assert emitted.registrations == tuple(manifest.registration_statements())


def test_emit_wraps_sections_in_namespace(fn) -> None:
    """The unit carries the header, namespace, adapter and interface."""
    emitted = BindingEmitter().emit(
        module_name="hello_world",
        type_name="HelloWorld",
        namespace="Acme.Scripts",
        functions=_hello_world(fn),
        manifest=ConverterManifest(),
    )
    source = emitted.source_text
    assert source.startswith("// <auto-generated/>\nusing Python.Runtime;")
    assert "namespace Acme.Scripts\n{\n    public static class HelloWorldExtensions" in source
    assert "    public interface IHelloWorld\n" in source
    assert source.index("HelloWorldExtensions") < source.index("public interface IHelloWorld")
    assert source.endswith("}\n")
    assert "RegisterEncoder" not in source


class _StubRenderer:
    def adapter_fields(self, module_name: str) -> list[str]:
        return [f"// fields for {module_name}"]

    def constructor_lines(self, module_name: str) -> list[str]:
        return ["Init();"]

    def render_body(self, function, gen: CodeGen) -> None:
        gen.line(f"throw new NotImplementedException(\"{function.name}\");")


def test_custom_call_site_renderer(fn) -> None:
    """The call mechanism is pluggable."""
    text = BindingEmitter(_StubRenderer()).adapter_text("m", "M", [fn("ping")], [])
    assert "// fields for m" in text
    assert 'throw new NotImplementedException("ping");' in text
    assert "Init();" in text
    assert "GIL.Acquire" not in text


def test_codegen_blocks_and_extend() -> None:
    """Blocks indent their body and extend re-indents pre-rendered text."""
    gen = CodeGen()
    with gen.block("outer"):
        gen.extend("a\n{\n    b\n}")
    assert gen.output() == "outer\n{\n    a\n    {\n        b\n    }\n}"
