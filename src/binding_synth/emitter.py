"""Binding emitter.

Renders the capability interface, the adapter implementing it, and the
converter registration block for one scripted module. Sections are built
independently with ``CodeGen`` and concatenated into the final unit text.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from binding_synth.codegen import CodeGen
from binding_synth.model import FunctionSignature, ParameterSignature, is_void
from binding_synth.naming import pascal_case, safe_identifier
from binding_synth.resolver import ConverterManifest

if TYPE_CHECKING:
    from binding_synth.application.ports import CallSiteRenderer

FILE_HEADER = (
    "// <auto-generated/>",
    "using Python.Runtime;",
    "using PythonEnvironments;",
    "using PythonEnvironments.CustomConverters;",
    "",
    "using System;",
    "using System.Collections.Generic;",
    "",
)


def _ordered(function: FunctionSignature) -> list[ParameterSignature]:
    return sorted(function.parameters, key=lambda p: p.position)


def parameter_list(function: FunctionSignature) -> str:
    """Render ``(long a, string b)`` for a function."""
    params = ", ".join(
        f"{param.shape.render()} {safe_identifier(param.name)}"
        for param in _ordered(function)
    )
    return f"({params})"


def method_declaration(function: FunctionSignature) -> str:
    """Render ``long Add(long a, long b)`` without modifiers or terminator."""
    return_type = function.return_shape.render()
    return f"{return_type} {pascal_case(function.name)}{parameter_list(function)}"


class PythonNetCallRenderer:
    """Delegate adapter calls through the Python.NET runtime."""

    def adapter_fields(self, module_name: str) -> list[str]:
        del module_name
        return ["private readonly PyObject module;"]

    def constructor_lines(self, module_name: str) -> list[str]:
        return [f'module = Py.Import("{module_name}");']

    def render_body(self, function: FunctionSignature, gen: CodeGen) -> None:
        params = _ordered(function)
        with gen.block("using (GIL.Acquire())"):
            gen.line(
                "using PyObject __underlyingPythonFunc = "
                f'this.module.GetAttr("{function.name}");'
            )
            for param in params:
                gen.line(
                    f"using PyObject {param.name}_pyObject = "
                    f"{safe_identifier(param.name)}.ToPython();"
                )
            call_args = ", ".join(f"{param.name}_pyObject" for param in params)
            gen.line(
                "using PyObject __result_pyObject = "
                f"__underlyingPythonFunc.Call({call_args});"
            )
            if not is_void(function.return_shape):
                gen.line(f"return __result_pyObject.As<{function.return_shape.render()}>();")


@dataclass(frozen=True)
class EmittedBinding:
    """Rendered sections of a binding unit."""

    interface_text: str
    adapter_text: str
    registrations: tuple[str, ...]
    source_text: str


class BindingEmitter:
    """Render binding source text for a scripted module."""

    def __init__(self, renderer: CallSiteRenderer | None = None) -> None:
        self.renderer = renderer or PythonNetCallRenderer()

    def interface_text(
        self,
        type_name: str,
        functions: Sequence[FunctionSignature],
    ) -> str:
        gen = CodeGen()
        with gen.block(f"public interface I{type_name}"):
            for function in functions:
                gen.line(f"{method_declaration(function)};")
        return gen.output()

    def registration_block(self, manifest: ConverterManifest) -> tuple[str, ...]:
        """Encoder registrations first, then decoder registrations."""
        return tuple(manifest.registration_statements())

    def adapter_text(
        self,
        module_name: str,
        type_name: str,
        functions: Sequence[FunctionSignature],
        registrations: Sequence[str],
    ) -> str:
        internal = f"{type_name}Internal"
        gen = CodeGen()
        with gen.block(f"public static class {type_name}Extensions"):
            gen.line(
                f"private static readonly I{type_name} instance = new {internal}();"
            )
            gen.line()
            with gen.block(f"public static I{type_name} {type_name}(this IPythonEnvironment env)"):
                gen.line("return instance;")
            gen.line()
            with gen.block(f"private class {internal} : I{type_name}"):
                for field_line in self.renderer.adapter_fields(module_name):
                    gen.line(field_line)
                gen.line()
                for function in functions:
                    with gen.block(f"public {method_declaration(function)}"):
                        self.renderer.render_body(function, gen)
                    gen.line()
                with gen.block(f"internal {internal}()"):
                    gen.lines(*registrations)
                    gen.lines(*self.renderer.constructor_lines(module_name))
        return gen.output()

    def emit(
        self,
        *,
        module_name: str,
        type_name: str,
        namespace: str,
        functions: Sequence[FunctionSignature],
        manifest: ConverterManifest,
    ) -> EmittedBinding:
        """Render every section and the complete unit text."""
        registrations = self.registration_block(manifest)
        interface = self.interface_text(type_name, functions)
        adapter = self.adapter_text(module_name, type_name, functions, registrations)

        unit = CodeGen()
        unit.lines(*FILE_HEADER)
        with unit.block(f"namespace {namespace}"):
            unit.extend(adapter)
            unit.extend(interface)
        return EmittedBinding(
            interface_text=interface,
            adapter_text=adapter,
            registrations=registrations,
            source_text=unit.output() + "\n",
        )