"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from binding_synth.model import FunctionSignature
from binding_synth.resolver import ConverterManifest


class DiagnosticCode(StrEnum):
    """Stable diagnostic codes surfaced to calling toolchains."""

    UNSUPPORTED_SHAPE = "BSG001"
    GENERATED = "BSG002"
    DUPLICATE_FUNCTION = "BSG003"
    MALFORMED_INPUT = "BSG004"
    UNREGISTERED_RETURN_SHAPE = "BSG005"


class Severity(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """Structured generation diagnostic."""

    code: DiagnosticCode
    severity: Severity
    message: str
    module_name: str | None = None
    function_name: str | None = None
    shape: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        """Render as ``CODE severity: message``."""
        return f"{self.code} {self.severity}: {self.message}"


@dataclass(frozen=True)
class BindingUnit:
    """Rendered bindings for one scripted module.

    ``diagnostics`` only holds problems; a clean module has none. Use
    ``report()`` for the full list including the informational entry.
    """

    module_name: str
    namespace: str
    type_name: str
    interface_text: str = ""
    adapter_text: str = ""
    registrations: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    functions: tuple[FunctionSignature, ...] = ()
    manifest: ConverterManifest = field(default_factory=ConverterManifest)
    source_text: str = ""

    @property
    def file_name(self) -> str:
        return f"{self.type_name}.py.cs"

    @property
    def generated(self) -> bool:
        return bool(self.source_text)

    @property
    def has_errors(self) -> bool:
        return any(diag.is_error for diag in self.diagnostics)

    def report(self) -> tuple[Diagnostic, ...]:
        """Return diagnostics plus a progress note when source was produced."""
        if not self.generated:
            return self.diagnostics
        note = Diagnostic(
            code=DiagnosticCode.GENERATED,
            severity=Severity.INFO,
            message=f"Generated {self.file_name}",
            module_name=self.module_name,
        )
        return (*self.diagnostics, note)


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of generating bindings from one source file."""

    unit: BindingUnit
    source_path: Path
    output_path: Path | None = None
