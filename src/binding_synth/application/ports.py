"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from binding_synth.codegen import CodeGen
from binding_synth.model import FunctionSignature, ModuleSignatures

if TYPE_CHECKING:
    from binding_synth.application.results import BindingUnit


class SignatureSource(Protocol):
    """Produce parsed signatures for a scripted module."""

    def load(self, source_path: Path) -> ModuleSignatures:
        """Load signatures; raise ``MalformedSignatureError`` on bad input."""


class CallSiteRenderer(Protocol):
    """Render the scripted-call mechanism used by adapter methods."""

    def adapter_fields(self, module_name: str) -> list[str]:
        """Field declarations the adapter needs."""

    def constructor_lines(self, module_name: str) -> list[str]:
        """Statements run by the adapter constructor after registration."""

    def render_body(self, function: FunctionSignature, gen: CodeGen) -> None:
        """Write the body of one adapter method into ``gen``."""


class BindingSink(Protocol):
    """Persist rendered binding units."""

    def write(self, unit: BindingUnit, source_path: Path) -> Path:
        """Write unit source text generated from ``source_path``; return its path."""


class ConversionRegistry(Protocol):
    """Process-wide conversion registry consulted at call time."""

    def register_encoder(self, identity: str) -> None:
        """Register an encoder; repeated identities are ignored."""

    def register_decoder(self, identity: str) -> None:
        """Register a decoder; repeated identities are ignored."""
