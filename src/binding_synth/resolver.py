"""Converter requirement resolution.

Walks the type shapes of a signature set and produces the ordered,
duplicate-free encoder and decoder lists to register, including converters
implied by other converters (a dictionary converter needs the tuple
converter).

Traversal order is signature order, then parameter order, then
depth-first left-to-right over nested arguments. First-seen order is kept.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from binding_synth.converters.base import ConverterRequirement
from binding_synth.converters.registry import ConverterTable, create_default_table
from binding_synth.model import FunctionSignature, Generic, TypeShape, iter_generics

if TYPE_CHECKING:
    from binding_synth.application.ports import ConversionRegistry

ENCODER_TEMPLATE = "PyObjectConversions.RegisterEncoder(new {identity}());"
DECODER_TEMPLATE = "PyObjectConversions.RegisterDecoder(new {identity}());"


@dataclass(frozen=True)
class ConverterManifest:
    """Resolved converters for one module."""

    encoders: tuple[ConverterRequirement, ...] = ()
    decoders: tuple[ConverterRequirement, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.encoders and not self.decoders

    def covers(self, requirement: ConverterRequirement) -> bool:
        """Check whether ``requirement`` is registered both ways."""
        return requirement in self.encoders and requirement in self.decoders

    def registration_statements(self) -> list[str]:
        """Render every encoder registration, then every decoder registration."""
        return [
            ENCODER_TEMPLATE.format(identity=req.identity) for req in self.encoders
        ] + [DECODER_TEMPLATE.format(identity=req.identity) for req in self.decoders]

    def apply(self, registry: ConversionRegistry) -> None:
        """Replay the registrations against a conversion registry."""
        for req in self.encoders:
            registry.register_encoder(req.identity)
        for req in self.decoders:
            registry.register_decoder(req.identity)


class ManifestBuilder:
    """Accumulates requirements for a single resolution pass."""

    def __init__(self) -> None:
        self._encoders: list[ConverterRequirement] = []
        self._decoders: list[ConverterRequirement] = []

    def add(self, requirement: ConverterRequirement) -> None:
        if requirement not in self._encoders:
            self._encoders.append(requirement)
        if requirement not in self._decoders:
            self._decoders.append(requirement)

    def add_all(self, requirements: Iterable[ConverterRequirement]) -> None:
        for requirement in requirements:
            self.add(requirement)

    def build(self) -> ConverterManifest:
        return ConverterManifest(
            encoders=tuple(self._encoders),
            decoders=tuple(self._decoders),
        )


class ConverterResolver:
    """Resolve converter requirements against a converter table."""

    def __init__(self, table: ConverterTable | None = None) -> None:
        self.table = table or create_default_table()

    def requirements_for_shape(self, shape: TypeShape) -> list[ConverterRequirement]:
        """Return requirements reachable from ``shape`` in traversal order.

        Raises
        ------
        UnsupportedShapeError
            If any reachable generic has no converter.
        """
        root = shape if isinstance(shape, Generic) else None
        requirements: list[ConverterRequirement] = []
        for generic in iter_generics(shape):
            spec = self.table.lookup(generic, root=root)
            requirements.append(spec.requirement_for(generic))
            requirements.extend(spec.implies)
        return requirements

    def requirements_for_function(
        self,
        function: FunctionSignature,
        include_return: bool = False,
    ) -> list[ConverterRequirement]:
        """Return requirements for a function's parameters (and return shape).

        Nothing is returned unless the whole function resolves.
        """
        shapes = list(function.parameter_shapes())
        if include_return:
            shapes.append(function.return_shape)
        requirements: list[ConverterRequirement] = []
        for shape in shapes:
            requirements.extend(self.requirements_for_shape(shape))
        return requirements

    def resolve(
        self,
        functions: Iterable[FunctionSignature],
        include_return_types: bool = False,
    ) -> ConverterManifest:
        """Resolve the manifest for a whole signature set.

        Raises
        ------
        UnsupportedShapeError
            On the first shape without a converter.
        """
        builder = ManifestBuilder()
        for function in functions:
            builder.add_all(
                self.requirements_for_function(function, include_return=include_return_types)
            )
        return builder.build()


def resolve_converters(
    functions: Iterable[FunctionSignature],
    table: ConverterTable | None = None,
    include_return_types: bool = False,
) -> ConverterManifest:
    """Resolve converters for ``functions`` with the default table."""
    return ConverterResolver(table).resolve(
        functions, include_return_types=include_return_types
    )
