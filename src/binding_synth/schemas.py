"""Pydantic schemas for runtime validation of signature manifests."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from binding_synth.model import (
    VOID,
    FunctionSignature,
    Generic,
    ModuleSignatures,
    ParameterSignature,
    Primitive,
    TypeShape,
    parse_shape,
)


class ShapeConfig(BaseModel):
    """Structured type shape; ``args=None`` marks a primitive."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    args: list[ShapeConfig | str] | None = None

    def to_shape(self) -> TypeShape:
        """Build the model shape."""
        if self.args is None:
            return Primitive(self.name.strip())
        return Generic(self.name.strip(), tuple(_to_shape(arg) for arg in self.args))


def _to_shape(value: ShapeConfig | str) -> TypeShape:
    if isinstance(value, str):
        return parse_shape(value)
    return value.to_shape()


class ParameterConfig(BaseModel):
    """Validated parameter entry."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: ShapeConfig | str

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value.isidentifier():
            raise ValueError(f"parameter name '{value}' is not a valid identifier.")
        return value


class FunctionConfig(BaseModel):
    """Validated function entry."""

    model_config = ConfigDict(extra="forbid")

    name: str
    parameters: list[ParameterConfig] = Field(default_factory=list)
    returns: ShapeConfig | str | None = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        value = value.strip()
        if not value.isidentifier():
            raise ValueError(f"function name '{value}' is not a valid identifier.")
        return value

    @field_validator("parameters")
    @classmethod
    def _validate_unique_parameters(
        cls, value: list[ParameterConfig]
    ) -> list[ParameterConfig]:
        names = [param.name for param in value]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate parameter names: {', '.join(duplicates)}")
        return value

    def to_signature(self) -> FunctionSignature:
        """Build the model signature; raises ``MalformedSignatureError`` on bad types."""
        return FunctionSignature(
            name=self.name,
            parameters=tuple(
                ParameterSignature(name=param.name, shape=_to_shape(param.type), position=index)
                for index, param in enumerate(self.parameters)
            ),
            return_shape=VOID if self.returns is None else _to_shape(self.returns),
        )


class ModuleManifestConfig(BaseModel):
    """Validated signature manifest for one scripted module."""

    model_config = ConfigDict(extra="forbid")

    module: str = Field(min_length=1)
    namespace: str | None = None
    functions: list[FunctionConfig]

    def to_signatures(self) -> ModuleSignatures:
        """Build the model signature set."""
        return ModuleSignatures(
            module_name=self.module.strip(),
            functions=tuple(function.to_signature() for function in self.functions),
            namespace=self.namespace,
        )


class ConverterSpecConfig(BaseModel):
    """Validated converter extension entry."""

    model_config = ConfigDict(extra="forbid", strict=True)

    shape_name: str = Field(min_length=1)
    converter_name: str = Field(min_length=1)
    kind: str = "custom"
    parameterized: bool = True
    implies: list[str] = Field(default_factory=list)


ShapeConfig.model_rebuild()
