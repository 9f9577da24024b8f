"""Signature model consumed by the resolver and emitter.

A scripted module is described by an ordered tuple of ``FunctionSignature``
values. Every parameter and return value carries a ``TypeShape``: either a
``Primitive`` or a ``Generic`` with nested argument shapes.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TypeAlias

from binding_synth.errors import MalformedSignatureError


@dataclass(frozen=True)
class Primitive:
    """Leaf shape such as ``long`` or ``string``."""

    name: str

    def render(self) -> str:
        """Render the shape as host type text."""
        return self.name


@dataclass(frozen=True)
class Generic:
    """Named generic shape with ordered argument shapes."""

    name: str
    args: tuple[TypeShape, ...] = ()

    def render(self) -> str:
        """Render the shape as host type text, e.g. ``IEnumerable<long>``."""
        return f"{self.name}{self.type_argument_list()}"

    def type_argument_list(self) -> str:
        """Render only the argument list, e.g. ``<string, long>``."""
        if not self.args:
            return ""
        return "<" + ", ".join(arg.render() for arg in self.args) + ">"


TypeShape: TypeAlias = Primitive | Generic

VOID = Primitive("void")


@dataclass(frozen=True)
class ParameterSignature:
    """One positional parameter of a scripted function."""

    name: str
    shape: TypeShape
    position: int


@dataclass(frozen=True)
class FunctionSignature:
    """Scripted function signature.

    Parameters
    ----------
    name : str
        Function name as written in the scripted module (case-sensitive).
    parameters : tuple[ParameterSignature, ...]
        Parameters in call order.
    return_shape : TypeShape
        Return shape, ``VOID`` when the function returns nothing.
    """

    name: str
    parameters: tuple[ParameterSignature, ...] = ()
    return_shape: TypeShape = VOID

    def parameter_shapes(self) -> tuple[TypeShape, ...]:
        """Return parameter shapes in position order."""
        ordered = sorted(self.parameters, key=lambda p: p.position)
        return tuple(param.shape for param in ordered)


@dataclass(frozen=True)
class ModuleSignatures:
    """Parsed signature set for one scripted module."""

    module_name: str
    functions: tuple[FunctionSignature, ...]
    namespace: str | None = None


def iter_generics(shape: TypeShape) -> Iterator[Generic]:
    """Yield every generic reachable from ``shape``.

    Order is depth-first, left-to-right, parents before children.
    """
    stack: list[TypeShape] = [shape]
    while stack:
        current = stack.pop()
        if isinstance(current, Generic):
            yield current
            stack.extend(reversed(current.args))


def is_void(shape: TypeShape) -> bool:
    """Check whether ``shape`` denotes the absence of a return value."""
    return isinstance(shape, Primitive) and shape.name == VOID.name


_TOKEN_RE = re.compile(r"\s*(?:([A-Za-z_][\w.]*)|([\[\]<>,]))")
_CLOSERS = {"[": "]", "<": ">"}


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if match is None:
            raise MalformedSignatureError(
                f"Unexpected character {stripped[pos:].strip()[:1]!r} in type '{text}'"
            )
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


def parse_shape(text: str) -> TypeShape:
    """Parse an annotation string into a ``TypeShape``.

    Both ``dict[str, list[int]]`` and ``IReadOnlyDictionary<string, long>``
    forms are accepted.

    Raises
    ------
    MalformedSignatureError
        If the text is empty or not a well-formed type expression.
    """
    tokens = _tokenize(text)
    if not tokens:
        raise MalformedSignatureError("Type annotation cannot be empty.")
    shape, index = _parse_at(tokens, 0, text)
    if index != len(tokens):
        raise MalformedSignatureError(
            f"Unexpected '{tokens[index]}' in type '{text}'"
        )
    return shape


def _parse_at(tokens: list[str], index: int, text: str) -> tuple[TypeShape, int]:
    if index >= len(tokens) or not _is_name(tokens[index]):
        raise MalformedSignatureError(f"Expected a type name in '{text}'")
    name = tokens[index]
    index += 1
    if index >= len(tokens) or tokens[index] not in _CLOSERS:
        return Primitive(name), index

    closer = _CLOSERS[tokens[index]]
    index += 1
    args: list[TypeShape] = []
    while True:
        arg, index = _parse_at(tokens, index, text)
        args.append(arg)
        if index >= len(tokens):
            raise MalformedSignatureError(f"Unbalanced brackets in '{text}'")
        if tokens[index] == ",":
            index += 1
            continue
        if tokens[index] == closer:
            return Generic(name, tuple(args)), index + 1
        raise MalformedSignatureError(
            f"Unexpected '{tokens[index]}' in type '{text}'"
        )


def _is_name(token: str) -> bool:
    return token not in _CLOSERS and token not in {"]", ">", ","}
