"""Indentation-aware text builder for generated host source."""

from __future__ import annotations

from types import TracebackType


class CodeGen:
    """Line-oriented code builder.

    Sections are assembled independently and joined by the emitter.
    """

    def __init__(self, indent: int = 0, indent_str: str = "    ") -> None:
        self._lines: list[str] = []
        self._indent = indent
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Add a line with current indentation."""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append("")

    def lines(self, *texts: str) -> None:
        for text in texts:
            self.line(text)

    def extend(self, text: str) -> None:
        """Append pre-rendered text, re-indented at this level."""
        for item in text.splitlines():
            self.line(item)

    def indent(self) -> None:
        self._indent += 1

    def dedent(self) -> None:
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, opener: str = "{", footer: str = "}") -> _BlockContext:
        """Context manager emitting ``header``, a braced body, then ``footer``."""
        return _BlockContext(self, header, opener, footer)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def output(self) -> str:
        """Get generated code as string."""
        return "\n".join(self._lines)


class _BlockContext:
    """Context manager for indented code blocks."""

    def __init__(self, gen: CodeGen, header: str, opener: str, footer: str) -> None:
        self._gen = gen
        self._header = header
        self._opener = opener
        self._footer = footer

    def __enter__(self) -> _BlockContext:
        if self._header:
            self._gen.line(self._header)
        self._gen.line(self._opener)
        self._gen.indent()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._gen.dedent()
        self._gen.line(self._footer)
