#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/binding_synth"

CORE_MODULES = [
    "codegen.py",
    "emitter.py",
    "errors.py",
    "model.py",
    "naming.py",
    "resolver.py",
    "schemas.py",
    "converters/base.py",
    "converters/builtins.py",
    "converters/registry.py",
]


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    _assert_no_imports(
        PACKAGE / "cli/cli.py",
        ["binding_synth.application.use_cases", "binding_synth.infrastructure"],
    )

    for name in CORE_MODULES:
        _assert_no_imports(
            PACKAGE / name,
            [
                "import typer",
                "from typer",
                "binding_synth.api",
                "binding_synth.cli",
                "binding_synth.infrastructure",
            ],
        )

    for path in (PACKAGE / "application").glob("*.py"):
        _assert_no_imports(
            path,
            ["import typer", "from typer", "binding_synth.api", "binding_synth.cli"],
        )

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
