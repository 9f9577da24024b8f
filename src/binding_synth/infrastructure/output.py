"""Binding unit persistence."""

from __future__ import annotations

from pathlib import Path

from binding_synth.application.results import BindingUnit


def _write(directory: Path, unit: BindingUnit) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / unit.file_name
    path.write_text(unit.source_text, encoding="utf-8")
    return path


class DirectoryBindingSink:
    """Write each unit as ``<TypeName>.py.cs`` under a directory."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def write(self, unit: BindingUnit, source_path: Path) -> Path:
        del source_path
        return _write(self.output_dir, unit)


class SiblingBindingSink:
    """Write each unit next to the source it was generated from."""

    def write(self, unit: BindingUnit, source_path: Path) -> Path:
        return _write(source_path.parent, unit)
