"""Shared pytest configuration, marker assignment, and signature helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from binding_synth.model import (
    VOID,
    FunctionSignature,
    ParameterSignature,
    TypeShape,
    parse_shape,
)


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def make_function(
    name: str,
    *params: tuple[str, str | TypeShape],
    returns: str | TypeShape | None = None,
) -> FunctionSignature:
    """Build a signature from ``(name, annotation)`` pairs."""
    return FunctionSignature(
        name=name,
        parameters=tuple(
            ParameterSignature(
                name=param_name,
                shape=parse_shape(shape) if isinstance(shape, str) else shape,
                position=index,
            )
            for index, (param_name, shape) in enumerate(params)
        ),
        return_shape=(
            VOID
            if returns is None
            else parse_shape(returns) if isinstance(returns, str) else returns
        ),
    )


@pytest.fixture
def fn():
    """Expose ``make_function`` to tests."""
    return make_function
