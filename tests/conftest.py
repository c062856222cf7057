"""Global pytest configuration.

Registers the combitest collection plugin so test modules can declare
``test_*`` scenarios directly, and ``pytester`` for plugin-level tests.
"""

from __future__ import annotations

import pytest

from combitest import Scenario, Variable

pytest_plugins: list[str] = ["pytester", "combitest.pytest_plugin"]


@pytest.fixture
def doubles() -> Scenario:
    """Two variables with two values each: a in {A1, A2}, b in {B10, B20}."""
    return Scenario(
        title="doubles",
        variables=[
            Variable.of("a", A1=1, A2=2),
            Variable.of("b", B10=10, B20=20),
        ],
        when=lambda a, b: 2 * a + 2 * b,
        then=lambda result, a, b: result == 2 * (a + b),
    )


@pytest.fixture
def cube() -> Scenario:
    """Three variables with three values each."""
    return Scenario(
        title="cube",
        variables=[
            Variable.of("a", A1=1, A2=2, A3=3),
            Variable.of("b", B10=10, B20=20, B30=30),
            Variable.of("c", C100=100, C200=200, C300=300),
        ],
        when=lambda a, b, c: 2 * a + 2 * b + 2 * c,
        then=lambda result, a, b, c: result == 2 * (a + b + c),
    )
