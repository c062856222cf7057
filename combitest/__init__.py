"""combitest: combinatorial test-case generation.

A scenario names a set of variables, each with an ordered list of named
values. combitest expands it into one test case per combination and names
every case by its hierarchical path ``title::var1::value1::...``.

Primary API:
    Scenario, Variable, Value - Declarative scenario model
    TestCase - One fully bound combination, runnable on its own
    expand_scenario() - Validate and expand a scenario into test cases
    ScenarioSuite - Scenarios with unique titles
    run_cases() - Run cases and collect outcomes
    SpecificationError - Raised for malformed scenarios

Example:
    from combitest import Scenario, Variable

    doubles = Scenario(
        title="doubles",
        variables=[
            Variable.of("a", A1=1, A2=2, A3=3),
            Variable.of("b", B10=10, B20=20),
        ],
        when=lambda a, b: (a + (b << 1)) << 1,
        then=lambda result, a, b: result == 2 * a + 4 * b,
    )

    for case in doubles.expand():
        print(case.name, case.run().outcome)

With ``combitest.pytest_plugin`` enabled, binding the scenario to a
``test_*`` name in a test module collects each case as its own test.
"""

from __future__ import annotations

from combitest import logging
from combitest._version import __version__
from combitest.config import EXPANSION_CONFIG, ExpansionConfig
from combitest.errors import AssertionFailure, ExecutionError, SpecificationError
from combitest.expand import count_cases, expand_scenario, validate_scenario
from combitest.hierarchy import build_tree, format_path, parse_path
from combitest.loader import load_scenario_yaml
from combitest.model import Scenario, TestCase, Value, Variable
from combitest.results import CaseOutcome, CaseResult, RunSummary
from combitest.runner import run_case, run_cases, select_cases
from combitest.suite import ScenarioSuite

__all__ = [
    # Version
    "__version__",
    # Model
    "Scenario",
    "Variable",
    "Value",
    "TestCase",
    "ScenarioSuite",
    # Expansion
    "expand_scenario",
    "validate_scenario",
    "count_cases",
    # Naming
    "format_path",
    "parse_path",
    "build_tree",
    # Execution
    "run_case",
    "run_cases",
    "select_cases",
    "CaseOutcome",
    "CaseResult",
    "RunSummary",
    # Errors
    "SpecificationError",
    "ExecutionError",
    "AssertionFailure",
    # Configuration
    "ExpansionConfig",
    "EXPANSION_CONFIG",
    "load_scenario_yaml",
    "logging",
]
