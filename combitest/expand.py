"""Cartesian expansion of scenarios into test cases.

Expansion walks the variable list recursively. Each level iterates the current
variable's values in declaration order, extends a private copy of the
accumulated bindings and path, and recurses into the remaining variables. The
base case emits one combination. The first variable therefore varies slowest
and the last one fastest.

Usage:
    from combitest.expand import expand_scenario

    cases = expand_scenario(scenario)
    [case.path for case in cases]
    # [("doubles", "a", "A1", "b", "B10"), ("doubles", "a", "A1", "b", "B20"), ...]
"""

from __future__ import annotations

import keyword
from math import prod
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from combitest.config import EXPANSION_CONFIG, ExpansionConfig
from combitest.errors import SpecificationError
from combitest.hierarchy import extend_path
from combitest.logging import get_logger
from combitest.model import Scenario, TestCase, Variable

__all__ = [
    "count_cases",
    "expand_bindings",
    "expand_paths",
    "expand_scenario",
    "validate_scenario",
    "validate_variables",
]

logger = get_logger(__name__)


def _reject(
    message: str, *, scenario: Optional[str] = None, variable: Optional[str] = None
) -> SpecificationError:
    error = SpecificationError(message, scenario=scenario, variable=variable)
    logger.error("Invalid scenario definition: %s", error)
    return error


def _check_label(label: Any, what: str, separator: str, **where: Any) -> None:
    if not isinstance(label, str) or not label:
        raise _reject(f"{what} must be a non-empty string, got {label!r}", **where)
    if separator in label:
        raise _reject(
            f"{what} '{label}' must not contain the path separator '{separator}'",
            **where,
        )


def count_cases(variables: Sequence[Variable]) -> int:
    """Return the number of combinations, zero when there are no variables."""
    if not variables:
        return 0
    return prod(len(v.values) for v in variables)


def validate_variables(
    title: str,
    variables: Sequence[Variable],
    config: Optional[ExpansionConfig] = None,
    reserved: Sequence[str] = (),
) -> None:
    """Check title and variables before anything is expanded.

    Args:
        title: Scenario title.
        variables: Variables in declaration order.
        config: Limits to enforce; defaults to :data:`EXPANSION_CONFIG`.
        reserved: Names a variable may not take (e.g. the result keyword).

    Raises:
        SpecificationError: If the title is unusable, there are no variables,
            a variable has no values, a variable name is duplicated, not an
            identifier, or reserved, a value name repeats within one
            variable, or the case count exceeds ``config.max_cases``.
    """
    cfg = config or EXPANSION_CONFIG
    sep = cfg.path_separator

    _check_label(title, "title", sep)
    if not variables:
        raise _reject("at least one variable is required", scenario=title)

    seen_vars: set[str] = set()
    for variable in variables:
        where = {"scenario": title, "variable": getattr(variable, "name", None)}
        if not isinstance(variable, Variable):
            raise _reject(f"expected a Variable, got {type(variable).__name__}", scenario=title)
        name = variable.name
        if not isinstance(name, str) or not name.isidentifier() or keyword.iskeyword(name):
            raise _reject("variable name must be a Python identifier", **where)
        if name in reserved:
            raise _reject("variable name collides with the result keyword", **where)
        if name in seen_vars:
            raise _reject("variable is declared more than once", **where)
        seen_vars.add(name)

        if not variable.values:
            raise _reject("variable has no values", **where)

        seen_values: set[str] = set()
        for value in variable.values:
            _check_label(value.name, "value name", sep, **where)
            if value.name in seen_values:
                raise _reject(f"duplicate value name '{value.name}'", **where)
            seen_values.add(value.name)

    total = count_cases(variables)
    if not cfg.check_case_count(total):
        raise _reject(
            f"expansion would create {total} cases (limit: {cfg.max_cases}); "
            "use fewer values or split the scenario",
            scenario=title,
        )


def validate_scenario(scenario: Scenario, config: Optional[ExpansionConfig] = None) -> None:
    """Check a scenario eagerly. See :func:`validate_variables` for the rules.

    Raises:
        SpecificationError: On any rule violation, or if ``when``/``then``
            are not callable.
    """
    title = scenario.title
    if not callable(scenario.when):
        raise _reject("'when' must be callable", scenario=title)
    if not callable(scenario.then):
        raise _reject("'then' must be callable", scenario=title)
    if not isinstance(scenario.result_name, str) or not scenario.result_name.isidentifier():
        raise _reject("result_name must be a Python identifier", scenario=title)
    validate_variables(
        title, scenario.variables, config=config, reserved=(scenario.result_name,)
    )


def expand_bindings(
    variables: Sequence[Variable],
    prefix: Tuple[str, ...] = (),
    bound: Optional[Dict[str, Any]] = None,
) -> Iterator[Tuple[Tuple[str, ...], Dict[str, Any]]]:
    """Yield ``(path, bindings)`` for every combination of ``variables``.

    This is the raw recursion and performs no validation; use
    :func:`expand_scenario` for checked expansion.

    Args:
        variables: Remaining variables, outermost first.
        prefix: Path accumulated by enclosing levels.
        bound: Bindings accumulated by enclosing levels. Never mutated.

    Yields:
        The full path and a fresh bindings dict for each combination.
    """
    scope = bound if bound is not None else {}
    if not variables:
        yield prefix, dict(scope)
        return

    head, tail = variables[0], variables[1:]
    for value in head.values:
        branch = dict(scope)
        branch[head.name] = value.value
        yield from expand_bindings(
            tail, extend_path(prefix, head.name, value.name), branch
        )


def expand_paths(
    title: str,
    variables: Sequence[Variable],
    config: Optional[ExpansionConfig] = None,
) -> List[Tuple[str, ...]]:
    """Validate and return only the case paths, without building cases."""
    validate_variables(title, variables, config=config)
    return [path for path, _ in expand_bindings(variables, prefix=(title,))]


def expand_scenario(
    scenario: Scenario, config: Optional[ExpansionConfig] = None
) -> List[TestCase]:
    """Expand a scenario into one test case per combination.

    The scenario is fully validated first, so either every case is returned or
    none is.

    Args:
        scenario: Scenario to expand.
        config: Expansion limits; defaults to :data:`EXPANSION_CONFIG`.

    Returns:
        Test cases in nested-loop order, first variable outermost.

    Raises:
        SpecificationError: If the scenario is malformed.
    """
    validate_scenario(scenario, config=config)

    cases = [
        TestCase(path=path, bindings=bindings, scenario=scenario)
        for path, bindings in expand_bindings(scenario.variables, prefix=(scenario.title,))
    ]
    logger.debug(
        "Expanded scenario '%s': %d variable(s) -> %d case(s)",
        scenario.title,
        len(scenario.variables),
        len(cases),
    )
    return cases
