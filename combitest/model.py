"""Scenario data model.

A :class:`Scenario` declares named variables, each with an ordered list of
named :class:`Value` candidates, plus two callables: ``when`` computes a result
from one combination of bound values and ``then`` checks that result.
Expanding a scenario yields one :class:`TestCase` per combination.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from combitest.errors import AssertionFailure
from combitest.hierarchy import format_path

if TYPE_CHECKING:
    from combitest.config import ExpansionConfig
    from combitest.results import CaseResult

#: Computation step; called with the bound values as keyword arguments.
WhenFunc = Callable[..., Any]

#: Assertion step; called with the bound values and the result as keyword arguments.
ThenFunc = Callable[..., Any]


@dataclass(frozen=True)
class Value:
    """A named candidate value of a variable.

    Attributes:
        name: Label used as the path segment for this value.
        value: The object bound to the variable when this value is chosen.
    """

    name: str
    value: Any


@dataclass(frozen=True)
class Variable:
    """A named axis of variation with an ordered list of candidate values.

    ``values`` accepts :class:`Value` objects or ``(name, value)`` pairs and is
    stored as a tuple.

    Attributes:
        name: Variable name; becomes a keyword argument of ``when``/``then``.
        values: Candidate values in declaration order.
    """

    name: str
    values: Sequence[Value]

    def __post_init__(self) -> None:
        coerced = tuple(
            item if isinstance(item, Value) else Value(*item) for item in self.values
        )
        object.__setattr__(self, "values", coerced)

    @classmethod
    def of(cls, name: str, /, **named_values: Any) -> "Variable":
        """Build a variable from keyword arguments, in keyword order.

        Example:
            >>> Variable.of("b", B10=10, B20=20).value_names
            ('B10', 'B20')
        """
        return cls(name, [Value(k, v) for k, v in named_values.items()])

    @classmethod
    def from_values(cls, name: str, values: Iterable[Any]) -> "Variable":
        """Build a variable whose value names are ``str(value)``."""
        return cls(name, [Value(str(v), v) for v in values])

    @property
    def value_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.values)


@dataclass(frozen=True)
class Scenario:
    """A parameterized test definition.

    Attributes:
        title: Scenario name; the first segment of every generated path.
        variables: Variables in declaration order. The first one varies slowest.
        when: Computation step, called as ``when(**bindings)``.
        then: Assertion step, called as ``then(**bindings, <result_name>=result)``.
            It fails by raising ``AssertionError`` or returning ``False``.
        result_name: Keyword under which ``then`` receives the result.
    """

    title: str
    variables: Sequence[Variable]
    when: WhenFunc = field(repr=False)
    then: ThenFunc = field(repr=False)
    result_name: str = "result"

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", tuple(self.variables))

    @classmethod
    def build(
        cls,
        title: str,
        variables: Mapping[str, Mapping[str, Any]],
        when: WhenFunc,
        then: ThenFunc,
        result_name: str = "result",
    ) -> "Scenario":
        """Build a scenario from nested mappings ``{variable: {value_name: value}}``."""
        return cls(
            title=title,
            variables=[Variable.of(name, **values) for name, values in variables.items()],
            when=when,
            then=then,
            result_name=result_name,
        )

    @classmethod
    def from_yaml(cls, yaml_str: str, when: WhenFunc, then: ThenFunc) -> "Scenario":
        """Build a scenario whose title and variables come from YAML.

        See :func:`combitest.loader.load_scenario_yaml` for the format.
        """
        from combitest.loader import scenario_from_yaml

        return scenario_from_yaml(yaml_str, when=when, then=then)

    @property
    def variable_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variables)

    @property
    def case_count(self) -> int:
        """Number of test cases this scenario expands to."""
        from combitest.expand import count_cases

        return count_cases(self.variables)

    def __len__(self) -> int:
        return self.case_count

    def expand(self, config: Optional["ExpansionConfig"] = None) -> List["TestCase"]:
        """Validate and expand into test cases. See :func:`combitest.expand.expand_scenario`."""
        from combitest.expand import expand_scenario

        return expand_scenario(self, config=config)

    def cases(self, config: Optional["ExpansionConfig"] = None) -> List["TestCase"]:
        """Alias of :meth:`expand`."""
        return self.expand(config=config)


@dataclass(frozen=True)
class TestCase:
    """One fully bound combination of a scenario.

    Equality considers ``path`` and ``bindings`` only, so expanding the same
    scenario twice produces equal but distinct instances.

    Attributes:
        path: ``(title, var1, value1, ..., varN, valueN)``.
        bindings: Read-only mapping of variable name to bound value, in
            declaration order. Never shared with another case.
        scenario: The scenario providing ``when`` and ``then``.
    """

    __test__ = False

    path: Tuple[str, ...]
    bindings: Mapping[str, Any]
    scenario: Scenario = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "bindings", MappingProxyType(dict(self.bindings)))

    @property
    def title(self) -> str:
        return self.path[0]

    @property
    def name(self) -> str:
        """Path joined with the configured separator."""
        return format_path(self.path)

    @property
    def choices(self) -> Tuple[Tuple[str, str], ...]:
        """``(variable, value_name)`` pairs in declaration order."""
        return tuple(zip(self.path[1::2], self.path[2::2]))

    def compute(self) -> Any:
        """Run the computation step. Exceptions propagate unchanged."""
        return self.scenario.when(**self.bindings)

    def check(self, result: Any) -> None:
        """Run the assertion step against ``result``.

        Raises:
            AssertionFailure: If the assertion step returned ``False``.
            AssertionError: Re-raised unchanged from the assertion step.
        """
        verdict = self.scenario.then(
            **self.bindings, **{self.scenario.result_name: result}
        )
        if verdict is False:
            raise AssertionFailure(
                self.path, f"assertion returned False for result {result!r}"
            )

    def execute(self) -> Any:
        """Run computation then assertion and return the computed result."""
        result = self.compute()
        self.check(result)
        return result

    def run(self) -> "CaseResult":
        """Execute and capture the outcome instead of raising."""
        from combitest.runner import run_case

        return run_case(self)

