"""Collections of scenarios with unique titles."""

from __future__ import annotations

from types import ModuleType
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from combitest.config import ExpansionConfig
from combitest.errors import SpecificationError
from combitest.expand import expand_scenario, validate_scenario
from combitest.logging import get_logger
from combitest.model import Scenario, TestCase
from combitest.results import RunSummary
from combitest.runner import run_cases, select_cases

logger = get_logger(__name__)


class ScenarioSuite:
    """Ordered set of scenarios keyed by title.

    Args:
        scenarios: Initial scenarios, added in order.
        config: Expansion limits applied to every scenario.
    """

    def __init__(
        self,
        scenarios: Iterable[Scenario] = (),
        config: Optional[ExpansionConfig] = None,
    ) -> None:
        self.config = config
        self._scenarios: Dict[str, Scenario] = {}
        for scenario in scenarios:
            self.add(scenario)

    @classmethod
    def from_module(
        cls,
        module: ModuleType,
        config: Optional[ExpansionConfig] = None,
        prefix: Optional[str] = "test",
    ) -> "ScenarioSuite":
        """Collect module-level :class:`Scenario` objects in definition order.

        Only names starting with ``prefix`` are considered, which matches the
        pytest plugin's default ``python_functions`` filter. Pass
        ``prefix=None`` to take every module-level scenario.
        """
        found: List[Scenario] = []
        for name, obj in vars(module).items():
            if prefix is not None and not name.startswith(prefix):
                continue
            # the same object may be bound to several names
            if isinstance(obj, Scenario) and not any(obj is f for f in found):
                found.append(obj)
        logger.debug("Found %d scenario(s) in module %s", len(found), module.__name__)
        return cls(found, config=config)

    def add(self, scenario: Scenario) -> None:
        """Register a scenario.

        Raises:
            SpecificationError: If a scenario with the same title exists.
        """
        if scenario.title in self._scenarios:
            logger.error("Duplicate scenario title: %s", scenario.title)
            raise SpecificationError(
                "title is already used in this suite", scenario=scenario.title
            )
        self._scenarios[scenario.title] = scenario

    def get(self, title: str) -> Scenario:
        return self._scenarios[title]

    @property
    def titles(self) -> List[str]:
        return list(self._scenarios)

    def __iter__(self) -> Iterator[Scenario]:
        return iter(self._scenarios.values())

    def __len__(self) -> int:
        return len(self._scenarios)

    def __contains__(self, title: object) -> bool:
        return title in self._scenarios

    def expand(self) -> Dict[str, List[TestCase]]:
        """Expand every scenario, validating all of them first."""
        for scenario in self:
            validate_scenario(scenario, config=self.config)
        return {s.title: expand_scenario(s, config=self.config) for s in self}

    def cases(self) -> List[TestCase]:
        """All cases of all scenarios, scenario by scenario."""
        return [case for group in self.expand().values() for case in group]

    def run(self, select: Sequence[str] = ()) -> RunSummary:
        """Run every case, or only those addressed by ``select`` paths."""
        cases = self.cases()
        if select:
            cases = select_cases(cases, select, self.config.path_separator if self.config else None)
        return run_cases(cases)
