"""pytest integration: collect scenarios as nested test nodes.

Enable with ``pytest_plugins = ["combitest.pytest_plugin"]`` in a top-level
``conftest.py`` or with ``-p combitest.pytest_plugin``. Any module- or
class-level :class:`~combitest.model.Scenario` bound to a name matching
``python_functions`` (``test_*`` by default) is expanded at collection time.
Each path segment becomes a collection node::

    test_math.py::doubles::a::A1::b::B10 PASSED
    test_math.py::doubles::a::A1::b::B20 PASSED

A malformed scenario is reported as a collection error for that scenario
only. So is a second scenario reusing a title already collected in the same
module or class, since both would share one node id.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Union

import pytest

from combitest.errors import AssertionFailure, SpecificationError
from combitest.expand import expand_scenario
from combitest.hierarchy import PathNode, build_tree
from combitest.logging import get_logger
from combitest.model import Scenario, TestCase

logger = get_logger(__name__)

# Scenarios already collected under a module or class, keyed by title
_COLLECTED_TITLES = pytest.StashKey[Dict[str, Scenario]]()


def _collect_children(
    parent: pytest.Collector, node: PathNode
) -> Iterator[Union["PathGroup", "CaseItem"]]:
    for child in node.children.values():
        if child.case is not None:
            yield CaseItem.from_parent(parent, name=child.name, case=child.case)
        else:
            yield PathGroup.from_parent(parent, name=child.name, node=child)


class ScenarioCollector(pytest.Collector):
    """Collection node for one scenario title."""

    def __init__(
        self,
        *,
        scenario: Scenario,
        conflict: Optional[SpecificationError] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.scenario = scenario
        self.conflict = conflict

    def collect(self) -> Iterator[Union["PathGroup", "CaseItem"]]:
        if self.conflict is not None:
            raise self.conflict
        cases = expand_scenario(self.scenario)
        logger.debug("Collected %d case(s) for %s", len(cases), self.nodeid)
        root = build_tree(cases)
        yield from _collect_children(self, root.children[self.scenario.title])


class PathGroup(pytest.Collector):
    """Collection node for an intermediate variable or value segment."""

    def __init__(self, *, node: PathNode, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.path_node = node

    def collect(self) -> Iterator[Union["PathGroup", "CaseItem"]]:
        yield from _collect_children(self, self.path_node)


class CaseItem(pytest.Item):
    """A single test case, named after the last value segment of its path."""

    def __init__(self, *, case: TestCase, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.case = case

    def runtest(self) -> None:
        self.case.execute()

    def repr_failure(self, excinfo: pytest.ExceptionInfo[BaseException], style=None):
        if isinstance(excinfo.value, AssertionFailure):
            return str(excinfo.value)
        return super().repr_failure(excinfo, style=style)

    def reportinfo(self):
        return self.path, None, self.case.name


@pytest.hookimpl(tryfirst=True)
def pytest_pycollect_makeitem(
    collector: pytest.Collector, name: str, obj: object
) -> Optional[List[ScenarioCollector]]:
    if not isinstance(obj, Scenario) or not collector.funcnamefilter(name):
        return None

    seen = collector.stash.setdefault(_COLLECTED_TITLES, {})
    previous = seen.get(obj.title)
    if previous is obj:
        # the same scenario bound to another test name
        return []
    conflict = None
    if previous is not None:
        logger.error("Duplicate scenario title in %s: %s", collector.nodeid, obj.title)
        conflict = SpecificationError(
            f"title is already used in this module or class (bound to '{name}')",
            scenario=obj.title,
        )
    else:
        seen[obj.title] = obj
    return [
        ScenarioCollector.from_parent(
            collector, name=obj.title, scenario=obj, conflict=conflict
        )
    ]
