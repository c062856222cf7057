"""Hierarchical names for generated test cases.

A case path is ``(title, var1, value1, ..., varN, valueN)``. Paths are built
one ``(variable, value)`` pair at a time while the expander recurses, and can
be grouped into a :class:`PathNode` tree that mirrors the nesting: scenario,
then variable, then value, then the next variable, and so on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, List, Optional, Tuple

from combitest.config import EXPANSION_CONFIG
from combitest.errors import SpecificationError

if TYPE_CHECKING:
    from combitest.model import TestCase

__all__ = [
    "PathNode",
    "build_tree",
    "extend_path",
    "format_path",
    "parse_path",
]

Path = Tuple[str, ...]


def extend_path(prefix: Path, variable: str, value_name: str) -> Path:
    """Return ``prefix`` followed by one ``(variable, value_name)`` pair.

    The prefix is not modified; sibling branches share nothing.
    """
    return prefix + (variable, value_name)


def format_path(path: Iterable[str], separator: Optional[str] = None) -> str:
    """Join path segments, e.g. ``doubles::a::A1::b::B10``."""
    sep = EXPANSION_CONFIG.path_separator if separator is None else separator
    return sep.join(path)


def parse_path(text: str, separator: Optional[str] = None) -> Path:
    """Split a formatted path back into its segments."""
    sep = EXPANSION_CONFIG.path_separator if separator is None else separator
    if not text:
        return ()
    return tuple(text.split(sep))


@dataclass
class PathNode:
    """One segment of the case hierarchy.

    Attributes:
        name: The segment label.
        depth: 0 for the synthetic root, 1 for scenario titles, then
            alternating variable (even) and value (odd) levels.
        children: Child nodes keyed by segment, in first-seen order.
        case: The test case for leaf nodes, otherwise None.
    """

    name: str
    depth: int = 0
    children: Dict[str, "PathNode"] = field(default_factory=dict)
    case: Optional["TestCase"] = None

    @property
    def kind(self) -> str:
        if self.depth == 0:
            return "root"
        if self.depth == 1:
            return "scenario"
        return "variable" if self.depth % 2 == 0 else "value"

    @property
    def is_leaf(self) -> bool:
        return self.case is not None

    def child(self, name: str) -> "PathNode":
        node = self.children.get(name)
        if node is None:
            node = PathNode(name=name, depth=self.depth + 1)
            self.children[name] = node
        return node

    def iter_cases(self) -> Iterator["TestCase"]:
        """Yield leaf cases depth-first in insertion order."""
        if self.case is not None:
            yield self.case
        for node in self.children.values():
            yield from node.iter_cases()

    def render(self, indent: str = "  ") -> List[str]:
        """Return an indented outline of this subtree, one line per node."""
        lines: List[str] = []
        for node in self.children.values():
            lines.append(node.name)
            lines.extend(f"{indent}{line}" for line in node.render(indent))
        return lines


def build_tree(cases: Iterable["TestCase"]) -> PathNode:
    """Group cases into a tree keyed by path segments.

    Args:
        cases: Test cases, typically from one or more expanded scenarios.

    Returns:
        A synthetic root whose children are scenario titles.

    Raises:
        SpecificationError: If two cases share a path, or one path is a
            prefix of another.
    """
    root = PathNode(name="")
    for case in cases:
        node = root
        for segment in case.path:
            if node.case is not None:
                raise SpecificationError(
                    f"path '{format_path(case.path)}' extends an existing case",
                    scenario=case.title,
                )
            node = node.child(segment)
        if node.case is not None or node.children:
            raise SpecificationError(
                f"duplicate path '{format_path(case.path)}'", scenario=case.title
            )
        node.case = case
    return root
