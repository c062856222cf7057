"""Exception types raised by combitest.

``SpecificationError`` is raised while building or expanding scenarios and
aborts the whole scenario. ``ExecutionError`` and ``AssertionFailure`` describe
the outcome of a single test case and never affect its siblings.
"""

from __future__ import annotations

from typing import Optional, Sequence


def _joined(path: Sequence[str]) -> str:
    # combitest.hierarchy imports this module
    from combitest.hierarchy import format_path

    return format_path(path)


class SpecificationError(ValueError):
    """A scenario description is malformed and cannot be expanded.

    Args:
        message: Human-readable description of the problem.
        scenario: Title of the offending scenario, when known.
        variable: Name of the offending variable, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        scenario: Optional[str] = None,
        variable: Optional[str] = None,
    ) -> None:
        self.scenario = scenario
        self.variable = variable
        location = []
        if scenario is not None:
            location.append(f"scenario '{scenario}'")
        if variable is not None:
            location.append(f"variable '{variable}'")
        prefix = f"{', '.join(location)}: " if location else ""
        super().__init__(f"{prefix}{message}")


class ExecutionError(RuntimeError):
    """The computation step of a test case raised an exception.

    The original exception is available as ``__cause__`` and ``cause``.
    """

    def __init__(self, path: Sequence[str], cause: BaseException) -> None:
        self.path = tuple(path)
        self.cause = cause
        super().__init__(
            f"{_joined(self.path)}: computation raised "
            f"{type(cause).__name__}: {cause}"
        )


class AssertionFailure(AssertionError):
    """The assertion step of a test case reported a mismatch."""

    def __init__(self, path: Sequence[str], reason: str) -> None:
        self.path = tuple(path)
        self.reason = reason
        super().__init__(f"{_joined(self.path)}: {reason}")
