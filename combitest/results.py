"""Outcome containers for executed test cases.

Objects expose ``to_dict()`` returning JSON-safe primitives for reporters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from combitest.errors import AssertionFailure, ExecutionError
from combitest.hierarchy import format_path


class CaseOutcome(Enum):
    """Result of executing one test case."""

    #: Computation and assertion both succeeded.
    PASSED = "passed"
    #: The assertion reported a mismatch.
    FAILED = "failed"
    #: The computation (or the assertion machinery) raised.
    ERRORED = "errored"

    @classmethod
    def from_string(cls, value: str) -> "CaseOutcome":
        """Parse a case-insensitive outcome name such as ``"passed"``.

        Raises:
            ValueError: If the string doesn't match any outcome.
        """
        try:
            return cls(value.lower())
        except ValueError:
            valid = ", ".join(e.value for e in cls)
            raise ValueError(
                f"Invalid outcome '{value}'. Valid values are: {valid}"
            ) from None


@dataclass(slots=True)
class CaseResult:
    """Outcome of one test case.

    Args:
        path: The case path.
        outcome: Passed, failed or errored.
        reason: Failure or error message; None when passed.
        error: The exception raised by the case, if any.
        duration: Wall-clock seconds spent in computation and assertion.
    """

    path: Tuple[str, ...]
    outcome: CaseOutcome
    reason: Optional[str] = None
    error: Optional[BaseException] = field(default=None, repr=False)
    duration: float = 0.0

    @property
    def name(self) -> str:
        return format_path(self.path)

    @property
    def ok(self) -> bool:
        return self.outcome is CaseOutcome.PASSED

    def raise_for_outcome(self) -> None:
        """Re-raise a non-passing outcome as a combitest exception.

        Raises:
            AssertionFailure: For FAILED results.
            ExecutionError: For ERRORED results, chained from the original error.
        """
        if self.outcome is CaseOutcome.FAILED:
            raise AssertionFailure(self.path, self.reason or "assertion failed")
        if self.outcome is CaseOutcome.ERRORED:
            cause = self.error or RuntimeError(self.reason or "unknown error")
            raise ExecutionError(self.path, cause) from cause

    def to_dict(self) -> Dict[str, Any]:
        error = None
        if self.error is not None:
            error = {"type": type(self.error).__name__, "message": str(self.error)}
        return {
            "path": list(self.path),
            "name": self.name,
            "outcome": self.outcome.value,
            "reason": self.reason,
            "error": error,
            "duration": self.duration,
        }


@dataclass
class RunSummary:
    """Results of a batch of cases, in execution order."""

    results: List[CaseResult] = field(default_factory=list)

    def _with(self, outcome: CaseOutcome) -> List[CaseResult]:
        return [r for r in self.results if r.outcome is outcome]

    @property
    def passed(self) -> List[CaseResult]:
        return self._with(CaseOutcome.PASSED)

    @property
    def failed(self) -> List[CaseResult]:
        return self._with(CaseOutcome.FAILED)

    @property
    def errored(self) -> List[CaseResult]:
        return self._with(CaseOutcome.ERRORED)

    @property
    def ok(self) -> bool:
        """True when every case passed."""
        return all(r.ok for r in self.results)

    def counts(self) -> Dict[str, int]:
        counts = {outcome.value: 0 for outcome in CaseOutcome}
        for r in self.results:
            counts[r.outcome.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": len(self.results),
            "counts": self.counts(),
            "results": [r.to_dict() for r in self.results],
        }
