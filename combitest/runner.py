"""Sequential execution of generated test cases.

Each case runs its computation and then, only if that succeeded, its
assertion. Outcomes are captured per case so one failure never stops its
siblings. The host test framework is the usual executor; these helpers serve
the CLI and programmatic use.
"""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

from combitest.hierarchy import format_path, parse_path
from combitest.logging import get_logger
from combitest.results import CaseOutcome, CaseResult, RunSummary

if TYPE_CHECKING:
    from combitest.model import TestCase

logger = get_logger(__name__)


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


# Never captured as a case outcome; the whole run stops.
_PROPAGATE = (KeyboardInterrupt, GeneratorExit)


def run_case(case: "TestCase") -> CaseResult:
    """Execute one case and capture its outcome.

    Computation errors give ERRORED and skip the assertion. An
    ``AssertionError`` (or a ``False`` verdict) from the assertion gives FAILED;
    any other exception from the assertion gives ERRORED. This includes
    ``BaseException`` subclasses such as ``SystemExit`` or pytest's skip and
    fail outcomes; only ``KeyboardInterrupt`` and ``GeneratorExit`` escape.
    """
    start = perf_counter()
    try:
        result = case.compute()
    except _PROPAGATE:
        raise
    except BaseException as exc:
        logger.debug("Case %s errored in computation: %s", case.name, _describe(exc))
        return CaseResult(
            path=case.path,
            outcome=CaseOutcome.ERRORED,
            reason=_describe(exc),
            error=exc,
            duration=perf_counter() - start,
        )

    try:
        case.check(result)
    except AssertionError as exc:
        logger.debug("Case %s failed: %s", case.name, exc)
        return CaseResult(
            path=case.path,
            outcome=CaseOutcome.FAILED,
            reason=str(exc) or "assertion failed",
            error=exc,
            duration=perf_counter() - start,
        )
    except _PROPAGATE:
        raise
    except BaseException as exc:
        logger.debug("Case %s errored in assertion: %s", case.name, _describe(exc))
        return CaseResult(
            path=case.path,
            outcome=CaseOutcome.ERRORED,
            reason=_describe(exc),
            error=exc,
            duration=perf_counter() - start,
        )

    return CaseResult(
        path=case.path, outcome=CaseOutcome.PASSED, duration=perf_counter() - start
    )


def run_cases(cases: Iterable["TestCase"]) -> RunSummary:
    """Run every case in order and collect the results."""
    summary = RunSummary()
    for case in cases:
        summary.results.append(run_case(case))

    counts = summary.counts()
    logger.info(
        "Ran %d case(s): %d passed, %d failed, %d errored",
        len(summary.results),
        counts["passed"],
        counts["failed"],
        counts["errored"],
    )
    return summary


def select_cases(
    cases: Iterable["TestCase"],
    patterns: Sequence[str],
    separator: Optional[str] = None,
) -> List["TestCase"]:
    """Keep cases addressed by any of ``patterns``.

    A pattern is a formatted path or a prefix of one on segment boundaries, so
    ``doubles::a::A1`` selects every case with ``a`` bound to ``A1``.
    """
    prefixes = [parse_path(p, separator) for p in patterns]
    selected = [
        case
        for case in cases
        if any(case.path[: len(prefix)] == prefix for prefix in prefixes if prefix)
    ]
    logger.debug(
        "Selected %d case(s) for %s",
        len(selected),
        ", ".join(format_path(p, separator) for p in prefixes),
    )
    return selected
