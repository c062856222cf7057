"""Tests for case execution in ``combitest.runner`` and ``combitest.results``."""

import sys

import pytest

from combitest import (
    AssertionFailure,
    CaseOutcome,
    ExecutionError,
    ExpansionConfig,
    Scenario,
    Variable,
    run_case,
    run_cases,
    select_cases,
)
from combitest.expand import expand_scenario


def _scenario(when, then) -> Scenario:
    return Scenario(
        title="s",
        variables=[Variable.of("a", A1=1, A2=2, A3=3)],
        when=when,
        then=then,
    )


class TestRunCase:
    """Outcome classification for one case."""

    def test_passed(self) -> None:
        case = expand_scenario(_scenario(lambda a: a, lambda result, a: result == a))[0]
        result = run_case(case)
        assert result.outcome is CaseOutcome.PASSED
        assert result.ok
        assert result.reason is None
        assert result.error is None
        assert result.duration >= 0.0

    def test_failed_on_assertion_error(self) -> None:
        def then(result, a):
            assert result == 0, "expected zero"

        result = run_case(expand_scenario(_scenario(lambda a: a, then))[0])
        assert result.outcome is CaseOutcome.FAILED
        assert "expected zero" in result.reason

    def test_failed_on_false_verdict(self) -> None:
        result = run_case(expand_scenario(_scenario(lambda a: a, lambda result, a: False))[0])
        assert result.outcome is CaseOutcome.FAILED
        assert isinstance(result.error, AssertionFailure)

    def test_errored_in_computation_skips_assertion(self) -> None:
        calls = []

        def when(a):
            raise ZeroDivisionError("division by zero")

        result = run_case(
            expand_scenario(_scenario(when, lambda result, a: calls.append(a)))[0]
        )
        assert result.outcome is CaseOutcome.ERRORED
        assert isinstance(result.error, ZeroDivisionError)
        assert result.reason == "ZeroDivisionError: division by zero"
        assert calls == []

    def test_errored_in_assertion(self) -> None:
        def then(result, a):
            raise TypeError("bad compare")

        result = run_case(expand_scenario(_scenario(lambda a: a, then))[0])
        assert result.outcome is CaseOutcome.ERRORED
        assert isinstance(result.error, TypeError)

    def test_system_exit_in_computation_is_errored(self) -> None:
        def when(a):
            sys.exit(3)

        result = run_case(expand_scenario(_scenario(when, lambda result, a: True))[0])
        assert result.outcome is CaseOutcome.ERRORED
        assert isinstance(result.error, SystemExit)
        assert result.reason == "SystemExit: 3"

    def test_pytest_skip_in_assertion_is_errored(self) -> None:
        def then(result, a):
            pytest.skip("not here")

        result = run_case(expand_scenario(_scenario(lambda a: a, then))[0])
        assert result.outcome is CaseOutcome.ERRORED
        assert "not here" in result.reason

    def test_keyboard_interrupt_propagates(self) -> None:
        def when(a):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            run_case(expand_scenario(_scenario(when, lambda result, a: True))[0])

    def test_case_run_method(self) -> None:
        case = expand_scenario(_scenario(lambda a: a, lambda result, a: True))[0]
        assert case.run().outcome is CaseOutcome.PASSED


class TestRunCases:
    """Batch execution keeps siblings independent."""

    def test_one_failure_does_not_affect_siblings(self) -> None:
        scenario = _scenario(lambda a: a, lambda result, a: a != 2)
        summary = run_cases(expand_scenario(scenario))
        assert [r.outcome for r in summary.results] == [
            CaseOutcome.PASSED,
            CaseOutcome.FAILED,
            CaseOutcome.PASSED,
        ]
        assert not summary.ok
        assert [r.name for r in summary.failed] == ["s::a::A2"]

    def test_error_does_not_stop_run(self) -> None:
        def when(a):
            if a == 1:
                raise RuntimeError("first")
            return a

        summary = run_cases(expand_scenario(_scenario(when, lambda result, a: True)))
        assert summary.counts() == {"passed": 2, "failed": 0, "errored": 1}

    def test_cases_execute_exactly_once(self) -> None:
        calls = []

        def when(a):
            calls.append(a)
            return a

        run_cases(expand_scenario(_scenario(when, lambda result, a: True)))
        assert calls == [1, 2, 3]

    def test_system_exit_does_not_stop_run(self) -> None:
        calls = []

        def when(a):
            calls.append(a)
            if a == 1:
                sys.exit(3)
            return a

        summary = run_cases(expand_scenario(_scenario(when, lambda result, a: True)))
        assert calls == [1, 2, 3]
        assert summary.counts() == {"passed": 2, "failed": 0, "errored": 1}

    def test_all_passed(self, cube: Scenario) -> None:
        summary = run_cases(expand_scenario(cube))
        assert summary.ok
        assert len(summary.passed) == 27

    def test_summary_to_dict(self) -> None:
        summary = run_cases(
            expand_scenario(_scenario(lambda a: a, lambda result, a: a != 3))
        )
        data = summary.to_dict()
        assert data["total"] == 3
        assert data["counts"] == {"passed": 2, "failed": 1, "errored": 0}
        last = data["results"][2]
        assert last["path"] == ["s", "a", "A3"]
        assert last["outcome"] == "failed"
        assert last["error"]["type"] == "AssertionFailure"


class TestSelectCases:
    """Selecting cases by full or partial path."""

    def test_prefix_selects_subtree(self, doubles: Scenario) -> None:
        cases = expand_scenario(doubles)
        selected = select_cases(cases, ["doubles::a::A2"])
        assert [c.name for c in selected] == [
            "doubles::a::A2::b::B10",
            "doubles::a::A2::b::B20",
        ]

    def test_full_path_selects_one(self, doubles: Scenario) -> None:
        cases = expand_scenario(doubles)
        assert len(select_cases(cases, ["doubles::a::A1::b::B20"])) == 1

    def test_prefix_must_match_whole_segments(self, doubles: Scenario) -> None:
        assert select_cases(expand_scenario(doubles), ["doubles::a::A"]) == []

    def test_multiple_patterns_keep_order(self, doubles: Scenario) -> None:
        cases = expand_scenario(doubles)
        selected = select_cases(cases, ["doubles::a::A2::b::B20", "doubles::a::A1::b::B10"])
        assert [c.path[2::2] for c in selected] == [("A1", "B10"), ("A2", "B20")]


class TestCaseResult:
    """Outcome helpers."""

    def test_outcome_from_string(self) -> None:
        assert CaseOutcome.from_string("Passed") is CaseOutcome.PASSED
        with pytest.raises(ValueError, match="Valid values"):
            CaseOutcome.from_string("skipped")

    def test_raise_for_failed(self) -> None:
        result = run_case(expand_scenario(_scenario(lambda a: a, lambda result, a: False))[0])
        with pytest.raises(AssertionFailure):
            result.raise_for_outcome()

    def test_raise_for_errored_chains_cause(self) -> None:
        def when(a):
            raise OSError("disk")

        result = run_case(expand_scenario(_scenario(when, lambda result, a: True))[0])
        with pytest.raises(ExecutionError) as excinfo:
            result.raise_for_outcome()
        assert isinstance(excinfo.value.__cause__, OSError)
        assert excinfo.value.path == ("s", "a", "A1")

    def test_raise_for_passed_is_noop(self) -> None:
        result = run_case(expand_scenario(_scenario(lambda a: a, lambda result, a: True))[0])
        result.raise_for_outcome()

    def test_error_messages_follow_path_separator(self, monkeypatch) -> None:
        monkeypatch.setattr(
            "combitest.hierarchy.EXPANSION_CONFIG", ExpansionConfig(path_separator="/")
        )
        failure = AssertionFailure(("s", "a", "A1"), "mismatch")
        error = ExecutionError(("s", "a", "A2"), OSError("disk"))
        assert str(failure) == "s/a/A1: mismatch"
        assert str(error) == "s/a/A2: computation raised OSError: disk"
