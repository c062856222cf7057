"""Tests for `combitest.config`."""

import dataclasses

import pytest

from combitest.config import EXPANSION_CONFIG, ExpansionConfig


def test_defaults() -> None:
    assert EXPANSION_CONFIG.max_cases is None
    assert EXPANSION_CONFIG.path_separator == "::"


def test_check_case_count_bounds() -> None:
    config = ExpansionConfig(max_cases=5)
    assert config.check_case_count(5)
    assert not config.check_case_count(6)
    assert ExpansionConfig(max_cases=None).check_case_count(10**9)


def test_config_is_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        EXPANSION_CONFIG.max_cases = 1  # type: ignore[misc]
