"""Tests for YAML loading and schema validation in ``combitest.loader``."""

import textwrap

import pytest

from combitest import Scenario, SpecificationError, Value
from combitest.loader import load_scenario_yaml, variables_from_data

FULL_YAML = textwrap.dedent(
    """
    title: doubles
    variables:
      - name: a
        values:
          - {name: A1, value: 1}
          - {name: A2, value: 2}
      - name: b
        values: [10, 20]
      - name: mode
        values: {fast: 1, safe: 2}
    """
)


class TestLoadScenarioYaml:
    """Canonical dictionary output."""

    def test_all_value_forms_normalized(self) -> None:
        data = load_scenario_yaml(FULL_YAML)
        assert data["title"] == "doubles"
        assert [v["name"] for v in data["variables"]] == ["a", "b", "mode"]
        assert data["variables"][0]["values"] == [
            {"name": "A1", "value": 1},
            {"name": "A2", "value": 2},
        ]
        assert data["variables"][1]["values"] == [
            {"name": "10", "value": 10},
            {"name": "20", "value": 20},
        ]
        assert data["variables"][2]["values"] == [
            {"name": "fast", "value": 1},
            {"name": "safe", "value": 2},
        ]
        assert "result_name" not in data

    def test_yaml_boolean_keys_become_strings(self) -> None:
        data = load_scenario_yaml(
            "title: t\nvariables:\n  - name: flag\n    values: {yes: 1, no: 0}\n"
        )
        assert [v["name"] for v in data["variables"][0]["values"]] == ["True", "False"]

    def test_result_name_kept(self) -> None:
        data = load_scenario_yaml(
            "title: t\nresult_name: out\nvariables:\n  - {name: a, values: [1]}\n"
        )
        assert data["result_name"] == "out"

    def test_empty_values_rejected(self) -> None:
        with pytest.raises(SpecificationError, match="variables/0/values"):
            load_scenario_yaml("title: t\nvariables:\n  - {name: a, values: []}\n")

    def test_missing_variables_rejected(self) -> None:
        with pytest.raises(SpecificationError, match="'variables' is a required property"):
            load_scenario_yaml("title: t\n")

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(SpecificationError, match="invalid scenario"):
            load_scenario_yaml(
                "title: t\nextra: 1\nvariables:\n  - {name: a, values: [1]}\n"
            )

    def test_malformed_yaml_rejected(self) -> None:
        with pytest.raises(SpecificationError, match="invalid YAML"):
            load_scenario_yaml("title: [unclosed\n")

    def test_repeated_value_name_in_mapping_rejected(self) -> None:
        """A repeated key would otherwise silently keep only the last value."""
        with pytest.raises(SpecificationError, match="duplicate key 'A1'"):
            load_scenario_yaml(
                "title: t\nvariables:\n  - name: a\n    values: {A1: 1, A1: 2}\n"
            )

    def test_repeated_value_name_in_list_rejected(self) -> None:
        scenario = Scenario.from_yaml(
            "title: t\nvariables:\n  - name: a\n    values:\n"
            "      - {name: A1, value: 1}\n      - {name: A1, value: 2}\n",
            when=lambda a: a,
            then=lambda result, a: True,
        )
        with pytest.raises(SpecificationError, match="duplicate value name 'A1'"):
            scenario.expand()

    def test_merge_keys_still_allowed(self) -> None:
        data = load_scenario_yaml(
            textwrap.dedent(
                """
                title: t
                variables:
                  - name: mode
                    values: &modes {fast: 1, safe: 2}
                  - name: other
                    values:
                      <<: *modes
                      slow: 3
                """
            )
        )
        assert [v["name"] for v in data["variables"][1]["values"]] == [
            "fast",
            "safe",
            "slow",
        ]

    @pytest.mark.parametrize("text", ["", "- a\n- b\n", "just text"])
    def test_non_mapping_rejected(self, text: str) -> None:
        with pytest.raises(SpecificationError, match="dictionary"):
            load_scenario_yaml(text)


def test_variables_from_data() -> None:
    variables = variables_from_data(load_scenario_yaml(FULL_YAML)["variables"])
    assert variables[0].values == (Value("A1", 1), Value("A2", 2))
    assert variables[1].value_names == ("10", "20")


def test_scenario_from_yaml_expands() -> None:
    scenario = Scenario.from_yaml(
        FULL_YAML,
        when=lambda a, b, mode: a * b * mode,
        then=lambda result, a, b, mode: result > 0,
    )
    cases = scenario.expand()
    assert len(cases) == 8
    assert cases[0].path == ("doubles", "a", "A1", "b", "10", "mode", "fast")
    assert all(case.run().ok for case in cases)
