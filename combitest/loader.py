"""YAML loader + schema validation for scenario variables.

Scenario titles and variable tables can live in YAML while the ``when`` and
``then`` steps stay in Python:

```yaml
title: doubles
variables:
  - name: a
    values:
      - {name: A1, value: 1}
      - {name: A2, value: 2}
  - name: b
    values: [10, 20]          # value names become "10" and "20"
  - name: mode
    values: {fast: 1, safe: 2}
```

The loader parses the YAML, validates it against the packaged JSON schema,
and returns a canonical dictionary in which every value is an explicit
``{"name": ..., "value": ...}`` entry.
"""

from __future__ import annotations

import json
from collections.abc import Hashable
from importlib import resources
from typing import Any, Dict, List

import jsonschema
import yaml

from combitest.errors import SpecificationError
from combitest.logging import get_logger
from combitest.model import Scenario, ThenFunc, Value, Variable, WhenFunc

logger = get_logger(__name__)

_SCHEMA_CACHE: Dict[str, Any] = {}


def _scenario_schema() -> Dict[str, Any]:
    if "scenario" not in _SCHEMA_CACHE:
        with (
            resources.files("combitest.schemas")
            .joinpath("scenario.json")
            .open("r", encoding="utf-8")
        ) as f:
            _SCHEMA_CACHE["scenario"] = json.load(f)
    return _SCHEMA_CACHE["scenario"]


class _UniqueKeyLoader(yaml.SafeLoader):
    """Safe loader that rejects a mapping key given more than once."""

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            # 1 and true hash alike but become different labels
            marker = (type(key), key)
            if marker in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(marker)
        return super().construct_mapping(node, deep=deep)


def _label(key: Any) -> str:
    # YAML 1.1 turns keys such as yes/no/on/off into booleans; keep them readable
    return str(key)


def _normalize_values(raw: Any) -> List[Dict[str, Any]]:
    if isinstance(raw, dict):
        return [{"name": _label(k), "value": v} for k, v in raw.items()]
    entries = []
    for item in raw:
        if isinstance(item, dict):
            entries.append({"name": _label(item["name"]), "value": item["value"]})
        else:
            entries.append({"name": _label(item), "value": item})
    return entries


def load_scenario_yaml(yaml_str: str) -> Dict[str, Any]:
    """Load and validate a scenario YAML string.

    Returns:
        ``{"title": str, "variables": [{"name": str, "values": [{"name": str,
        "value": Any}, ...]}, ...]}`` plus ``result_name`` when given.

    Raises:
        SpecificationError: If the YAML does not parse, repeats a mapping key
            (such as a value name), is not a mapping, or
            does not match the schema (e.g. a variable with an empty value list).
    """
    try:
        data = yaml.load(yaml_str, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        logger.error("Scenario YAML could not be parsed: %s", exc)
        raise SpecificationError(f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        logger.error("Scenario YAML must map to a dictionary at top level")
        raise SpecificationError("the provided YAML must map to a dictionary at top level")

    try:
        jsonschema.validate(data, _scenario_schema())
    except jsonschema.ValidationError as exc:
        location = "/".join(str(p) for p in exc.absolute_path) or "<root>"
        logger.error("Scenario YAML failed validation at %s: %s", location, exc.message)
        raise SpecificationError(
            f"invalid scenario at {location}: {exc.message}",
            scenario=data.get("title") if isinstance(data.get("title"), str) else None,
        ) from exc

    canonical: Dict[str, Any] = {
        "title": data["title"],
        "variables": [
            {"name": var["name"], "values": _normalize_values(var["values"])}
            for var in data["variables"]
        ],
    }
    if "result_name" in data:
        canonical["result_name"] = data["result_name"]
    return canonical


def variables_from_data(entries: List[Dict[str, Any]]) -> List[Variable]:
    """Build variables from canonical ``{"name", "values"}`` entries."""
    return [
        Variable(entry["name"], [Value(v["name"], v["value"]) for v in entry["values"]])
        for entry in entries
    ]


def scenario_from_yaml(yaml_str: str, when: WhenFunc, then: ThenFunc) -> Scenario:
    """Build a :class:`Scenario` from YAML plus the two Python steps."""
    data = load_scenario_yaml(yaml_str)
    return Scenario(
        title=data["title"],
        variables=variables_from_data(data["variables"]),
        when=when,
        then=then,
        result_name=data.get("result_name", "result"),
    )
