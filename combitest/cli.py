"""Command-line interface for combitest."""

from __future__ import annotations

import argparse
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from time import perf_counter
from types import ModuleType
from typing import Any, List, Optional

from combitest.errors import SpecificationError
from combitest.expand import expand_paths
from combitest.hierarchy import PathNode, build_tree, format_path
from combitest.loader import load_scenario_yaml, variables_from_data
from combitest.logging import get_logger, set_global_log_level
from combitest.suite import ScenarioSuite

logger = get_logger(__name__)

_YAML_SUFFIXES = {".yaml", ".yml"}


def _format_table(headers: List[str], rows: List[List[str]], min_width: int = 6) -> str:
    """Format rows as a plain ASCII table with left-aligned columns."""
    if not rows:
        return ""

    widths = [
        max(min_width, len(header), *(len(str(row[i])) for row in rows))
        for i, header in enumerate(headers)
    ]

    def line(cells: List[Any]) -> str:
        return "   " + " | ".join(f"{str(c):<{widths[i]}}" for i, c in enumerate(cells))

    out = [line(headers), "   " + "-+-".join("-" * w for w in widths)]
    out.extend(line(row) for row in rows)
    return "\n".join(out)


def _plural(n: int, singular: str) -> str:
    return singular if n == 1 else f"{singular}s"


def _import_target(target: str) -> ModuleType:
    """Import a Python file path or a dotted module name."""
    path = Path(target)
    if path.suffix == ".py":
        if not path.is_file():
            raise FileNotFoundError(target)
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot import {target}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[path.stem] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(path.stem, None)
            raise
        return module
    return importlib.import_module(target)


def _inspect_yaml(path: Path, tree: bool) -> None:
    data = load_scenario_yaml(path.read_text())
    variables = variables_from_data(data["variables"])
    paths = expand_paths(data["title"], variables)

    print(f"\n{data['title']}: {len(variables)} {_plural(len(variables), 'variable')}, "
          f"{len(paths)} {_plural(len(paths), 'case')}")
    if tree:
        root = PathNode(name="")
        for case_path in paths:
            node = root
            for segment in case_path:
                node = node.child(segment)
        for text in root.render():
            print(f"  {text}")
    else:
        for case_path in paths:
            print(f"  {format_path(case_path)}")


def _inspect_module(target: str, tree: bool) -> None:
    suite = ScenarioSuite.from_module(_import_target(target))
    if not len(suite):
        print(f"No scenarios found in {target}")
        return
    expanded = suite.expand()
    for title, cases in expanded.items():
        scenario = suite.get(title)
        print(f"\n{title}: {len(scenario.variables)} "
              f"{_plural(len(scenario.variables), 'variable')}, "
              f"{len(cases)} {_plural(len(cases), 'case')}")
        if tree:
            for text in build_tree(cases).render():
                print(f"  {text}")
        else:
            for case in cases:
                print(f"  {case.name}")


def _inspect(target: str, tree: bool = False) -> None:
    """Validate scenarios in ``target`` and print their generated paths.

    Args:
        target: Scenario YAML file, Python file, or dotted module name.
        tree: Print an indented hierarchy instead of flat paths.
    """
    logger.info(f"Inspecting scenarios from: {target}")
    try:
        if Path(target).suffix in _YAML_SUFFIXES:
            _inspect_yaml(Path(target), tree)
        else:
            _inspect_module(target, tree)
    except FileNotFoundError:
        print(f"ERROR: Target not found: {target}")
        sys.exit(1)
    except ImportError as e:
        print(f"ERROR: Cannot import target: {target}")
        print(f"  {type(e).__name__}: {e}")
        sys.exit(1)
    except SpecificationError as e:
        print("ERROR: Invalid scenario")
        print(f"  {e}")
        sys.exit(1)


def _run(target: str, select: Optional[List[str]] = None) -> None:
    """Run every case of the scenarios in a Python module and print a table."""
    logger.info(f"Running scenarios from: {target}")
    start = perf_counter()
    try:
        suite = ScenarioSuite.from_module(_import_target(target))
        summary = suite.run(select=select or ())
    except FileNotFoundError:
        print(f"ERROR: Target not found: {target}")
        sys.exit(1)
    except ImportError as e:
        print(f"ERROR: Cannot import target: {target}")
        print(f"  {type(e).__name__}: {e}")
        sys.exit(1)
    except SpecificationError as e:
        print("ERROR: Invalid scenario")
        print(f"  {e}")
        sys.exit(1)

    rows = [
        [r.name, r.outcome.value, r.reason or "", f"{r.duration * 1000.0:.1f} ms"]
        for r in summary.results
    ]
    if rows:
        print(_format_table(["Case", "Outcome", "Reason", "Time"], rows))
    counts = summary.counts()
    print(
        f"\n{len(summary.results)} {_plural(len(summary.results), 'case')}: "
        f"{counts['passed']} passed, {counts['failed']} failed, "
        f"{counts['errored']} errored in {perf_counter() - start:.2f} s"
    )
    if not summary.ok:
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``combitest`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="combitest",
        description="Inspect and run combinatorial test scenarios.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{inspect,run}",
        help="Available commands",
    )

    inspect_parser = subparsers.add_parser(
        "inspect", help="Validate scenarios and list generated case paths"
    )
    inspect_parser.add_argument(
        "target", help="Scenario YAML file, Python file, or dotted module name"
    )
    inspect_parser.add_argument(
        "--tree", "-t", action="store_true", help="Show paths as an indented hierarchy"
    )

    run_parser = subparsers.add_parser("run", help="Run scenarios from a Python module")
    run_parser.add_argument("target", help="Python file or dotted module name")
    run_parser.add_argument(
        "--select",
        "-s",
        nargs="+",
        metavar="PATH",
        help="Only run cases under these paths, e.g. doubles::a::A1",
    )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        set_global_log_level(logging.DEBUG)
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        set_global_log_level(logging.INFO)

    if args.command == "inspect":
        _inspect(args.target, args.tree)
    elif args.command == "run":
        _run(args.target, args.select)


if __name__ == "__main__":
    main()
