"""Command line entry point: ``lineage-graph layout|path``."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys

from lineage_graph.config import LayoutConfig
from lineage_graph.graph import LineageGraph, load_records
from lineage_graph.layout import LayoutResult, full_layout
from lineage_graph.pathfinder import find_path
from lineage_graph.resolve import resolve_name

logger = logging.getLogger(__name__)

EXIT_NO_PATH = 1
EXIT_UNRESOLVED = 2
EXIT_BAD_INPUT = 3


def setup_logging(debug: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="lineage-graph", description="Lay out a big/little lineage graph.")
    p.add_argument("--debug", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    lay = sub.add_parser("layout", help="Print node and edge geometry as JSON.")
    lay.add_argument("data", help="Path to the people JSON file.")
    lay.add_argument("--width", type=float, default=None, help="Canvas width in pixels.")
    lay.add_argument("--height", type=float, default=None, help="Canvas height in pixels.")

    path = sub.add_parser("path", help="Print the shortest relationship path between two people.")
    path.add_argument("data", help="Path to the people JSON file.")
    path.add_argument("source", help="Name, formatted name or nickname.")
    path.add_argument("target", help="Name, formatted name or nickname.")

    return p.parse_args(argv)


def layout_to_dict(result: LayoutResult) -> dict:
    return {
        "nodes": [dataclasses.asdict(n) for n in result.nodes],
        "edges": [dataclasses.asdict(e) for e in result.edges],
        "familyOrder": result.family_order,
        "familyLabels": [dataclasses.asdict(lbl) for lbl in result.labels],
        "cycles": result.cycles,
    }


def cmd_layout(args: argparse.Namespace) -> int:
    config = LayoutConfig.from_env()
    overrides = {}
    if args.width is not None:
        overrides["canvas_width"] = args.width
    if args.height is not None:
        overrides["canvas_height"] = args.height
    if overrides:
        config = dataclasses.replace(config, **overrides)

    graph = LineageGraph.from_people(load_records(args.data))
    result = full_layout(graph, config=config)
    json.dump(layout_to_dict(result), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def cmd_path(args: argparse.Namespace) -> int:
    people = load_records(args.data)
    graph = LineageGraph.from_people(people)

    names = []
    for typed in (args.source, args.target):
        name = resolve_name(people, typed)
        if name is None:
            print(f'"{typed}" not found in the data. Please check the spelling.', file=sys.stderr)
            return EXIT_UNRESOLVED
        names.append(name)

    result = find_path(graph, names[0], names[1])
    if not result.found:
        print(f"No path found between {result.source} and {result.target}", file=sys.stderr)
        return EXIT_NO_PATH
    print(" → ".join(result.path))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    try:
        if args.command == "layout":
            return cmd_layout(args)
        return cmd_path(args)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
