"""
CLI Adapter - Command-line interface.

Thin wrapper over the file adapter + layout engine.

    treeworld layout tree.json -o world.json --set minNodeDistance=30
    treeworld connectors tree.yaml --config layout.yaml --colliders
    treeworld version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from treeworld.errors import InvalidConfiguration, TreeWorldError


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="treeworld",
        description="Lay out a labeled tree as a 3D world of platforms and connectors",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # layout command
    layout_parser = subparsers.add_parser("layout", help="Write the positioned spatial graph")
    _add_input_arguments(layout_parser)

    # connectors command
    connectors_parser = subparsers.add_parser("connectors", help="Write connector geometry")
    _add_input_arguments(connectors_parser)
    connectors_parser.add_argument(
        "--colliders",
        action="store_true",
        help="Include collider segments for each connector",
    )

    # version command
    subparsers.add_parser("version", help="Show version")

    parsed = parser.parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "version":
        from treeworld import __version__
        print(f"treeworld {__version__}")
        return 0

    if parsed.command == "layout":
        return _cmd_layout(parsed)

    if parsed.command == "connectors":
        return _cmd_connectors(parsed)

    return 1


def _add_input_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("input", help="Input tree JSON or YAML file ('-' for JSON on stdin)")
    sub.add_argument("-o", "--output", help="Output file (default: stdout)")
    sub.add_argument("-c", "--config", help="Layout configuration JSON or YAML file")
    sub.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override one configuration key (repeatable)",
    )
    sub.add_argument(
        "--format",
        choices=["auto", "tree", "export", "graph"],
        default="auto",
        help="Input shape (default: auto-detect)",
    )
    sub.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")


def _parse_override(item: str) -> tuple[str, Any]:
    key, sep, raw = item.partition("=")
    key = key.strip()
    if not sep or not key:
        raise InvalidConfiguration(item, None, "expected KEY=VALUE")
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        value = raw
    return key, value


def _run_layout(args: argparse.Namespace):
    from treeworld.adapters.files import load_config_file, load_tree_file
    from treeworld.layout import LayoutEngine

    overrides = dict(_parse_override(item) for item in args.overrides)
    config = load_config_file(args.config, overrides)
    tree = load_tree_file(args.input, fmt=args.format)
    return LayoutEngine(config).layout(tree)


def _cmd_layout(args: argparse.Namespace) -> int:
    """Handle layout command."""
    from treeworld.adapters.files import save_graph

    try:
        result = _run_layout(args)
        save_graph(result.graph, args.output, indent=args.indent)
    except (TreeWorldError, OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    degraded = result.degraded_nodes
    if degraded:
        names = ", ".join(node.name for node in degraded)
        print(f"Warning: {len(degraded)} node(s) used fallback placement: {names}", file=sys.stderr)
    return 0


def _cmd_connectors(args: argparse.Namespace) -> int:
    """Handle connectors command."""
    from treeworld.adapters.files import dump_data, write_text

    try:
        result = _run_layout(args)
    except (TreeWorldError, OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    items = []
    for connector in result.connectors:
        item = connector.to_dict()
        if args.colliders:
            item["colliders"] = [
                {
                    "center": segment.center.to_dict(),
                    "length": segment.length,
                    "height": segment.height,
                    "width": segment.width,
                    "transition": segment.transition,
                }
                for segment in connector.collider_segments()
            ]
        items.append(item)

    try:
        write_text(dump_data(items, args.output, args.indent), args.output)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
