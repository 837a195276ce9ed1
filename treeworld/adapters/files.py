"""
File Adapter - JSON and YAML files in and out.

Only I/O: decoding, shape dispatch and encoding. Layout logic stays in
treeworld.layout. Files ending in .yaml / .yml go through PyYAML, every
other path (and stdin) is read as JSON.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from treeworld.errors import InvalidConfiguration
from treeworld.graph.importers import load_tree
from treeworld.graph.serializer import GraphSerializer
from treeworld.graph.types import InputTreeNode, SpatialGraph
from treeworld.layout.config import LayoutConfig

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def is_yaml(path: str | Path | None) -> bool:
    return path is not None and Path(path).suffix.lower() in YAML_SUFFIXES


def read_data(path: str | Path) -> Any:
    """Decode a JSON or YAML file; ``"-"`` reads JSON from stdin."""
    if str(path) == "-":
        return json.load(sys.stdin)
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if is_yaml(path):
            return yaml.safe_load(f)
        return json.load(f)


def load_tree_file(path: str | Path, fmt: str = "auto") -> InputTreeNode:
    """Read an input tree in any supported shape."""
    tree = load_tree(read_data(path), fmt=fmt)
    logger.debug("Loaded %d nodes from %s", tree.size(), path)
    return tree


def load_config_file(path: str | Path | None, overrides: dict[str, Any] | None = None) -> LayoutConfig:
    """Read a flat configuration object, then apply ``overrides``."""
    settings: dict[str, Any] = {}
    if path:
        loaded = read_data(path)
        if not isinstance(loaded, dict):
            raise InvalidConfiguration(str(path), type(loaded).__name__, "config file must hold a mapping")
        settings.update(loaded)
    settings.update(overrides or {})
    return LayoutConfig.from_dict(settings)


def dump_data(data: Any, path: str | Path | None = None, indent: int | None = 2) -> str:
    """Encode ``data`` as YAML when ``path`` is a YAML file, JSON otherwise."""
    if is_yaml(path):
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    return json.dumps(data, indent=indent)


def write_text(text: str, path: str | Path | None = None) -> None:
    """Write to ``path``, or stdout when no path is given."""
    if path:
        Path(path).write_text(text.rstrip("\n") + "\n", encoding="utf-8")
    else:
        print(text)


def save_graph(graph: SpatialGraph, path: str | Path | None = None, indent: int | None = 2) -> None:
    write_text(dump_data(GraphSerializer().to_dict(graph), path, indent), path)


def load_graph_file(path: str | Path) -> SpatialGraph:
    """Read a SpatialGraph previously written by save_graph()."""
    return GraphSerializer().from_dict(read_data(path))
