"""
Tree Importers - Raw input shapes to InputTreeNode.

Supported shapes:
    Plain tree      {"id", "label", "children": [...], ...extra}
    Editor node     {"id", "type", "data": {"label", "description", ...}, "children": [...]}
    Editor export   [editor_node, ...]  (first element is the root)
    Flat graph      {"nodes": [editor_node, ...], "edges": [{"source", "target"}, ...]}

Extra keys become pass-through metadata. Conversion is iterative so deep
trees do not hit the interpreter recursion limit.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from treeworld.errors import InvalidTreeStructure
from treeworld.graph.types import InputTreeNode

logger = logging.getLogger(__name__)

# Keys consumed by the importer; everything else is metadata
_STRUCTURAL_KEYS = ("id", "label", "children", "data")

# Editor payload keys that pass through (the label is consumed)
_EDITOR_PASSTHROUGH = ("description",)

# Stack marker: leaving a node during the preorder walk
_LEAVE = object()


def _read_node(raw: Any, path: str) -> tuple[Any, str, list, dict[str, Any]]:
    """Validate one raw node and split it into (id, label, children, metadata)."""
    if not isinstance(raw, Mapping):
        raise InvalidTreeStructure(
            f"node must be a mapping, got {type(raw).__name__}", path=path,
        )

    node_id = raw.get("id")
    if node_id is None:
        raise InvalidTreeStructure("missing 'id'", path=path)

    data = raw.get("data")
    if data is not None and not isinstance(data, Mapping):
        raise InvalidTreeStructure("'data' must be a mapping", path=path)

    label = raw.get("label")
    if label is None and data is not None:
        label = data.get("label")
    if label is None:
        raise InvalidTreeStructure("missing 'label'", path=path, details={"id": node_id})
    if not isinstance(label, str):
        label = str(label)

    children = raw.get("children", [])
    if children is None:
        children = []
    if not isinstance(children, list):
        raise InvalidTreeStructure(
            f"'children' must be a list, got {type(children).__name__}",
            path=path,
            details={"id": node_id},
        )

    metadata = {k: v for k, v in raw.items() if k not in _STRUCTURAL_KEYS}
    if data is not None:
        for key in _EDITOR_PASSTHROUGH:
            if key in data and key not in metadata:
                metadata[key] = data[key]

    return node_id, label, children, metadata


def tree_from_dict(raw: Mapping[str, Any]) -> InputTreeNode:
    """Build an InputTreeNode tree from nested mappings.

    Raises:
        InvalidTreeStructure: malformed node, or a mapping reachable twice
            (cycle or shared subtree).
    """
    # Pass 1: preorder walk, validating and recording parent links
    records: list[tuple[Any, str, dict[str, Any], int]] = []
    child_slots: list[list[int]] = []
    on_path: set[int] = set()
    seen: set[int] = set()

    # (raw, path, parent index), or (_LEAVE, key) once a node's subtree is done
    stack: list[tuple[Any, ...]] = [(raw, "root", -1)]
    while stack:
        entry = stack.pop()
        if entry[0] is _LEAVE:
            on_path.discard(entry[1])
            continue
        item, path, parent = entry
        node_id, label, children, metadata = _read_node(item, path)
        key = id(item)
        if key in on_path:
            raise InvalidTreeStructure("cyclic reference", path=path)
        if key in seen:
            raise InvalidTreeStructure("node reachable from more than one parent", path=path)

        index = len(records)
        records.append((node_id, label, metadata, parent))
        child_slots.append([])
        if parent >= 0:
            child_slots[parent].append(index)

        seen.add(key)
        on_path.add(key)
        stack.append((_LEAVE, key))
        for i in range(len(children) - 1, -1, -1):
            stack.append((children[i], f"{path}.children[{i}]", index))

    # Pass 2: build bottom-up (reverse preorder puts children before parents)
    built: list[InputTreeNode | None] = [None] * len(records)
    for index in range(len(records) - 1, -1, -1):
        node_id, label, metadata, _ = records[index]
        built[index] = InputTreeNode(
            id=node_id,
            label=label,
            children=tuple(built[c] for c in child_slots[index]),
            metadata=metadata,
        )
    return built[0]


def tree_from_export(nodes: Sequence[Mapping[str, Any]]) -> InputTreeNode:
    """Build a tree from an editor export list; the first element is the root."""
    if not isinstance(nodes, (list, tuple)) or not nodes:
        raise InvalidTreeStructure("export must be a non-empty list of nodes")
    if len(nodes) > 1:
        logger.debug("Export has %d top-level nodes, using the first as root", len(nodes))
    return tree_from_dict(nodes[0])


def tree_from_graph(data: Mapping[str, Any]) -> InputTreeNode:
    """Build a tree from flat ``nodes`` plus ``source -> target`` ``edges``.

    The first node that is never an edge target becomes the root. Edges
    that reference unknown ids are skipped.
    """
    if not isinstance(data, Mapping):
        raise InvalidTreeStructure(f"graph must be a mapping, got {type(data).__name__}")
    nodes = data.get("nodes")
    edges = data.get("edges", [])
    if not isinstance(nodes, list) or not nodes:
        raise InvalidTreeStructure("'nodes' must be a non-empty list", path="nodes")
    if not isinstance(edges, list):
        raise InvalidTreeStructure("'edges' must be a list", path="edges")

    by_id: dict[Any, dict[str, Any]] = {}
    order: list[Any] = []
    for i, raw in enumerate(nodes):
        if not isinstance(raw, Mapping) or raw.get("id") is None:
            raise InvalidTreeStructure("node must be a mapping with an 'id'", path=f"nodes[{i}]")
        if not _hashable(raw["id"]):
            raise InvalidTreeStructure(f"node id {raw['id']!r} must be a scalar", path=f"nodes[{i}]")
        if raw["id"] in by_id:
            raise InvalidTreeStructure(f"duplicate node id {raw['id']!r}", path=f"nodes[{i}]")
        copy = {k: v for k, v in raw.items() if k != "children"}
        copy["children"] = []
        by_id[raw["id"]] = copy
        order.append(raw["id"])

    targets: set[Any] = set()
    for i, edge in enumerate(edges):
        if not isinstance(edge, Mapping):
            raise InvalidTreeStructure("edge must be a mapping", path=f"edges[{i}]")
        source, target = edge.get("source"), edge.get("target")
        if not (_hashable(source) and _hashable(target)):
            raise InvalidTreeStructure("edge endpoints must be scalar ids", path=f"edges[{i}]")
        if source not in by_id or target not in by_id:
            logger.debug("Skipping edge %r -> %r with unknown endpoint", source, target)
            continue
        if target in targets:
            raise InvalidTreeStructure(
                f"node {target!r} has more than one parent", path=f"edges[{i}]",
            )
        targets.add(target)
        by_id[source]["children"].append(by_id[target])

    roots = [node_id for node_id in order if node_id not in targets]
    if not roots:
        raise InvalidTreeStructure("no root node: every node is an edge target", path="edges")
    if len(roots) > 1:
        logger.debug("Graph has %d roots, using %r", len(roots), roots[0])

    # With at most one parent per node, anything no root reaches sits on a cycle
    reached = _reachable_ids(by_id, roots)
    cyclic = [node_id for node_id in order if node_id not in reached]
    if cyclic:
        raise InvalidTreeStructure(f"cyclic edges involving {cyclic[0]!r}", path="edges")

    tree = tree_from_dict(by_id[roots[0]])
    logger.debug("Imported %d of %d nodes from graph", tree.size(), len(order))
    return tree


def _hashable(value: Any) -> bool:
    try:
        hash(value)
    except TypeError:
        return False
    return True


def _reachable_ids(by_id: dict[Any, dict[str, Any]], roots: list[Any]) -> set[Any]:
    reached: set[Any] = set()
    stack = [by_id[r] for r in roots]
    while stack:
        current = stack.pop()
        reached.add(current["id"])
        stack.extend(current["children"])
    return reached


def load_tree(data: Any, fmt: str = "auto") -> InputTreeNode:
    """Dispatch on input shape.

    Args:
        data: Decoded JSON.
        fmt: "tree", "export", "graph" or "auto".
    """
    if fmt == "auto":
        if isinstance(data, list):
            fmt = "export"
        elif isinstance(data, Mapping) and "nodes" in data and "edges" in data:
            fmt = "graph"
        else:
            fmt = "tree"

    if fmt == "tree":
        return tree_from_dict(data)
    if fmt == "export":
        return tree_from_export(data)
    if fmt == "graph":
        return tree_from_graph(data)
    raise InvalidTreeStructure(f"unknown input format {fmt!r}")
