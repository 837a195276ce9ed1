"""
Graph Serializer - Positioned layout tree to public SpatialGraph.

The serializer copies; it never mutates the layout tree. Output keeps
the input's shape and child order, carries pass-through metadata, and
drops layout bookkeeping (sectors, weights, attempt counters, depth).

JSON shape:
    {
        "location": {"x": .., "y": .., "z": ..},
        "radius": ..,
        "name": "..",
        "connections": [ ... ],
        ...metadata
    }
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Mapping

from treeworld.graph.types import SpatialGraph, Vec3

if TYPE_CHECKING:
    from treeworld.layout.engine import LayoutNode

logger = logging.getLogger(__name__)

RESERVED_KEYS = ("location", "radius", "name", "connections")


class GraphSerializer:
    """Emits SpatialGraph trees and their JSON form."""

    def serialize(self, root: LayoutNode) -> SpatialGraph:
        """Copy a positioned LayoutNode tree into a SpatialGraph tree."""
        # Preorder list, then build bottom-up so deep trees need no recursion
        order: list[LayoutNode] = []
        stack = [root]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(reversed(node.children))

        built: dict[int, SpatialGraph] = {}
        for node in reversed(order):
            source = node.source
            metadata = {"id": source.id}
            metadata.update(source.metadata)
            built[id(node)] = SpatialGraph(
                location=node.position,
                radius=node.radius,
                name=source.label,
                connections=tuple(built.pop(id(child)) for child in node.children),
                metadata=metadata,
            )
        return built[id(root)]

    def to_dict(self, graph: SpatialGraph) -> dict[str, Any]:
        """Plain-JSON form of a SpatialGraph tree."""
        order: list[SpatialGraph] = list(graph.walk())
        built: dict[int, dict[str, Any]] = {}
        for node in reversed(order):
            out: dict[str, Any] = {}
            for key, value in node.metadata.items():
                if key in RESERVED_KEYS:
                    logger.debug("Metadata key %r shadowed by layout output", key)
                    continue
                out[key] = value
            out["location"] = node.location.to_dict()
            out["radius"] = node.radius
            out["name"] = node.name
            out["connections"] = [built.pop(id(child)) for child in node.connections]
            built[id(node)] = out
        return built[id(graph)]

    def to_json(self, graph: SpatialGraph, indent: int | None = 2) -> str:
        return json.dumps(self.to_dict(graph), indent=indent)

    def from_dict(self, data: Mapping[str, Any]) -> SpatialGraph:
        """Read back the form produced by to_dict()."""
        order: list[Mapping[str, Any]] = []
        stack = [data]
        while stack:
            node = stack.pop()
            order.append(node)
            stack.extend(reversed(node.get("connections", [])))

        built: dict[int, SpatialGraph] = {}
        for node in reversed(order):
            built[id(node)] = SpatialGraph(
                location=Vec3.from_dict(node["location"]),
                radius=float(node["radius"]),
                name=node["name"],
                connections=tuple(built.pop(id(c)) for c in node.get("connections", [])),
                metadata={k: v for k, v in node.items() if k not in RESERVED_KEYS},
            )
        return built[id(data)]
