"""
Layout Engine - Tree in, positioned spatial graph out.

Architecture:
    validate → place (one top-down pass) → serialize → connectors

The placement pass walks the tree with an explicit stack. For each node
it sizes the children, splits the node's sector among them by fan-out
weight, and places every child on a ring below the node. Children are
then expanded depth-first in input order.

Guarantees:
- depth(child) = depth(parent) + 1, root depth 0
- radius(node) = platform_radius(fan_out(node))
- child sectors exactly partition the parent's sector
- identical tree + config (deterministic angles) → identical positions
- every call uses a fresh PlacementContext

Example:
    engine = LayoutEngine(LayoutConfig(min_node_distance=30))
    result = engine.layout(tree)
    print(result.graph.location, len(result.connectors))
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import numpy as np

from treeworld.connectors.geometry import Connector, ConnectorGeometry
from treeworld.graph.importers import load_tree
from treeworld.graph.serializer import GraphSerializer
from treeworld.graph.types import InputTreeNode, SpatialGraph, Vec3
from treeworld.graph.validation import validate_tree
from treeworld.layout.config import AngleMode, LayoutConfig
from treeworld.layout.placement import PlacementContext, PlacementSolver
from treeworld.layout.sectors import Sector, allocate_sectors, child_weight
from treeworld.layout.sizing import platform_radius

logger = logging.getLogger(__name__)

FULL_TURN = 2 * math.pi


@dataclass(eq=False)
class LayoutNode:
    """A node being positioned. Only the engine pass that created it mutates it."""
    source: InputTreeNode
    depth: int
    radius: float
    position: Vec3 = field(default_factory=Vec3)
    sector: Sector = (0.0, FULL_TURN)
    weight: int = 1
    attempts: int = 0
    degraded: bool = False
    children: list[LayoutNode] = field(default_factory=list)

    @property
    def fan_out(self) -> int:
        return self.source.fan_out

    @property
    def name(self) -> str:
        return self.source.label

    def walk(self) -> Iterator[LayoutNode]:
        """Preorder traversal (iterative)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class LayoutResult:
    """Everything one layout call produced."""
    root: LayoutNode
    graph: SpatialGraph
    connectors: list[Connector]
    config: LayoutConfig

    def iter_nodes(self) -> Iterator[LayoutNode]:
        return self.root.walk()

    @property
    def degraded_nodes(self) -> list[LayoutNode]:
        """Nodes placed by the fallback path."""
        return [node for node in self.iter_nodes() if node.degraded]

    @property
    def node_count(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    @property
    def max_depth(self) -> int:
        return max(node.depth for node in self.iter_nodes())


class LayoutEngine:
    """Positions a tree of platforms.

    One engine can run many layouts; no state is kept between calls.
    """

    def __init__(self, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()
        self.serializer = GraphSerializer()
        self.geometry = ConnectorGeometry.from_config(self.config)

    def layout(self, tree: InputTreeNode | Mapping[str, Any] | list) -> LayoutResult:
        """Lay out ``tree`` and return positions, graph and connectors.

        Raises:
            InvalidTreeStructure: Malformed input (nothing is placed).
        """
        if not isinstance(tree, InputTreeNode):
            tree = load_tree(tree)
        validate_tree(tree)

        root = self._place(tree)
        graph = self.serializer.serialize(root)
        connectors = list(self.geometry.iter_connectors(graph))

        result = LayoutResult(root=root, graph=graph, connectors=connectors, config=self.config)
        degraded = result.degraded_nodes
        logger.info(
            "Laid out %d nodes (max depth %d, %d degraded)",
            result.node_count, result.max_depth, len(degraded),
        )
        return result

    def start_angle(self) -> float:
        """Rotation of the root's angular interval."""
        cfg = self.config
        if cfg.angle_mode is AngleMode.RANDOM:
            rng = np.random.default_rng(cfg.seed)
            return float(rng.uniform(0.0, FULL_TURN))
        origin = cfg.origin
        return (origin.x + origin.y + origin.z) % FULL_TURN

    def _size(self, node: InputTreeNode) -> float:
        cfg = self.config
        return platform_radius(node.fan_out, cfg.bridge_width, cfg.error_margin)

    def _place(self, tree: InputTreeNode) -> LayoutNode:
        cfg = self.config
        context = PlacementContext(cell_size=cfg.sibling_spread_radius)
        solver = PlacementSolver(config=cfg, context=context)

        theta = self.start_angle()
        root = LayoutNode(
            source=tree,
            depth=0,
            radius=self._size(tree),
            position=cfg.origin,
            sector=(theta, theta + FULL_TURN),
            weight=child_weight(tree.fan_out),
        )
        context.register(root.position, root.radius)

        stack = [root]
        while stack:
            node = stack.pop()
            kids = node.source.children
            if not kids:
                continue

            weights = [child_weight(kid.fan_out) for kid in kids]
            sectors = allocate_sectors(node.sector[0], node.sector[1], weights)
            logger.debug(
                "Expanding %r at depth %d: %d children, ring %.2f",
                node.name, node.depth, len(kids), solver.ring_radius(node.depth, len(kids)),
            )

            for kid, weight, sector in zip(kids, weights, sectors):
                radius = self._size(kid)
                placement = solver.place(
                    parent_position=node.position,
                    sector_start=sector[0],
                    child_radius=radius,
                    sibling_count=len(kids),
                    depth=node.depth,
                )
                node.children.append(LayoutNode(
                    source=kid,
                    depth=node.depth + 1,
                    radius=radius,
                    position=placement.position,
                    sector=sector,
                    weight=weight,
                    attempts=placement.attempts,
                    degraded=placement.degraded,
                ))

            stack.extend(reversed(node.children))

        return root


def layout_tree(
    tree: InputTreeNode | Mapping[str, Any] | list,
    config: LayoutConfig | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> LayoutResult:
    """One-call layout.

    Args:
        tree: InputTreeNode or raw input (see treeworld.graph.importers).
        config: LayoutConfig or flat mapping.
        **overrides: Individual config keys.
    """
    if not isinstance(config, LayoutConfig):
        config = LayoutConfig.from_dict(config)
    config = config.with_overrides(**overrides)
    return LayoutEngine(config).layout(tree)
