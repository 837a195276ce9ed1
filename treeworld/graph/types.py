"""
Graph Types - Input tree and positioned output graph.

InputTreeNode is what callers hand in; SpatialGraph is what the layout
hands back. Both are immutable. Everything in between (sectors, weights,
attempt counters) lives on treeworld.layout.engine.LayoutNode and never
reaches these types.

Coordinate System:
    X, Y: Horizontal plane. Sectors are measured from +X towards +Y.
    Z: Height. Children sit one depth layer below their parent (-Z).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

import numpy as np


@dataclass(frozen=True)
class Vec3:
    """3D point or vector (float64 components)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def distance_to(self, other: Vec3) -> float:
        """Euclidean distance to another point."""
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def planar_distance_to(self, other: Vec3) -> float:
        """Distance in the XY plane, ignoring height."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, values: np.ndarray) -> Vec3:
        return cls(float(values[0]), float(values[1]), float(values[2]))

    @classmethod
    def from_polar(cls, center: Vec3, angle: float, distance: float, z: float) -> Vec3:
        """Point at ``distance`` from ``center`` along ``angle`` in the XY plane, at height ``z``."""
        return cls(
            x=center.x + distance * math.cos(angle),
            y=center.y + distance * math.sin(angle),
            z=z,
        )

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Vec3:
        return cls(float(data["x"]), float(data["y"]), float(data["z"]))


@dataclass(frozen=True)
class InputTreeNode:
    """A node of the caller's tree.

    ``metadata`` passes through layout untouched and reappears on the
    matching SpatialGraph node.
    """
    id: Any
    label: str
    children: tuple[InputTreeNode, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def fan_out(self) -> int:
        """Number of direct children."""
        return len(self.children)

    def walk(self) -> Iterator[InputTreeNode]:
        """Preorder traversal (iterative)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def size(self) -> int:
        return sum(1 for _ in self.walk())


@dataclass(frozen=True)
class SpatialGraph:
    """A positioned platform and the platforms it connects to.

    Public output of a layout. Holds exactly location, radius, name and
    connections, plus whatever metadata the input node carried.
    """
    location: Vec3
    radius: float
    name: str
    connections: tuple[SpatialGraph, ...] = ()
    metadata: Mapping[str, Any] = field(default_factory=dict)

    def walk(self) -> Iterator[SpatialGraph]:
        """Preorder traversal (iterative)."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.connections))

    def edges(self) -> Iterator[tuple[SpatialGraph, SpatialGraph]]:
        """All (parent, child) pairs in preorder."""
        for node in self.walk():
            for child in node.connections:
                yield node, child
