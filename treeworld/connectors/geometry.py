"""
Connector Geometry - Rim-to-rim links between adjacent platforms.

For each parent-child pair this computes where a connector touches each
platform rim, its direction, length and orientation frame, whether it is
significantly inclined, and how a collision builder should split it into
overlapping segments. No meshes are built here; the external scene and
collision builders consume these numbers.

Frame construction:
    primary = direction from endpoint A to endpoint B
    side    = primary x world_up   (normalized)
    up      = side x primary       (closest to world_up that stays orthogonal)

World up is +Z (the layout's height axis).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterator

import numpy as np

from treeworld.errors import InvalidConfiguration
from treeworld.graph.types import SpatialGraph, Vec3

if TYPE_CHECKING:
    from treeworld.layout.config import LayoutConfig


WORLD_UP = np.array([0.0, 0.0, 1.0])
_FALLBACK_UP = np.array([0.0, 1.0, 0.0])

# Segment policy: one segment per this much length / vertical drop
SEGMENT_LENGTH_UNIT = 5.0
SEGMENT_DROP_UNIT = 2.0

# Collider shaping relative to the connector
INCLINED_HEIGHT_FACTOR = 0.7
LEVEL_HEIGHT_FACTOR = 0.9
WIDTH_FACTOR = 0.95
TRANSITION_HEIGHT_FACTOR = 1.5
TRANSITION_DROP_FACTOR = 0.25


@dataclass(frozen=True)
class ConnectorFrame:
    """Orthonormal basis of a connector."""
    primary: Vec3
    up: Vec3
    side: Vec3

    def as_matrix(self) -> np.ndarray:
        """3x3 matrix with primary, up and side as columns."""
        return np.column_stack([self.primary.as_array(), self.up.as_array(), self.side.as_array()])


@dataclass(frozen=True)
class ColliderSegment:
    """A static box volume covering one stretch of a connector."""
    index: int
    center: Vec3
    length: float
    height: float
    width: float
    start_offset: float
    end_offset: float
    transition: bool = False


@dataclass(frozen=True)
class Connector:
    """Derived geometry of one parent-child link."""
    endpoint_a: Vec3
    endpoint_b: Vec3
    width: float
    thickness: float
    length: float
    vertical_drop: float
    incline_angle: float      # radians, atan2(drop, horizontal run)
    inclined: bool
    frame: ConnectorFrame
    segment_count: int
    overlap_factor: float = 1.0
    parent_name: str = ""
    child_name: str = ""

    @property
    def direction(self) -> Vec3:
        return self.frame.primary

    @property
    def midpoint(self) -> Vec3:
        return (self.endpoint_a + self.endpoint_b) * 0.5

    @property
    def segment_length(self) -> float:
        """Length of each segment including overlap."""
        return self.length / self.segment_count * self.overlap_factor

    def collider_segments(self) -> list[ColliderSegment]:
        """
        Split the connector into overlapping static boxes.

        Inclined connectors get thinner boxes so stepping onto a slope
        reads as a ramp; the first and last segment are marked as
        transitions for the collision module to extend downwards.
        """
        step = self.length / self.segment_count
        start = self.endpoint_a.as_array()
        direction = self.direction.as_array()
        height_factor = INCLINED_HEIGHT_FACTOR if self.inclined else LEVEL_HEIGHT_FACTOR
        last = self.segment_count - 1

        segments = []
        for i in range(self.segment_count):
            center = start + direction * ((i + 0.5) * step)
            segments.append(ColliderSegment(
                index=i,
                center=Vec3.from_array(center),
                length=step * self.overlap_factor,
                height=self.thickness * height_factor,
                width=self.width * WIDTH_FACTOR,
                start_offset=i * step,
                end_offset=(i + 1) * step,
                transition=(i == 0 or i == last),
            ))
        return segments

    def transition_colliders(self) -> list[ColliderSegment]:
        """Taller boxes under the end segments, dropped slightly below them."""
        segments = self.collider_segments()
        ends = [segments[0]] if len(segments) == 1 else [segments[0], segments[-1]]
        boxes = []
        for segment in ends:
            c = segment.center
            boxes.append(ColliderSegment(
                index=segment.index,
                center=Vec3(c.x, c.y, c.z - segment.height * TRANSITION_DROP_FACTOR),
                length=segment.length,
                height=segment.height * TRANSITION_HEIGHT_FACTOR,
                width=segment.width,
                start_offset=segment.start_offset,
                end_offset=segment.end_offset,
                transition=True,
            ))
        return boxes

    def to_dict(self) -> dict:
        return {
            "from": self.parent_name,
            "to": self.child_name,
            "endpointA": self.endpoint_a.to_dict(),
            "endpointB": self.endpoint_b.to_dict(),
            "width": self.width,
            "thickness": self.thickness,
            "length": self.length,
            "verticalDrop": self.vertical_drop,
            "inclineAngle": self.incline_angle,
            "inclined": self.inclined,
            "segments": self.segment_count,
            "segmentLength": self.segment_length,
        }


def segment_count(length: float, vertical_drop: float) -> int:
    """Number of collider segments: ``max(ceil(length/5), ceil(drop/2))``, at least 1."""
    return max(
        1,
        math.ceil(length / SEGMENT_LENGTH_UNIT),
        math.ceil(vertical_drop / SEGMENT_DROP_UNIT),
    )


def orthonormal_frame(direction: np.ndarray) -> ConnectorFrame:
    """Frame with ``direction`` as primary axis and up as close to +Z as possible."""
    norm = np.linalg.norm(direction)
    if norm == 0.0:
        primary = np.array([1.0, 0.0, 0.0])
    else:
        primary = direction / norm

    reference = WORLD_UP
    if abs(float(np.dot(primary, reference))) > 1.0 - 1e-12:
        reference = _FALLBACK_UP

    side = np.cross(primary, reference)
    side /= np.linalg.norm(side)
    up = np.cross(side, primary)
    up /= np.linalg.norm(up)
    return ConnectorFrame(
        primary=Vec3.from_array(primary),
        up=Vec3.from_array(up),
        side=Vec3.from_array(side),
    )


@dataclass
class ConnectorGeometry:
    """Computes Connector geometry for platform pairs."""

    width: float = 5.0
    thickness: float = 1.5
    overlap_factor: float = 1.4

    def __post_init__(self):
        if not math.isfinite(self.overlap_factor) or self.overlap_factor < 1.0:
            raise InvalidConfiguration("segmentOverlap", self.overlap_factor, "must be finite and >= 1")
        if not math.isfinite(self.width) or self.width <= 0:
            raise InvalidConfiguration("bridgeWidth", self.width, "must be finite and > 0")
        if not math.isfinite(self.thickness) or self.thickness <= 0:
            raise InvalidConfiguration("bridgeThickness", self.thickness, "must be finite and > 0")

    @classmethod
    def from_config(cls, config: LayoutConfig) -> ConnectorGeometry:
        return cls(
            width=config.bridge_width,
            thickness=config.bridge_thickness,
            overlap_factor=config.segment_overlap,
        )

    def attachment_points(
        self,
        center_a: Vec3,
        radius_a: float,
        center_b: Vec3,
        radius_b: float,
    ) -> tuple[Vec3, Vec3]:
        """
        Rim points facing each other.

        Both lie on the plan-view line between the centers, each offset
        outward from its own center by its own radius, at its platform's
        height. Centers stacked straight above each other use +X.
        """
        dx = center_b.x - center_a.x
        dy = center_b.y - center_a.y
        planar = math.hypot(dx, dy)
        if planar == 0.0:
            ux, uy = 1.0, 0.0
        else:
            ux, uy = dx / planar, dy / planar
        point_a = Vec3(center_a.x + ux * radius_a, center_a.y + uy * radius_a, center_a.z)
        point_b = Vec3(center_b.x - ux * radius_b, center_b.y - uy * radius_b, center_b.z)
        return point_a, point_b

    def connect(
        self,
        center_a: Vec3,
        radius_a: float,
        center_b: Vec3,
        radius_b: float,
        parent_name: str = "",
        child_name: str = "",
    ) -> Connector:
        """
        Connector from platform A (parent) to platform B (child).

        ``incline_angle`` is the slope of the connector in radians,
        ``atan2(vertical_drop, horizontal_run)`` between the endpoints, not
        the angle against the sloped length.
        """
        point_a, point_b = self.attachment_points(center_a, radius_a, center_b, radius_b)
        delta = point_b.as_array() - point_a.as_array()
        length = float(np.linalg.norm(delta))
        drop = abs(point_a.z - point_b.z)
        run = math.hypot(float(delta[0]), float(delta[1]))

        return Connector(
            endpoint_a=point_a,
            endpoint_b=point_b,
            width=self.width,
            thickness=self.thickness,
            length=length,
            vertical_drop=drop,
            incline_angle=math.atan2(drop, run),
            inclined=drop > self.thickness,
            frame=orthonormal_frame(delta),
            segment_count=segment_count(length, drop),
            overlap_factor=self.overlap_factor,
            parent_name=parent_name,
            child_name=child_name,
        )

    def iter_connectors(self, graph: SpatialGraph) -> Iterator[Connector]:
        """One connector per parent-child pair, in preorder."""
        for parent, child in graph.edges():
            yield self.connect(
                parent.location, parent.radius,
                child.location, child.radius,
                parent_name=parent.name,
                child_name=child.name,
            )


def build_connectors(graph: SpatialGraph, geometry: ConnectorGeometry | None = None) -> list[Connector]:
    """Flat pass over a SpatialGraph producing every connector."""
    geometry = geometry or ConnectorGeometry()
    return list(geometry.iter_connectors(graph))
