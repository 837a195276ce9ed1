"""
Placement Solver - Collision-checked centers for child platforms.

Children sit on a ring around their parent, one depth layer lower. The
ring radius grows with depth and with the number of siblings. Each
candidate is checked against every platform already placed in the same
layout call; on a hit the angle is nudged and, after five misses, the
ring is widened once. After ten misses the child is put on a wider
fallback ring at its un-nudged angle and flagged as degraded.

Placement never fails the layout. The attempt budget bounds the work to
at most ten candidates per node.

The registry lives in a PlacementContext owned by a single layout call.
Never share or reuse one across calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from treeworld.graph.types import Vec3
from treeworld.layout.config import LayoutConfig

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 10
ANGLE_JITTER = 0.05       # radians added per attempt
SAFETY_FACTOR = 1.1       # applied to the initial ring radius
CROWDING_ATTEMPT = 5      # attempt index from which the ring is widened
CROWDING_GROWTH = 1.15
FALLBACK_FACTOR = 1.5


@dataclass(frozen=True)
class RegistryEntry:
    """A placed platform."""
    position: Vec3
    radius: float


@dataclass(frozen=True)
class Placement:
    """Result of placing one child."""
    position: Vec3
    attempts: int          # candidates evaluated
    degraded: bool         # True when the fallback ring was used
    ring_radius: float     # ring radius in effect when placement finished


class PlacementContext:
    """
    Append-only registry of placed platforms for one layout call.

    A uniform grid over (x, y) indexes entries so a clearance query only
    visits nearby cells. Planar distance never exceeds 3D distance, so
    skipping far cells never hides a collision.
    """

    def __init__(self, cell_size: float = 75.0):
        if not math.isfinite(cell_size) or cell_size <= 0:
            cell_size = 75.0
        self.cell_size = cell_size
        self.entries: list[RegistryEntry] = []
        self._grid: dict[tuple[int, int], list[int]] = {}
        self._max_radius = 0.0

    def __len__(self) -> int:
        return len(self.entries)

    def _cell(self, x: float, y: float) -> tuple[int, int]:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def register(self, position: Vec3, radius: float) -> RegistryEntry:
        """Append a placed platform."""
        entry = RegistryEntry(position=position, radius=radius)
        self._grid.setdefault(self._cell(position.x, position.y), []).append(len(self.entries))
        self.entries.append(entry)
        self._max_radius = max(self._max_radius, radius)
        return entry

    def nearby(self, position: Vec3, reach: float) -> list[RegistryEntry]:
        """Entries whose cell lies within ``reach`` of ``position`` in the plane."""
        cx, cy = self._cell(position.x, position.y)
        span = int(math.ceil(reach / self.cell_size))
        if (2 * span + 1) ** 2 > len(self._grid):
            # Query box larger than the occupied grid: scan occupied cells only
            indices = [
                i for (gx, gy), bucket in self._grid.items()
                if abs(gx - cx) <= span and abs(gy - cy) <= span
                for i in bucket
            ]
        else:
            indices = [
                i
                for gx in range(cx - span, cx + span + 1)
                for gy in range(cy - span, cy + span + 1)
                for i in self._grid.get((gx, gy), ())
            ]
        # Registration order keeps results deterministic
        indices.sort()
        return [self.entries[i] for i in indices]

    def is_clear(self, position: Vec3, radius: float, clearance: float) -> bool:
        """True if no entry is closer than ``radius + entry.radius + clearance``."""
        reach = radius + self._max_radius + clearance
        for entry in self.nearby(position, reach):
            if position.distance_to(entry.position) < radius + entry.radius + clearance:
                return False
        return True


@dataclass
class PlacementSolver:
    """Computes child centers against a shared PlacementContext."""

    config: LayoutConfig
    context: PlacementContext = field(default_factory=PlacementContext)

    def ring_radius(self, depth: int, sibling_count: int) -> float:
        """Initial ring radius for children of a node at ``depth``."""
        cfg = self.config
        base = cfg.sibling_spread_radius * cfg.radius_growth_factor ** depth
        min_for_spacing = cfg.min_node_distance * sibling_count / (2 * math.pi)
        return max(base, min_for_spacing) * SAFETY_FACTOR

    def place(
        self,
        parent_position: Vec3,
        sector_start: float,
        child_radius: float,
        sibling_count: int,
        depth: int,
    ) -> Placement:
        """
        Place one child of a parent at ``depth``.

        Args:
            parent_position: Center of the parent platform.
            sector_start: Start angle of the child's allocated sector.
            child_radius: Radius of the child platform.
            sibling_count: Number of children the parent has.
            depth: Depth of the parent.

        Returns:
            Placement; the position is already registered.
        """
        cfg = self.config
        z = parent_position.z - cfg.depth_spacing
        current = self.ring_radius(depth, sibling_count)

        for attempt in range(MAX_ATTEMPTS):
            if attempt == CROWDING_ATTEMPT:
                current *= CROWDING_GROWTH
            angle = sector_start + attempt * ANGLE_JITTER
            candidate = Vec3.from_polar(parent_position, angle, current, z)
            if self.context.is_clear(candidate, child_radius, cfg.min_node_distance):
                self.context.register(candidate, child_radius)
                return Placement(
                    position=candidate,
                    attempts=attempt + 1,
                    degraded=False,
                    ring_radius=current,
                )

        fallback_radius = current * FALLBACK_FACTOR
        position = Vec3.from_polar(parent_position, sector_start, fallback_radius, z)
        logger.warning(
            "Fallback placement at depth %d (angle %.4f, ring %.2f) after %d attempts",
            depth + 1, sector_start, fallback_radius, MAX_ATTEMPTS,
        )
        self.context.register(position, child_radius)
        return Placement(
            position=position,
            attempts=MAX_ATTEMPTS,
            degraded=True,
            ring_radius=fallback_radius,
        )
