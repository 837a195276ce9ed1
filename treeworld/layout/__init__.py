"""
Layout module - Platform sizing, sector allocation and placement.

Components:
    platform_radius   - fan-out -> platform radius
    allocate_sectors  - parent interval + weights -> child intervals
    PlacementSolver   - collision-checked child centers
    LayoutEngine      - runs the whole pass

Usage:
    from treeworld.layout import LayoutEngine, LayoutConfig

    result = LayoutEngine(LayoutConfig(min_node_distance=30)).layout(tree)
"""

from treeworld.layout.config import (
    AngleMode,
    LayoutConfig,
)

from treeworld.layout.sizing import platform_radius

from treeworld.layout.sectors import (
    SECTOR_TOLERANCE,
    allocate_sectors,
    child_weight,
)

from treeworld.layout.placement import (
    Placement,
    PlacementContext,
    PlacementSolver,
)

from treeworld.layout.engine import (
    LayoutEngine,
    LayoutNode,
    LayoutResult,
    layout_tree,
)

__all__ = [
    # Config
    "AngleMode",
    "LayoutConfig",
    # Sizing
    "platform_radius",
    # Sectors
    "SECTOR_TOLERANCE",
    "allocate_sectors",
    "child_weight",
    # Placement
    "Placement",
    "PlacementContext",
    "PlacementSolver",
    # Engine
    "LayoutEngine",
    "LayoutNode",
    "LayoutResult",
    "layout_tree",
]
