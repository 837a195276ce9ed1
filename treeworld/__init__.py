"""
treeworld - Lay out a labeled tree as a walkable 3D world of platforms.

Architecture:
    InputTreeNode → LayoutEngine → SpatialGraph → connectors

Every node becomes a circular platform sized for the connectors it hosts;
every parent-child link becomes a rim-to-rim connector. Children get an
angular sector weighted by their own fan-out and are placed on a ring one
depth layer below their parent, avoiding every platform already placed.

Public API:
    layout_tree     - One call: tree (or raw dict) in, LayoutResult out.
    LayoutEngine    - Reusable engine bound to a LayoutConfig.
    LayoutConfig    - Validated configuration.
    SpatialGraph    - Positioned output tree.

Example:
    from treeworld import layout_tree

    result = layout_tree({
        "id": "1", "label": "root",
        "children": [{"id": "2", "label": "leaf", "children": []}],
    })
    print(result.graph.connections[0].location)
    for connector in result.connectors:
        print(connector.length, connector.inclined)
"""

__version__ = "1.0.0"

from treeworld.errors import (
    TreeWorldError,
    InvalidTreeStructure,
    InvalidConfiguration,
)

from treeworld.graph import (
    Vec3,
    InputTreeNode,
    SpatialGraph,
    GraphSerializer,
    load_tree,
)

from treeworld.layout import (
    AngleMode,
    LayoutConfig,
    LayoutEngine,
    LayoutResult,
    layout_tree,
)

from treeworld.connectors import (
    Connector,
    ConnectorGeometry,
    build_connectors,
)

__all__ = [
    "__version__",
    # Errors
    "TreeWorldError",
    "InvalidTreeStructure",
    "InvalidConfiguration",
    # Graph
    "Vec3",
    "InputTreeNode",
    "SpatialGraph",
    "GraphSerializer",
    "load_tree",
    # Layout
    "AngleMode",
    "LayoutConfig",
    "LayoutEngine",
    "LayoutResult",
    "layout_tree",
    # Connectors
    "Connector",
    "ConnectorGeometry",
    "build_connectors",
]
