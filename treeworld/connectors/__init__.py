"""
Connectors module - Geometry linking adjacent platforms.

Consumed by external scene and collision builders; nothing here renders.
"""

from treeworld.connectors.geometry import (
    ColliderSegment,
    Connector,
    ConnectorFrame,
    ConnectorGeometry,
    build_connectors,
    orthonormal_frame,
    segment_count,
)

__all__ = [
    "ColliderSegment",
    "Connector",
    "ConnectorFrame",
    "ConnectorGeometry",
    "build_connectors",
    "orthonormal_frame",
    "segment_count",
]
