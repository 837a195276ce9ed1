"""
Graph module - Input trees and positioned output graphs.

InputTreeNode goes into the layout engine, SpatialGraph comes out.
"""

from treeworld.graph.types import (
    Vec3,
    InputTreeNode,
    SpatialGraph,
)

from treeworld.graph.importers import (
    tree_from_dict,
    tree_from_export,
    tree_from_graph,
    load_tree,
)

from treeworld.graph.validation import (
    TreeIssue,
    collect_tree_issues,
    validate_tree,
)

from treeworld.graph.serializer import GraphSerializer

__all__ = [
    # Types
    "Vec3",
    "InputTreeNode",
    "SpatialGraph",
    # Importers
    "tree_from_dict",
    "tree_from_export",
    "tree_from_graph",
    "load_tree",
    # Validation
    "TreeIssue",
    "collect_tree_issues",
    "validate_tree",
    # Output
    "GraphSerializer",
]
