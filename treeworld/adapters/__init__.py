"""
Adapters module - I/O surfaces.

Adapters are thin wrappers around the layout engine.
They do no layout work - only I/O.
"""

from treeworld.adapters.files import (
    load_config_file,
    load_graph_file,
    load_tree_file,
    save_graph,
)

__all__ = [
    "load_config_file",
    "load_graph_file",
    "load_tree_file",
    "save_graph",
]
