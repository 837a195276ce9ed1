"""
Shared fixtures for treeworld tests.
"""

import pytest

from treeworld.graph.types import InputTreeNode


def make_tree(fan_outs, label="n"):
    """Build a tree level by level: fan_outs[i] children per node at depth i."""
    counter = iter(range(10_000))

    def build(depth):
        node_id = next(counter)
        kids = ()
        if depth < len(fan_outs):
            kids = tuple(build(depth + 1) for _ in range(fan_outs[depth]))
        return InputTreeNode(id=node_id, label=f"{label}{node_id}", children=kids)

    return build(0)


@pytest.fixture
def two_node_tree():
    return InputTreeNode(
        id="root",
        label="Root",
        children=(InputTreeNode(id="child", label="Child"),),
    )


@pytest.fixture
def star_tree():
    """Root with eight leaf children."""
    return make_tree([8])


@pytest.fixture
def mixed_tree():
    """Uneven tree: a busy branch next to leaves and a deep chain."""
    chain = InputTreeNode(
        id="c1", label="chain 1",
        children=(InputTreeNode(
            id="c2", label="chain 2",
            children=(InputTreeNode(id="c3", label="chain 3"),),
        ),),
    )
    busy = InputTreeNode(
        id="busy", label="busy",
        children=tuple(InputTreeNode(id=f"b{i}", label=f"b{i}") for i in range(7)),
    )
    return InputTreeNode(
        id="root", label="root",
        children=(busy, InputTreeNode(id="leaf", label="leaf"), chain),
        metadata={"description": "mixed fixture"},
    )


@pytest.fixture
def editor_export():
    """Editor export: list with one root node, labels under 'data'."""
    return [
        {
            "id": "1",
            "type": "custom",
            "position": {"x": -46.5, "y": 41},
            "data": {
                "label": "layer 1",
                "description": "This is the root node.",
                "manuallyRelatedNodeIds": [],
                "isCollapsed": False,
            },
            "children": [
                {
                    "id": "node_7",
                    "type": "custom",
                    "data": {"label": "branch 1", "description": "Description for node_7"},
                    "children": [
                        {"id": "node_8", "type": "custom", "data": {"label": "level 1"}},
                        {"id": "node_9", "type": "custom", "data": {"label": "level 2"}},
                    ],
                },
                {
                    "id": "node_10",
                    "type": "custom",
                    "data": {"label": "branch 2"},
                    "children": [
                        {"id": "node_11", "type": "custom", "data": {"label": "level 1"}},
                    ],
                },
            ],
        }
    ]


@pytest.fixture
def tree_factory():
    """make_tree as a fixture: tree_factory([3, 2]) -> root, 3 children, 2 grandchildren each."""
    return make_tree
