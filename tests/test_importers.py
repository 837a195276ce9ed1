"""Tests for input tree importers and structural validation."""

import pytest

from treeworld.errors import InvalidTreeStructure, TreeWorldError
from treeworld.graph import (
    InputTreeNode,
    collect_tree_issues,
    load_tree,
    tree_from_dict,
    tree_from_export,
    tree_from_graph,
    validate_tree,
)


class TestPlainTree:
    """Nested {id, label, children} mappings."""

    def test_basic(self):
        tree = tree_from_dict({
            "id": "r", "label": "Root",
            "children": [{"id": "a", "label": "A"}, {"id": "b", "label": "B", "children": []}],
        })
        assert tree.label == "Root"
        assert [c.id for c in tree.children] == ["a", "b"]
        assert tree.size() == 3

    def test_extra_keys_become_metadata(self):
        tree = tree_from_dict({"id": 1, "label": "x", "color": "blue", "weight": 3})
        assert tree.metadata == {"color": "blue", "weight": 3}

    def test_null_children_is_leaf(self):
        assert tree_from_dict({"id": 1, "label": "x", "children": None}).fan_out == 0

    def test_non_string_label_coerced(self):
        assert tree_from_dict({"id": 1, "label": 42}).label == "42"

    def test_missing_id(self):
        with pytest.raises(InvalidTreeStructure, match="missing 'id'"):
            tree_from_dict({"label": "x"})

    def test_missing_label_reports_path(self):
        raw = {"id": 1, "label": "r", "children": [{"id": 2, "label": "a"}, {"id": 3}]}
        with pytest.raises(InvalidTreeStructure) as exc:
            tree_from_dict(raw)
        assert exc.value.path == "root.children[1]"
        assert exc.value.details == {"id": 3}

    def test_children_must_be_list(self):
        with pytest.raises(InvalidTreeStructure, match="must be a list"):
            tree_from_dict({"id": 1, "label": "x", "children": {"id": 2}})

    def test_node_must_be_mapping(self):
        with pytest.raises(InvalidTreeStructure):
            tree_from_dict({"id": 1, "label": "x", "children": ["oops"]})

    def test_cycle(self):
        raw = {"id": 1, "label": "x", "children": []}
        raw["children"].append(raw)
        with pytest.raises(InvalidTreeStructure, match="cyclic"):
            tree_from_dict(raw)

    def test_shared_subtree(self):
        shared = {"id": 2, "label": "s"}
        with pytest.raises(InvalidTreeStructure, match="more than one parent"):
            tree_from_dict({"id": 1, "label": "x", "children": [shared, shared]})

    def test_duplicate_ids_allowed(self):
        tree = tree_from_dict({"id": 1, "label": "x", "children": [{"id": 1, "label": "y"}]})
        assert tree.size() == 2

    def test_deep_tree(self):
        raw = {"id": 0, "label": "leaf"}
        for i in range(1, 5000):
            raw = {"id": i, "label": str(i), "children": [raw]}
        tree = tree_from_dict(raw)
        assert tree.size() == 5000

    def test_errors_share_base(self):
        with pytest.raises(TreeWorldError):
            tree_from_dict([])

    def test_null_child_rejected(self):
        raw = {"id": 1, "label": "r", "children": [None, {"id": 2, "label": "a"}]}
        with pytest.raises(InvalidTreeStructure) as exc:
            tree_from_dict(raw)
        assert exc.value.path == "root.children[0]"

    def test_null_root_rejected(self):
        with pytest.raises(InvalidTreeStructure, match="must be a mapping"):
            tree_from_dict(None)

    def test_repeated_scalar_child_reported_as_bad_node(self):
        with pytest.raises(InvalidTreeStructure, match="must be a mapping"):
            tree_from_dict({"id": 1, "label": "r", "children": ["x", "x"]})


class TestEditorExport:
    """Editor payloads with labels under 'data'."""

    def test_export(self, editor_export):
        tree = tree_from_export(editor_export)
        assert tree.label == "layer 1"
        assert [c.label for c in tree.children] == ["branch 1", "branch 2"]
        assert tree.children[0].children[1].label == "level 2"

    def test_description_and_extras_pass_through(self, editor_export):
        tree = tree_from_export(editor_export)
        assert tree.metadata["description"] == "This is the root node."
        assert tree.metadata["type"] == "custom"
        assert tree.metadata["position"] == {"x": -46.5, "y": 41}
        assert "data" not in tree.metadata

    def test_first_element_is_root(self, editor_export):
        extra = {"id": "other", "data": {"label": "ignored"}}
        assert tree_from_export(editor_export + [extra]).id == "1"

    def test_empty_export(self):
        with pytest.raises(InvalidTreeStructure):
            tree_from_export([])

    def test_data_must_be_mapping(self):
        with pytest.raises(InvalidTreeStructure, match="'data'"):
            tree_from_dict({"id": 1, "data": "label"})


class TestFlatGraph:
    """nodes + edges input."""

    def nodes(self, *ids):
        return [{"id": i, "data": {"label": f"node {i}"}} for i in ids]

    def test_basic(self):
        data = {
            "nodes": self.nodes("a", "b", "c", "d"),
            "edges": [
                {"source": "a", "target": "b"},
                {"source": "a", "target": "c"},
                {"source": "c", "target": "d"},
            ],
        }
        tree = tree_from_graph(data)
        assert tree.id == "a"
        assert [c.id for c in tree.children] == ["b", "c"]
        assert tree.children[1].children[0].label == "node d"

    def test_unknown_edge_skipped(self):
        data = {"nodes": self.nodes("a", "b"), "edges": [{"source": "a", "target": "zzz"}]}
        assert tree_from_graph(data).fan_out == 0

    def test_two_parents(self):
        data = {
            "nodes": self.nodes("a", "b", "c"),
            "edges": [{"source": "a", "target": "c"}, {"source": "b", "target": "c"}],
        }
        with pytest.raises(InvalidTreeStructure, match="more than one parent"):
            tree_from_graph(data)

    def test_detached_cycle(self):
        data = {
            "nodes": self.nodes("a", "b", "c"),
            "edges": [{"source": "b", "target": "c"}, {"source": "c", "target": "b"}],
        }
        with pytest.raises(InvalidTreeStructure, match="cyclic"):
            tree_from_graph(data)

    def test_no_root(self):
        data = {
            "nodes": self.nodes("a", "b"),
            "edges": [{"source": "a", "target": "b"}, {"source": "b", "target": "a"}],
        }
        with pytest.raises(InvalidTreeStructure, match="no root"):
            tree_from_graph(data)

    def test_duplicate_id(self):
        with pytest.raises(InvalidTreeStructure, match="duplicate"):
            tree_from_graph({"nodes": self.nodes("a", "a"), "edges": []})

    def test_unhashable_node_id(self):
        with pytest.raises(InvalidTreeStructure) as exc:
            tree_from_graph({"nodes": [{"id": [1], "label": "x"}], "edges": []})
        assert exc.value.path == "nodes[0]"

    def test_unhashable_edge_endpoint(self):
        data = {"nodes": self.nodes(1, 2), "edges": [{"source": [1], "target": 2}]}
        with pytest.raises(InvalidTreeStructure) as exc:
            tree_from_graph(data)
        assert exc.value.path == "edges[0]"

    def test_graph_must_be_mapping(self):
        with pytest.raises(InvalidTreeStructure):
            tree_from_graph([{"id": 1}])


class TestLoadTree:
    """Shape dispatch."""

    def test_auto_detects_export(self, editor_export):
        assert load_tree(editor_export).id == "1"

    def test_auto_detects_graph(self):
        data = {"nodes": [{"id": 1, "label": "x"}], "edges": []}
        assert load_tree(data).label == "x"

    def test_auto_defaults_to_tree(self):
        assert load_tree({"id": 1, "label": "x"}).id == 1

    def test_explicit_format(self):
        with pytest.raises(InvalidTreeStructure):
            load_tree({"id": 1, "label": "x"}, fmt="export")

    def test_unknown_format(self):
        with pytest.raises(InvalidTreeStructure, match="unknown input format"):
            load_tree({"id": 1, "label": "x"}, fmt="yaml")


class TestValidation:
    """Checks on already-built InputTreeNode trees."""

    def test_valid_tree_returned(self, mixed_tree):
        assert validate_tree(mixed_tree) is mixed_tree
        assert collect_tree_issues(mixed_tree) == []

    def test_not_a_node(self):
        issues = collect_tree_issues({"id": 1})
        assert [i.code for i in issues] == ["NOT_A_NODE"]

    def test_collects_every_issue(self):
        tree = InputTreeNode(
            id=None, label="r",
            children=(InputTreeNode(id=2, label=None), "junk"),
        )
        codes = [i.code for i in collect_tree_issues(tree)]
        assert codes == ["MISSING_ID", "MISSING_LABEL", "NOT_A_NODE"]

    def test_shared_node(self):
        leaf = InputTreeNode(id="x", label="x")
        issues = collect_tree_issues(InputTreeNode(id="r", label="r", children=(leaf, leaf)))
        assert [(i.code, i.path) for i in issues] == [("SHARED_NODE", "root.children[1]")]

    def test_bad_children(self):
        tree = InputTreeNode(id=1, label="r", children="abc")
        assert [i.code for i in collect_tree_issues(tree)] == ["BAD_CHILDREN"]

    def test_bad_metadata(self):
        tree = InputTreeNode(id=1, label="r", metadata="x")
        assert [i.code for i in collect_tree_issues(tree)] == ["BAD_METADATA"]

    def test_validate_raises_with_all_issues(self):
        tree = InputTreeNode(id=None, label=None)
        with pytest.raises(InvalidTreeStructure) as exc:
            validate_tree(tree)
        assert len(exc.value.details["issues"]) == 2
        assert str(exc.value).startswith("root: ")
