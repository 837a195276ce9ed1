"""
Tree Validation - Fail before layout starts.

Every issue answers:
1. WHAT is wrong?
2. WHERE in the tree (path like "root.children[2]")?

validate_tree() raises InvalidTreeStructure carrying all issues found;
collect_tree_issues() returns them for tools that want to report rather
than raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from treeworld.errors import InvalidTreeStructure
from treeworld.graph.types import InputTreeNode


@dataclass
class TreeIssue:
    """A single structural problem in an input tree."""
    path: str
    message: str
    code: str = "INVALID_NODE"
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def collect_tree_issues(tree: Any) -> list[TreeIssue]:
    """Walk ``tree`` and return every structural issue (empty when valid)."""
    issues: list[TreeIssue] = []
    if not isinstance(tree, InputTreeNode):
        issues.append(TreeIssue(
            path="root",
            message=f"expected InputTreeNode, got {type(tree).__name__}",
            code="NOT_A_NODE",
        ))
        return issues

    seen: set[int] = set()
    stack: list[tuple[Any, str]] = [(tree, "root")]
    while stack:
        node, path = stack.pop()
        if not isinstance(node, InputTreeNode):
            issues.append(TreeIssue(
                path=path,
                message=f"expected InputTreeNode, got {type(node).__name__}",
                code="NOT_A_NODE",
            ))
            continue
        if id(node) in seen:
            # Frozen nodes cannot form cycles, but the same object can be shared
            issues.append(TreeIssue(
                path=path,
                message="node reachable from more than one parent",
                code="SHARED_NODE",
                context={"id": node.id},
            ))
            continue
        seen.add(id(node))

        if node.id is None:
            issues.append(TreeIssue(path=path, message="missing 'id'", code="MISSING_ID"))
        if not isinstance(node.label, str):
            issues.append(TreeIssue(
                path=path,
                message="missing or non-string 'label'",
                code="MISSING_LABEL",
                context={"id": node.id},
            ))
        if not isinstance(node.metadata, Mapping):
            issues.append(TreeIssue(
                path=path,
                message=f"'metadata' must be a mapping, got {type(node.metadata).__name__}",
                code="BAD_METADATA",
                context={"id": node.id},
            ))
        if not isinstance(node.children, (tuple, list)):
            issues.append(TreeIssue(
                path=path,
                message=f"'children' must be a sequence, got {type(node.children).__name__}",
                code="BAD_CHILDREN",
                context={"id": node.id},
            ))
            continue

        for i in range(len(node.children) - 1, -1, -1):
            stack.append((node.children[i], f"{path}.children[{i}]"))

    return issues


def validate_tree(tree: Any) -> InputTreeNode:
    """Raise InvalidTreeStructure if ``tree`` is malformed; return it otherwise."""
    issues = collect_tree_issues(tree)
    if issues:
        first = issues[0]
        raise InvalidTreeStructure(
            first.message,
            path=first.path,
            details={"issues": [str(issue) for issue in issues]},
        )
    return tree
