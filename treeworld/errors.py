"""
Layout Errors - Domain-specific error types.

Error hierarchy:
    TreeWorldError (base)
    ├── InvalidTreeStructure
    └── InvalidConfiguration

Both are raised before layout starts. A placement that runs out of
collision-avoidance attempts is NOT an error: the node is flagged as
degraded instead (see treeworld.layout.placement).
"""

from __future__ import annotations

from typing import Any


class TreeWorldError(Exception):
    """Base error for all treeworld errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidTreeStructure(TreeWorldError, ValueError):
    """
    Raised for malformed input trees.

    Examples:
    - Node that is not a mapping / InputTreeNode
    - Missing ``id`` or ``label``
    - ``children`` that is not a list
    - Cyclic or shared references
    """

    def __init__(
        self,
        message: str,
        path: str = "root",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"{path}: {message}", details)
        self.path = path


class InvalidConfiguration(TreeWorldError, ValueError):
    """Raised when a configuration value is unknown, non-finite or out of range."""

    def __init__(
        self,
        key: str,
        value: Any,
        reason: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(f"Invalid value for '{key}': {value!r} ({reason})", details)
        self.key = key
        self.value = value
        self.reason = reason
