"""
Sector Allocation - Split a parent's angular interval among its children.

Each child's share is proportional to its own branching factor
(``1 + (fan_out - 1)``, floored at 1), not to its whole subtree. A leaf
still gets a full unit wedge next to a busy sibling.
"""

from __future__ import annotations

import math
from typing import Sequence

from treeworld.errors import InvalidConfiguration

Sector = tuple[float, float]

# Tolerance used by checks on partitioned intervals
SECTOR_TOLERANCE = 1e-9


def child_weight(fan_out: int) -> int:
    """Angular weight of a child with ``fan_out`` direct children."""
    return max(1, 1 + (fan_out - 1))


def allocate_sectors(start: float, end: float, weights: Sequence[float]) -> list[Sector]:
    """
    Partition ``[start, end)`` into contiguous sub-intervals, one per weight.

    Intervals follow input order. Each interval starts where the previous
    one ended and the last ends exactly at ``end``, so there are no gaps,
    no overlaps, and the total width is conserved.

    Raises:
        InvalidConfiguration: If ``end < start``, bounds are non-finite, or
            any weight is non-finite or <= 0.
    """
    if not (math.isfinite(start) and math.isfinite(end)):
        raise InvalidConfiguration("sector", (start, end), "bounds must be finite")
    if end < start:
        raise InvalidConfiguration("sector", (start, end), "end must be >= start")
    if not weights:
        return []
    for w in weights:
        if not math.isfinite(w) or w <= 0:
            raise InvalidConfiguration("weight", w, "must be finite and > 0")

    width = end - start
    total = math.fsum(weights)
    sectors: list[Sector] = []
    cursor = start
    cumulative = 0.0
    last = len(weights) - 1
    for i, w in enumerate(weights):
        cumulative += w
        # Boundaries come from the running total so rounding cannot drift
        boundary = end if i == last else start + width * (cumulative / total)
        boundary = min(max(boundary, cursor), end)
        sectors.append((cursor, boundary))
        cursor = boundary
    return sectors


def sector_width(sector: Sector) -> float:
    return sector[1] - sector[0]
