"""
Platform Sizing - Fan-out to platform radius.

A platform's rim must hold one connector per child. Below six
connectors the platform keeps a floor size so leaves and lightly
connected nodes are never undersized; from six up the rim circumference
is k connector widths plus a safety margin.
"""

from __future__ import annotations

import math
import numbers

from treeworld.errors import InvalidConfiguration

# Fan-out below which every platform gets the floor size
FLOOR_CONNECTIONS = 6


def platform_radius(fan_out: int, bridge_width: float = 5.0, error_margin: float = 0.05) -> float:
    """
    Radius whose rim fits ``fan_out`` connectors of ``bridge_width``.

    Args:
        fan_out: Number of outgoing connectors (>= 0).
        bridge_width: Connector width (> 0).
        error_margin: Fractional slack added for busy platforms (>= 0).

    Returns:
        ``6·w/2π`` when fan_out < 6, else ``k·w·(1+m)/2π``.

    Raises:
        InvalidConfiguration: On negative, non-integral or non-finite input.
    """
    if isinstance(fan_out, bool) or not isinstance(fan_out, numbers.Real):
        raise InvalidConfiguration("fanOut", fan_out, "must be a number")
    if not math.isfinite(fan_out) or fan_out < 0 or fan_out != int(fan_out):
        raise InvalidConfiguration("fanOut", fan_out, "must be a non-negative integer")
    if isinstance(bridge_width, bool) or not isinstance(bridge_width, numbers.Real) \
            or not math.isfinite(bridge_width) or bridge_width <= 0:
        raise InvalidConfiguration("bridgeWidth", bridge_width, "must be finite and > 0")
    if isinstance(error_margin, bool) or not isinstance(error_margin, numbers.Real) \
            or not math.isfinite(error_margin) or error_margin < 0:
        raise InvalidConfiguration("errorMargin", error_margin, "must be finite and >= 0")

    if fan_out < FLOOR_CONNECTIONS:
        return FLOOR_CONNECTIONS * bridge_width / (2 * math.pi)
    return int(fan_out) * bridge_width * (1 + error_margin) / (2 * math.pi)
