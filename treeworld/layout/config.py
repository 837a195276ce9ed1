"""
Layout Configuration - Flat key-value surface with documented defaults.

All keys are optional. Keys are accepted in camelCase (the external
surface) or snake_case (the Python field names):

    depthSpacing         40     Z distance between a parent and its children
    siblingSpreadRadius  75     Ring radius for the root's children
    minNodeDistance      50     Clearance between platform rims
    radiusGrowthFactor   1.2    Ring radius multiplier per depth level
    bridgeWidth          5      Connector width (also sizes platforms)
    errorMargin          0.05   Rim slack for busy platforms
    bridgeThickness      1.5    Connector thickness (incline threshold)
    segmentOverlap       1.4    Collider segment overlap factor (>= 1)
    angleMode            deterministic | random
    seed                 None   RNG seed (>= 0) for the random angle mode
    origin               (0, 0, 0) Root platform center

Example:
    config = LayoutConfig.from_dict({"minNodeDistance": 30})
    wider = config.with_overrides(sibling_spread_radius=120)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping

from treeworld.errors import InvalidConfiguration
from treeworld.graph.types import Vec3


class AngleMode(str, Enum):
    """How the root's angular interval is rotated."""
    DETERMINISTIC = "deterministic"  # (x + y + z) of the origin, mod 2π
    RANDOM = "random"                # numpy RNG, reproducible with a seed


# camelCase surface name -> field name
_FLAT_KEYS = {
    "depthSpacing": "depth_spacing",
    "siblingSpreadRadius": "sibling_spread_radius",
    "minNodeDistance": "min_node_distance",
    "radiusGrowthFactor": "radius_growth_factor",
    "bridgeWidth": "bridge_width",
    "errorMargin": "error_margin",
    "bridgeThickness": "bridge_thickness",
    "segmentOverlap": "segment_overlap",
    "angleMode": "angle_mode",
    "seed": "seed",
    "origin": "origin",
}

# field -> (lower bound, bound is inclusive)
_NUMERIC_RULES: dict[str, tuple[float, bool]] = {
    "depth_spacing": (0.0, True),
    "sibling_spread_radius": (0.0, False),
    "min_node_distance": (0.0, True),
    "radius_growth_factor": (0.0, False),
    "bridge_width": (0.0, False),
    "error_margin": (0.0, True),
    "bridge_thickness": (0.0, False),
    "segment_overlap": (1.0, True),
}


@dataclass(frozen=True)
class LayoutConfig:
    """Validated layout configuration. Invalid values raise InvalidConfiguration."""

    depth_spacing: float = 40.0
    sibling_spread_radius: float = 75.0
    min_node_distance: float = 50.0
    radius_growth_factor: float = 1.2
    bridge_width: float = 5.0
    error_margin: float = 0.05
    bridge_thickness: float = 1.5
    segment_overlap: float = 1.4
    angle_mode: AngleMode = AngleMode.DETERMINISTIC
    seed: int | None = None
    origin: Vec3 = field(default_factory=Vec3)

    def __post_init__(self):
        for name, (bound, inclusive) in _NUMERIC_RULES.items():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfiguration(_surface_name(name), value, "must be a number")
            if not math.isfinite(value):
                raise InvalidConfiguration(_surface_name(name), value, "must be finite")
            if value < bound or (value == bound and not inclusive):
                relation = ">=" if inclusive else ">"
                raise InvalidConfiguration(_surface_name(name), value, f"must be {relation} {bound:g}")
            object.__setattr__(self, name, float(value))

        try:
            object.__setattr__(self, "angle_mode", AngleMode(self.angle_mode))
        except ValueError:
            choices = ", ".join(m.value for m in AngleMode)
            raise InvalidConfiguration("angleMode", self.angle_mode, f"must be one of: {choices}") from None

        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidConfiguration("seed", self.seed, "must be an integer or None")
        if self.seed is not None and self.seed < 0:
            raise InvalidConfiguration("seed", self.seed, "must be >= 0")

        origin = self.origin
        if not isinstance(origin, Vec3):
            origin = _coerce_origin(origin)
            object.__setattr__(self, "origin", origin)
        if not origin.is_finite():
            raise InvalidConfiguration("origin", origin, "must be finite")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> LayoutConfig:
        """Build from a flat mapping (camelCase or snake_case keys)."""
        if not data:
            return cls()
        valid = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _FLAT_KEYS.get(key, key)
            if name not in valid:
                raise InvalidConfiguration(key, value, "unknown configuration key")
            kwargs[name] = value
        return cls(**kwargs)

    def with_overrides(self, **overrides: Any) -> LayoutConfig:
        """Copy with some fields replaced (snake_case or camelCase names)."""
        if not overrides:
            return self
        valid = {f.name for f in fields(self)}
        kwargs = {}
        for key, value in overrides.items():
            name = _FLAT_KEYS.get(key, key)
            if name not in valid:
                raise InvalidConfiguration(key, value, "unknown configuration key")
            kwargs[name] = value
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Flat camelCase mapping, suitable for JSON."""
        out: dict[str, Any] = {}
        for surface, name in _FLAT_KEYS.items():
            value = getattr(self, name)
            if isinstance(value, AngleMode):
                value = value.value
            elif isinstance(value, Vec3):
                value = value.to_dict()
            out[surface] = value
        return out


def _surface_name(field_name: str) -> str:
    for surface, name in _FLAT_KEYS.items():
        if name == field_name:
            return surface
    return field_name


def _coerce_origin(value: Any) -> Vec3:
    try:
        if isinstance(value, Mapping):
            return Vec3.from_dict(value)
        x, y, z = value
        return Vec3(float(x), float(y), float(z))
    except (KeyError, TypeError, ValueError):
        raise InvalidConfiguration("origin", value, "must be {x, y, z} or a 3-sequence") from None
