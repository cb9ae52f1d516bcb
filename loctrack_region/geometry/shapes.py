"""
Region Shapes Module
====================

Tagged union of renderable region shapes - NO state, NO side effects.

Design:
- Immutable shapes (frozen dataclass pattern)
- RegionShape = Polygon | Circle, consumers dispatch exhaustively with
  isinstance and raise TypeError on anything else
- Point containment helpers for validation and hit testing
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple, Union

import numpy as np

from loctrack_region.geometry.primitives import DistanceFn, GeoPoint, haversine_distance_m

# Tolerance (degrees) for points lying exactly on a polygon edge
EDGE_TOLERANCE_DEG = 1e-9

# Tolerance (meters) for points lying exactly on a circle boundary
RADIUS_TOLERANCE_M = 1e-6


class ShapeKind(str, Enum):
    """Region shape discriminator."""
    POLYGON = "polygon"
    CIRCLE = "circle"


@dataclass(frozen=True)
class Polygon:
    """
    Immutable polygon region.

    Vertices come from the hull builder, so they are normally convex and
    counter-clockwise. Collinear input can yield fewer than 3 vertices; such
    polygons are valid but degenerate.

    Attributes:
        vertices: Ordered boundary vertices
    """

    vertices: Tuple[GeoPoint, ...]

    def __post_init__(self):
        """Normalize to tuple and validate."""
        object.__setattr__(self, "vertices", tuple(self.vertices))
        if not self.vertices:
            raise ValueError("Polygon must have at least 1 vertex")

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.POLYGON

    @property
    def is_degenerate(self) -> bool:
        """True for fewer than 3 vertices or zero area."""
        return len(self.vertices) < 3 or self.signed_area() == 0.0

    def signed_area(self) -> float:
        """Shoelace area in square degrees (positive when counter-clockwise)."""
        total = 0.0
        n = len(self.vertices)
        for i in range(n):
            a = self.vertices[i]
            b = self.vertices[(i + 1) % n]
            total += a.lng * b.lat - b.lng * a.lat
        return total / 2.0

    def as_array(self) -> np.ndarray:
        """Nx2 array of (lng, lat) pairs, the x/y order used by renderers."""
        return np.array([[v.lng, v.lat] for v in self.vertices], dtype=np.float64)

    def contains(self, point: GeoPoint) -> bool:
        """
        Check if point is inside or on the boundary (planar, lng = x, lat = y).

        Uses boundary check first, then even-odd ray casting.
        """
        n = len(self.vertices)
        for i in range(n):
            if _on_segment(self.vertices[i], self.vertices[(i + 1) % n], point):
                return True
        if n < 3:
            return False

        inside = False
        x, y = point.lng, point.lat
        j = n - 1
        for i in range(n):
            xi, yi = self.vertices[i].lng, self.vertices[i].lat
            xj, yj = self.vertices[j].lng, self.vertices[j].lat
            if (yi > y) != (yj > y):
                x_cross = (xj - xi) * (y - yi) / (yj - yi) + xi
                if x < x_cross:
                    inside = not inside
            j = i
        return inside

    def strictly_contains(self, point: GeoPoint) -> bool:
        """Inside and not on any edge."""
        n = len(self.vertices)
        if any(_on_segment(self.vertices[i], self.vertices[(i + 1) % n], point) for i in range(n)):
            return False
        return self.contains(point)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "kind": self.kind.value,
            "vertices": [v.to_dict() for v in self.vertices],
        }


@dataclass(frozen=True)
class Circle:
    """
    Immutable circle region.

    Attributes:
        center: Circle center
        radius_m: Radius in meters (>= 0)
    """

    center: GeoPoint
    radius_m: float

    def __post_init__(self):
        """Validate radius."""
        if self.radius_m < 0:
            raise ValueError(f"Circle radius must be >= 0, got {self.radius_m}")

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.CIRCLE

    def contains(self, point: GeoPoint, distance: DistanceFn = haversine_distance_m) -> bool:
        """Check if point is inside or on the circle."""
        return distance(self.center, point) <= self.radius_m + RADIUS_TOLERANCE_M

    def strictly_contains(self, point: GeoPoint, distance: DistanceFn = haversine_distance_m) -> bool:
        """Inside and not on the boundary."""
        return distance(self.center, point) < self.radius_m - RADIUS_TOLERANCE_M

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            "kind": self.kind.value,
            "center": self.center.to_dict(),
            "radius_m": self.radius_m,
        }


RegionShape = Union[Polygon, Circle]


def shape_from_dict(data: Dict[str, Any]) -> RegionShape:
    """
    Deserialize a shape produced by to_dict().

    Raises:
        ValueError: If kind is unknown or fields are missing
    """
    try:
        kind = ShapeKind(data["kind"])
    except KeyError as e:
        raise ValueError(f"Missing required shape field: {e}") from e

    if kind == ShapeKind.POLYGON:
        return Polygon(vertices=tuple(GeoPoint.from_dict(v) for v in data["vertices"]))
    elif kind == ShapeKind.CIRCLE:
        return Circle(center=GeoPoint.from_dict(data["center"]), radius_m=float(data["radius_m"]))
    else:
        raise ValueError(f"Unsupported shape kind: {kind}")


def _on_segment(a: GeoPoint, b: GeoPoint, p: GeoPoint) -> bool:
    """True if p lies on segment a-b (within EDGE_TOLERANCE_DEG)."""
    cross = (b.lng - a.lng) * (p.lat - a.lat) - (b.lat - a.lat) * (p.lng - a.lng)
    length = max(abs(b.lng - a.lng), abs(b.lat - a.lat), 1.0)
    if abs(cross) > EDGE_TOLERANCE_DEG * length:
        return False
    return (
        min(a.lng, b.lng) - EDGE_TOLERANCE_DEG <= p.lng <= max(a.lng, b.lng) + EDGE_TOLERANCE_DEG
        and min(a.lat, b.lat) - EDGE_TOLERANCE_DEG <= p.lat <= max(a.lat, b.lat) + EDGE_TOLERANCE_DEG
    )
