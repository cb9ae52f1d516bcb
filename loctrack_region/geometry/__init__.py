"""
Geometry Layer
==============

Bounded Context: Pure geographic shapes and computations.

Responsibilities:
- Point value type and distance math
- Convex hull construction
- Region shapes (Polygon | Circle)
- Outward padding
- NO state, NO storage, NO rendering
"""

from loctrack_region.geometry.primitives import (
    GeoPoint,
    centroid,
    planar_distance_m,
    haversine_distance_m,
    resolve_distance,
    max_distance_from_center,
)
from loctrack_region.geometry.hull import compute_hull, is_left_turn
from loctrack_region.geometry.shapes import Polygon, Circle, RegionShape, ShapeKind, shape_from_dict
from loctrack_region.geometry.padding import pad_shape, pad_circle, pad_polygon

__all__ = [
    "GeoPoint",
    "centroid",
    "planar_distance_m",
    "haversine_distance_m",
    "resolve_distance",
    "max_distance_from_center",
    "compute_hull",
    "is_left_turn",
    "Polygon",
    "Circle",
    "RegionShape",
    "ShapeKind",
    "shape_from_dict",
    "pad_shape",
    "pad_circle",
    "pad_polygon",
]
