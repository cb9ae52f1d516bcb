"""
Region Padding Module
=====================

Expands a region outward so its boundary never touches the member points.

Design:
- Circle: metric margin added to the radius
- Polygon: each vertex pushed away from the polygon centroid by a fixed
  margin in degrees (planar approximation, not a geodesic buffer)
- Always applied to a raw shape; padding a padded shape compounds the margin

Known limitation:
- Padded vertices are clamped to lat [-90, 90] and lng [-180, 180]. Next to
  a pole or the antimeridian a clamped vertex can land on the boundary, so a
  member point there is no longer strictly inside the padded polygon.
"""

import math

from loctrack_region.geometry.primitives import GeoPoint, centroid
from loctrack_region.geometry.shapes import Circle, Polygon, RegionShape

DEFAULT_CIRCLE_MARGIN_M = 50.0
DEFAULT_POLYGON_MARGIN_DEG = 0.0005  # ~50m at mid-latitudes


def pad_circle(circle: Circle, margin_m: float = DEFAULT_CIRCLE_MARGIN_M) -> Circle:
    """Grow the radius by margin_m meters."""
    return Circle(center=circle.center, radius_m=circle.radius_m + margin_m)


def pad_polygon(polygon: Polygon, margin_deg: float = DEFAULT_POLYGON_MARGIN_DEG) -> Polygon:
    """
    Push every vertex outward from the polygon centroid.

    The centroid→vertex vector is scaled by (length + margin) / length;
    a vertex sitting on the centroid (length 0) is left in place.
    """
    center = centroid(polygon.vertices)

    padded = []
    for vertex in polygon.vertices:
        vec_lat = vertex.lat - center.lat
        vec_lng = vertex.lng - center.lng
        length = math.sqrt(vec_lat * vec_lat + vec_lng * vec_lng)
        factor = (length + margin_deg) / length if length > 0 else 1.0
        padded.append(GeoPoint.clamped(
            lat=center.lat + vec_lat * factor,
            lng=center.lng + vec_lng * factor,
        ))

    return Polygon(vertices=tuple(padded))


def pad_shape(
    shape: RegionShape,
    margin_m: float = DEFAULT_CIRCLE_MARGIN_M,
    margin_deg: float = DEFAULT_POLYGON_MARGIN_DEG,
) -> RegionShape:
    """
    Pad any region shape.

    Args:
        shape: Raw (unpadded) shape from the selector
        margin_m: Circle margin in meters
        margin_deg: Polygon margin in degrees

    Raises:
        TypeError: If shape is not a Polygon or Circle
    """
    if isinstance(shape, Circle):
        return pad_circle(shape, margin_m)
    elif isinstance(shape, Polygon):
        return pad_polygon(shape, margin_deg)
    else:
        raise TypeError(f"Unsupported shape type: {type(shape).__name__}")
