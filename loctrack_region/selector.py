"""
Shape Selector Module
=====================

Decides circle vs. polygon for a group's point set.

Rules:
- 0 points: InsufficientDataError (caller removes the region instead)
- 1-2 points: Circle at the centroid, radius = max(farthest point, default)
- 3+ points: Polygon from the convex hull (even when collinear)
"""

from dataclasses import dataclass
from typing import Sequence

from loctrack_region.errors import InsufficientDataError
from loctrack_region.geometry.hull import compute_hull
from loctrack_region.geometry.padding import (
    DEFAULT_CIRCLE_MARGIN_M,
    DEFAULT_POLYGON_MARGIN_DEG,
    pad_shape,
)
from loctrack_region.geometry.primitives import (
    DISTANCE_FUNCTIONS,
    DistanceFn,
    GeoPoint,
    centroid,
    haversine_distance_m,
    max_distance_from_center,
    resolve_distance,
)
from loctrack_region.geometry.shapes import Circle, Polygon, RegionShape

DEFAULT_RADIUS_M = 100.0
MIN_POLYGON_POINTS = 3


@dataclass(frozen=True)
class RegionSettings:
    """
    Tunables for region construction.

    Attributes:
        default_radius_m: Minimum circle radius for 1-2 point groups
        circle_margin_m: Padding added to circle radii (meters)
        polygon_margin_deg: Padding added to polygon vertices (degrees)
        distance: Distance function name ("haversine" or "planar")
    """

    default_radius_m: float = DEFAULT_RADIUS_M
    circle_margin_m: float = DEFAULT_CIRCLE_MARGIN_M
    polygon_margin_deg: float = DEFAULT_POLYGON_MARGIN_DEG
    distance: str = "haversine"

    def __post_init__(self):
        """Validate region settings."""
        if self.default_radius_m < 0:
            raise ValueError(f"default_radius_m must be >= 0, got {self.default_radius_m}")
        if self.circle_margin_m < 0:
            raise ValueError(f"circle_margin_m must be >= 0, got {self.circle_margin_m}")
        if self.polygon_margin_deg < 0:
            raise ValueError(f"polygon_margin_deg must be >= 0, got {self.polygon_margin_deg}")
        if self.distance not in DISTANCE_FUNCTIONS:
            raise ValueError(
                f"Invalid distance: {self.distance}. "
                f"Must be one of {sorted(DISTANCE_FUNCTIONS)}"
            )

    @property
    def distance_fn(self) -> DistanceFn:
        return resolve_distance(self.distance)


def select_shape(
    points: Sequence[GeoPoint],
    default_radius_m: float = DEFAULT_RADIUS_M,
    distance: DistanceFn = haversine_distance_m,
) -> RegionShape:
    """
    Produce the raw (unpadded) shape for a point set.

    Raises:
        InsufficientDataError: If points is empty
    """
    if len(points) == 0:
        raise InsufficientDataError("Cannot derive a region from zero points")

    if len(points) < MIN_POLYGON_POINTS:
        center = centroid(points)
        radius = max(max_distance_from_center(center, points, distance), default_radius_m)
        return Circle(center=center, radius_m=radius)

    return Polygon(vertices=tuple(compute_hull(points)))


def build_region(points: Sequence[GeoPoint], settings: RegionSettings = RegionSettings()) -> RegionShape:
    """Select and pad the shape for a point set in one step."""
    raw = select_shape(points, settings.default_radius_m, settings.distance_fn)
    return pad_shape(raw, settings.circle_margin_m, settings.polygon_margin_deg)
