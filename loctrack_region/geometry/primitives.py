"""
Geometry Primitives
===================

Pure geographic value types and distance math - NO state, NO side effects.

Design:
- GeoPoint is an immutable value object (frozen dataclass, no identity)
- Coordinates are validated at construction (fail-fast)
- Haversine is the precise distance, the equirectangular formula is the fallback
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Sequence

from loctrack_region.errors import EmptyInputError, InvalidCoordinateError

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0

# Meters per degree used by the equirectangular approximation
METERS_PER_DEG_LNG = 111_320.0
METERS_PER_DEG_LAT = 110_574.0

DistanceFn = Callable[["GeoPoint", "GeoPoint"], float]


@dataclass(frozen=True)
class GeoPoint:
    """
    Immutable geographic point in decimal degrees.

    Attributes:
        lat: Latitude in [-90, 90]
        lng: Longitude in [-180, 180]

    Example:
        >>> GeoPoint(lat=48.8566, lng=2.3522)
        GeoPoint(lat=48.8566, lng=2.3522)
    """

    lat: float
    lng: float

    def __post_init__(self):
        """Validate coordinate range."""
        if not -90.0 <= self.lat <= 90.0:
            raise InvalidCoordinateError(f"lat must be in [-90, 90], got {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise InvalidCoordinateError(f"lng must be in [-180, 180], got {self.lng}")

    @classmethod
    def clamped(cls, lat: float, lng: float) -> "GeoPoint":
        """Build a point, clamping coordinates into the valid range."""
        return cls(
            lat=min(90.0, max(-90.0, lat)),
            lng=min(180.0, max(-180.0, lng)),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, float]) -> "GeoPoint":
        """Deserialize from a {"lat": ..., "lng": ...} mapping.

        Raises:
            InvalidCoordinateError: If keys are missing or values invalid
        """
        try:
            return cls(lat=float(data["lat"]), lng=float(data["lng"]))
        except InvalidCoordinateError:
            raise
        except KeyError as e:
            raise InvalidCoordinateError(f"Missing coordinate field: {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidCoordinateError(f"Invalid coordinate data: {e}") from e

    def to_dict(self) -> Dict[str, float]:
        """Serialize to JSON-compatible dict."""
        return {"lat": self.lat, "lng": self.lng}


def centroid(points: Sequence[GeoPoint]) -> GeoPoint:
    """
    Arithmetic mean of the lat and lng components.

    Raises:
        EmptyInputError: If points is empty (callers must guard)
    """
    if not points:
        raise EmptyInputError("centroid() requires at least one point")

    count = len(points)
    return GeoPoint(
        lat=sum(p.lat for p in points) / count,
        lng=sum(p.lng for p in points) / count,
    )


def planar_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """
    Equirectangular distance approximation in meters.

    Accurate enough for the small extents of a group; used when a precise
    spherical distance is not requested.
    """
    dx = METERS_PER_DEG_LNG * math.cos(a.lat * math.pi / 180.0) * (a.lng - b.lng)
    dy = METERS_PER_DEG_LAT * (a.lat - b.lat)
    return math.sqrt(dx * dx + dy * dy)


def haversine_distance_m(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters on a spherical Earth."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2.0) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2.0) ** 2
    return 2.0 * EARTH_RADIUS_M * math.atan2(math.sqrt(h), math.sqrt(1.0 - h))


DISTANCE_FUNCTIONS: Dict[str, DistanceFn] = {
    "haversine": haversine_distance_m,
    "planar": planar_distance_m,
}


def resolve_distance(name: str) -> DistanceFn:
    """
    Look up a distance function by name.

    Unknown names degrade to the planar approximation.
    """
    try:
        return DISTANCE_FUNCTIONS[name]
    except KeyError:
        logger.warning(
            f"⚠️ Unknown distance '{name}', falling back to planar approximation. "
            f"Available: {', '.join(sorted(DISTANCE_FUNCTIONS))}"
        )
        return planar_distance_m


def max_distance_from_center(
    center: GeoPoint,
    points: Sequence[GeoPoint],
    distance: DistanceFn = haversine_distance_m,
) -> float:
    """Distance from center to the farthest point (0 for an empty set)."""
    return max((distance(center, p) for p in points), default=0.0)
