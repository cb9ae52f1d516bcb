"""
Convex Hull Module
==================

Graham scan over geographic points, treating lng as x and lat as y.

Design:
- Pure function, input never mutated
- Left-turn test via 2D cross product
- Collinear input is not special-cased: the scan may return fewer than
  3 vertices for 3+ collinear points
"""

import math
from typing import List, Sequence

from loctrack_region.geometry.primitives import GeoPoint


def cross(p1: GeoPoint, p2: GeoPoint, p3: GeoPoint) -> float:
    """
    Cross product (p2 - p1) × (p3 - p1) in the (lng, lat) plane.

    Returns:
        > 0: p3 is left of p1→p2 (counter-clockwise turn)
        < 0: p3 is right of p1→p2
        0: collinear
    """
    return (p2.lng - p1.lng) * (p3.lat - p1.lat) - (p2.lat - p1.lat) * (p3.lng - p1.lng)


def is_left_turn(p1: GeoPoint, p2: GeoPoint, p3: GeoPoint) -> bool:
    """True if p1 → p2 → p3 turns strictly left."""
    return cross(p1, p2, p3) > 0


def find_pivot(points: Sequence[GeoPoint]) -> int:
    """Index of the point with smallest lat, ties broken by smallest lng."""
    return min(range(len(points)), key=lambda i: (points[i].lat, points[i].lng))


def compute_hull(points: Sequence[GeoPoint]) -> List[GeoPoint]:
    """
    Compute the convex hull boundary (counter-clockwise) with a Graham scan.

    Steps:
    1. 3 points or fewer are returned unchanged
    2. Pivot = lowest lat (then lowest lng)
    3. Remaining points sorted by polar angle atan2(Δlat, Δlng) around the
       pivot, closer points first on equal angles
    4. Scan, popping while the last two hull points and the candidate do
       not form a left turn

    Args:
        points: Point set of any size

    Returns:
        Hull vertices, starting at the pivot
    """
    if len(points) <= 3:
        return list(points)

    pivot_index = find_pivot(points)
    pivot = points[pivot_index]
    rest = [p for i, p in enumerate(points) if i != pivot_index]

    def polar_key(p: GeoPoint):
        d_lat = p.lat - pivot.lat
        d_lng = p.lng - pivot.lng
        return (math.atan2(d_lat, d_lng), d_lat * d_lat + d_lng * d_lng)

    ordered = sorted(rest, key=polar_key)

    hull = [pivot, ordered[0]]
    for candidate in ordered[1:]:
        while len(hull) >= 2 and not is_left_turn(hull[-2], hull[-1], candidate):
            hull.pop()
        hull.append(candidate)

    return hull
