"""
Loctrack Region Engine
======================

Bounded Context: Group regions for the location tracker map.

Every group (people + meeting points) is drawn as a region that encloses
its members: a padded convex polygon, or a circle when the group has fewer
than 3 locations. Regions are derived state, recomputed wholesale whenever
the group changes.

Architecture:

    loctrack_region/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── primitives.py  # GeoPoint, centroid, distances
    │   ├── hull.py        # Graham scan convex hull
    │   ├── shapes.py      # Polygon | Circle
    │   └── padding.py     # Outward margin
    │
    ├── selector.py        # Circle vs. polygon decision
    ├── store.py           # RegionStore (keyed records, listeners)
    │
    └── rendering/         # Map surfaces
        ├── layer.py       # RegionLayer (store → surface)
        └── visualizer.py  # RasterMapSurface

Usage:

    from loctrack_region import GeoPoint, RegionStore

    store = RegionStore()
    record = store.recompute(
        "group_1",
        [GeoPoint(48.85, 2.35), GeoPoint(48.86, 2.36), GeoPoint(48.85, 2.37)],
        color="#FF0000",
    )
    record.shape  # Polygon(...)
"""

# Geometry Layer (immutable, stateless)
from loctrack_region.geometry import (
    GeoPoint,
    Polygon,
    Circle,
    RegionShape,
    ShapeKind,
    centroid,
    compute_hull,
    pad_shape,
)

# Errors
from loctrack_region.errors import (
    RegionError,
    EmptyInputError,
    InsufficientDataError,
    InvalidCoordinateError,
)

# Selection & Store (stateful)
from loctrack_region.selector import RegionSettings, select_shape, build_region
from loctrack_region.store import RegionRecord, RegionListener, RegionStore

__all__ = [
    # Geometry
    "GeoPoint",
    "Polygon",
    "Circle",
    "RegionShape",
    "ShapeKind",
    "centroid",
    "compute_hull",
    "pad_shape",
    # Errors
    "RegionError",
    "EmptyInputError",
    "InsufficientDataError",
    "InvalidCoordinateError",
    # Selection
    "RegionSettings",
    "select_shape",
    "build_region",
    # Store
    "RegionRecord",
    "RegionListener",
    "RegionStore",
]

__version__ = "1.0.0"
