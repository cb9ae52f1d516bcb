"""
Rendering Layer
===============

Bounded Context: Drawing regions on a map surface.

Responsibilities:
- RegionLayer: store notifications → surface draw/erase calls
- RasterMapSurface: image-backed surface (supervision + OpenCV)
- NO geometry computation, NO storage
"""

from loctrack_region.rendering.layer import MapSurface, RegionLayer
from loctrack_region.rendering.visualizer import RasterMapSurface, Viewport

__all__ = [
    "MapSurface",
    "RegionLayer",
    "RasterMapSurface",
    "Viewport",
]
