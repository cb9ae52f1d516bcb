"""
Raster Map Surface
==================

MapSurface implementation that paints regions onto an image.

Design:
- Equirectangular viewport: lng → x, lat → y (north up)
- Shapes are retained (handle → shape) and painted on render()
- Uses supervision drawing utilities for polygons, OpenCV for circles
- hit_test()/click() emulate the click wiring of an interactive map

Dependencies:
- supervision (draw utilities, Color)
- opencv (circles, alpha blending)
- numpy (canvas)
"""

import itertools
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import cv2
import numpy as np
import supervision as sv

from loctrack_region.geometry.primitives import METERS_PER_DEG_LAT, GeoPoint
from loctrack_region.geometry.shapes import Circle, Polygon, RegionShape


@dataclass(frozen=True)
class Viewport:
    """
    Geographic window mapped onto a pixel canvas.

    Attributes:
        south, west, north, east: Bounds in degrees
        width, height: Canvas size in pixels
    """

    south: float
    west: float
    north: float
    east: float
    width: int = 1280
    height: int = 720

    def __post_init__(self):
        """Validate bounds and size."""
        if self.north <= self.south:
            raise ValueError(f"north must be > south, got {self.north} <= {self.south}")
        if self.east <= self.west:
            raise ValueError(f"east must be > west, got {self.east} <= {self.west}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Canvas size must be positive, got {self.width}x{self.height}")

    @classmethod
    def fit(
        cls,
        points: Sequence[GeoPoint],
        width: int = 1280,
        height: int = 720,
        margin_deg: float = 0.005,
    ) -> "Viewport":
        """Smallest viewport containing every point plus a margin."""
        if not points:
            raise ValueError("Viewport.fit() requires at least one point")
        return cls(
            south=min(p.lat for p in points) - margin_deg,
            west=min(p.lng for p in points) - margin_deg,
            north=max(p.lat for p in points) + margin_deg,
            east=max(p.lng for p in points) + margin_deg,
            width=width,
            height=height,
        )

    def to_pixel(self, point: GeoPoint) -> Tuple[int, int]:
        """Project a point to (x, y) pixel coordinates."""
        x = (point.lng - self.west) / (self.east - self.west) * self.width
        y = (self.north - point.lat) / (self.north - self.south) * self.height
        return int(round(x)), int(round(y))

    def meters_to_pixels(self, meters: float) -> int:
        """Vertical pixel length of a metric distance."""
        degrees = meters / METERS_PER_DEG_LAT
        return max(1, int(round(degrees / (self.north - self.south) * self.height)))


@dataclass
class _DrawnShape:
    shape: RegionShape
    color: sv.Color
    visible: bool = True
    on_click: Optional[Callable[[], None]] = None


class RasterMapSurface:
    """
    Retained-mode surface that renders regions to a BGR image.

    Usage:
        surface = RasterMapSurface(Viewport.fit(points))
        layer = RegionLayer(surface)
        store.add_listener(layer)
        ...
        frame = surface.render()
        cv2.imwrite("regions.png", frame)
    """

    def __init__(
        self,
        viewport: Viewport,
        background: sv.Color = sv.Color(r=255, g=255, b=255),
        thickness: int = 2,
        opacity: float = 0.2,
    ):
        """
        Args:
            viewport: Geographic window and canvas size
            background: Canvas fill color
            thickness: Outline thickness in pixels
            opacity: Fill opacity (0-1)
        """
        self.viewport = viewport
        self.background = background
        self.thickness = thickness
        self.opacity = opacity
        self._shapes: Dict[int, _DrawnShape] = {}
        self._next_handle = itertools.count(1)

    def draw_polygon(self, vertices: Sequence[GeoPoint], color: str) -> int:
        return self._add(Polygon(vertices=tuple(vertices)), color)

    def draw_circle(self, center: GeoPoint, radius_m: float, color: str) -> int:
        return self._add(Circle(center=center, radius_m=radius_m), color)

    def remove_shape(self, handle: int) -> None:
        self._shapes.pop(handle, None)

    def set_visible(self, handle: int, visible: bool) -> None:
        self._shapes[handle].visible = visible

    def on_shape_clicked(self, handle: int, callback: Callable[[], None]) -> None:
        self._shapes[handle].on_click = callback

    @property
    def handles(self) -> List[int]:
        """Handles of every retained shape."""
        return list(self._shapes.keys())

    def is_visible(self, handle: int) -> bool:
        return self._shapes[handle].visible

    def hit_test(self, point: GeoPoint) -> Optional[int]:
        """Topmost visible shape containing point."""
        for handle in reversed(list(self._shapes)):
            drawn = self._shapes[handle]
            if drawn.visible and drawn.shape.contains(point):
                return handle
        return None

    def click(self, point: GeoPoint) -> Optional[int]:
        """Simulate a map click; fires the callback of the hit shape."""
        handle = self.hit_test(point)
        if handle is not None and self._shapes[handle].on_click is not None:
            self._shapes[handle].on_click()
        return handle

    def render(self) -> np.ndarray:
        """
        Paint every visible shape.

        Returns:
            BGR image of shape (height, width, 3)
        """
        frame = np.full(
            (self.viewport.height, self.viewport.width, 3),
            self.background.as_bgr(),
            dtype=np.uint8,
        )

        for drawn in self._shapes.values():
            if not drawn.visible:
                continue
            if isinstance(drawn.shape, Polygon):
                frame = self._render_polygon(frame, drawn.shape, drawn.color)
            elif isinstance(drawn.shape, Circle):
                frame = self._render_circle(frame, drawn.shape, drawn.color)
            else:
                raise TypeError(f"Unsupported shape type: {type(drawn.shape).__name__}")

        return frame

    def _add(self, shape: RegionShape, color: str) -> int:
        handle = next(self._next_handle)
        self._shapes[handle] = _DrawnShape(shape=shape, color=sv.Color.from_hex(color))
        return handle

    def _render_polygon(self, frame: np.ndarray, polygon: Polygon, color: sv.Color) -> np.ndarray:
        pixels = np.array(
            [self.viewport.to_pixel(v) for v in polygon.vertices],
            dtype=np.int32,
        )
        frame = sv.draw_filled_polygon(
            scene=frame,
            polygon=pixels,
            color=color,
            opacity=self.opacity,
        )
        return sv.draw_polygon(
            scene=frame,
            polygon=pixels,
            color=color,
            thickness=self.thickness,
        )

    def _render_circle(self, frame: np.ndarray, circle: Circle, color: sv.Color) -> np.ndarray:
        center = self.viewport.to_pixel(circle.center)
        radius = self.viewport.meters_to_pixels(circle.radius_m)

        overlay = frame.copy()
        cv2.circle(overlay, center, radius, color.as_bgr(), thickness=-1)
        frame = cv2.addWeighted(overlay, self.opacity, frame, 1 - self.opacity, 0)

        cv2.circle(frame, center, radius, color.as_bgr(), thickness=self.thickness)
        return frame
