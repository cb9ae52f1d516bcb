"""
Region Layer Module
===================

Bridges RegionStore notifications to a map drawing surface.

Design:
- The surface is a collaborator (MapSurface protocol): real map SDKs,
  the raster surface, or test fakes
- The layer owns the group_id → shape handle mapping
- Click handling is delegated: the layer only ties each handle to its group
"""

import logging
from typing import Any, Callable, Dict, Iterable, Optional, Protocol, Sequence

from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.geometry.shapes import Circle, Polygon
from loctrack_region.store import RegionRecord

logger = logging.getLogger(__name__)

ShapeHandle = Any


class MapSurface(Protocol):
    """Drawing operations required from a map rendering surface."""

    def draw_polygon(self, vertices: Sequence[GeoPoint], color: str) -> ShapeHandle:
        ...

    def draw_circle(self, center: GeoPoint, radius_m: float, color: str) -> ShapeHandle:
        ...

    def remove_shape(self, handle: ShapeHandle) -> None:
        ...

    def set_visible(self, handle: ShapeHandle, visible: bool) -> None:
        ...

    def on_shape_clicked(self, handle: ShapeHandle, callback: Callable[[], None]) -> None:
        ...


class RegionLayer:
    """
    Keeps a map surface in sync with the region store.

    Implements RegionListener, so it can be attached directly:

        layer = RegionLayer(surface, on_group_selected=select_group)
        store.add_listener(layer)
        layer.sync(store.get_all())
    """

    def __init__(
        self,
        surface: MapSurface,
        on_group_selected: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            surface: Drawing surface
            on_group_selected: Called with the group id when a shape is clicked
        """
        self.surface = surface
        self.on_group_selected = on_group_selected
        self._handles: Dict[str, ShapeHandle] = {}

    def sync(self, records: Iterable[RegionRecord]) -> None:
        """Initial rendering pass: draw every existing record."""
        for record in records:
            self.on_region_updated(record)

    def handle_for(self, group_id: str) -> Optional[ShapeHandle]:
        """Surface handle currently drawn for a group."""
        return self._handles.get(group_id)

    def on_region_updated(self, record: RegionRecord) -> None:
        """Draw (or redraw) the shape of a record."""
        self.on_region_removed(record.group_id)

        shape = record.shape
        if isinstance(shape, Polygon):
            handle = self.surface.draw_polygon(shape.vertices, record.color)
        elif isinstance(shape, Circle):
            handle = self.surface.draw_circle(shape.center, shape.radius_m, record.color)
        else:
            raise TypeError(f"Unsupported shape type: {type(shape).__name__}")

        self.surface.set_visible(handle, record.visible)
        self.surface.on_shape_clicked(handle, self._click_callback(record.group_id))
        self._handles[record.group_id] = handle

    def on_region_removed(self, group_id: str) -> None:
        """Erase the shape of a group, if drawn."""
        handle = self._handles.pop(group_id, None)
        if handle is not None:
            self.surface.remove_shape(handle)

    def on_visibility_changed(self, visible: bool) -> None:
        """Show or hide every drawn shape."""
        for handle in self._handles.values():
            self.surface.set_visible(handle, visible)

    def _click_callback(self, group_id: str) -> Callable[[], None]:
        def _clicked() -> None:
            logger.debug(f"Region clicked: {group_id}")
            if self.on_group_selected is not None:
                self.on_group_selected(group_id)
        return _clicked
