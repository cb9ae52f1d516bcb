import numpy as np
import pytest

from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.rendering import RasterMapSurface, RegionLayer, Viewport


class FakeSurface:
    """In-memory MapSurface keeping the last state of every handle."""

    def __init__(self):
        self.shapes = {}
        self.visible = {}
        self.callbacks = {}
        self.removed = []
        self._next = 0

    def draw_polygon(self, vertices, color):
        return self._add(("polygon", tuple(vertices), color))

    def draw_circle(self, center, radius_m, color):
        return self._add(("circle", center, radius_m, color))

    def remove_shape(self, handle):
        self.removed.append(handle)
        del self.shapes[handle]

    def set_visible(self, handle, visible):
        self.visible[handle] = visible

    def on_shape_clicked(self, handle, callback):
        self.callbacks[handle] = callback

    def _add(self, shape):
        self._next += 1
        self.shapes[self._next] = shape
        return self._next


@pytest.fixture
def surface():
    return FakeSurface()


@pytest.fixture
def selected():
    return []


@pytest.fixture
def layer(store, surface, selected):
    region_layer = RegionLayer(surface, on_group_selected=selected.append)
    store.add_listener(region_layer)
    return region_layer


class TestRegionLayer:
    def test_draws_polygon(self, store, surface, layer, square_points):
        store.recompute("g1", square_points, "#FF0000")

        handle = layer.handle_for("g1")
        kind, vertices, color = surface.shapes[handle]
        assert kind == "polygon"
        assert len(vertices) == 4
        assert color == "#FF0000"
        assert surface.visible[handle] is True

    def test_draws_circle(self, store, surface, layer):
        store.recompute("g1", [GeoPoint(0, 0)], "#00FF00")
        assert surface.shapes[layer.handle_for("g1")] == ("circle", GeoPoint(0, 0), 150, "#00FF00")

    def test_redraw_replaces_shape(self, store, surface, layer, square_points):
        store.recompute("g1", square_points, "#FF0000")
        first = layer.handle_for("g1")
        store.recompute("g1", [GeoPoint(0, 0)], "#FF0000")

        assert first in surface.removed
        assert list(surface.shapes) == [layer.handle_for("g1")]

    def test_remove_erases(self, store, surface, layer, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.remove("g1")
        assert surface.shapes == {}
        assert layer.handle_for("g1") is None

    def test_visibility(self, store, surface, layer, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.recompute("g2", [GeoPoint(5, 5)], "#00FF00")
        store.set_visibility(False)
        assert set(surface.visible.values()) == {False}

    def test_hidden_record_drawn_hidden(self, store, surface, layer):
        store.set_visibility(False)
        store.recompute("g1", [GeoPoint(0, 0)], "#00FF00")
        assert surface.visible[layer.handle_for("g1")] is False

    def test_click_selects_group(self, store, surface, layer, selected):
        store.recompute("g1", [GeoPoint(0, 0)], "#00FF00")
        surface.callbacks[layer.handle_for("g1")]()
        assert selected == ["g1"]

    def test_sync_existing_records(self, square_points):
        from loctrack_region.store import RegionStore

        store = RegionStore()
        store.recompute("g1", square_points, "#FF0000")
        store.recompute("g2", [GeoPoint(5, 5)], "#00FF00")

        surface = FakeSurface()
        layer = RegionLayer(surface)
        layer.sync(store.get_all())
        assert len(surface.shapes) == 2
        assert layer.handle_for("g2") is not None


class TestViewport:
    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            Viewport(south=1, west=0, north=0, east=1)

    def test_fit_adds_margin(self):
        viewport = Viewport.fit([GeoPoint(0, 0), GeoPoint(1, 1)], margin_deg=0.5)
        assert (viewport.south, viewport.west, viewport.north, viewport.east) == (-0.5, -0.5, 1.5, 1.5)

    def test_fit_requires_points(self):
        with pytest.raises(ValueError):
            Viewport.fit([])

    def test_to_pixel_north_up(self):
        viewport = Viewport(south=0, west=0, north=1, east=1, width=100, height=100)
        assert viewport.to_pixel(GeoPoint(1, 0)) == (0, 0)
        assert viewport.to_pixel(GeoPoint(0, 1)) == (100, 100)
        assert viewport.to_pixel(GeoPoint(0.5, 0.5)) == (50, 50)


class TestRasterMapSurface:
    @pytest.fixture
    def raster(self):
        return RasterMapSurface(Viewport(south=-1, west=-1, north=2, east=2, width=300, height=300))

    def test_render_blank(self, raster):
        frame = raster.render()
        assert frame.shape == (300, 300, 3)
        assert frame.dtype == np.uint8
        assert (frame == 255).all()

    def test_render_draws_visible_shapes_only(self, raster, square_points):
        handle = raster.draw_polygon(square_points, "#FF0000")
        assert not (raster.render() == 255).all()

        raster.set_visible(handle, False)
        assert (raster.render() == 255).all()

    def test_render_circle(self, raster):
        raster.draw_circle(GeoPoint(0.5, 0.5), 20_000, "#0000FF")
        frame = raster.render()
        x, y = raster.viewport.to_pixel(GeoPoint(0.5, 0.5))
        # Blue fill blended over white: blue channel stays high, red drops
        assert frame[y, x, 0] == 255
        assert frame[y, x, 2] < 255

    def test_hit_test_topmost_visible(self, raster, square_points):
        bottom = raster.draw_polygon(square_points, "#FF0000")
        top = raster.draw_circle(GeoPoint(0.5, 0.5), 1000, "#00FF00")

        assert raster.hit_test(GeoPoint(0.5, 0.5)) == top
        raster.set_visible(top, False)
        assert raster.hit_test(GeoPoint(0.5, 0.5)) == bottom
        assert raster.hit_test(GeoPoint(1.9, 1.9)) is None

    def test_layer_click_round_trip(self, store):
        raster = RasterMapSurface(Viewport(south=-1, west=-1, north=1, east=1))
        selected = []
        store.add_listener(RegionLayer(raster, on_group_selected=selected.append))
        store.recompute("g1", [GeoPoint(0, 0)], "#00FF00")

        assert raster.click(GeoPoint(0.0001, 0.0001)) is not None
        assert raster.click(GeoPoint(0.9, 0.9)) is None
        assert selected == ["g1"]

    def test_remove_shape(self, raster, square_points):
        handle = raster.draw_polygon(square_points, "#FF0000")
        raster.remove_shape(handle)
        assert raster.handles == []
