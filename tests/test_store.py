import pytest

import loctrack_region.store as store_module
from loctrack_region.errors import InsufficientDataError
from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.geometry.shapes import Circle, Polygon, ShapeKind
from loctrack_region.store import RegionStore


class TestRecompute:
    def test_creates_record(self, store, listener, square_points):
        record = store.recompute("g1", square_points, "#FF0000")

        assert record.group_id == "g1"
        assert record.color == "#FF0000"
        assert record.kind == ShapeKind.POLYGON
        assert record.point_count == 4
        assert record.visible is True
        assert store.get("g1") == record
        assert listener.names() == ["updated"]

    def test_single_point_circle_is_padded(self, store):
        record = store.recompute("g1", [GeoPoint(0, 0)], "#FF0000")
        assert record.shape == Circle(center=GeoPoint(0, 0), radius_m=150)

    def test_replaces_previous_record(self, store, listener, square_points):
        store.recompute("g1", square_points, "#FF0000")
        record = store.recompute("g1", [GeoPoint(0, 0)], "#00FF00")

        assert store.count() == 1
        assert store.get("g1") == record
        assert isinstance(record.shape, Circle)
        assert listener.names() == ["updated", "removed", "updated"]

    def test_idempotent(self, store, square_points):
        first = store.recompute("g1", square_points, "#FF0000")
        second = store.recompute("g1", square_points, "#FF0000")

        assert first == second
        assert store.get_all() == [second]

    def test_empty_points_removes(self, store, listener, square_points):
        store.recompute("g1", square_points, "#FF0000")
        assert store.recompute("g1", [], "#FF0000") is None

        assert store.get("g1") is None
        assert "g1" not in [r.group_id for r in store.get_all()]
        assert listener.names() == ["updated", "removed"]

    def test_empty_points_unknown_group(self, store, listener):
        assert store.recompute("ghost", [], "#FF0000") is None
        assert listener.calls == []

    def test_failure_keeps_previous_record(self, store, listener, square_points, monkeypatch):
        previous = store.recompute("g1", square_points, "#FF0000")

        def broken(points, settings):
            raise InsufficientDataError("boom")

        monkeypatch.setattr(store_module, "build_region", broken)

        with pytest.raises(InsufficientDataError):
            store.recompute("g1", square_points, "#00FF00")

        assert store.get("g1") == previous
        assert listener.names() == ["updated"]

    def test_groups_are_independent(self, store, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.recompute("g2", [GeoPoint(10, 10)], "#00FF00")
        store.remove("g1")

        assert store.group_ids() == ["g2"]


class TestRemove:
    def test_remove_existing(self, store, listener, square_points):
        store.recompute("g1", square_points, "#FF0000")
        assert store.remove("g1") is True
        assert store.count() == 0
        assert listener.calls[-1] == ("removed", "g1")

    def test_remove_is_idempotent(self, store, listener):
        assert store.remove("g1") is False
        assert store.remove("g1") is False
        assert listener.calls == []

    def test_clear(self, store, listener, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.recompute("g2", [GeoPoint(10, 10)], "#00FF00")
        store.clear()

        assert store.count() == 0
        assert sorted(arg for name, arg in listener.calls if name == "removed") == ["g1", "g2"]


class TestVisibility:
    def test_applies_to_every_record(self, store, listener, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.recompute("g2", [GeoPoint(10, 10)], "#00FF00")

        store.set_visibility(False)

        assert store.visible is False
        assert all(not r.visible for r in store.get_all())
        assert listener.calls[-1] == ("visibility", False)

    def test_recompute_keeps_visibility(self, store, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.set_visibility(False)

        record = store.recompute("g1", square_points, "#FF0000")
        assert record.visible is False

    def test_new_record_follows_global_flag(self, store):
        store.set_visibility(False)
        record = store.recompute("g1", [GeoPoint(0, 0)], "#FF0000")
        assert record.visible is False

    def test_shown_again(self, store, square_points):
        store.recompute("g1", square_points, "#FF0000")
        store.set_visibility(False)
        store.set_visibility(True)
        assert store.get("g1").visible is True


class TestListeners:
    def test_remove_listener(self, store, listener):
        store.remove_listener(listener)
        store.recompute("g1", [GeoPoint(0, 0)], "#FF0000")
        assert listener.calls == []

    def test_remove_unknown_listener_is_noop(self, listener):
        RegionStore().remove_listener(listener)

    def test_settings_used(self):
        from loctrack_region.selector import RegionSettings

        store = RegionStore(RegionSettings(default_radius_m=20, circle_margin_m=0))
        record = store.recompute("g1", [GeoPoint(0, 0)], "#FF0000")
        assert record.shape.radius_m == 20

    def test_polygon_record(self, store, square_points):
        record = store.recompute("g1", square_points, "#FF0000")
        assert isinstance(record.shape, Polygon)
        assert all(record.shape.strictly_contains(p) for p in square_points)
