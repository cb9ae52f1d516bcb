import numpy as np
import pytest

from loctrack_region.geometry.padding import pad_circle, pad_polygon, pad_shape
from loctrack_region.geometry.primitives import GeoPoint, haversine_distance_m
from loctrack_region.geometry.shapes import Circle, Polygon, ShapeKind, shape_from_dict

SQUARE = Polygon(vertices=(
    GeoPoint(0, 0),
    GeoPoint(0, 1),
    GeoPoint(1, 1),
    GeoPoint(1, 0),
))


class TestPolygon:
    def test_vertices_normalized_to_tuple(self):
        polygon = Polygon(vertices=[GeoPoint(0, 0), GeoPoint(1, 1), GeoPoint(0, 1)])
        assert isinstance(polygon.vertices, tuple)

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            Polygon(vertices=())

    def test_kind(self):
        assert SQUARE.kind == ShapeKind.POLYGON

    def test_signed_area_counter_clockwise_positive(self):
        assert SQUARE.signed_area() == pytest.approx(1.0)

    def test_degenerate(self):
        assert not SQUARE.is_degenerate
        assert Polygon(vertices=(GeoPoint(0, 0), GeoPoint(0, 1))).is_degenerate
        assert Polygon(vertices=(GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 2))).is_degenerate

    def test_as_array_is_lng_lat(self):
        arr = Polygon(vertices=(GeoPoint(lat=10, lng=20),)).as_array()
        assert arr.shape == (1, 2)
        np.testing.assert_array_equal(arr, [[20.0, 10.0]])

    def test_contains(self):
        assert SQUARE.contains(GeoPoint(0.5, 0.5))
        assert SQUARE.contains(GeoPoint(0, 0.5))
        assert not SQUARE.contains(GeoPoint(1.5, 0.5))

    def test_strictly_contains_excludes_boundary(self):
        assert SQUARE.strictly_contains(GeoPoint(0.5, 0.5))
        assert not SQUARE.strictly_contains(GeoPoint(0, 0.5))
        assert not SQUARE.strictly_contains(GeoPoint(1, 1))

    def test_two_vertex_polygon_contains_segment_only(self):
        segment = Polygon(vertices=(GeoPoint(0, 0), GeoPoint(0, 2)))
        assert segment.contains(GeoPoint(0, 1))
        assert not segment.contains(GeoPoint(0.1, 1))


class TestCircle:
    def test_negative_radius_rejected(self):
        with pytest.raises(ValueError):
            Circle(center=GeoPoint(0, 0), radius_m=-1)

    def test_contains(self):
        circle = Circle(center=GeoPoint(0, 0), radius_m=1000)
        near = GeoPoint(0.005, 0)
        far = GeoPoint(0.02, 0)
        assert circle.contains(near)
        assert circle.strictly_contains(near)
        assert not circle.contains(far)

    def test_boundary_point(self):
        point = GeoPoint(0.01, 0)
        circle = Circle(center=GeoPoint(0, 0), radius_m=haversine_distance_m(GeoPoint(0, 0), point))
        assert circle.contains(point)
        assert not circle.strictly_contains(point)


class TestShapeSerialization:
    def test_polygon_dict(self):
        data = SQUARE.to_dict()
        assert data["kind"] == "polygon"
        assert data["vertices"][1] == {"lat": 0, "lng": 1}
        assert shape_from_dict(data) == SQUARE

    def test_circle_dict(self):
        circle = Circle(center=GeoPoint(1, 2), radius_m=150.0)
        assert circle.to_dict() == {"kind": "circle", "center": {"lat": 1, "lng": 2}, "radius_m": 150.0}
        assert shape_from_dict(circle.to_dict()) == circle

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            shape_from_dict({"kind": "ellipse"})

    def test_missing_kind(self):
        with pytest.raises(ValueError, match="Missing"):
            shape_from_dict({"vertices": []})


class TestPadding:
    def test_pad_circle(self):
        circle = Circle(center=GeoPoint(0, 0), radius_m=100)
        assert pad_circle(circle, 50).radius_m == 150
        assert pad_circle(circle, 50).center == circle.center

    def test_pad_polygon_moves_each_vertex_by_margin(self):
        padded = pad_polygon(SQUARE, 0.0005)
        center = GeoPoint(0.5, 0.5)
        for before, after in zip(SQUARE.vertices, padded.vertices):
            d_before = np.hypot(before.lat - center.lat, before.lng - center.lng)
            d_after = np.hypot(after.lat - center.lat, after.lng - center.lng)
            assert d_after - d_before == pytest.approx(0.0005)

    def test_padded_polygon_strictly_contains_original_vertices(self):
        padded = pad_polygon(SQUARE, 0.0005)
        assert all(padded.strictly_contains(v) for v in SQUARE.vertices)

    def test_vertex_on_centroid_unchanged(self):
        # Collinear triple: middle vertex sits on the centroid
        line = Polygon(vertices=(GeoPoint(0, 0), GeoPoint(0, 1), GeoPoint(0, 2)))
        padded = pad_polygon(line, 0.0005)
        assert padded.vertices[1] == GeoPoint(0, 1)
        assert padded.vertices[0].lng == pytest.approx(-0.0005)
        assert padded.vertices[2].lng == pytest.approx(2.0005)

    def test_padding_clamps_to_valid_range(self):
        polar = Polygon(vertices=(GeoPoint(90, 0), GeoPoint(89, 1), GeoPoint(89, -1)))
        padded = pad_polygon(polar, 0.5)
        assert all(-90 <= v.lat <= 90 for v in padded.vertices)

    def test_pad_shape_dispatch(self):
        assert isinstance(pad_shape(SQUARE), Polygon)
        assert pad_shape(Circle(GeoPoint(0, 0), 100), margin_m=25).radius_m == 125

    def test_pad_shape_unknown_type(self):
        with pytest.raises(TypeError):
            pad_shape("not a shape")
