"""Shared fixtures for the loctrack test suite."""

from typing import List, Tuple

import pytest

from loctrack_control.events import MemberKind
from loctrack_control.sources import InMemoryDirectory, Member
from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.store import RegionRecord, RegionStore


class RecordingListener:
    """RegionListener that keeps every notification in order."""

    def __init__(self):
        self.calls: List[Tuple[str, object]] = []

    def on_region_updated(self, record: RegionRecord) -> None:
        self.calls.append(("updated", record))

    def on_region_removed(self, group_id: str) -> None:
        self.calls.append(("removed", group_id))

    def on_visibility_changed(self, visible: bool) -> None:
        self.calls.append(("visibility", visible))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def store(listener) -> RegionStore:
    region_store = RegionStore()
    region_store.add_listener(listener)
    return region_store


@pytest.fixture
def square_points() -> List[GeoPoint]:
    """Unit square, deliberately scrambled."""
    return [
        GeoPoint(lat=1, lng=1),
        GeoPoint(lat=0, lng=0),
        GeoPoint(lat=1, lng=0),
        GeoPoint(lat=0, lng=1),
    ]


@pytest.fixture
def directory() -> InMemoryDirectory:
    """
    Three groups:
        north: 3 persons + 1 meeting point (polygon)
        solo: 1 person (circle)
        empty: no members
    """
    d = InMemoryDirectory()
    d.add_group("north", "#FF0000")
    d.add_group("solo", "#00FF00")
    d.add_group("empty", "#0000FF")

    d.upsert_member(Member("p1", MemberKind.PERSON, GeoPoint(48.8650, 2.3400), "north"))
    d.upsert_member(Member("p2", MemberKind.PERSON, GeoPoint(48.8690, 2.3520), "north"))
    d.upsert_member(Member("p3", MemberKind.PERSON, GeoPoint(48.8630, 2.3600), "north"))
    d.upsert_member(Member("m1", MemberKind.MEETING, GeoPoint(48.8670, 2.3480), "north"))
    d.upsert_member(Member("p4", MemberKind.PERSON, GeoPoint(48.8580, 2.3700), "solo"))
    return d
