"""
Region Store - keyed registry of group regions.

This module provides the RegionStore class which owns the current
RegionRecord of every group. Records are derived state: they are rebuilt
from the group's point set on every recompute, never patched in place.

Lifecycle:
- recompute(): compute first, then remove the old record and store the new one
- remove(): idempotent delete
- set_visibility(): global toggle applied to every record

Thread Safety:
- threading.Lock protects the record dict
- Listeners are notified after the lock is released
"""

import threading
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Protocol, Sequence

from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.geometry.shapes import RegionShape, ShapeKind
from loctrack_region.selector import RegionSettings, build_region


@dataclass(frozen=True)
class RegionRecord:
    """
    Renderable region of one group.

    Design:
    - Immutable: visibility changes produce a new record
    - shape is already padded
    """

    group_id: str
    shape: RegionShape
    color: str
    visible: bool = True
    point_count: int = 0

    @property
    def kind(self) -> ShapeKind:
        return self.shape.kind


class RegionListener(Protocol):
    """Receives store changes (map layers, publishers)."""

    def on_region_updated(self, record: RegionRecord) -> None:
        """A record was created or replaced."""
        ...

    def on_region_removed(self, group_id: str) -> None:
        """A record was deleted; release any resources bound to it."""
        ...

    def on_visibility_changed(self, visible: bool) -> None:
        """The global visibility flag changed."""
        ...


class RegionStore:
    """
    Registry of RegionRecord keyed by group id.

    At most one record exists per group. The store is the only owner of the
    records; consumers get snapshots via get()/get_all() or notifications
    via listeners.

    Usage:
        store = RegionStore(settings=RegionSettings())
        store.add_listener(layer)

        store.recompute("g1", points, "#FF0000")   # create / replace
        store.set_visibility(False)               # hide every region
        store.remove("g1")                        # delete
    """

    def __init__(self, settings: RegionSettings = RegionSettings()):
        """
        Args:
            settings: Radius, margin and distance tunables
        """
        self.settings = settings
        self._records: Dict[str, RegionRecord] = {}
        self._listeners: List[RegionListener] = []
        self._visible = True
        self._lock = threading.Lock()

    @property
    def visible(self) -> bool:
        """Global visibility flag."""
        return self._visible

    def add_listener(self, listener: RegionListener) -> None:
        """Register a listener for store changes."""
        self._listeners.append(listener)

    def remove_listener(self, listener: RegionListener) -> None:
        """Unregister a listener (no-op if unknown)."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def recompute(
        self,
        group_id: str,
        points: Sequence[GeoPoint],
        color: str,
    ) -> Optional[RegionRecord]:
        """
        Rebuild the region of a group from its current point set.

        The new shape is computed before the old record is touched, so a
        failure leaves the previous record in place.

        Args:
            group_id: Group identifier
            points: Member and meeting-point locations
            color: Display color

        Returns:
            The new record, or None when points is empty (record removed)

        Raises:
            RegionError: If the shape cannot be computed
        """
        if len(points) == 0:
            self.remove(group_id)
            return None

        shape = build_region(points, self.settings)

        previous = self.get(group_id)
        if previous is not None:
            self.remove(group_id)

        record = RegionRecord(
            group_id=group_id,
            shape=shape,
            color=color,
            visible=previous.visible if previous is not None else self._visible,
            point_count=len(points),
        )

        with self._lock:
            self._records[group_id] = record

        for listener in list(self._listeners):
            listener.on_region_updated(record)

        return record

    def remove(self, group_id: str) -> bool:
        """
        Delete the record of a group.

        Returns:
            True if a record was removed, False if none existed
        """
        with self._lock:
            removed = self._records.pop(group_id, None)

        if removed is None:
            return False

        for listener in list(self._listeners):
            listener.on_region_removed(group_id)
        return True

    def set_visibility(self, visible: bool) -> None:
        """Apply a visibility flag to every record."""
        with self._lock:
            self._visible = visible
            self._records = {
                group_id: replace(record, visible=visible)
                for group_id, record in self._records.items()
            }

        for listener in list(self._listeners):
            listener.on_visibility_changed(visible)

    def get(self, group_id: str) -> Optional[RegionRecord]:
        """Current record of a group, if any."""
        with self._lock:
            return self._records.get(group_id)

    def get_all(self) -> List[RegionRecord]:
        """Snapshot of every record (initial rendering pass)."""
        with self._lock:
            return list(self._records.values())

    def group_ids(self) -> List[str]:
        """Ids of groups that currently have a region."""
        with self._lock:
            return list(self._records.keys())

    def clear(self) -> None:
        """Remove every record, notifying listeners for each."""
        for group_id in self.group_ids():
            self.remove(group_id)

    def count(self) -> int:
        """Number of stored records."""
        with self._lock:
            return len(self._records)
