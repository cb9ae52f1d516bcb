"""
RegionSynchronizer - translates domain events into region store calls

Bounded Context: Keeping group regions consistent with group membership
Responsibilities:
  - One handler per EventKind (checked exhaustively at construction)
  - Fetch the current point set from the GroupPointSource
  - Recompute / remove / toggle visibility on the RegionStore
  - Contain region errors: log a warning, keep the previous record

Mapping:
  group_created / group_updated   → recompute(group)
  group_deleted                   → remove(group)
  member_changed                  → recompute(group) [+ previous group]
  member_deleted                  → recompute(former group)
  visibility_toggled              → set_visibility(flag)
"""

from typing import Optional

from loctrack_mqtt.logging import LogEvent, StructuredLogger, create_logger
from loctrack_region.errors import RegionError
from loctrack_region.store import RegionRecord, RegionStore

from .events import (
    DomainEvent,
    EventKind,
    GroupCreated,
    GroupDeleted,
    GroupUpdated,
    MemberChanged,
    MemberDeleted,
    VisibilityToggled,
)
from .registry import HandlerRegistry
from .sources import EventApplier, GroupPointSource


class RegionSynchronizer:
    """
    Change-trigger adapter between domain events and the RegionStore.

    Every operation runs to completion before dispatch() returns. Region
    errors never escape dispatch(): they are logged and the group's previous
    region stays in place.

    Example:
        store = RegionStore()
        sync = RegionSynchronizer(store, directory)
        sync.rebuild_all()

        sync.dispatch(GroupCreated(group_id="g1", color="#FF0000"))
        sync.dispatch(VisibilityToggled(visible=False))
    """

    def __init__(
        self,
        store: RegionStore,
        source: GroupPointSource,
        logger: Optional[StructuredLogger] = None,
        directory: Optional[EventApplier] = None,
    ):
        """
        Args:
            store: Region store to mutate (this adapter is its only writer)
            source: Group colors and member locations
            logger: Structured logger (default: "regions" component)
            directory: Writable source updated with each event before it is
                handled (None when the source is kept current elsewhere)
        """
        self.store = store
        self.source = source
        self.directory = directory
        self.logger = logger or create_logger("regions")

        self.registry = HandlerRegistry()
        self.registry.register(EventKind.GROUP_CREATED, self._on_group_changed, "Compute region of new group")
        self.registry.register(EventKind.GROUP_UPDATED, self._on_group_changed, "Recompute region with new color")
        self.registry.register(EventKind.GROUP_DELETED, self._on_group_deleted, "Remove region of group")
        self.registry.register(EventKind.MEMBER_CHANGED, self._on_member_changed, "Recompute member's group(s)")
        self.registry.register(EventKind.MEMBER_DELETED, self._on_member_deleted, "Recompute former group")
        self.registry.register(EventKind.VISIBILITY_TOGGLED, self._on_visibility_toggled, "Show/hide all regions")

        unhandled = self.registry.missing(EventKind)
        if unhandled:
            raise RuntimeError(
                f"No handler for events: {', '.join(sorted(k.value for k in unhandled))}"
            )

    def dispatch(self, event: DomainEvent) -> None:
        """Route one domain event to its handler."""
        self.logger.debug(
            event=LogEvent.EVENT_DISPATCHED,
            message=f"Dispatching {event.kind.value}",
            metadata={'event': event.kind.value},
        )
        if self.directory is not None:
            event = self.directory.apply(event)
        self.registry.dispatch(event)

    def rebuild_all(self) -> int:
        """
        Clear the store and recompute every group the source knows.

        Returns:
            Number of regions stored afterwards
        """
        self.store.clear()
        for group_id in self.source.group_ids():
            self.refresh_group(group_id)

        count = self.store.count()
        self.logger.info(
            event=LogEvent.REGIONS_REBUILT,
            message=f"Rebuilt {count} regions",
            metadata={'regions': count},
        )
        return count

    def refresh_group(self, group_id: str, color: Optional[str] = None) -> Optional[RegionRecord]:
        """
        Recompute one group from the source.

        A group unknown to the source loses its region.

        Args:
            group_id: Group to recompute
            color: Color override (group events carry the new color)
        """
        color = color or self.source.group_color(group_id)
        if color is None:
            self._remove(group_id, reason="unknown group")
            return None

        had_region = self.store.get(group_id) is not None
        try:
            points = self.source.group_member_points(group_id)
            record = self.store.recompute(group_id, points, color)
        except RegionError as e:
            self.logger.warning(
                event=LogEvent.REGION_COMPUTE_FAILED,
                message=f"Keeping previous region of {group_id}: {e}",
                metadata={'group_id': group_id},
                exc_info=e,
            )
            return self.store.get(group_id)

        if record is None:
            if had_region:
                self.logger.info(
                    event=LogEvent.REGION_REMOVED,
                    message=f"Group {group_id} has no locations",
                    metadata={'group_id': group_id, 'reason': 'empty'},
                )
        else:
            self.logger.info(
                event=LogEvent.REGION_RECOMPUTED,
                message=f"Region of {group_id} recomputed",
                metadata={
                    'group_id': group_id,
                    'shape': record.kind.value,
                    'points': record.point_count,
                },
            )
        return record

    # ===== Handlers =====

    def _on_group_changed(self, event: GroupCreated | GroupUpdated) -> None:
        self.refresh_group(event.group_id, color=event.color)

    def _on_group_deleted(self, event: GroupDeleted) -> None:
        self._remove(event.group_id, reason="group deleted")

    def _on_member_changed(self, event: MemberChanged) -> None:
        if event.previous_group_id and event.previous_group_id != event.group_id:
            self.refresh_group(event.previous_group_id)
        if event.group_id:
            self.refresh_group(event.group_id)

    def _on_member_deleted(self, event: MemberDeleted) -> None:
        if event.group_id:
            self.refresh_group(event.group_id)

    def _on_visibility_toggled(self, event: VisibilityToggled) -> None:
        self.store.set_visibility(event.visible)
        self.logger.info(
            event=LogEvent.REGION_VISIBILITY_CHANGED,
            message=f"Regions {'shown' if event.visible else 'hidden'}",
            metadata={'visible': event.visible, 'regions': self.store.count()},
        )

    def _remove(self, group_id: str, reason: str) -> None:
        if self.store.remove(group_id):
            self.logger.info(
                event=LogEvent.REGION_REMOVED,
                message=f"Region of {group_id} removed",
                metadata={'group_id': group_id, 'reason': reason},
            )
