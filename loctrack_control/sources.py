"""
Group Point Sources - the boundary to person/meeting/group data.

The synchronizer never reads CRUD state directly; it asks a
GroupPointSource for a group's color and current point set.

InMemoryDirectory is a plain implementation (tests, CLI rendering, the
service's dataset file). Points are ordered persons first, then meetings.
It is also writable: apply(event) keeps it current from domain events.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, List, Optional, Protocol, runtime_checkable

import yaml

from loctrack_region.geometry.primitives import GeoPoint

from .events import (
    DomainEvent,
    GroupCreated,
    GroupDeleted,
    GroupUpdated,
    MemberChanged,
    MemberDeleted,
    MemberKind,
    validate_color,
)

logger = logging.getLogger(__name__)


class GroupPointSource(Protocol):
    """Read access to groups and their member locations."""

    def group_ids(self) -> List[str]:
        """Every known group."""
        ...

    def group_color(self, group_id: str) -> Optional[str]:
        """Display color, or None if the group does not exist."""
        ...

    def group_member_points(self, group_id: str) -> List[GeoPoint]:
        """Locations of the group's persons and meeting points."""
        ...


@runtime_checkable
class EventApplier(Protocol):
    """A source that keeps its own state current from domain events."""

    def apply(self, event: DomainEvent) -> DomainEvent:
        """Record the change, returning the event completed with known state."""
        ...


@dataclass(frozen=True)
class Member:
    """A person or meeting point with an optional group assignment."""

    member_id: str
    member_kind: MemberKind
    location: GeoPoint
    group_id: Optional[str] = None


class InMemoryDirectory:
    """
    Dict-backed GroupPointSource.

    Usage:
        directory = InMemoryDirectory()
        directory.add_group("g1", "#FF0000")
        directory.upsert_member(Member("p1", MemberKind.PERSON, GeoPoint(48.85, 2.35), "g1"))
        directory.group_member_points("g1")  # [GeoPoint(48.85, 2.35)]
    """

    def __init__(self):
        self._groups: Dict[str, str] = {}
        self._members: Dict[str, Member] = {}

    def add_group(self, group_id: str, color: str) -> None:
        """Create or recolor a group.

        Raises:
            ValueError: Color is not "#RGB" or "#RRGGBB"
        """
        self._groups[group_id] = validate_color(color)

    def delete_group(self, group_id: str) -> None:
        """Delete a group and unassign its members."""
        self._groups.pop(group_id, None)
        for member in list(self._members.values()):
            if member.group_id == group_id:
                self._members[self._key(member)] = Member(
                    member_id=member.member_id,
                    member_kind=member.member_kind,
                    location=member.location,
                    group_id=None,
                )

    def upsert_member(self, member: Member) -> Optional[str]:
        """
        Insert or replace a member.

        Returns:
            The member's previous group id (None if new or unassigned)
        """
        previous = self._members.get(self._key(member))
        self._members[self._key(member)] = member
        return previous.group_id if previous is not None else None

    def delete_member(self, member_kind: MemberKind, member_id: str) -> Optional[Member]:
        """Remove a member, returning it if it existed."""
        return self._members.pop(f"{member_kind.value}:{member_id}", None)

    def get_member(self, member_kind: MemberKind, member_id: str) -> Optional[Member]:
        return self._members.get(f"{member_kind.value}:{member_id}")

    def apply(self, event: DomainEvent) -> DomainEvent:
        """
        Write one domain event into the directory.

        Member events are completed from what the directory already knows:
        a move fills in previous_group_id, a deletion fills in group_id.
        A member_changed without lat/lng keeps the member's stored location;
        for an unknown member it changes nothing.
        """
        if isinstance(event, (GroupCreated, GroupUpdated)):
            self.add_group(event.group_id, event.color)

        elif isinstance(event, GroupDeleted):
            self.delete_group(event.group_id)

        elif isinstance(event, MemberChanged):
            location = event.location
            current = self.get_member(event.member_kind, event.member_id)
            if location is None and current is None:
                logger.warning(
                    f"{event.member_kind.value} {event.member_id} has no known location; not stored"
                )
                return event

            previous_group = self.upsert_member(Member(
                member_id=event.member_id,
                member_kind=event.member_kind,
                location=location if location is not None else current.location,
                group_id=event.group_id,
            ))
            if event.previous_group_id is None and previous_group != event.group_id:
                return replace(event, previous_group_id=previous_group)

        elif isinstance(event, MemberDeleted):
            removed = self.delete_member(event.member_kind, event.member_id)
            if event.group_id is None and removed is not None:
                return replace(event, group_id=removed.group_id)

        return event

    def group_ids(self) -> List[str]:
        return list(self._groups.keys())

    def group_color(self, group_id: str) -> Optional[str]:
        return self._groups.get(group_id)

    def group_member_points(self, group_id: str) -> List[GeoPoint]:
        members = [m for m in self._members.values() if m.group_id == group_id]
        persons = [m.location for m in members if m.member_kind == MemberKind.PERSON]
        meetings = [m.location for m in members if m.member_kind == MemberKind.MEETING]
        return persons + meetings

    def all_points(self) -> List[GeoPoint]:
        """Every member location (viewport fitting)."""
        return [m.location for m in self._members.values()]

    @staticmethod
    def _key(member: Member) -> str:
        return f"{member.member_kind.value}:{member.member_id}"

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "InMemoryDirectory":
        """
        Load a directory from YAML.

        Example YAML:
            groups:
              - id: "north"
                color: "#FF0000"

            persons:
              - id: "p1"
                lat: 48.8566
                lng: 2.3522
                group: "north"

            meetings:
              - id: "m1"
                lat: 48.8600
                lng: 2.3400
                group: "north"
        """
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryDirectory":
        """Build a directory from the mapping described in from_yaml()."""
        directory = cls()
        for group in data.get("groups", []):
            directory.add_group(str(group["id"]), str(group["color"]))

        for section, member_kind in (("persons", MemberKind.PERSON), ("meetings", MemberKind.MEETING)):
            for entry in data.get(section, []):
                directory.upsert_member(Member(
                    member_id=str(entry["id"]),
                    member_kind=member_kind,
                    location=GeoPoint(lat=float(entry["lat"]), lng=float(entry["lng"])),
                    group_id=entry.get("group"),
                ))
        return directory

