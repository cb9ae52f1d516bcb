"""
Domain Events - typed change notifications that drive region recomputation.

Each event is a frozen dataclass tagged with an EventKind. Events arrive
either in-process (direct dispatch) or as JSON over MQTT, e.g.:

    {"event": "group_created", "group_id": "g1", "color": "#FF0000"}
    {"event": "member_changed", "member_id": "p7", "member_kind": "person",
     "group_id": "g2", "previous_group_id": "g1", "lat": 48.85, "lng": 2.35}
    {"event": "visibility_toggled", "visible": false}
"""

import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Optional, Type, Union

from loctrack_region.geometry.primitives import GeoPoint

# "#RGB" or "#RRGGBB"
HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class EventParseError(ValueError):
    """Raised when an event payload cannot be turned into a DomainEvent."""
    pass


class EventKind(str, Enum):
    """Every domain event the region synchronizer reacts to."""
    GROUP_CREATED = "group_created"
    GROUP_UPDATED = "group_updated"
    GROUP_DELETED = "group_deleted"
    MEMBER_CHANGED = "member_changed"
    MEMBER_DELETED = "member_deleted"
    VISIBILITY_TOGGLED = "visibility_toggled"


class MemberKind(str, Enum):
    """Entities whose locations belong to a group."""
    PERSON = "person"
    MEETING = "meeting"


def validate_color(color: str) -> str:
    """
    Check a display color.

    Raises:
        ValueError: Color is not "#RGB" or "#RRGGBB"
    """
    if not isinstance(color, str) or not HEX_COLOR.fullmatch(color):
        raise ValueError(f"color must be #RGB or #RRGGBB, got {color!r}")
    return color


@dataclass(frozen=True)
class GroupCreated:
    group_id: str
    color: str

    kind: ClassVar[EventKind] = EventKind.GROUP_CREATED

    def __post_init__(self):
        validate_color(self.color)


@dataclass(frozen=True)
class GroupUpdated:
    """Color or requirements of a group changed."""
    group_id: str
    color: str

    kind: ClassVar[EventKind] = EventKind.GROUP_UPDATED

    def __post_init__(self):
        validate_color(self.color)


@dataclass(frozen=True)
class GroupDeleted:
    group_id: str

    kind: ClassVar[EventKind] = EventKind.GROUP_DELETED


@dataclass(frozen=True)
class MemberChanged:
    """
    A person or meeting point was created or updated.

    previous_group_id is set when the member moved out of another group,
    whose region must shrink as well. lat/lng carry the member's current
    location; both or neither must be given.
    """
    member_id: str
    member_kind: MemberKind
    group_id: Optional[str] = None
    previous_group_id: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    kind: ClassVar[EventKind] = EventKind.MEMBER_CHANGED

    def __post_init__(self):
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        if self.lat is not None:
            GeoPoint(lat=self.lat, lng=self.lng)

    @property
    def location(self) -> Optional[GeoPoint]:
        if self.lat is None:
            return None
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class MemberDeleted:
    member_id: str
    member_kind: MemberKind
    group_id: Optional[str] = None

    kind: ClassVar[EventKind] = EventKind.MEMBER_DELETED


@dataclass(frozen=True)
class VisibilityToggled:
    visible: bool

    kind: ClassVar[EventKind] = EventKind.VISIBILITY_TOGGLED


DomainEvent = Union[
    GroupCreated,
    GroupUpdated,
    GroupDeleted,
    MemberChanged,
    MemberDeleted,
    VisibilityToggled,
]

EVENT_TYPES: Dict[EventKind, Type[Any]] = {
    EventKind.GROUP_CREATED: GroupCreated,
    EventKind.GROUP_UPDATED: GroupUpdated,
    EventKind.GROUP_DELETED: GroupDeleted,
    EventKind.MEMBER_CHANGED: MemberChanged,
    EventKind.MEMBER_DELETED: MemberDeleted,
    EventKind.VISIBILITY_TOGGLED: VisibilityToggled,
}


def event_to_dict(event: DomainEvent) -> Dict[str, Any]:
    """Serialize an event to its JSON wire form."""
    data = {"event": event.kind.value}
    for key, value in asdict(event).items():
        data[key] = value.value if isinstance(value, Enum) else value
    return data


def event_from_dict(data: Dict[str, Any]) -> DomainEvent:
    """
    Parse the JSON wire form of an event.

    Raises:
        EventParseError: Unknown event name, missing or invalid fields
    """
    if not isinstance(data, dict):
        raise EventParseError(f"Event payload must be an object, got {type(data).__name__}")

    try:
        kind = EventKind(str(data.get("event", "")).lower())
    except ValueError:
        raise EventParseError(
            f"Unknown event '{data.get('event')}'. "
            f"Known events: {', '.join(k.value for k in EventKind)}"
        )

    try:
        if kind in (EventKind.GROUP_CREATED, EventKind.GROUP_UPDATED):
            return EVENT_TYPES[kind](group_id=str(data["group_id"]), color=str(data["color"]))
        elif kind == EventKind.GROUP_DELETED:
            return GroupDeleted(group_id=str(data["group_id"]))
        elif kind == EventKind.MEMBER_CHANGED:
            lat, lng = data.get("lat"), data.get("lng")
            return MemberChanged(
                member_id=str(data["member_id"]),
                member_kind=MemberKind(data["member_kind"]),
                group_id=data.get("group_id"),
                previous_group_id=data.get("previous_group_id"),
                lat=float(lat) if lat is not None else None,
                lng=float(lng) if lng is not None else None,
            )
        elif kind == EventKind.MEMBER_DELETED:
            return MemberDeleted(
                member_id=str(data["member_id"]),
                member_kind=MemberKind(data["member_kind"]),
                group_id=data.get("group_id"),
            )
        elif kind == EventKind.VISIBILITY_TOGGLED:
            visible = data["visible"]
            if not isinstance(visible, bool):
                raise EventParseError(f"'visible' must be a boolean, got {visible!r}")
            return VisibilityToggled(visible=visible)
        else:
            raise EventParseError(f"No parser for event '{kind.value}'")
    except EventParseError:
        raise
    except KeyError as e:
        raise EventParseError(f"Missing required field {e} for event '{kind.value}'") from e
    except (TypeError, ValueError) as e:
        raise EventParseError(f"Invalid field for event '{kind.value}': {e}") from e
