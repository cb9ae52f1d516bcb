"""
loctrack_control - Change-trigger layer for group regions

Bounded Context: Entity-change events → region store operations
Responsibilities:
  - Typed domain events (EventKind + frozen dataclasses)
  - Handler registration and exhaustiveness check
  - RegionSynchronizer: the only writer of the RegionStore
  - GroupPointSource boundary to person/meeting/group data
  - MQTTEventPlane: MQTT ingress for JSON events

Design Philosophy:
  - Explicit registration (fail-fast, no runtime surprises)
  - Typed events instead of string-keyed topics
  - Region errors are contained at the synchronizer boundary
"""

from .events import (
    EventKind,
    MemberKind,
    EventParseError,
    DomainEvent,
    GroupCreated,
    GroupUpdated,
    GroupDeleted,
    MemberChanged,
    MemberDeleted,
    VisibilityToggled,
    event_from_dict,
    event_to_dict,
)
from .registry import HandlerRegistry, EventNotHandledError
from .sources import GroupPointSource, InMemoryDirectory, Member
from .adapter import RegionSynchronizer
from .plane import MQTTEventPlane

__all__ = [
    "EventKind",
    "MemberKind",
    "EventParseError",
    "DomainEvent",
    "GroupCreated",
    "GroupUpdated",
    "GroupDeleted",
    "MemberChanged",
    "MemberDeleted",
    "VisibilityToggled",
    "event_from_dict",
    "event_to_dict",
    "HandlerRegistry",
    "EventNotHandledError",
    "GroupPointSource",
    "InMemoryDirectory",
    "Member",
    "RegionSynchronizer",
    "MQTTEventPlane",
]
