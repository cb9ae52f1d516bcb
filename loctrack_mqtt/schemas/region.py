"""
Region Message Schema
=====================

Bounded Context: Region updates sent to map clients

Message Flow:
    RegionStore → RegionPublisher → MQTT → map client (draw / erase / toggle)

Actions:
- updated: shape + color + visible for one group (draw or replace)
- removed: group_id only (erase)
- visibility: visible only (applies to every region)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from loctrack_region.geometry.shapes import RegionShape, shape_from_dict
from loctrack_region.store import RegionRecord

from .common import Timestamp

SCHEMA_VERSION = "1.0"


class RegionAction(str, Enum):
    """What the map client must do with the message."""
    UPDATED = "updated"
    REMOVED = "removed"
    VISIBILITY = "visibility"


@dataclass(frozen=True)
class RegionMessage:
    """
    One region change.

    Invariants:
        - UPDATED carries group_id, shape and color
        - REMOVED carries group_id
        - VISIBILITY carries visible

    Example:
        >>> msg = RegionMessage.updated(record)
        >>> msg.to_dict()['shape']['kind']
        'polygon'
    """
    schema_version: str
    timestamp: Timestamp
    action: RegionAction
    group_id: Optional[str] = None
    shape: Optional[RegionShape] = None
    color: Optional[str] = None
    visible: Optional[bool] = None

    def __post_init__(self):
        """Validate invariants."""
        if self.action == RegionAction.UPDATED:
            if self.group_id is None or self.shape is None or self.color is None:
                raise ValueError("updated messages need group_id, shape and color")
        elif self.action == RegionAction.REMOVED:
            if self.group_id is None:
                raise ValueError("removed messages need group_id")
        elif self.action == RegionAction.VISIBILITY:
            if self.visible is None:
                raise ValueError("visibility messages need visible")

    @classmethod
    def updated(cls, record: RegionRecord) -> 'RegionMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            action=RegionAction.UPDATED,
            group_id=record.group_id,
            shape=record.shape,
            color=record.color,
            visible=record.visible,
        )

    @classmethod
    def removed(cls, group_id: str) -> 'RegionMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            action=RegionAction.REMOVED,
            group_id=group_id,
        )

    @classmethod
    def visibility(cls, visible: bool) -> 'RegionMessage':
        return cls(
            schema_version=SCHEMA_VERSION,
            timestamp=Timestamp.now(),
            action=RegionAction.VISIBILITY,
            visible=visible,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict (None fields omitted)."""
        data: Dict[str, Any] = {
            'schema_version': self.schema_version,
            'timestamp': self.timestamp.to_dict(),
            'action': self.action.value,
        }
        if self.group_id is not None:
            data['group_id'] = self.group_id
        if self.shape is not None:
            data['shape'] = self.shape.to_dict()
        if self.color is not None:
            data['color'] = self.color
        if self.visible is not None:
            data['visible'] = self.visible
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RegionMessage':
        """Deserialize from dict.

        Raises:
            ValueError: If required keys missing or invalid values
        """
        try:
            return cls(
                schema_version=data['schema_version'],
                timestamp=Timestamp(value=data['timestamp']),
                action=RegionAction(data['action']),
                group_id=data.get('group_id'),
                shape=shape_from_dict(data['shape']) if 'shape' in data else None,
                color=data.get('color'),
                visible=data.get('visible'),
            )
        except KeyError as e:
            raise ValueError(f"Missing required RegionMessage field: {e}") from e
