"""
Loctrack MQTT Schemas
=====================

Bounded Context: Data Structures

Immutable, typed message structures with to_dict()/from_dict().

Public API
----------
    Timestamp: ISO 8601 timestamp wrapper
    RegionAction: Enum (UPDATED, REMOVED, VISIBILITY)
    RegionMessage: One region change
"""

from .common import Timestamp
from .region import RegionAction, RegionMessage, SCHEMA_VERSION

__all__ = [
    'Timestamp',
    'RegionAction',
    'RegionMessage',
    'SCHEMA_VERSION',
]
