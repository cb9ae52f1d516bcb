"""
Structured Logging for Loctrack
===============================

Bounded Context: Observability

JSON-structured logging: one object per line with typed event names.

Public API
----------
    LogEvent: Typed event names (enum)
    StructuredLogger: JSON logger implementation
    create_logger: Factory function

Example:
    >>> from loctrack_mqtt.logging import create_logger, LogEvent
    >>> logger = create_logger("regions")
    >>> logger.info(
    ...     event=LogEvent.REGION_RECOMPUTED,
    ...     message="Region recomputed",
    ...     metadata={'group_id': 'g1', 'shape': 'polygon'}
    ... )

Output:
    {
        "timestamp": "2026-10-17T15:30:45.123456+00:00",
        "level": "INFO",
        "component": "regions",
        "event": "region.recomputed",
        "message": "Region recomputed",
        "metadata": {"group_id": "g1", "shape": "polygon"}
    }
"""

from .events import LogEvent
from .structured import StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
