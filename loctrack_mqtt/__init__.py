"""
Loctrack MQTT Communication Package
===================================

Bounded Context: Region updates and observability

Architecture:
- schemas/: Immutable message structures (RegionMessage)
- publishers/: Message producers (RegionPublisher)
- logging/: Structured JSON logging

Public API
----------
Schemas:
    Timestamp, RegionAction, RegionMessage

Publishers:
    BasePublisher, RegionPublisher

Logging:
    LogEvent, StructuredLogger, create_logger
"""

__version__ = "1.0.0"

from .logging import (
    LogEvent,
    StructuredLogger,
    create_logger,
)

from .schemas import (
    Timestamp,
    RegionAction,
    RegionMessage,
)

from .publishers import (
    BasePublisher,
    RegionPublisher,
)

__all__ = [
    '__version__',
    'LogEvent',
    'StructuredLogger',
    'create_logger',
    'Timestamp',
    'RegionAction',
    'RegionMessage',
    'BasePublisher',
    'RegionPublisher',
]
