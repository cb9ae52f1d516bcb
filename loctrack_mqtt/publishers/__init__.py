"""
Loctrack MQTT Publishers
========================

Bounded Context: Message Production

Architecture:
    BasePublisher (abstract)
        └─ RegionPublisher

Example:
    >>> from loctrack_mqtt.publishers import RegionPublisher
    >>> from loctrack_mqtt.logging import create_logger
    >>> publisher = RegionPublisher(
    ...     broker_host="localhost",
    ...     topic="loctrack/hq/regions",
    ...     logger=create_logger("publisher")
    ... )
"""

from .base import BasePublisher
from .region import RegionPublisher

__all__ = [
    'BasePublisher',
    'RegionPublisher',
]
