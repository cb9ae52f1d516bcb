"""
loctrack_service - Long-running region service

Architecture:
- ServiceConfig: YAML configuration (frozen dataclasses)
- RegionService: store + synchronizer + MQTT event plane + region publisher
"""

from loctrack_service.config import MQTTConfig, ServiceConfig
from loctrack_service.service import RegionService

__all__ = [
    "MQTTConfig",
    "ServiceConfig",
    "RegionService",
]
