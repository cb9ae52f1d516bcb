"""
Configuration schema for the region service.

This module defines the configuration structure for the region service:
service identity, the dataset used to seed the in-memory directory,
region construction tunables and MQTT settings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from loctrack_region.selector import RegionSettings


@dataclass(frozen=True)
class MQTTConfig:
    """MQTT broker configuration."""

    broker: str = "localhost"
    port: int = 1883
    username: Optional[str] = None
    password: Optional[str] = None
    qos: int = 1  # Region updates must not be lost (retained, at-least-once)

    event_topic: str = "loctrack/{service_id}/events"
    region_topic: str = "loctrack/{service_id}/regions"
    status_topic: str = "loctrack/{service_id}/status"

    def __post_init__(self):
        """Validate MQTT configuration."""
        if not self.broker:
            raise ValueError("MQTT broker cannot be empty")

        if not 1 <= self.port <= 65535:
            raise ValueError(
                f"MQTT port must be in [1, 65535], got {self.port}"
            )

        if self.qos not in {0, 1, 2}:
            raise ValueError(
                f"MQTT QoS must be 0, 1, or 2, got {self.qos}"
            )

    def topics(self, service_id: str) -> "ResolvedTopics":
        """Expand the {service_id} placeholder in every topic."""
        return ResolvedTopics(
            events=self.event_topic.format(service_id=service_id),
            regions=self.region_topic.format(service_id=service_id),
            status=self.status_topic.format(service_id=service_id),
        )


@dataclass(frozen=True)
class ResolvedTopics:
    events: str
    regions: str
    status: str


@dataclass(frozen=True)
class ServiceConfig:
    """
    Main configuration for the region service.

    Loaded from YAML and validated at startup.
    Immutable after construction (frozen dataclass).
    """

    # Service identification
    service_id: str

    # Seed data for the in-memory directory (None: start empty)
    dataset: Optional[Path] = None

    region: RegionSettings = field(default_factory=RegionSettings)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)

    def __post_init__(self):
        """Validate service configuration."""
        if not self.service_id:
            raise ValueError("service_id cannot be empty")

        if self.dataset is not None and not self.dataset.is_file():
            raise FileNotFoundError(
                f"Dataset file not found: {self.dataset}\n"
                f"Create the file or update 'dataset' in config"
            )

    @property
    def topics(self) -> ResolvedTopics:
        return self.mqtt.topics(self.service_id)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ServiceConfig":
        """
        Load configuration from YAML file.

        A relative dataset path is resolved against the config file's
        directory.

        Example YAML:
            service_id: "hq"
            dataset: "dataset.yaml"

            region:
              default_radius_m: 100
              circle_margin_m: 50
              polygon_margin_deg: 0.0005
              distance: "haversine"

            mqtt:
              broker: "localhost"
              port: 1883
              username: null
              password: null
              qos: 1
        """
        yaml_path = Path(yaml_path)
        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data, base_dir=yaml_path.parent)

    @classmethod
    def from_dict(cls, data: dict, base_dir: Optional[Path] = None) -> "ServiceConfig":
        """Build a configuration from the mapping described in from_yaml()."""
        if "service_id" not in data:
            raise ValueError("service_id is required")

        region = RegionSettings(**data.get("region", {}))
        mqtt = MQTTConfig(**data.get("mqtt", {}))

        dataset = data.get("dataset")
        if dataset is not None:
            dataset = Path(dataset)
            if base_dir is not None and not dataset.is_absolute():
                dataset = base_dir / dataset

        return cls(
            service_id=str(data["service_id"]),
            dataset=dataset,
            region=region,
            mqtt=mqtt,
        )
