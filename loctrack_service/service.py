"""
Region Service - keeps group regions in sync with entity changes.

This module provides the RegionService class which wires the region
store, the change-trigger adapter, the MQTT event plane and the region
publisher into one long-running service.

Threading Model:
- paho-mqtt client thread (event plane): parses and dispatches events
- paho-mqtt client thread (publisher): network loop for region updates
- Caller thread: blocks in wait() until stop() is called
"""

import logging
import threading
from typing import Optional

from loctrack_control import InMemoryDirectory, MQTTEventPlane, RegionSynchronizer
from loctrack_control.sources import EventApplier, GroupPointSource
from loctrack_mqtt import RegionPublisher, create_logger
from loctrack_region.store import RegionStore

from .config import ServiceConfig

logger = logging.getLogger(__name__)


class RegionService:
    """
    Main region service.

    Lifecycle:
        1. setup(): seed the directory, compute every region
        2. start(): connect the publisher, then the event plane
        3. wait(): block until stop()
        4. stop(): disconnect everything

    Usage:
        config = ServiceConfig.from_yaml("config.yaml")
        service = RegionService(config)

        service.setup()
        service.start()
        service.wait()  # Blocks until stopped
    """

    def __init__(
        self,
        config: ServiceConfig,
        source: Optional[GroupPointSource] = None,
        publisher: Optional[RegionPublisher] = None,
        plane: Optional[MQTTEventPlane] = None,
    ):
        """
        Args:
            config: Service configuration
            source: Group/member data (default: directory loaded from config.dataset).
                A source with an apply() method is kept current from incoming events.
            publisher: Region publisher (default: built from config.mqtt)
            plane: Event plane (default: built from config.mqtt)
        """
        self.config = config
        topics = config.topics

        if source is None:
            source = (
                InMemoryDirectory.from_yaml(config.dataset)
                if config.dataset is not None
                else InMemoryDirectory()
            )
        self.source = source

        self.store = RegionStore(config.region)
        self.synchronizer = RegionSynchronizer(
            store=self.store,
            source=self.source,
            logger=create_logger("regions"),
            directory=self.source if isinstance(self.source, EventApplier) else None,
        )

        self.publisher = publisher or RegionPublisher(
            broker_host=config.mqtt.broker,
            broker_port=config.mqtt.port,
            topic=topics.regions,
            logger=create_logger("publisher"),
            client_id=f"publisher_regions_{config.service_id}",
            username=config.mqtt.username,
            password=config.mqtt.password,
            qos=config.mqtt.qos,
        )

        self.plane = plane or MQTTEventPlane(
            synchronizer=self.synchronizer,
            broker_host=config.mqtt.broker,
            broker_port=config.mqtt.port,
            event_topic=topics.events,
            status_topic=topics.status,
            client_id=f"region_service_{config.service_id}",
            username=config.mqtt.username,
            password=config.mqtt.password,
        )

        self._running = False
        self._stop_event = threading.Event()

        logger.info(f"RegionService initialized for service_id={config.service_id}")

    def setup(self) -> int:
        """
        Compute the initial region of every group.

        Returns:
            Number of regions computed
        """
        count = self.synchronizer.rebuild_all()
        logger.info(f"✅ Initial regions computed: {count}")
        return count

    def start(self) -> None:
        """
        Start the service (non-blocking).

        The publisher is connected first and receives a snapshot of every
        region before live events start flowing in.
        """
        if self._running:
            logger.warning("Service already running")
            return

        logger.info("Starting region service")

        if not self.publisher.connect():
            raise RuntimeError("Failed to connect to MQTT broker (region publisher)")

        self.store.add_listener(self.publisher)
        for record in self.store.get_all():
            self.publisher.on_region_updated(record)

        if not self.plane.connect(timeout=5.0):
            self.store.remove_listener(self.publisher)
            self.publisher.disconnect()
            raise RuntimeError("Failed to connect to MQTT broker (event plane)")

        self._stop_event.clear()
        self._running = True
        self.plane.publish_status("running")
        logger.info("✅ Region service started")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until stop() is called.

        Returns:
            True if the service stopped, False on timeout
        """
        if not self._running:
            logger.warning("Service not running")
            return True
        return self._stop_event.wait(timeout=timeout)

    def stop(self) -> None:
        """Stop the service gracefully. Safe to call when not running."""
        if not self._running:
            logger.warning("Service not running")
            return

        logger.info("Stopping region service")

        self.plane.publish_status("stopped")
        self.plane.disconnect()

        self.store.remove_listener(self.publisher)
        self.publisher.disconnect()

        self._running = False
        self._stop_event.set()
        logger.info("✅ Region service stopped")

    @property
    def is_running(self) -> bool:
        return self._running
