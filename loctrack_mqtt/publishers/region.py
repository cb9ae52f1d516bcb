"""
Region Publisher
================

Bounded Context: Region update production

Publishes every RegionStore change so remote map clients can draw, erase
or toggle regions.

Topics:
- {topic}/{group_id}: updated / removed messages, retained, so a client
  that connects late receives the current region of every group
  (a removal publishes the message, then clears the retained payload)
- {topic}: visibility messages, retained

Message Flow:
    RegionStore → RegionPublisher (RegionListener) → MQTT Broker
"""

from typing import Any, Dict, Optional

from loctrack_region.store import RegionRecord

from ..logging import StructuredLogger
from ..schemas import RegionMessage
from .base import BasePublisher


class RegionPublisher(BasePublisher):
    """
    RegionListener that publishes RegionMessage instances.

    Example:
        >>> publisher = RegionPublisher(
        ...     broker_host="localhost",
        ...     topic="loctrack/hq/regions",
        ...     logger=create_logger("publisher"),
        ... )
        >>> publisher.connect()
        >>> store.add_listener(publisher)
    """

    def __init__(
        self,
        broker_host: str,
        topic: str,
        logger: StructuredLogger,
        broker_port: int = 1883,
        client_id: str = "loctrack_regions",
        username: Optional[str] = None,
        password: Optional[str] = None,
        qos: int = 1
    ):
        super().__init__(
            broker_host=broker_host,
            broker_port=broker_port,
            topic=topic,
            client_id=client_id,
            logger=logger,
            username=username,
            password=password,
            qos=qos
        )

    def format_message(self, message: RegionMessage) -> Dict[str, Any]:
        return message.to_dict()

    def group_topic(self, group_id: str) -> str:
        return f"{self.topic}/{group_id}"

    def publish_region(self, message: RegionMessage) -> bool:
        """Publish one region message to the topic matching its action."""
        topic = self.group_topic(message.group_id) if message.group_id is not None else self.topic
        return self.publish(self.format_message(message), topic=topic, retain=True)

    # ===== RegionListener =====

    def on_region_updated(self, record: RegionRecord) -> None:
        self.publish_region(RegionMessage.updated(record))

    def on_region_removed(self, group_id: str) -> None:
        if self.publish_region(RegionMessage.removed(group_id)):
            # Empty retained payload clears the broker's copy
            self.client.publish(self.group_topic(group_id), payload=None, qos=self.qos, retain=True)

    def on_visibility_changed(self, visible: bool) -> None:
        self.publish_region(RegionMessage.visibility(visible))
