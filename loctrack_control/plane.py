"""
MQTTEventPlane - receives domain events over MQTT

Bounded Context: MQTT connection management + event reception
Responsibilities:
  - MQTT connection lifecycle (connect, disconnect)
  - Event message reception (subscribe to event topic)
  - Status publishing (publish to status topic)
  - JSON → typed DomainEvent → RegionSynchronizer

QoS Policy:
  - Events: QoS 1 (at-least-once delivery; recompute is idempotent)
  - Status: QoS 1 + retained (last status persisted)

Threading:
  - MQTT client runs its own background thread (loop_start/loop_stop)
  - Dispatch is serialized with a lock: the synchronizer handles one
    event at a time
"""

import json
import logging
import threading
from datetime import datetime, timezone
from threading import Event
from typing import Optional

import paho.mqtt.client as mqtt

from .adapter import RegionSynchronizer
from .events import EventParseError, event_from_dict
from .registry import EventNotHandledError

logger = logging.getLogger(__name__)


class MQTTEventPlane:
    """
    MQTT ingress for entity-change events.

    Example:
        plane = MQTTEventPlane(
            synchronizer=sync,
            broker_host="localhost",
            broker_port=1883,
            event_topic="loctrack/hq/events",
            status_topic="loctrack/hq/status",
            client_id="region_service_hq",
        )
        if plane.connect(timeout=5.0):
            print("Listening for events")
        ...
        plane.disconnect()
    """

    def __init__(
        self,
        synchronizer: RegionSynchronizer,
        broker_host: str,
        broker_port: int,
        event_topic: str,
        status_topic: str,
        client_id: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Args:
            synchronizer: Target of every parsed event
            broker_host: MQTT broker hostname
            broker_port: MQTT broker port (typically 1883)
            event_topic: Topic for receiving events (subscribe)
            status_topic: Topic for publishing status (publish)
            client_id: MQTT client identifier
            username: Optional MQTT authentication username
            password: Optional MQTT authentication password
        """
        self.synchronizer = synchronizer
        self.broker_host = broker_host
        self.broker_port = broker_port
        self.event_topic = event_topic
        self.status_topic = status_topic
        self.client_id = client_id

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2, client_id=client_id)
        self.client.on_connect = self._on_connect
        self.client.on_message = self._on_message
        self.client.on_disconnect = self._on_disconnect

        if username and password:
            self.client.username_pw_set(username, password)

        self._connected = Event()
        self._running = False
        self._dispatch_lock = threading.Lock()
        self.events_received = 0
        self.events_rejected = 0

    def connect(self, timeout: float = 5.0) -> bool:
        """
        Connect to MQTT broker with timeout.

        Returns:
            True if connected successfully, False otherwise
        """
        try:
            logger.info(f"🔌 Connecting to MQTT broker: {self.broker_host}:{self.broker_port}")
            self.client.connect(self.broker_host, self.broker_port, keepalive=60)
            self.client.loop_start()
            self._running = True

            if self._connected.wait(timeout=timeout):
                logger.info("✅ MQTT event plane connected")
                return True
            else:
                logger.error(f"❌ Connection timeout after {timeout}s")
                return False

        except OSError as e:
            logger.error(f"❌ Error connecting to MQTT: {e}")
            return False

    def disconnect(self) -> None:
        """Disconnect from MQTT broker. Safe to call multiple times."""
        if self._running:
            logger.info("🔌 Disconnecting from MQTT broker")
            self.publish_status("disconnected")
            self.client.loop_stop()
            self.client.disconnect()
            self._running = False
            self._connected.clear()
            logger.info("✅ MQTT event plane disconnected")

    def publish_status(self, status: str) -> None:
        """
        Publish status update to status topic (QoS 1, retained).

        Args:
            status: Status string (e.g., "connected", "disconnected")
        """
        message = {
            "status": status,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "client_id": self.client_id,
            "regions": self.synchronizer.store.count(),
        }

        try:
            self.client.publish(
                self.status_topic,
                json.dumps(message),
                qos=1,
                retain=True,
            )
            logger.debug(f"📤 Status published: {status}")
        except (OSError, ValueError) as e:
            logger.error(f"❌ Error publishing status: {e}")

    def handle_payload(self, payload: bytes) -> bool:
        """
        Parse and dispatch one raw event payload.

        Returns:
            True if the event was dispatched, False if it was rejected
        """
        self.events_received += 1
        try:
            event = event_from_dict(json.loads(payload.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, EventParseError) as e:
            self.events_rejected += 1
            logger.warning(f"⚠️ Rejected event payload {payload!r}: {e}")
            return False

        logger.info(f"🎯 Dispatching event: {event.kind.value}")
        try:
            with self._dispatch_lock:
                self.synchronizer.dispatch(event)
        except EventNotHandledError as e:
            self.events_rejected += 1
            logger.warning(f"⚠️ {e}")
            return False
        return True

    # ===== MQTT Callbacks (run in MQTT thread) =====

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        if reason_code.is_failure:
            logger.error(f"❌ Connection failed ({reason_code})")
            self._connected.clear()
            return

        logger.info(f"✅ Connected to broker ({reason_code})")
        client.subscribe(self.event_topic, qos=1)
        logger.info(f"📥 Subscribed to: {self.event_topic} (QoS 1)")
        self.publish_status("connected")
        self._connected.set()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        if reason_code.is_failure:
            logger.warning(f"⚠️ Unexpected disconnection ({reason_code})")
        else:
            logger.info("✅ Disconnected from broker")
        self._connected.clear()

    def _on_message(self, client, userdata, msg):
        """Keep this fast: region recompute is bounded by group size."""
        try:
            self.handle_payload(msg.payload)
        except Exception as e:
            logger.error(f"❌ Error processing event: {e}", exc_info=True)
