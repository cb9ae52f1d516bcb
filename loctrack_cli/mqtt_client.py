"""
MQTT client wrapper for sending domain events to the region service.

Handles MQTT connection, publishing, and disconnection.
"""

import json
from typing import Any, Dict, Optional

import paho.mqtt.client as mqtt


class MQTTEventClient:
    """
    MQTT client for sending entity-change events.

    Publishes events to the service's event topic with QoS 1.
    """

    def __init__(
        self,
        broker: str = "localhost",
        port: int = 1883,
        username: Optional[str] = None,
        password: Optional[str] = None
    ):
        """
        Args:
            broker: MQTT broker host
            port: MQTT broker port
            username: Optional MQTT username
            password: Optional MQTT password
        """
        self.broker = broker
        self.port = port

        self.client = mqtt.Client(mqtt.CallbackAPIVersion.VERSION2)

        if username and password:
            self.client.username_pw_set(username, password)

    def send_event(
        self,
        topic: str,
        event: Dict[str, Any],
        qos: int = 1,
        timeout: float = 5.0
    ) -> None:
        """
        Send one event to an MQTT topic.

        Args:
            topic: MQTT topic (e.g., "loctrack/hq/events")
            event: Event dictionary (will be JSON serialized)
            qos: Quality of Service (default: 1)
            timeout: Seconds to wait for the broker acknowledgement

        Raises:
            ConnectionError: If unable to connect to MQTT broker
            RuntimeError: If the event could not be published
        """
        try:
            self.client.connect(self.broker, self.port, keepalive=60)
        except OSError as e:
            raise ConnectionError(
                f"Unable to connect to MQTT broker at {self.broker}:{self.port}. "
                f"Is mosquitto running? ({e})"
            ) from e

        self.client.loop_start()
        try:
            result = self.client.publish(topic, json.dumps(event), qos=qos)
            result.wait_for_publish(timeout=timeout)
            if not result.is_published():
                raise RuntimeError(f"Event not acknowledged within {timeout}s")
        finally:
            self.client.disconnect()
            self.client.loop_stop()

        print(f"✅ Event sent: {event.get('event', 'unknown')}")
