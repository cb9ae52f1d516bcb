"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Event Naming Convention:
    <component>.<category>.<action>

    component: region, event, mqtt, error
    category: recomputed, dispatched, publish
    action: success, failed

Example Log Query (CloudWatch Insights):
    fields @timestamp, event, message, metadata.group_id
    | filter event = "region.compute_failed"
    | stats count() by bin(5m)
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - region.*: Region store changes
    - event.*: Domain event dispatch
    - mqtt.*: MQTT broker interactions
    - error.*: Error conditions
    """

    # ========== Region Events ==========
    REGION_RECOMPUTED = "region.recomputed"
    """Region rebuilt from the group's current point set."""

    REGION_REMOVED = "region.removed"
    """Region deleted (group deleted or no points left)."""

    REGION_VISIBILITY_CHANGED = "region.visibility_changed"
    """Global region visibility toggled."""

    REGION_COMPUTE_FAILED = "region.compute_failed"
    """Region could not be computed; previous record kept."""

    REGIONS_REBUILT = "region.rebuilt"
    """Every known group recomputed."""

    # ========== Domain Event Dispatch ==========
    EVENT_DISPATCHED = "event.dispatched"
    """Domain event routed to its handler."""

    # ========== MQTT Events ==========
    MQTT_CONNECTED = "mqtt.connected"
    """MQTT broker connection established."""

    MQTT_DISCONNECTED = "mqtt.disconnected"
    """MQTT broker connection lost."""

    MQTT_PUBLISH_SUCCESS = "mqtt.publish.success"
    """Message successfully published to broker."""

    MQTT_PUBLISH_FAILED = "mqtt.publish.failed"
    """Message publication failed."""

    # ========== Error Events ==========
    MQTT_CONNECTION_ERROR = "error.mqtt_connection"
    """Failed to connect to MQTT broker."""

    MQTT_PUBLISH_ERROR = "error.mqtt_publish"
    """Error during message publication."""


# Event categories for filtering
REGION_EVENTS = {
    LogEvent.REGION_RECOMPUTED,
    LogEvent.REGION_REMOVED,
    LogEvent.REGION_VISIBILITY_CHANGED,
    LogEvent.REGION_COMPUTE_FAILED,
    LogEvent.REGIONS_REBUILT,
}

MQTT_EVENTS = {
    LogEvent.MQTT_CONNECTED,
    LogEvent.MQTT_DISCONNECTED,
    LogEvent.MQTT_PUBLISH_SUCCESS,
    LogEvent.MQTT_PUBLISH_FAILED,
}

ERROR_EVENTS = {
    LogEvent.REGION_COMPUTE_FAILED,
    LogEvent.MQTT_CONNECTION_ERROR,
    LogEvent.MQTT_PUBLISH_ERROR,
}
