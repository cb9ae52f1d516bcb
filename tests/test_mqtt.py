import json
import logging
from types import SimpleNamespace

import paho.mqtt.client as mqtt
import pytest

from loctrack_mqtt import LogEvent, RegionAction, RegionMessage, RegionPublisher, create_logger
from loctrack_mqtt.logging import StructuredLogger
from loctrack_mqtt.logging.structured import JSONFormatter
from loctrack_mqtt.schemas import SCHEMA_VERSION, Timestamp
from loctrack_region.geometry.primitives import GeoPoint
from loctrack_region.geometry.shapes import Circle
from loctrack_region.store import RegionRecord

RECORD = RegionRecord(
    group_id="g1",
    shape=Circle(center=GeoPoint(1, 2), radius_m=150.0),
    color="#FF0000",
    visible=True,
    point_count=1,
)


class FakeClient:
    """Stands in for paho's Client: records publish() calls."""

    def __init__(self, rc=mqtt.MQTT_ERR_SUCCESS):
        self.rc = rc
        self.published = []

    def publish(self, topic, payload=None, qos=0, retain=False):
        self.published.append((topic, payload, qos, retain))
        return SimpleNamespace(rc=self.rc)


@pytest.fixture
def publisher():
    pub = RegionPublisher(
        broker_host="localhost",
        topic="loctrack/test/regions",
        logger=create_logger("test_publisher"),
    )
    pub.client = FakeClient()
    pub._connected.set()
    return pub


class TestRegionMessage:
    def test_updated(self):
        data = RegionMessage.updated(RECORD).to_dict()
        assert data["schema_version"] == SCHEMA_VERSION
        assert data["action"] == "updated"
        assert data["group_id"] == "g1"
        assert data["shape"] == {"kind": "circle", "center": {"lat": 1, "lng": 2}, "radius_m": 150.0}
        assert data["color"] == "#FF0000"
        assert data["visible"] is True

    def test_removed_omits_empty_fields(self):
        data = RegionMessage.removed("g1").to_dict()
        assert set(data) == {"schema_version", "timestamp", "action", "group_id"}

    def test_visibility(self):
        data = RegionMessage.visibility(False).to_dict()
        assert data["action"] == "visibility"
        assert data["visible"] is False
        assert "group_id" not in data

    def test_from_dict(self):
        message = RegionMessage.updated(RECORD)
        parsed = RegionMessage.from_dict(json.loads(json.dumps(message.to_dict())))
        assert parsed.shape == RECORD.shape
        assert parsed.action == RegionAction.UPDATED

    def test_invariants(self):
        with pytest.raises(ValueError):
            RegionMessage(SCHEMA_VERSION, Timestamp.now(), RegionAction.UPDATED, group_id="g1")
        with pytest.raises(ValueError):
            RegionMessage(SCHEMA_VERSION, Timestamp.now(), RegionAction.VISIBILITY)

    def test_from_dict_missing_field(self):
        with pytest.raises(ValueError, match="Missing"):
            RegionMessage.from_dict({"action": "removed"})

    def test_timestamp_is_utc(self):
        assert Timestamp.now().to_datetime().utcoffset().total_seconds() == 0


class TestRegionPublisher:
    def test_region_updated_retained_per_group(self, publisher):
        publisher.on_region_updated(RECORD)

        [(topic, payload, qos, retain)] = publisher.client.published
        assert topic == "loctrack/test/regions/g1"
        assert json.loads(payload)["action"] == "updated"
        assert qos == 1
        assert retain is True
        assert publisher.get_stats()["message_count"] == 1

    def test_region_removed_clears_retained(self, publisher):
        publisher.on_region_removed("g1")

        removed, cleared = publisher.client.published
        assert json.loads(removed[1])["action"] == "removed"
        assert cleared[0] == "loctrack/test/regions/g1"
        assert cleared[1] is None
        assert cleared[3] is True

    def test_visibility_on_base_topic(self, publisher):
        publisher.on_visibility_changed(False)
        [(topic, payload, _, _)] = publisher.client.published
        assert topic == "loctrack/test/regions"
        assert json.loads(payload)["visible"] is False

    def test_not_connected(self, publisher, caplog):
        publisher._connected.clear()
        with caplog.at_level(logging.WARNING):
            assert publisher.publish_region(RegionMessage.removed("g1")) is False
        assert publisher.client.published == []
        assert "mqtt.publish.failed" in caplog.text

    def test_broker_rejects(self, publisher):
        publisher.client = FakeClient(rc=mqtt.MQTT_ERR_NO_CONN)
        assert publisher.publish_region(RegionMessage.visibility(True)) is False
        assert publisher.get_stats()["message_count"] == 0


class TestStructuredLogger:
    def test_json_record(self, caplog):
        logger = StructuredLogger("unit")
        with caplog.at_level(logging.INFO):
            logger.info(LogEvent.REGION_RECOMPUTED, "done", metadata={"group_id": "g1"})

        body = json.loads(caplog.records[-1].getMessage())
        assert body["component"] == "unit"
        assert body["event"] == "region.recomputed"
        assert body["level"] == "INFO"
        assert body["metadata"] == {"group_id": "g1"}
        assert caplog.records[-1].name == "loctrack.unit"

    def test_exception_summary(self, caplog):
        logger = StructuredLogger("unit")
        with caplog.at_level(logging.WARNING):
            logger.warning(LogEvent.REGION_COMPUTE_FAILED, "failed", exc_info=ValueError("bad"))

        body = json.loads(caplog.records[-1].getMessage())
        assert body["exception"] == {"type": "ValueError", "message": "bad"}

    def test_set_level(self, caplog):
        logger = StructuredLogger("unit_quiet")
        logger.set_level(logging.ERROR)
        with caplog.at_level(logging.INFO):
            logger.info(LogEvent.REGION_REMOVED, "hidden")
        assert caplog.records == []

    def test_json_formatter_passthrough(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, '{"a": 1}', None, None)
        assert JSONFormatter().format(record) == '{"a": 1}'
