import json
import logging
from types import SimpleNamespace

import pytest

from loctrack_control.adapter import RegionSynchronizer
from loctrack_control.plane import MQTTEventPlane


@pytest.fixture
def sync(store, directory) -> RegionSynchronizer:
    synchronizer = RegionSynchronizer(store, directory)
    synchronizer.rebuild_all()
    return synchronizer


@pytest.fixture
def plane(sync) -> MQTTEventPlane:
    return MQTTEventPlane(
        synchronizer=sync,
        broker_host="localhost",
        broker_port=1883,
        event_topic="loctrack/test/events",
        status_topic="loctrack/test/status",
        client_id="test_plane",
    )


def _payload(data) -> bytes:
    return json.dumps(data).encode("utf-8")


class TestHandlePayload:
    def test_dispatches_event(self, plane, store):
        ok = plane.handle_payload(_payload({"event": "group_deleted", "group_id": "north"}))

        assert ok is True
        assert store.get("north") is None
        assert plane.events_received == 1
        assert plane.events_rejected == 0

    def test_visibility_event(self, plane, store):
        assert plane.handle_payload(_payload({"event": "visibility_toggled", "visible": False}))
        assert store.visible is False

    def test_invalid_json_rejected(self, plane, caplog):
        with caplog.at_level(logging.WARNING):
            assert plane.handle_payload(b"{not json") is False
        assert plane.events_rejected == 1
        assert "Rejected" in caplog.text

    def test_invalid_utf8_rejected(self, plane):
        assert plane.handle_payload(b"\xff\xfe") is False
        assert plane.events_rejected == 1

    def test_unknown_event_rejected(self, plane, store):
        count = store.count()
        assert plane.handle_payload(_payload({"event": "teleport"})) is False
        assert store.count() == count

    def test_missing_field_rejected(self, plane):
        assert plane.handle_payload(_payload({"event": "group_created", "group_id": "x"})) is False

    def test_on_message_callback(self, plane, store):
        message = SimpleNamespace(
            topic="loctrack/test/events",
            payload=_payload({"event": "group_deleted", "group_id": "solo"}),
        )
        plane._on_message(plane.client, None, message)
        assert store.get("solo") is None


class TestStatus:
    def test_publish_status(self, plane, monkeypatch):
        published = []
        monkeypatch.setattr(
            plane.client,
            "publish",
            lambda topic, payload, qos=0, retain=False: published.append((topic, payload, qos, retain)),
        )

        plane.publish_status("running")

        [(topic, payload, qos, retain)] = published
        body = json.loads(payload)
        assert topic == "loctrack/test/status"
        assert body["status"] == "running"
        assert body["regions"] == 2
        assert body["client_id"] == "test_plane"
        assert qos == 1 and retain is True

    def test_disconnect_when_not_connected_is_noop(self, plane):
        plane.disconnect()
