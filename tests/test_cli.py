import pytest

from loctrack_cli.cli import build_event, build_parser, main, render_dataset
from loctrack_control.events import (
    GroupCreated,
    GroupDeleted,
    GroupUpdated,
    MemberChanged,
    MemberDeleted,
    MemberKind,
    VisibilityToggled,
)
from loctrack_region.geometry.primitives import GeoPoint

DATASET = """\
groups:
  - {id: north, color: "#FF0000"}
  - {id: solo, color: "#00FF00"}
persons:
  - {id: p1, lat: 48.8650, lng: 2.3400, group: north}
  - {id: p2, lat: 48.8690, lng: 2.3520, group: north}
  - {id: p3, lat: 48.8630, lng: 2.3600, group: north}
  - {id: p4, lat: 48.8580, lng: 2.3700, group: solo}
"""


def _event(*argv):
    return build_event(build_parser().parse_args(list(argv)))


class TestBuildEvent:
    def test_group_events(self):
        assert _event("group-created", "g1", "#FF0000") == GroupCreated("g1", "#FF0000")
        assert _event("group-updated", "g1", "#00FF00") == GroupUpdated("g1", "#00FF00")
        assert _event("group-deleted", "g1") == GroupDeleted("g1")

    def test_member_changed(self):
        event = _event("member-changed", "p1", "--group", "north", "--previous-group", "south")
        assert event == MemberChanged("p1", MemberKind.PERSON, "north", "south")

    def test_member_changed_with_location(self):
        event = _event("member-changed", "p1", "--group", "north", "--lat", "48.865", "--lng", "2.34")
        assert event.location == GeoPoint(48.865, 2.34)

    def test_member_changed_lat_without_lng(self):
        with pytest.raises(ValueError, match="together"):
            _event("member-changed", "p1", "--lat", "48.865")

    def test_group_created_non_hex_color(self):
        with pytest.raises(ValueError, match="color"):
            _event("group-created", "g1", "red")

    def test_member_deleted_meeting(self):
        event = _event("member-deleted", "m1", "--kind", "meeting", "--group", "north")
        assert event == MemberDeleted("m1", MemberKind.MEETING, "north")

    def test_visibility(self):
        assert _event("visibility", "off") == VisibilityToggled(False)
        assert _event("visibility", "on") == VisibilityToggled(True)

    def test_invalid_kind(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["member-deleted", "x", "--kind", "robot"])


class TestRender:
    def test_render_dataset(self, tmp_path):
        dataset = tmp_path / "dataset.yaml"
        dataset.write_text(DATASET)
        output = tmp_path / "out" / "regions.png"

        summary = render_dataset(dataset, output, width=320, height=240)

        assert summary["regions"] == 2
        assert output.is_file()
        assert output.stat().st_size > 0

    def test_render_empty_dataset(self, tmp_path):
        dataset = tmp_path / "dataset.yaml"
        dataset.write_text("groups: []\n")
        with pytest.raises(ValueError, match="no locations"):
            render_dataset(dataset, tmp_path / "out.png")

    def test_main_render(self, tmp_path, capsys):
        dataset = tmp_path / "dataset.yaml"
        dataset.write_text(DATASET)
        output = tmp_path / "regions.png"

        main(["render", str(dataset), "--output", str(output)])

        assert "Rendered 2 regions" in capsys.readouterr().out

    def test_main_without_command(self):
        with pytest.raises(SystemExit):
            main([])
