"""
Loctrack CLI - Main entry point.

Provides a command-line interface for sending domain events to the
region service over MQTT, and an offline renderer for dataset files.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loctrack_control.events import (
    DomainEvent,
    GroupCreated,
    GroupDeleted,
    GroupUpdated,
    MemberChanged,
    MemberDeleted,
    MemberKind,
    VisibilityToggled,
    event_to_dict,
)

from .mqtt_client import MQTTEventClient

VISIBILITY_CHOICES = {"on": True, "off": False}


def send_event(
    event: DomainEvent,
    service_id: str = "default",
    broker: str = "localhost",
    port: int = 1883,
    topic: Optional[str] = None
) -> None:
    """
    Send an event to the region service via MQTT.

    Args:
        event: Domain event
        service_id: Target service ID
        broker: MQTT broker host
        port: MQTT broker port
        topic: Explicit event topic (default: loctrack/<service_id>/events)
    """
    topic = topic or f"loctrack/{service_id}/events"

    client = MQTTEventClient(broker=broker, port=port)
    client.send_event(topic, event_to_dict(event), qos=1)


def build_event(args: argparse.Namespace) -> DomainEvent:
    """Translate parsed event subcommand arguments into a domain event."""
    if args.command == 'group-created':
        return GroupCreated(group_id=args.group_id, color=args.color)

    if args.command == 'group-updated':
        return GroupUpdated(group_id=args.group_id, color=args.color)

    if args.command == 'group-deleted':
        return GroupDeleted(group_id=args.group_id)

    if args.command == 'member-changed':
        return MemberChanged(
            member_id=args.member_id,
            member_kind=MemberKind(args.kind),
            group_id=args.group,
            previous_group_id=args.previous_group,
            lat=args.lat,
            lng=args.lng,
        )

    if args.command == 'member-deleted':
        return MemberDeleted(
            member_id=args.member_id,
            member_kind=MemberKind(args.kind),
            group_id=args.group,
        )

    if args.command == 'visibility':
        return VisibilityToggled(visible=VISIBILITY_CHOICES[args.state])

    raise ValueError(f"Not an event command: {args.command}")


def render_dataset(
    dataset: Path,
    output: Path,
    width: int = 1280,
    height: int = 720
) -> Dict[str, Any]:
    """
    Compute every region of a dataset and write them to an image.

    Returns:
        Summary with the number of regions and the output path
    """
    # Rendering pulls in OpenCV and supervision; only this command needs them
    import cv2

    from loctrack_control import InMemoryDirectory, RegionSynchronizer
    from loctrack_region.rendering import RasterMapSurface, RegionLayer, Viewport
    from loctrack_region.store import RegionStore

    directory = InMemoryDirectory.from_yaml(dataset)
    points = directory.all_points()
    if not points:
        raise ValueError(f"Dataset has no locations: {dataset}")

    surface = RasterMapSurface(Viewport.fit(points, width=width, height=height))
    store = RegionStore()
    store.add_listener(RegionLayer(surface))

    synchronizer = RegionSynchronizer(store, directory)
    count = synchronizer.rebuild_all()

    output.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(output), surface.render()):
        raise RuntimeError(f"Failed to write image: {output}")

    return {'regions': count, 'output': str(output)}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loctrack-cli",
        description="Loctrack CLI - Send entity-change events to the region service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Group lifecycle
  loctrack-cli group-created north "#FF0000"
  loctrack-cli group-updated north "#00FF00"
  loctrack-cli group-deleted north

  # Person moved from group "south" to group "north"
  loctrack-cli member-changed p1 --kind person --group north --previous-group south \\
      --lat 48.8650 --lng 2.3400

  # Meeting point deleted
  loctrack-cli member-deleted m1 --kind meeting --group north

  # Show/hide all regions
  loctrack-cli visibility off

  # Offline rendering
  loctrack-cli render config/dataset.yaml --output regions.png
"""
    )

    # Global arguments
    parser.add_argument(
        "--service-id",
        default="default",
        help="Target service ID (default: default)"
    )
    parser.add_argument(
        "--broker",
        default="localhost",
        help="MQTT broker host (default: localhost)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=1883,
        help="MQTT broker port (default: 1883)"
    )
    parser.add_argument(
        "--topic",
        default=None,
        help="Event topic override (default: loctrack/<service-id>/events)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    for name, help_text in (
        ('group-created', 'Group created'),
        ('group-updated', 'Group color changed'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('group_id', help='Group ID')
        sub.add_argument('color', help='Display color (e.g. "#FF0000")')

    group_deleted = subparsers.add_parser('group-deleted', help='Group deleted')
    group_deleted.add_argument('group_id', help='Group ID')

    member_kinds = [k.value for k in MemberKind]

    member_changed = subparsers.add_parser('member-changed', help='Person or meeting point created/updated')
    member_changed.add_argument('member_id', help='Person or meeting point ID')
    member_changed.add_argument('--kind', choices=member_kinds, default=MemberKind.PERSON.value)
    member_changed.add_argument('--group', default=None, help='Current group ID')
    member_changed.add_argument('--previous-group', default=None, help='Group the member left')
    member_changed.add_argument('--lat', type=float, default=None, help='Current latitude')
    member_changed.add_argument('--lng', type=float, default=None, help='Current longitude')

    member_deleted = subparsers.add_parser('member-deleted', help='Person or meeting point deleted')
    member_deleted.add_argument('member_id', help='Person or meeting point ID')
    member_deleted.add_argument('--kind', choices=member_kinds, default=MemberKind.PERSON.value)
    member_deleted.add_argument('--group', default=None, help='Group the member belonged to')

    visibility = subparsers.add_parser('visibility', help='Show or hide all regions')
    visibility.add_argument('state', choices=sorted(VISIBILITY_CHOICES))

    render = subparsers.add_parser('render', help='Render the regions of a dataset to an image')
    render.add_argument('dataset', type=Path, help='Path to dataset YAML')
    render.add_argument('--output', type=Path, required=True, help='Output image (PNG)')
    render.add_argument('--width', type=int, default=1280)
    render.add_argument('--height', type=int, default=720)

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == 'render':
            summary = render_dataset(args.dataset, args.output, args.width, args.height)
            print(f"✅ Rendered {summary['regions']} regions to {summary['output']}")
        else:
            event = build_event(args)
            send_event(event, args.service_id, args.broker, args.port, args.topic)

    except Exception as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
