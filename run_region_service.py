#!/usr/bin/env python3
"""
Region Service - Entry Point
============================

This script starts the loctrack RegionService, which:
- Loads groups, persons and meeting points from a dataset file
- Computes one region (padded hull polygon or circle) per group
- Recomputes regions on entity-change events received over MQTT
- Publishes every region change to MQTT (retained)

Usage:
    python run_region_service.py --config config/region_service.yaml

Architecture:
    - RegionService: Main orchestrator (loctrack_service)
    - MQTTEventPlane: Event ingress (loctrack_control)
    - RegionSynchronizer: Event → region store operations (loctrack_control)
    - RegionPublisher: Publishes region messages (loctrack_mqtt)

Lifecycle:
    1. Load configuration from YAML
    2. Setup logging (console + file)
    3. Create RegionService
    4. Compute initial regions
    5. Start service (non-blocking)
    6. Wait for stop signal (Ctrl+C or SIGTERM)
    7. Graceful shutdown

Signals:
    - SIGTERM: Graceful shutdown
    - SIGINT (Ctrl+C): Graceful shutdown
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Optional

from loctrack_service import RegionService, ServiceConfig


# ─────────────────────────────────────────────────────────────────────────────
# Logging Setup
# ─────────────────────────────────────────────────────────────────────────────

def setup_logging(log_file: Optional[Path] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Setup logging for the region service.

    Args:
        log_file: Optional path to log file
        level: Root logging level

    Returns:
        Logger instance for the entry point
    """
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            *(
                [logging.FileHandler(log_file)]
                if log_file
                else []
            )
        ]
    )

    return logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Main Service
# ─────────────────────────────────────────────────────────────────────────────

class RegionServiceApp:
    """
    Main application wrapper for RegionService.

    Handles:
    - Configuration loading
    - Signal handling (SIGTERM, SIGINT)
    - Graceful shutdown
    """

    def __init__(self, config_path: Path, log_file: Optional[Path] = None, verbose: bool = False):
        self.config_path = config_path
        self.logger = setup_logging(log_file, logging.DEBUG if verbose else logging.INFO)

        self.config: Optional[ServiceConfig] = None
        self.service: Optional[RegionService] = None

        self._shutdown_requested = False

    def setup(self):
        """Load configuration, create the service, compute initial regions."""
        self.logger.info("=" * 80)
        self.logger.info("🚀 Loctrack Region Service - Starting")
        self.logger.info("=" * 80)

        self.logger.info(f"📄 Loading configuration: {self.config_path}")
        self.config = ServiceConfig.from_yaml(self.config_path)
        self.logger.info(f"✅ Configuration loaded (service_id={self.config.service_id})")

        topics = self.config.topics
        self.logger.info(f"  - Event topic: {topics.events}")
        self.logger.info(f"  - Region topic: {topics.regions}")
        self.logger.info(f"  - Status topic: {topics.status}")

        self.logger.info("🏗️  Creating region service")
        self.service = RegionService(self.config)
        self.service.setup()
        self.logger.info("=" * 80)

    def run(self):
        """
        Run the region service.

        Blocks until shutdown is requested (via signal or exception).
        """
        if not self.service:
            raise RuntimeError("Service not initialized. Call setup() first.")

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        try:
            self.service.start()

            self.logger.info("✅ Service started successfully")
            self.logger.info("Press Ctrl+C to stop")
            self.logger.info("=" * 80)

            self.service.wait()

        except KeyboardInterrupt:
            self.logger.info("⚠️  KeyboardInterrupt received")
            self.shutdown()

        except Exception as e:
            self.logger.error(f"❌ Service error: {e}", exc_info=True)
            self.shutdown()
            sys.exit(1)

    def shutdown(self):
        """Graceful shutdown of the service."""
        if self._shutdown_requested:
            self.logger.warning("⚠️  Shutdown already in progress")
            return

        self._shutdown_requested = True

        self.logger.info("=" * 80)
        self.logger.info("🛑 Shutting down region service")

        if self.service and self.service.is_running:
            try:
                self.service.stop()
            except Exception as e:
                self.logger.error(f"❌ Error stopping service: {e}")

        self.logger.info("✅ Shutdown complete")
        self.logger.info("=" * 80)

    def _signal_handler(self, signum, frame):
        signal_name = signal.Signals(signum).name
        self.logger.info(f"⚠️  Received signal {signal_name} ({signum})")
        self.shutdown()
        sys.exit(0)


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def parse_args():
    parser = argparse.ArgumentParser(
        description="Loctrack Region Service - group regions over MQTT",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Start with the example config
  python run_region_service.py --config config/region_service.yaml

  # Console only, debug logging
  python run_region_service.py --config config/region_service.yaml --no-log-file -v
        """
    )

    parser.add_argument(
        '--config',
        type=Path,
        required=True,
        help='Path to service configuration YAML file'
    )

    parser.add_argument(
        '--log-file',
        type=Path,
        default=Path('logs/region_service.log'),
        help='Path to log file (default: logs/region_service.log)'
    )

    parser.add_argument(
        '--no-log-file',
        action='store_true',
        help='Disable file logging (console only)'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args()


def main():
    args = parse_args()

    log_file = None if args.no_log_file else args.log_file

    if not args.config.exists():
        print(f"❌ Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)

    app = RegionServiceApp(
        config_path=args.config,
        log_file=log_file,
        verbose=args.verbose,
    )

    try:
        app.setup()
        app.run()
    except Exception as e:
        print(f"❌ Fatal error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
