"""
Loctrack CLI - Command-line interface for the region service.

This package provides a CLI for sending entity-change events to the
region service without manually writing JSON, and for rendering the
regions of a dataset offline.

Usage:
    loctrack-cli group-created north "#FF0000"
    loctrack-cli member-changed p1 --kind person --group north
    loctrack-cli visibility off
    loctrack-cli render config/dataset.yaml --output regions.png
"""

__version__ = "1.0.0"
