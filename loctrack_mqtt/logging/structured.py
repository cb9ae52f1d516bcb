"""
Structured JSON Logger
======================

Bounded Context: Observability Infrastructure

Wraps Python's logging module so every record is a single JSON object.

Design:
- JSON output (compatible with log aggregators)
- Typed events (LogEvent enum)
- Records propagate to the root logger, so standard handlers
  (and pytest's caplog) still see them
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger.

    Attributes:
        component: Component name (e.g., "regions", "publisher")
        logger: Underlying Python logger instance

    Example:
        >>> logger = StructuredLogger("regions")
        >>> logger.warning(
        ...     event=LogEvent.REGION_COMPUTE_FAILED,
        ...     message="Invalid coordinate",
        ...     metadata={'group_id': 'g1'}
        ... )
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Args:
            component: Component identifier
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: loctrack.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"loctrack.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

    def _log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            entry['metadata'] = metadata

        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(
            level,
            json.dumps(entry, default=str),
            exc_info=exc_info if level >= logging.ERROR else None
        )

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Log DEBUG level message."""
        self._log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Log INFO level message."""
        self._log(logging.INFO, event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log WARNING level message.

        exc_info is summarized in the JSON body (no traceback at this level).
        """
        self._log(logging.WARNING, event, message, metadata, exc_info)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     publisher.publish(data)
            ... except OSError as e:
            ...     logger.error(
            ...         event=LogEvent.MQTT_PUBLISH_ERROR,
            ...         message="Publish failed",
            ...         exc_info=e,
            ...     )
        """
        self._log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        """Change logging level dynamically."""
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """
    Formatter for handlers dedicated to StructuredLogger output.

    The message is already a JSON document, so it is passed through.
    """

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO,
    json_handler: bool = False
) -> StructuredLogger:
    """
    Factory function to create a StructuredLogger.

    Args:
        component: Component identifier
        level: Logging level (default: INFO)
        json_handler: Attach a stderr handler printing raw JSON lines and
            stop propagation to the root logger

    Example:
        >>> logger = create_logger("regions", level=logging.DEBUG)
    """
    structured = StructuredLogger(component=component, level=level)
    if json_handler and not structured.logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        structured.logger.addHandler(handler)
        structured.logger.propagate = False
    return structured
