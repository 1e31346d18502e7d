"""Structured logging utilities for tag extraction.

Every record emitted while scanning carries the scanning component's name and
the correlation ID of the extraction call (usually the page being scanned),
so records from parallel CLI workers or threads can be told apart.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that attaches correlation ID and component name to each record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID, e.g. a file path
            component: Component name; defaults to the last part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def is_enabled_for(self, level: int) -> bool:
        """Check whether records of ``level`` would be emitted.

        Lets callers skip assembling costly ``extra`` payloads.
        """
        return self.logger.isEnabledFor(level)

    def log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log ``message`` at ``level`` with correlation info merged into ``extra``."""
        fields = {"component": self.component, "correlation_id": self.correlation_id}
        if extra:
            fields.update(extra)
        self.logger.log(level, message, extra=fields)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.WARNING, message, extra)


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance."""
    return CorrelationLogger(name, correlation_id, component)
