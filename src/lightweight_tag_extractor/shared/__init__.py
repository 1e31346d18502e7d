"""Shared utilities for tag extraction.

This module provides configuration objects, exceptions, result types and the
correlation-aware logger used across the scanning, text and API layers.
"""

from .config import (
    AttributeConfig,
    ConfigError,
    ConfigValidationError,
    ExtractorConfig,
    GlobalConfig,
    ScanConfig,
)
from .exceptions import (
    ExtractionError,
    MalformedMarkupError,
    UnsupportedEntityError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    PivotLocation,
    ScanMetrics,
    ScanResult,
)

__all__ = [
    "AttributeConfig",
    "ConfigError",
    "ConfigValidationError",
    "ExtractorConfig",
    "GlobalConfig",
    "ScanConfig",
    "ExtractionError",
    "MalformedMarkupError",
    "UnsupportedEntityError",
    "CorrelationLogger",
    "get_logger",
    "PivotLocation",
    "ScanMetrics",
    "ScanResult",
]
