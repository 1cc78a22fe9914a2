"""
Spatial Meter - Monitoring Module

Structured logging for rendering and layout events.

Usage:
    from spatial_meter.monitoring import configure_logging

    configure_logging(level="debug", json_format=False)
"""

from spatial_meter.monitoring.logging import (
    StructuredLogger,
    LogLevel,
    LogRecord,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogRecord",
    "configure_logging",
    "get_logger",
]
