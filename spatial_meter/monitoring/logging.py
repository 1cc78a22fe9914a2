"""
Structured logging for Spatial Meter.

Records are single lines, JSON by default, carrying an event name plus
flat key/value data. Nothing here is meant for the audio thread: log from
rendering and layout changes, never from process() or tick().
"""

from __future__ import annotations

import json
import logging
import sys
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO


class LogLevel(Enum):
    """Log levels, ordered like the standard library's."""
    
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"
    
    @property
    def numeric(self) -> int:
        """Matching `logging` level number."""
        return getattr(logging, self.name)


@dataclass
class LogRecord:
    """One structured log line.
    
    Attributes:
        level: Level name.
        event: Machine-readable event name, e.g. "rendering_complete".
        message: Optional human-readable text.
        timestamp: Unix time of the record.
        data: Event fields, merged with the logger's bound context.
        logger_name: Name of the emitting logger.
        thread_name: Thread the record was created on.
    """
    
    level: str
    event: str
    message: str = ""
    timestamp: float = field(default_factory=time.time)
    data: dict[str, Any] = field(default_factory=dict)
    
    logger_name: str = ""
    thread_name: str = ""
    
    def to_dict(self) -> dict[str, Any]:
        """Flatten the record: event fields sit beside the fixed keys."""
        record = {
            "timestamp": self.timestamp,
            "level": self.level,
            "event": self.event,
            "message": self.message,
            "logger_name": self.logger_name,
            "thread_name": self.thread_name,
        }
        record.update(self.data)
        return record
    
    def to_json(self) -> str:
        # numpy scalars and arrays fall back to str()
        return json.dumps(self.to_dict(), default=str)


class StructuredLogger:
    """Event logger writing one JSON object (or one readable line) per record.
    
    Example:
        logger = StructuredLogger("spatial_meter", level=LogLevel.DEBUG)
        logger.rendering_complete(0.4, channels=8, dimension="2d")
        
        # Context bound once, repeated on every record
        front = logger.bind(meter="front_ring")
        front.layout_changed(8, "2d", rotation=0.1)
    """
    
    def __init__(
        self,
        name: str = "spatial_meter",
        level: LogLevel = LogLevel.INFO,
        output: TextIO | None = None,
        json_format: bool = True,
        context: dict[str, Any] | None = None,
    ):
        """Create a logger.
        
        Args:
            name: Logger name, copied into every record.
            level: Records below this level are dropped.
            output: Stream to write to. stderr (looked up per record) if None.
            json_format: JSON lines if True, readable lines otherwise.
            context: Fields added to every record.
        """
        self.name = name
        self._level = level
        self._output = output
        self._json_format = json_format
        self._context = dict(context or {})
        self._lock = threading.Lock()
    
    @property
    def level(self) -> LogLevel:
        return self._level
    
    def enabled_for(self, level: LogLevel) -> bool:
        return level.numeric >= self._level.numeric
    
    def bind(self, **context: Any) -> "StructuredLogger":
        """Return a logger sharing this one's output, with extra context."""
        return StructuredLogger(
            name=self.name,
            level=self._level,
            output=self._output,
            json_format=self._json_format,
            context={**self._context, **context},
        )
    
    def log(self, level: LogLevel, event: str, message: str = "", **data: Any) -> None:
        """Write one record if `level` passes the threshold."""
        if not self.enabled_for(level):
            return
        
        record = LogRecord(
            level=level.value,
            event=event,
            message=message,
            data={**self._context, **data},
            logger_name=self.name,
            thread_name=threading.current_thread().name,
        )
        line = record.to_json() if self._json_format else self._readable(record)
        
        with self._lock:
            print(line, file=self._output or sys.stderr)
    
    @staticmethod
    def _readable(record: LogRecord) -> str:
        clock = time.strftime("%H:%M:%S", time.localtime(record.timestamp))
        line = f"{clock} {record.level.upper():<8} [{record.event}]"
        if record.message:
            line += f" {record.message}"
        if record.data:
            line += " " + " ".join(f"{key}={value}" for key, value in record.data.items())
        return line
    
    def debug(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.DEBUG, event, message, **data)
    
    def info(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.INFO, event, message, **data)
    
    def warning(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.WARNING, event, message, **data)
    
    def error(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.ERROR, event, message, **data)
    
    def critical(self, event: str, message: str = "", **data: Any) -> None:
        self.log(LogLevel.CRITICAL, event, message, **data)
    
    # Meter events
    
    def layout_changed(
        self,
        channels: int,
        dimension: str,
        rotation: float = 0.0,
        **extra: Any,
    ) -> None:
        """A layout was replaced or rotated; rendering is now stale."""
        self.info(
            "layout_changed",
            f"{channels} channels ({dimension}), rotation {rotation:.4f} rad",
            channels=channels,
            dimension=dimension,
            rotation=rotation,
            **extra,
        )
    
    def rendering_complete(
        self,
        duration_ms: float,
        channels: int,
        dimension: str,
        **extra: Any,
    ) -> None:
        self.debug(
            "rendering_complete",
            f"Geometry of {channels} channels built in {duration_ms:.2f}ms",
            duration_ms=duration_ms,
            channels=channels,
            dimension=dimension,
            **extra,
        )
    
    def rendering_failed(self, error: Exception, **extra: Any) -> None:
        """compute_rendering() raised; the previous geometry stays published."""
        self.warning(
            "rendering_failed",
            str(error),
            error_type=type(error).__name__,
            **extra,
        )


_global_logger: StructuredLogger | None = None


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    output: TextIO | None = None,
    json_format: bool = True,
) -> StructuredLogger:
    """Replace the logger returned by get_logger().
    
    Args:
        level: Minimum level, as a LogLevel or its name ("debug", ...).
        output: Output stream; stderr if None.
        json_format: JSON lines if True.
    
    Returns:
        The new global logger.
    """
    global _global_logger
    
    _global_logger = StructuredLogger(
        level=LogLevel(level),
        output=output,
        json_format=json_format,
    )
    return _global_logger


def get_logger() -> StructuredLogger:
    """Global logger used by meters created without one."""
    global _global_logger
    
    if _global_logger is None:
        _global_logger = StructuredLogger()
    return _global_logger
