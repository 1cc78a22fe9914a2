"""
Tests for structured logging.
"""

import io
import json

from spatial_meter.monitoring import (
    LogLevel,
    StructuredLogger,
    configure_logging,
    get_logger,
)


class TestStructuredLogger:
    """Tests for StructuredLogger."""
    
    def test_json_output(self, debug_logger, log_stream):
        debug_logger.info("layout_changed", "hello", channels=4)
        
        record = json.loads(log_stream.getvalue())
        assert record["level"] == "info"
        assert record["event"] == "layout_changed"
        assert record["message"] == "hello"
        assert record["channels"] == 4
        assert record["logger_name"] == "test"
    
    def test_level_filtering(self):
        stream = io.StringIO()
        logger = StructuredLogger(level=LogLevel.WARNING, output=stream)
        
        logger.debug("skipped")
        logger.info("skipped")
        logger.warning("kept")
        
        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["event"] == "kept"
    
    def test_bind_context(self, debug_logger, log_stream):
        bound = debug_logger.bind(meter="front")
        bound.error("rendering_failed", channels=3)
        debug_logger.info("plain")
        
        first, second = [json.loads(line) for line in log_stream.getvalue().splitlines()]
        assert first["meter"] == "front"
        assert first["channels"] == 3
        assert "meter" not in second
    
    def test_human_format(self):
        stream = io.StringIO()
        logger = StructuredLogger(output=stream, json_format=False)
        logger.info("layout_changed", "Layout set", channels=2)
        
        line = stream.getvalue()
        assert line.split()[1] == "INFO"
        assert "[layout_changed]" in line
        assert "channels=2" in line
    
    def test_meter_events(self, debug_logger, log_stream):
        debug_logger.layout_changed(8, "2d", rotation=0.5)
        debug_logger.rendering_complete(1.25, 8, "2d")
        debug_logger.rendering_failed(RuntimeError("boom"), channels=8)
        
        records = [json.loads(line) for line in log_stream.getvalue().splitlines()]
        assert [r["event"] for r in records] == [
            "layout_changed", "rendering_complete", "rendering_failed",
        ]
        assert records[0]["rotation"] == 0.5
        assert records[1]["level"] == "debug"
        assert records[1]["duration_ms"] == 1.25
        assert records[2]["level"] == "warning"
        assert records[2]["error_type"] == "RuntimeError"
        assert records[2]["message"] == "boom"


class TestGlobalLogger:
    """Tests for the module-level logger."""
    
    def test_configure_replaces_global(self):
        stream = io.StringIO()
        logger = configure_logging(level="debug", output=stream)
        
        assert get_logger() is logger
        assert logger.level is LogLevel.DEBUG
        
        get_logger().debug("probe")
        assert json.loads(stream.getvalue())["event"] == "probe"
        
        configure_logging()
