"""Tests for structured logging."""
import json
import logging

import pytest

from framescore.utils.logging import (
    FramescoreLogger,
    JSONFormatter,
    LogConfig,
    TextFormatter,
    configure_from_cli,
    configure_logging,
    get_cli_args_parser,
    get_logger,
    set_level,
)


def _record(name="framescore.scene", msg="Classified", **extra_fields):
    record = logging.LogRecord(name, logging.INFO, __file__, 10, msg, None, None)
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestLogConfig:
    """Tests for LogConfig validation."""

    def test_defaults(self):
        """Test the library stays quiet by default."""
        config = LogConfig()
        assert config.log_level == "WARNING"
        assert config.log_format == "text"
        assert config.log_file is None

    def test_invalid_level(self):
        """Test unknown levels are rejected."""
        with pytest.raises(ValueError):
            LogConfig(log_level="LOUD")

    def test_invalid_format(self):
        """Test unknown formats are rejected."""
        with pytest.raises(ValueError):
            LogConfig(log_format="xml")

    def test_invalid_component_level(self):
        """Test component levels are validated."""
        with pytest.raises(ValueError):
            LogConfig(component_levels={"scene": "VERBOSE"})

    def test_invalid_file_size(self):
        """Test rotation size must be positive."""
        with pytest.raises(ValueError):
            LogConfig(max_file_size_mb=0)


class TestFormatters:
    """Tests for JSON and text formatters."""

    def test_json_formatter(self):
        """Test JSON output carries component and extra fields."""
        output = JSONFormatter().format(_record(overall=72))
        data = json.loads(output)
        assert data["level"] == "INFO"
        assert data["component"] == "scene"
        assert data["message"] == "Classified"
        assert data["overall"] == 72
        assert data["timestamp"].endswith("Z")

    def test_text_formatter_appends_fields(self):
        """Test extra fields are appended in brackets."""
        output = TextFormatter(include_timestamp=False).format(_record(width=64))
        assert "Classified [width=64]" in output
        assert "INFO" in output

    def test_text_formatter_leaves_record_untouched(self):
        """Test the original record message is not rewritten."""
        record = _record(width=64)
        TextFormatter().format(record)
        assert record.msg == "Classified"


class TestFramescoreLogger:
    """Tests for the structured logger adapter."""

    def test_get_logger_is_cached(self):
        """Test repeated lookups return the same adapter."""
        assert get_logger("cache_test") is get_logger("cache_test")

    def test_logger_name(self):
        """Test adapters live under the framescore logger tree."""
        logger = get_logger("tree_test")
        assert isinstance(logger, FramescoreLogger)
        assert logger.logger.name == "framescore.tree_test"

    def test_process_moves_kwargs(self):
        """Test keyword arguments become extra_fields."""
        adapter = FramescoreLogger(logging.getLogger("framescore.proc"), "proc")
        msg, kwargs = adapter.process("hello", {"width": 3, "exc_info": False})
        assert msg == "hello"
        assert kwargs["extra"]["extra_fields"] == {"width": 3}
        assert kwargs["exc_info"] is False

    def test_metric_and_processing_logged_as_json(self, capsys):
        """Test helper methods emit structured debug records."""
        configure_logging(LogConfig(log_level="DEBUG", log_format="json"))
        logger = get_logger("metric_test")
        logger.processing_start("frame analysis", width=4)
        logger.metric("scene_seconds", 0.5, unit="s")
        logger.processing_complete("frame analysis", duration_seconds=1.234567)

        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        assert lines[0]["message"] == "Starting frame analysis"
        assert lines[0]["width"] == 4
        assert lines[1]["metric_name"] == "scene_seconds"
        assert lines[1]["metric_unit"] == "s"
        assert lines[2]["duration_seconds"] == 1.2346


class TestConfigureLogging:
    """Tests for configuration entry points."""

    def test_configure_replaces_handlers(self):
        """Test repeated configuration does not stack handlers."""
        configure_logging(LogConfig())
        configure_logging(LogConfig())
        assert len(logging.getLogger("framescore").handlers) == 1

    def test_file_handler(self, tmp_path):
        """Test log files are created and written."""
        log_file = tmp_path / "logs" / "framescore.log"
        configure_logging(LogConfig(log_level="INFO", log_file=str(log_file)))
        get_logger("file_test").info("written", value=1)
        for handler in logging.getLogger("framescore").handlers:
            handler.flush()
        assert "written [value=1]" in log_file.read_text()

    def test_component_levels(self):
        """Test per-component levels are applied."""
        configure_logging(LogConfig(component_levels={"scene": "DEBUG"}))
        assert logging.getLogger("framescore.scene").level == logging.DEBUG
        logging.getLogger("framescore.scene").setLevel(logging.NOTSET)

    def test_set_level(self):
        """Test dynamic level changes."""
        set_level("ERROR", component="dynamic")
        assert logging.getLogger("framescore.dynamic").level == logging.ERROR
        set_level("DEBUG")
        assert logging.getLogger("framescore").level == logging.DEBUG

    def test_configure_from_cli(self):
        """Test CLI values produce the applied config."""
        config = configure_from_cli(log_level="debug", log_format="json")
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"
        assert logging.getLogger("framescore").level == logging.DEBUG

    def test_configure_from_cli_defaults(self):
        """Test missing CLI values fall back to WARNING text."""
        config = configure_from_cli()
        assert config.log_level == "WARNING"
        assert config.log_format == "text"

    def test_cli_args(self):
        """Test argparse argument specs."""
        flags = [args[0] for args, _ in get_cli_args_parser()]
        assert flags == ["--log-level", "--log-format", "--log-file"]
