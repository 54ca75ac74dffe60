"""Structured logging for FrameScore.

Every analyzer logs through a ``FramescoreLogger`` obtained from
``get_logger``. Keyword arguments passed to a log call become structured
fields, rendered as ``[key=value]`` in text output or merged into the
object in JSON output.

The library installs no handlers on import. Applications (and the CLI)
call ``configure_logging`` once:

    >>> from framescore.utils.logging import LogConfig, configure_logging, get_logger
    >>> configure_logging(LogConfig(log_level="DEBUG", log_format="json"))
    >>> get_logger("scene").debug("Classified", scene_type="close_up")
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["text", "json"]

ROOT_LOGGER_NAME = "framescore"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_FORMATS = ("text", "json")

# kwargs that belong to logging itself and must not become fields
_RESERVED_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel", "extra"})


def _level_value(level: str) -> int:
    return getattr(logging, level.upper())


def _check_level(level: str, what: str) -> None:
    if level.upper() not in VALID_LEVELS:
        raise ValueError(f"Invalid {what} '{level}'. Must be one of: {VALID_LEVELS}")


@dataclass
class LogConfig:
    """Logging settings applied by ``configure_logging``.

    Attributes:
        log_level: Level for the ``framescore`` logger tree
        log_format: 'text' for humans, 'json' for one object per line
        log_file: Optional rotating log file, written next to stderr output
        component_levels: Overrides keyed by component ('scene', 'technical', ...)
        max_file_size_mb: Rotation threshold for ``log_file``
        backup_count: Rotated files kept
        include_timestamp: Prefix text lines with the record time
    """

    log_level: LogLevel = "WARNING"
    log_format: LogFormat = "text"
    log_file: Optional[str] = None
    component_levels: Dict[str, LogLevel] = field(default_factory=dict)
    max_file_size_mb: int = 10
    backup_count: int = 5
    include_timestamp: bool = True

    def __post_init__(self) -> None:
        _check_level(self.log_level, "log_level")
        if self.log_format not in VALID_FORMATS:
            raise ValueError(
                f"Invalid log_format '{self.log_format}'. Must be one of: {VALID_FORMATS}"
            )
        for component, level in self.component_levels.items():
            _check_level(level, f"level for component '{component}'")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    {"timestamp": "2026-01-05T10:30:45.120Z", "level": "DEBUG",
     "component": "technical", "message": "Scored frame", "overall": 64}
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "component": record.name.rsplit(".", 1)[-1],
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Pipe-separated text lines.

    2026-01-05 10:30:45 | DEBUG    | framescore.technical | Scored frame [overall=64]
    """

    def __init__(self, include_timestamp: bool = True) -> None:
        fmt = "%(levelname)-8s | %(name)s | %(message)s"
        if include_timestamp:
            fmt = "%(asctime)s | " + fmt
        super().__init__(fmt=fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        fields = getattr(record, "extra_fields", None)
        if fields:
            message += " [" + ", ".join(f"{k}={v}" for k, v in fields.items()) + "]"

        # Other handlers share this record, so render a copy
        rendered = logging.makeLogRecord(record.__dict__)
        rendered.msg = message
        rendered.args = None
        return super().format(rendered)


class FramescoreLogger(logging.LoggerAdapter):
    """Adapter moving keyword arguments into ``extra_fields``."""

    def __init__(self, logger: logging.Logger, component: str) -> None:
        super().__init__(logger, {})
        self.component = component

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        fields = {k: kwargs.pop(k) for k in list(kwargs) if k not in _RESERVED_KWARGS}
        kwargs.setdefault("extra", {})["extra_fields"] = fields
        return msg, kwargs

    def processing_start(self, operation: str, **fields: Any) -> None:
        self.debug(f"Starting {operation}", operation=operation, **fields)

    def processing_complete(
        self,
        operation: str,
        duration_seconds: Optional[float] = None,
        **fields: Any,
    ) -> None:
        if duration_seconds is not None:
            fields["duration_seconds"] = round(duration_seconds, 4)
        self.debug(f"Completed {operation}", operation=operation, **fields)

    def metric(
        self,
        metric_name: str,
        value: Union[int, float],
        unit: Optional[str] = None,
        **fields: Any,
    ) -> None:
        """Log a named measurement, e.g. a stage duration."""
        fields["metric_name"] = metric_name
        fields["metric_value"] = value
        if unit:
            fields["metric_unit"] = unit
        self.debug(f"Metric: {metric_name}={value}{unit or ''}", **fields)


_active_config: Optional[LogConfig] = None
_loggers: Dict[str, FramescoreLogger] = {}


def configure_logging(config: Optional[LogConfig] = None) -> None:
    """Install handlers on the ``framescore`` logger, replacing earlier ones."""
    global _active_config

    config = config or LogConfig()
    _active_config = config
    level = _level_value(config.log_level)

    if config.log_format == "json":
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = TextFormatter(include_timestamp=config.include_timestamp)

    handlers = [logging.StreamHandler(sys.stderr)]
    if config.log_file:
        log_path = Path(config.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=config.max_file_size_mb * 1024 * 1024,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
        )

    root = logging.getLogger(ROOT_LOGGER_NAME)
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    root.setLevel(level)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        root.addHandler(handler)
    root.propagate = False

    for component, component_level in config.component_levels.items():
        set_level(component_level, component)


def get_logger(component: str) -> FramescoreLogger:
    """Return the cached adapter for ``framescore.<component>``."""
    logger = _loggers.get(component)
    if logger is None:
        base = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component}")
        if _active_config and component in _active_config.component_levels:
            base.setLevel(_level_value(_active_config.component_levels[component]))
        logger = _loggers[component] = FramescoreLogger(base, component)
    return logger


def set_level(level: LogLevel, component: Optional[str] = None) -> None:
    """Change the level of one component, or of the whole tree."""
    name = f"{ROOT_LOGGER_NAME}.{component}" if component else ROOT_LOGGER_NAME
    logging.getLogger(name).setLevel(_level_value(level))


def configure_from_cli(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    log_file: Optional[str] = None,
) -> LogConfig:
    config = LogConfig(
        log_level=log_level.upper() if log_level else "WARNING",
        log_format=log_format if log_format in VALID_FORMATS else "text",
        log_file=log_file,
    )
    configure_logging(config)
    return config


def get_cli_args_parser():
    """(flags, kwargs) pairs for ``ArgumentParser.add_argument``."""
    return [
        (("--log-level",), {
            "type": str.upper,
            "choices": list(VALID_LEVELS),
            "default": "WARNING",
            "help": "Logging level (default: WARNING)",
        }),
        (("--log-format",), {
            "choices": list(VALID_FORMATS),
            "default": "text",
            "help": "Log line format (default: text)",
        }),
        (("--log-file",), {
            "default": None,
            "help": "Also write logs to this rotating file",
        }),
    ]
