"""Utilities: structured logging and image decoding."""

from .logging import (
    FramescoreLogger,
    LogConfig,
    configure_from_cli,
    configure_logging,
    get_logger,
    set_level,
)

__all__ = [
    "FramescoreLogger",
    "LogConfig",
    "configure_from_cli",
    "configure_logging",
    "get_logger",
    "set_level",
]
