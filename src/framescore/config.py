"""Configuration for the FrameScore analysis orchestrator."""
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

from .exceptions import ConfigurationError


@dataclass
class AnalyzerConfig:
    """Execution settings for ``FrameAnalyzer``.

    These settings only control how the independent analyzers are
    scheduled; they never change numeric results.

    Attributes:
        parallel: Run composition, technical and scene analysis in a thread pool
        max_workers: Worker threads used when ``parallel`` is enabled (1-32)
    """

    parallel: bool = True
    max_workers: int = 3

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not isinstance(self.parallel, bool):
            raise ConfigurationError(
                "parallel must be a boolean",
                config_key="parallel",
                config_value=self.parallel,
            )

        if (
            isinstance(self.max_workers, bool)
            or not isinstance(self.max_workers, int)
            or not 1 <= self.max_workers <= 32
        ):
            raise ConfigurationError(
                "max_workers must be an integer between 1 and 32",
                config_key="max_workers",
                config_value=self.max_workers,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "parallel": self.parallel,
            "max_workers": self.max_workers,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalyzerConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        valid_keys = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in valid_keys})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AnalyzerConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read configuration file {path}",
                config_key="config_file",
                config_value=str(path),
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration file must contain a JSON object",
                config_key="config_file",
                config_value=str(path),
            )
        return cls.from_dict(data)
