"""Exception hierarchy for FrameScore.

Every error raised by the package derives from ``FramescoreError`` so
callers can catch the whole family at once while still being able to
handle specific categories.

Exception Hierarchy:
    FramescoreError (base)
    +-- InvalidFrameError
    +-- ConfigurationError
    +-- AnalysisError
    +-- ImageLoadError
"""

from typing import Any, Dict, Optional


class FramescoreError(Exception):
    """Base exception for all FrameScore errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
        cause: Original exception that caused this error (if any)
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return string representation with details if available."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class InvalidFrameError(FramescoreError):
    """Raster frame that cannot be analyzed.

    Raised before any computation when the declared dimensions are not
    positive integers or the pixel buffer length does not equal
    ``width * height * 4``.
    """

    def __init__(
        self,
        message: str,
        width: Optional[Any] = None,
        height: Optional[Any] = None,
        buffer_length: Optional[int] = None,
        expected_length: Optional[int] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if width is not None:
            details["width"] = width
        if height is not None:
            details["height"] = height
        if buffer_length is not None:
            details["buffer_length"] = buffer_length
        if expected_length is not None:
            details["expected_length"] = expected_length
        super().__init__(message, details=details, cause=cause)


class ConfigurationError(FramescoreError):
    """Invalid analyzer or logging configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        valid_values: Optional[list] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if config_key:
            details["config_key"] = config_key
        if config_value is not None:
            details["config_value"] = config_value
        if valid_values:
            details["valid_values"] = valid_values
        super().__init__(message, details=details, cause=cause)


class AnalysisError(FramescoreError):
    """An analyzer failed while processing a valid frame.

    Wraps the underlying exception so the orchestrator can report which
    analysis stage failed without returning a partial result.
    """

    def __init__(
        self,
        message: str,
        analysis_type: Optional[str] = None,
        stage: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if analysis_type:
            details["analysis_type"] = analysis_type
        if stage:
            details["stage"] = stage
        super().__init__(message, details=details, cause=cause)


class ImageLoadError(FramescoreError):
    """Image file or encoded bytes could not be decoded into a frame."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        details: Dict[str, Any] = {}
        if path:
            details["path"] = str(path)
        super().__init__(message, details=details, cause=cause)


def is_frame_error(error: Exception) -> bool:
    """Check whether an error was caused by invalid caller input."""
    return isinstance(error, (InvalidFrameError, ImageLoadError))
