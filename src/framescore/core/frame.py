"""Immutable RGBA raster input for all analyzers."""

import hashlib
from dataclasses import dataclass
from typing import Union

import numpy as np

from ..exceptions import InvalidFrameError
from .types import AnalysisType

CHANNELS = 4


@dataclass(frozen=True)
class RasterFrame:
    """A decoded frame as interleaved R,G,B,A bytes.

    The frame is validated on construction, so an instance that exists
    is always safe to analyze.

    Attributes:
        width: Frame width in pixels (positive)
        height: Frame height in pixels (positive)
        buffer: ``width * height * 4`` bytes in R,G,B,A order
    """

    width: int
    height: int
    buffer: bytes

    def __post_init__(self) -> None:
        for name in ("width", "height"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)) or value <= 0:
                raise InvalidFrameError(
                    f"Frame {name} must be a positive integer",
                    width=self.width,
                    height=self.height,
                )

        if isinstance(self.buffer, (bytearray, memoryview)):
            object.__setattr__(self, "buffer", bytes(self.buffer))
        elif not isinstance(self.buffer, bytes):
            raise InvalidFrameError(
                f"Frame buffer must be bytes, got {type(self.buffer).__name__}",
                width=self.width,
                height=self.height,
            )

        expected = int(self.width) * int(self.height) * CHANNELS
        if len(self.buffer) != expected:
            raise InvalidFrameError(
                "Frame buffer length does not match width*height*4",
                width=self.width,
                height=self.height,
                buffer_length=len(self.buffer),
                expected_length=expected,
            )

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterFrame":
        """Build a frame from an ``H x W x 3`` or ``H x W x 4`` uint8 array.

        RGB input receives an opaque alpha channel.
        """
        array = np.asarray(array)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise InvalidFrameError(
                f"Expected an HxWx3 or HxWx4 array, got shape {array.shape}"
            )
        if array.dtype != np.uint8:
            raise InvalidFrameError(f"Expected uint8 pixels, got {array.dtype}")

        height, width = array.shape[:2]
        if array.shape[2] == 3:
            alpha = np.full((height, width, 1), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        return cls(width=int(width), height=int(height), buffer=np.ascontiguousarray(array).tobytes())

    def to_array(self) -> np.ndarray:
        """Return a read-only ``H x W x 4`` uint8 view of the pixels."""
        array = np.frombuffer(self.buffer, dtype=np.uint8)
        return array.reshape(self.height, self.width, CHANNELS)

    def rgb(self) -> np.ndarray:
        """Return the R,G,B channels as an ``H x W x 3`` float64 array."""
        return self.to_array()[:, :, :3].astype(np.float64)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    def content_hash(self) -> str:
        """SHA256 digest over dimensions and pixel bytes."""
        digest = hashlib.sha256()
        digest.update(f"{self.width}x{self.height}:".encode("ascii"))
        digest.update(self.buffer)
        return digest.hexdigest()

    def cache_key(self, analysis_type: Union[AnalysisType, str]) -> str:
        """Key of the form ``<analysis-type>:<content-hash>``."""
        if isinstance(analysis_type, AnalysisType):
            analysis_type = analysis_type.value
        return f"{analysis_type}:{self.content_hash()}"

    def __repr__(self) -> str:
        return f"RasterFrame(width={self.width}, height={self.height})"
