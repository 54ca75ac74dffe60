"""Decode image files and encoded bytes into RasterFrames with OpenCV.

Decoding sits outside the analysis core: analyzers only ever see a
validated ``RasterFrame``.
"""

import logging
from pathlib import Path
from typing import Union

import numpy as np

from ..core.frame import RasterFrame
from ..exceptions import ImageLoadError

logger = logging.getLogger(__name__)

try:
    import cv2
    HAS_CV2 = True
except ImportError:
    HAS_CV2 = False
    logger.warning("OpenCV not available - image decoding disabled")


def _require_cv2() -> None:
    if not HAS_CV2:
        raise ImageLoadError("OpenCV (opencv-python-headless) is required to decode images")


def _to_rgba(image: np.ndarray) -> np.ndarray:
    """Convert an OpenCV decode result (gray, BGR or BGRA) to RGBA."""
    if image.dtype != np.uint8:
        # 16-bit PNG/TIFF input
        image = (image / 257).astype(np.uint8)
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.shape[2] == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)
    return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)


def load_frame(path: Union[str, Path]) -> RasterFrame:
    """Load an image file as a RasterFrame.

    Args:
        path: Path to any image format OpenCV can read

    Raises:
        ImageLoadError: If the file is missing or cannot be decoded
    """
    _require_cv2()
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError("Image file not found", path=str(path))

    # imdecode handles non-ASCII paths that imread rejects on some platforms
    data = np.fromfile(str(path), dtype=np.uint8)
    image = cv2.imdecode(data, cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageLoadError("Could not decode image", path=str(path))

    frame = RasterFrame.from_array(_to_rgba(image))
    logger.debug(f"Loaded {path.name}: {frame.width}x{frame.height}")
    return frame


def decode_frame(data: bytes) -> RasterFrame:
    """Decode encoded image bytes (PNG, JPEG, ...) into a RasterFrame.

    Raises:
        ImageLoadError: If the bytes cannot be decoded
    """
    _require_cv2()
    if not data:
        raise ImageLoadError("No image data provided")
    image = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_UNCHANGED)
    if image is None:
        raise ImageLoadError("Could not decode image bytes")
    return RasterFrame.from_array(_to_rgba(image))


def encode_png(frame: RasterFrame) -> bytes:
    """Encode a frame as PNG bytes."""
    _require_cv2()
    bgra = cv2.cvtColor(frame.to_array().copy(), cv2.COLOR_RGBA2BGRA)
    ok, encoded = cv2.imencode(".png", bgra)
    if not ok:
        raise ImageLoadError("Could not encode frame as PNG")
    return encoded.tobytes()
