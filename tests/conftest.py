"""Shared pytest fixtures for FrameScore tests."""
import logging

import numpy as np
import pytest

from framescore.core.frame import RasterFrame


def make_frame(array: np.ndarray) -> RasterFrame:
    """Build a RasterFrame from an HxWx3 uint8 array."""
    return RasterFrame.from_array(np.ascontiguousarray(array, dtype=np.uint8))


def solid(width: int, height: int, color) -> np.ndarray:
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[:, :] = color
    return array


# ============================================================================
# Synthetic frames
# ============================================================================

@pytest.fixture
def flat_gray_frame() -> RasterFrame:
    """64x64 uniform mid-gray frame."""
    return make_frame(solid(64, 64, (128, 128, 128)))


@pytest.fixture
def tiny_frame() -> RasterFrame:
    """Single white pixel."""
    return make_frame(solid(1, 1, (255, 255, 255)))


@pytest.fixture
def checkerboard_frame() -> RasterFrame:
    """400x400 black/white checkerboard with 100px squares."""
    yy, xx = np.mgrid[0:400, 0:400]
    white = ((yy // 100) + (xx // 100)) % 2 == 0
    array = np.zeros((400, 400, 3), dtype=np.uint8)
    array[white] = 255
    return make_frame(array)


@pytest.fixture
def fine_checkerboard_frame() -> RasterFrame:
    """200x200 black/white checkerboard with 50px squares."""
    yy, xx = np.mgrid[0:200, 0:200]
    white = ((yy // 50) + (xx // 50)) % 2 == 0
    array = np.zeros((200, 200, 3), dtype=np.uint8)
    array[white] = 255
    return make_frame(array)


@pytest.fixture
def thirds_square_frame() -> RasterFrame:
    """300x300 black frame with a 60px white square on a thirds intersection."""
    array = solid(300, 300, (0, 0, 0))
    array[100:160, 100:160] = 255
    return make_frame(array)


@pytest.fixture
def centered_square_frame() -> RasterFrame:
    """300x300 black frame with a 60px white square in the center."""
    array = solid(300, 300, (0, 0, 0))
    array[120:180, 120:180] = 255
    return make_frame(array)


@pytest.fixture
def skin_patch_frame() -> RasterFrame:
    """128x128 black frame with a 28px skin-toned patch at (40, 40)."""
    array = solid(128, 128, (0, 0, 0))
    array[40:68, 40:68] = (220, 170, 140)
    return make_frame(array)


@pytest.fixture
def noise_frame() -> RasterFrame:
    """128x96 uniform random RGB noise with a fixed seed."""
    rng = np.random.default_rng(0)
    return make_frame(rng.integers(0, 256, size=(96, 128, 3), dtype=np.uint8))


@pytest.fixture
def gradient_frame() -> RasterFrame:
    """160x120 frame with a warm horizontal gradient."""
    ramp = np.linspace(0, 255, 160).astype(np.uint8)
    array = np.zeros((120, 160, 3), dtype=np.uint8)
    array[:, :, 0] = ramp
    array[:, :, 1] = ramp // 2
    array[:, :, 2] = ramp // 4
    return make_frame(array)


# ============================================================================
# Logging isolation
# ============================================================================

@pytest.fixture(autouse=True)
def reset_framescore_logging():
    """Remove handlers installed by configure_logging during a test."""
    yield
    root = logging.getLogger("framescore")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.NOTSET)
    root.propagate = True


@pytest.fixture
def frame_from_array():
    """Factory fixture wrapping ``make_frame``."""
    return make_frame
