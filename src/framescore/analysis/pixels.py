"""Shared pixel primitives.

Stateless numpy and OpenCV routines used by every analyzer. Each routine
works on whole planes at once; analyzers then read values at
stride-sampled positions. A sampling grid starts at its margin
(``margin, margin + stride, ...``) so a given frame, stride and margin
always select the same pixels.

Conventions:
    - ``rgb`` planes are ``H x W x 3`` float64 arrays in [0, 255]
    - luminance uses ITU-R BT.601 weights
    - hue is in degrees [0, 360), saturation and value in [0, 1]
    - gradient and Laplacian planes are 0 on the one-pixel border
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from ..core.frame import RasterFrame

LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114


# =============================================================================
# Scalar helpers
# =============================================================================

def luminance(r: float, g: float, b: float) -> float:
    """BT.601 luminance of a single pixel."""
    return LUMA_R * r + LUMA_G * g + LUMA_B * b


def rgb_to_hsv(r: float, g: float, b: float) -> Tuple[float, float, float]:
    """Convert 8-bit RGB to (hue degrees, saturation, value)."""
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    c_max = max(r, g, b)
    c_min = min(r, g, b)
    diff = c_max - c_min

    if diff == 0:
        hue = 0.0
    elif c_max == r:
        hue = (60 * ((g - b) / diff) + 360) % 360
    elif c_max == g:
        hue = (60 * ((b - r) / diff) + 120) % 360
    else:
        hue = (60 * ((r - g) / diff) + 240) % 360

    saturation = 0.0 if c_max == 0 else diff / c_max
    return hue, saturation, c_max


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp to [low, high], mapping NaN to ``low``."""
    if value is None or math.isnan(value):
        return low
    return float(min(high, max(low, value)))


def safe_mean(values: np.ndarray, default: float = 0.0) -> float:
    """Mean of an array, or ``default`` when it is empty."""
    if values.size == 0:
        return default
    return float(values.mean())


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    if denominator == 0:
        return default
    return numerator / denominator


# =============================================================================
# Plane operations
# =============================================================================

def luminance_plane(rgb: np.ndarray) -> np.ndarray:
    """Per-pixel BT.601 luminance of an ``H x W x 3`` array."""
    return LUMA_R * rgb[..., 0] + LUMA_G * rgb[..., 1] + LUMA_B * rgb[..., 2]


def hsv_planes(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Vectorized max/min/diff HSV conversion.

    Works on any array whose last axis holds R,G,B in [0, 255].

    Returns:
        Tuple of (hue in degrees, saturation, value) arrays
    """
    norm = rgb / 255.0
    r, g, b = norm[..., 0], norm[..., 1], norm[..., 2]
    c_max = norm.max(axis=-1)
    c_min = norm.min(axis=-1)
    diff = c_max - c_min

    safe_diff = np.where(diff == 0, 1.0, diff)
    hue = np.zeros_like(c_max)
    red_max = (c_max == r) & (diff > 0)
    green_max = (c_max == g) & (diff > 0) & ~red_max
    blue_max = (diff > 0) & ~red_max & ~green_max
    hue = np.where(red_max, (60 * ((g - b) / safe_diff) + 360) % 360, hue)
    hue = np.where(green_max, (60 * ((b - r) / safe_diff) + 120) % 360, hue)
    hue = np.where(blue_max, (60 * ((r - g) / safe_diff) + 240) % 360, hue)

    saturation = np.where(c_max == 0, 0.0, diff / np.where(c_max == 0, 1.0, c_max))
    return hue, saturation, c_max


def _zero_border(plane: np.ndarray) -> np.ndarray:
    plane[0, :] = 0.0
    plane[-1, :] = 0.0
    plane[:, 0] = 0.0
    plane[:, -1] = 0.0
    return plane


def sobel(lum: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Sobel gradients of a luminance plane.

    Returns:
        Tuple of (gx, gy, magnitude) planes, all 0 on the border
    """
    height, width = lum.shape
    if height < 3 or width < 3:
        zeros = np.zeros((height, width), dtype=np.float64)
        return zeros, zeros.copy(), zeros.copy()
    plane = np.ascontiguousarray(lum, dtype=np.float64)
    gx = _zero_border(cv2.Sobel(plane, cv2.CV_64F, 1, 0, ksize=3))
    gy = _zero_border(cv2.Sobel(plane, cv2.CV_64F, 0, 1, ksize=3))
    return gx, gy, np.sqrt(gx * gx + gy * gy)


def gradient_angle(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    """Gradient direction in degrees, (-180, 180]."""
    return np.degrees(np.arctan2(gy, gx))


def central_differences(
    lum: np.ndarray, ys: np.ndarray, xs: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """(right - left, below - above) luminance at every (ys x xs) grid point.

    Grid coordinates must stay off the frame border.
    """
    dx = lum[np.ix_(ys, xs + 1)] - lum[np.ix_(ys, xs - 1)]
    dy = lum[np.ix_(ys + 1, xs)] - lum[np.ix_(ys - 1, xs)]
    return dx, dy


def laplacian(lum: np.ndarray) -> np.ndarray:
    """4-neighbour Laplacian response (4*center - neighbours), 0 on the border."""
    height, width = lum.shape
    if height < 3 or width < 3:
        return np.zeros((height, width), dtype=np.float64)
    plane = np.ascontiguousarray(lum, dtype=np.float64)
    # ksize=1 is OpenCV's [0 1 0; 1 -4 1; 0 1 0]
    return _zero_border(-cv2.Laplacian(plane, cv2.CV_64F, ksize=1))


def block_variance(lum: np.ndarray, x: int, y: int, width: int, height: int) -> float:
    """Population variance of luminance over an axis-aligned region.

    The region is clipped to the plane; an empty region has variance 0.
    """
    region = lum[max(0, y):max(0, y + height), max(0, x):max(0, x + width)]
    if region.size == 0:
        return 0.0
    return float(region.var())


def region_sharpness(
    magnitude: np.ndarray, x: int, y: int, width: int, height: int, inset: int = 0
) -> float:
    """Mean gradient magnitude on a stride-2 grid inside a region.

    Samples start ``inset`` pixels in from the region's top-left corner,
    never on the frame border, and stop one pixel short of the region's
    far edges. An empty region scores 0.
    """
    plane_h, plane_w = magnitude.shape
    y0, y1 = max(1, y + inset), min(y + height - 1, plane_h - 1)
    x0, x1 = max(1, x + inset), min(x + width - 1, plane_w - 1)
    if y1 <= y0 or x1 <= x0:
        return 0.0
    return float(magnitude[y0:y1:2, x0:x1:2].mean())


def luminance_histogram(lum: np.ndarray) -> np.ndarray:
    """256-bin histogram of floored luminance values."""
    bins = np.clip(np.floor(lum), 0, 255).astype(np.uint8)
    histogram = cv2.calcHist([bins], [0], None, [256], [0, 256])
    return histogram.ravel().astype(np.int64)


# =============================================================================
# Sampling
# =============================================================================

def sample(plane: np.ndarray, stride: int, margin: int = 0) -> np.ndarray:
    """Values of a plane on a stride grid starting at ``margin``.

    Grid points are ``margin, margin + stride, ...`` below ``size - margin``
    on both axes. The result keeps any trailing channel axis.
    """
    height, width = plane.shape[:2]
    return plane[margin:max(margin, height - margin):stride,
                 margin:max(margin, width - margin):stride]


def sample_coords(size: int, stride: int, margin: int = 0) -> np.ndarray:
    """Coordinates selected by ``sample`` along one axis."""
    return np.arange(margin, max(margin, size - margin), stride)


def every_nth_pixel(plane: np.ndarray, n: int) -> np.ndarray:
    """Every ``n``-th pixel in raster order, flattened to ``N x C``."""
    channels = plane.shape[2] if plane.ndim == 3 else 1
    return plane.reshape(-1, channels)[::n]


def block_positions(width: int, height: int, size: int, step: int):
    """Top-left corners of ``size x size`` blocks on a ``step`` grid.

    Corners stop strictly before ``dimension - size``, so a block flush
    with the right or bottom edge is never produced.
    """
    for y in range(0, height - size, step):
        for x in range(0, width - size, step):
            yield x, y


# =============================================================================
# Per-frame planes
# =============================================================================

@dataclass(frozen=True)
class FramePlanes:
    """Derived planes of one frame, computed once per analysis call.

    Nothing here outlives the call that created it.
    """
    width: int
    height: int
    rgb: np.ndarray
    lum: np.ndarray
    gx: np.ndarray
    gy: np.ndarray
    magnitude: np.ndarray
    _hsv: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None

    @property
    def hsv(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        if self._hsv is None:
            object.__setattr__(self, "_hsv", hsv_planes(self.rgb))
        return self._hsv

    @property
    def angle(self) -> np.ndarray:
        return gradient_angle(self.gx, self.gy)


def compute_planes(frame: RasterFrame) -> FramePlanes:
    """Build RGB, luminance and Sobel planes for a frame."""
    rgb = frame.rgb()
    lum = luminance_plane(rgb)
    gx, gy, magnitude = sobel(lum)
    return FramePlanes(
        width=frame.width,
        height=frame.height,
        rgb=rgb,
        lum=lum,
        gx=gx,
        gy=gy,
        magnitude=magnitude,
    )
