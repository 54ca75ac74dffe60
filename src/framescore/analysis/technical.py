"""Technical Quality Analyzer - capture quality scoring for a single frame.

Measures how well a frame was captured, independent of what it shows.
Every sub-score is in [0, 100] and higher is always better, including
``noise_level`` (100 = clean) and ``motion_blur`` (100 = crisp).

Metrics:
- Sharpness: Laplacian variance, edge density and maximum gradient
- Exposure: 256-bin luminance histogram, tonal bands and clipping
- Contrast: non-linear curve over luminance standard deviation
- Saturation: HSV saturation against an ideal band, color-cast detection
- Noise: 8x8 block variance, grain and ISO estimate
- Motion blur: share of edges whose transition is gradual

Example:
    >>> result = TechnicalQualityAnalyzer().analyze(frame)
    >>> print(result.scores.sharpness, result.noise_details.iso_estimate)
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.frame import RasterFrame
from .pixels import (
    FramePlanes,
    block_positions,
    clamp,
    compute_planes,
    every_nth_pixel,
    hsv_planes,
    laplacian,
    luminance_histogram,
    region_sharpness,
    safe_mean,
    sample,
    sample_coords,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

OVERALL_WEIGHTS = {
    "sharpness": 0.25,
    "exposure": 0.20,
    "contrast": 0.15,
    "color_saturation": 0.15,
    "noise_level": 0.15,
    "motion_blur": 0.10,
}

SHARPNESS_WEIGHTS = {
    "laplacian_variance": 0.4,
    "edge_density": 0.3,
    "max_gradient": 0.3,
}
LAPLACIAN_VARIANCE_SCALE = 500.0
EDGE_THRESHOLD = 30.0
EDGE_DENSITY_STRIDE = 2
EDGE_DENSITY_MARGIN = 1
EDGE_DENSITY_GAIN = 5.0
MAX_GRADIENT_STRIDE = 4
MAX_GRADIENT_SCALE = 5.0
FOCUS_BLOCK_SIZE = 64
FOCUS_BLOCK_STEP = 32
MAX_FOCUS_REGIONS = 10

SHADOW_LIMIT = 85
HIGHLIGHT_START = 171
CLIP_BINS = 3
CLIP_PENALTY = 500.0
SKEW_LIMIT = 0.7
SKEW_PENALTY = 20.0
MIN_MIDTONES = 0.2
FLAT_MIDTONE_PENALTY = 15.0
DYNAMIC_RANGE_BONUS = 20.0

CONTRAST_RANGE_BONUS = 20.0

SATURATION_PIXEL_STEP = 4
SATURATION_IDEAL = 0.55
COLOR_CAST_THRESHOLD = 0.02
COLOR_CAST_PENALTY_MIN = 0.1
COLOR_CAST_PENALTY = 300.0
HUE_BIN_DEGREES = 30
MAX_HUE_BINS = 6

NOISE_BLOCK_SIZE = 8
CLEAN_BLOCK_VARIANCE = 50.0
GRAIN_SHARE = 0.7
CLEAN_SHARE = 0.3
ISO_THRESHOLDS = ((200.0, 1600), (150.0, 800), (100.0, 400), (50.0, 200))
BASE_ISO = 100

BLUR_STRIDE = 4
BLUR_MARGIN = 2
BLUR_TRANSITION_MIN = 30.0
BLUR_CENTER_TOLERANCE = 10.0
BLUR_RATIO_PENALTY = 60.0
NO_EDGE_BLUR_SCORE = 50.0

CONFIDENCE_BASE = 0.6
CONFIDENCE_FOCUS_BONUS = 0.1
CONFIDENCE_RANGE_BONUS = 0.1
CONFIDENCE_DISTRIBUTION_BONUS = 0.2


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class TechnicalScores:
    """Technical sub-scores, all in [0, 100], higher is better."""
    sharpness: float = 0.0
    exposure: float = 0.0
    contrast: float = 0.0
    color_saturation: float = 0.0
    noise_level: float = 0.0
    motion_blur: float = 0.0
    overall_score: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {k: round(v, 2) for k, v in asdict(self).items()}


@dataclass
class FocusRegion:
    x: int
    y: int
    width: int
    height: int
    sharpness: float


@dataclass
class SharpnessDetails:
    """Raw sharpness signals.

    ``variance`` is the Laplacian variance, ``edge_density`` the percentage
    of sampled points above the edge threshold.
    """
    variance: float = 0.0
    edge_density: float = 0.0
    max_gradient: float = 0.0
    focus_regions: List[FocusRegion] = field(default_factory=list)


@dataclass
class ExposureDetails:
    """Tonal band fractions, clipping fractions and dynamic range."""
    shadows: float = 0.0
    midtones: float = 0.0
    highlights: float = 0.0
    clipped_black: float = 0.0
    clipped_white: float = 0.0
    dynamic_range: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "histogram": {
                "shadows": round(self.shadows, 4),
                "midtones": round(self.midtones, 4),
                "highlights": round(self.highlights, 4),
            },
            "clipped_pixels": {
                "black": round(self.clipped_black, 4),
                "white": round(self.clipped_white, 4),
            },
            "dynamic_range": self.dynamic_range,
        }


@dataclass
class ColorCast:
    detected: bool = False
    type: Optional[str] = None
    strength: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"detected": self.detected}
        if self.detected:
            data["type"] = self.type
            data["strength"] = round(self.strength, 4)
        return data


@dataclass
class HueBin:
    """Share of sampled pixels in a 30-degree hue bin."""
    hue: int
    saturation: float
    percentage: float


@dataclass
class ColorDetails:
    saturation_distribution: List[HueBin] = field(default_factory=list)
    color_cast: ColorCast = field(default_factory=ColorCast)
    vibrance: float = 0.0


@dataclass
class NoiseDetails:
    grain_score: float = 100.0
    pattern_noise: float = 0.0
    iso_estimate: int = BASE_ISO
    clean_regions: float = 100.0


@dataclass
class TechnicalQualityResult:
    """Complete technical quality analysis of one frame."""
    scores: TechnicalScores = field(default_factory=TechnicalScores)
    sharpness_details: SharpnessDetails = field(default_factory=SharpnessDetails)
    exposure_details: ExposureDetails = field(default_factory=ExposureDetails)
    color_details: ColorDetails = field(default_factory=ColorDetails)
    noise_details: NoiseDetails = field(default_factory=NoiseDetails)
    analysis_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        sharp = self.sharpness_details
        color = self.color_details
        noise = self.noise_details
        return {
            "scores": self.scores.to_dict(),
            "sharpness_details": {
                "variance": round(sharp.variance, 2),
                "edge_density": round(sharp.edge_density, 4),
                "max_gradient": round(sharp.max_gradient, 2),
                "focus_regions": [
                    {**asdict(r), "sharpness": round(r.sharpness, 2)}
                    for r in sharp.focus_regions
                ],
            },
            "exposure_details": self.exposure_details.to_dict(),
            "color_details": {
                "saturation_distribution": [
                    {
                        "hue": b.hue,
                        "saturation": round(b.saturation, 4),
                        "percentage": round(b.percentage, 2),
                    }
                    for b in color.saturation_distribution
                ],
                "color_cast": color.color_cast.to_dict(),
                "vibrance": round(color.vibrance, 2),
            },
            "noise_details": {
                "grain_score": round(noise.grain_score, 2),
                "pattern_noise": round(noise.pattern_noise, 2),
                "iso_estimate": noise.iso_estimate,
                "clean_regions": round(noise.clean_regions, 2),
            },
            "analysis_confidence": round(self.analysis_confidence, 4),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TechnicalQualityResult":
        """Create from dictionary."""
        sharp = data.get("sharpness_details", {})
        exposure = data.get("exposure_details", {})
        histogram = exposure.get("histogram", {})
        clipped = exposure.get("clipped_pixels", {})
        color = data.get("color_details", {})
        return cls(
            scores=TechnicalScores(**data.get("scores", {})),
            sharpness_details=SharpnessDetails(
                variance=sharp.get("variance", 0.0),
                edge_density=sharp.get("edge_density", 0.0),
                max_gradient=sharp.get("max_gradient", 0.0),
                focus_regions=[FocusRegion(**r) for r in sharp.get("focus_regions", [])],
            ),
            exposure_details=ExposureDetails(
                shadows=histogram.get("shadows", 0.0),
                midtones=histogram.get("midtones", 0.0),
                highlights=histogram.get("highlights", 0.0),
                clipped_black=clipped.get("black", 0.0),
                clipped_white=clipped.get("white", 0.0),
                dynamic_range=exposure.get("dynamic_range", 0),
            ),
            color_details=ColorDetails(
                saturation_distribution=[HueBin(**b) for b in color.get("saturation_distribution", [])],
                color_cast=ColorCast(**color.get("color_cast", {})),
                vibrance=color.get("vibrance", 0.0),
            ),
            noise_details=NoiseDetails(**data.get("noise_details", {})),
            analysis_confidence=data.get("analysis_confidence", 0.0),
        )


# =============================================================================
# Scoring curves
# =============================================================================

def score_exposure_histogram(histogram: np.ndarray) -> Tuple[float, ExposureDetails]:
    """Score a 256-bin luminance histogram.

    Starts at 100, subtracts heavy clipping penalties and penalties for
    mass concentrated in one tonal band, then adds a dynamic-range bonus.

    Args:
        histogram: 256 pixel counts indexed by floored luminance

    Returns:
        Tuple of (score, exposure details)
    """
    histogram = np.asarray(histogram, dtype=np.float64)
    total = float(histogram.sum())
    if total <= 0:
        return 50.0, ExposureDetails()

    shadows = histogram[:SHADOW_LIMIT].sum() / total
    midtones = histogram[SHADOW_LIMIT:HIGHLIGHT_START].sum() / total
    highlights = histogram[HIGHLIGHT_START:].sum() / total
    clipped_black = histogram[:CLIP_BINS].sum() / total
    clipped_white = histogram[-CLIP_BINS:].sum() / total

    occupied = np.nonzero(histogram)[0]
    dynamic_range = int(occupied[-1] - occupied[0])

    score = 100.0
    score -= clipped_black * CLIP_PENALTY
    score -= clipped_white * CLIP_PENALTY
    if shadows > SKEW_LIMIT:
        score -= SKEW_PENALTY
    if highlights > SKEW_LIMIT:
        score -= SKEW_PENALTY
    if midtones < MIN_MIDTONES:
        score -= FLAT_MIDTONE_PENALTY
    score += dynamic_range / 255.0 * DYNAMIC_RANGE_BONUS

    details = ExposureDetails(
        shadows=float(shadows),
        midtones=float(midtones),
        highlights=float(highlights),
        clipped_black=float(clipped_black),
        clipped_white=float(clipped_white),
        dynamic_range=dynamic_range,
    )
    return clamp(score), details


def contrast_curve(std: float) -> float:
    """Map luminance standard deviation to a contrast score.

    Flat images (std < 20) are scaled up from zero, the 20-100 band is
    the near-linear "good" region and anything harsher is penalized.
    """
    if std < 20:
        score = std * 2.0
    elif std > 100:
        score = 100.0 - (std - 100.0) * 0.5
    else:
        score = min(100.0, 80.0 + (std - 50.0) * 0.4)
    return clamp(score)


def saturation_curve(mean_saturation: float) -> float:
    """Score mean HSV saturation against the ideal band."""
    if mean_saturation < 0.2:
        return mean_saturation * 250.0
    if mean_saturation > 0.9:
        return 100.0 - (mean_saturation - 0.9) * 500.0
    return 100.0 - abs(mean_saturation - SATURATION_IDEAL) * 100.0


def detect_color_cast(avg_r: float, avg_g: float, avg_b: float) -> ColorCast:
    """Flag a cast when channel means (in [0, 1]) differ by 2% or more."""
    high = max(avg_r, avg_g, avg_b)
    low = min(avg_r, avg_g, avg_b)
    if high - low < COLOR_CAST_THRESHOLD:
        return ColorCast(detected=False)

    if avg_r > avg_g and avg_r > avg_b:
        cast_type = "warm_red" if avg_g > avg_b else "red_magenta"
    elif avg_g > avg_r and avg_g > avg_b:
        cast_type = "green"
    else:
        cast_type = "blue_cool"
    return ColorCast(detected=True, type=cast_type, strength=float(high - low))


def estimate_iso(average_variance: float) -> int:
    for threshold, iso in ISO_THRESHOLDS:
        if average_variance > threshold:
            return iso
    return BASE_ISO


# =============================================================================
# Technical Quality Analyzer
# =============================================================================

class TechnicalQualityAnalyzer:
    """Stateless technical quality scorer."""

    def analyze(self, frame: RasterFrame) -> TechnicalQualityResult:
        """Analyze the technical quality of a frame.

        Args:
            frame: Validated RGBA raster

        Returns:
            TechnicalQualityResult with clamped scores
        """
        planes = compute_planes(frame)

        sharpness, sharpness_details = self._analyze_sharpness(planes)
        exposure, exposure_details = score_exposure_histogram(luminance_histogram(planes.lum))
        contrast = self._analyze_contrast(planes)
        saturation, color_details = self._analyze_saturation(planes)
        noise, noise_details = self._analyze_noise(planes)
        motion_blur = self._analyze_motion_blur(planes)

        scores = TechnicalScores(
            sharpness=sharpness,
            exposure=exposure,
            contrast=contrast,
            color_saturation=saturation,
            noise_level=noise,
            motion_blur=motion_blur,
        )
        scores.overall_score = clamp(sum(
            getattr(scores, name) * weight for name, weight in OVERALL_WEIGHTS.items()
        ))

        confidence = CONFIDENCE_BASE
        if len(sharpness_details.focus_regions) > 3:
            confidence += CONFIDENCE_FOCUS_BONUS
        if exposure_details.dynamic_range > 150:
            confidence += CONFIDENCE_RANGE_BONUS
        if len(color_details.saturation_distribution) > 3:
            confidence += CONFIDENCE_DISTRIBUTION_BONUS

        logger.debug(
            f"Technical {frame.width}x{frame.height}: overall={scores.overall_score:.1f}, "
            f"sharpness={sharpness:.1f}, iso~{noise_details.iso_estimate}"
        )

        return TechnicalQualityResult(
            scores=scores,
            sharpness_details=sharpness_details,
            exposure_details=exposure_details,
            color_details=color_details,
            noise_details=noise_details,
            analysis_confidence=clamp(confidence, 0.0, 1.0),
        )

    def _analyze_sharpness(self, planes: FramePlanes) -> Tuple[float, SharpnessDetails]:
        """Blend Laplacian variance, edge density and max gradient."""
        response = np.abs(laplacian(planes.lum))
        interior = response[1:-1, 1:-1]
        variance = float(interior.var()) if interior.size else 0.0
        variance_score = min(100.0, variance / LAPLACIAN_VARIANCE_SCALE * 100.0)

        density_samples = sample(planes.magnitude, EDGE_DENSITY_STRIDE, EDGE_DENSITY_MARGIN)
        edge_density = safe_mean(density_samples > EDGE_THRESHOLD) * 100.0
        density_score = min(100.0, edge_density * EDGE_DENSITY_GAIN)

        # Grid starts at 0, so edges on multiples of 4 are reached
        gradient_samples = sample(planes.magnitude, MAX_GRADIENT_STRIDE)
        max_gradient = float(gradient_samples.max()) if gradient_samples.size else 0.0
        gradient_score = min(100.0, max_gradient / MAX_GRADIENT_SCALE)

        score = (
            variance_score * SHARPNESS_WEIGHTS["laplacian_variance"]
            + density_score * SHARPNESS_WEIGHTS["edge_density"]
            + gradient_score * SHARPNESS_WEIGHTS["max_gradient"]
        )

        return clamp(score), SharpnessDetails(
            variance=variance,
            edge_density=edge_density,
            max_gradient=max_gradient,
            focus_regions=self._find_focus_regions(planes),
        )

    def _find_focus_regions(self, planes: FramePlanes) -> List[FocusRegion]:
        size = FOCUS_BLOCK_SIZE
        regions = []
        for x, y in block_positions(planes.width, planes.height, size, FOCUS_BLOCK_STEP):
            sharpness = region_sharpness(planes.magnitude, x, y, size, size, inset=1)
            if sharpness > EDGE_THRESHOLD:
                regions.append(FocusRegion(x=x, y=y, width=size, height=size, sharpness=sharpness))
        regions.sort(key=lambda r: r.sharpness, reverse=True)
        return regions[:MAX_FOCUS_REGIONS]

    def _analyze_contrast(self, planes: FramePlanes) -> float:
        lum = planes.lum
        std = float(lum.std())
        lum_range = float(lum.max() - lum.min())
        return clamp(contrast_curve(std) + lum_range / 255.0 * CONTRAST_RANGE_BONUS)

    def _analyze_saturation(self, planes: FramePlanes) -> Tuple[float, ColorDetails]:
        """Mean saturation score, cast detection, hue distribution and vibrance."""
        pixels = every_nth_pixel(planes.rgb, SATURATION_PIXEL_STEP)
        hue, saturation, _ = hsv_planes(pixels)
        mean_saturation = float(saturation.mean())
        avg_r, avg_g, avg_b = (pixels.mean(axis=0) / 255.0).tolist()

        color_cast = detect_color_cast(avg_r, avg_g, avg_b)
        score = saturation_curve(mean_saturation)
        if color_cast.detected and color_cast.strength > COLOR_CAST_PENALTY_MIN:
            score -= color_cast.strength * COLOR_CAST_PENALTY

        vibrance = float(np.where(saturation < 0.5, saturation * 2.0, saturation).mean()) * 100.0

        return clamp(score), ColorDetails(
            saturation_distribution=self._saturation_distribution(hue, saturation),
            color_cast=color_cast,
            vibrance=clamp(vibrance),
        )

    def _saturation_distribution(self, hue: np.ndarray, saturation: np.ndarray) -> List[HueBin]:
        bins = (np.floor(hue / HUE_BIN_DEGREES) * HUE_BIN_DEGREES).astype(np.int64)
        total = bins.size
        distribution = []
        for value in np.unique(bins):
            members = bins == value
            distribution.append(HueBin(
                hue=int(value),
                saturation=float(saturation[members].mean()),
                percentage=float(members.sum()) / total * 100.0,
            ))
        distribution.sort(key=lambda b: b.percentage, reverse=True)
        return distribution[:MAX_HUE_BINS]

    def _analyze_noise(self, planes: FramePlanes) -> Tuple[float, NoiseDetails]:
        """Estimate grain from 8x8 block luminance variance.

        Blocks start on multiples of 8 strictly before the last 8 pixels
        of each axis.
        """
        size = NOISE_BLOCK_SIZE
        cols = len(range(0, planes.width - size, size))
        rows = len(range(0, planes.height - size, size))
        if rows == 0 or cols == 0:
            return 100.0, NoiseDetails()

        blocks = planes.lum[:rows * size, :cols * size].reshape(rows, size, cols, size)
        variances = blocks.var(axis=(1, 3))
        average_variance = float(variances.mean())
        clean_percentage = float((variances < CLEAN_BLOCK_VARIANCE).mean()) * 100.0

        grain = clamp(100.0 - average_variance / 10.0)
        score = min(100.0, grain * GRAIN_SHARE + clean_percentage * CLEAN_SHARE)

        return clamp(score), NoiseDetails(
            grain_score=grain,
            pattern_noise=0.0,
            iso_estimate=estimate_iso(average_variance),
            clean_regions=clean_percentage,
        )

    def _analyze_motion_blur(self, planes: FramePlanes) -> float:
        """Penalize edges whose horizontal transition is smeared.

        Points sit on a stride-4 grid starting 2 pixels in; each is compared
        with the pixels 2 to its left and right.
        """
        lum = planes.lum
        m = BLUR_MARGIN
        ys = sample_coords(planes.height, BLUR_STRIDE, m)
        xs = sample_coords(planes.width, BLUR_STRIDE, m)
        if ys.size == 0 or xs.size == 0:
            return NO_EDGE_BLUR_SCORE

        magnitude = planes.magnitude[np.ix_(ys, xs)]
        edges = magnitude > EDGE_THRESHOLD
        edge_count = int(edges.sum())
        if edge_count == 0:
            return NO_EDGE_BLUR_SCORE

        center = lum[np.ix_(ys, xs)]
        left = lum[np.ix_(ys, xs - m)]
        right = lum[np.ix_(ys, xs + m)]
        transition = np.abs(right - left)
        neighbour_mean = (left + right) / 2.0
        blurred = edges & (transition > BLUR_TRANSITION_MIN) & (np.abs(center - neighbour_mean) < BLUR_CENTER_TOLERANCE)

        blur_ratio = float(blurred.sum()) / edge_count
        average_edge = float(magnitude[edges].mean())
        return clamp(min(100.0 - blur_ratio * BLUR_RATIO_PENALTY, average_edge / 2.0))



# =============================================================================
# Factory and convenience functions
# =============================================================================

def create_technical_analyzer() -> TechnicalQualityAnalyzer:
    """Create a technical quality analyzer."""
    return TechnicalQualityAnalyzer()


def analyze_technical_quality(frame: RasterFrame) -> TechnicalQualityResult:
    """Analyze technical quality of a frame with a fresh analyzer."""
    return TechnicalQualityAnalyzer().analyze(frame)
