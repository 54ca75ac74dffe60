"""Composition Analyzer - aesthetic layout scoring for a single frame.

Scores how a frame is arranged rather than how well it was captured:

- Rule of thirds: visual weight around the four grid intersections and
  edge energy along the grid lines
- Leading lines: dominant gradient orientations binned into 8 buckets
- Visual balance: visual-weight centroid relative to the frame center
- Symmetry: mirror similarity across the vertical and horizontal axes
- Focal regions: 32x32 blocks with strong edges and local contrast
- Color harmony: share of saturated pixels inside named hue bands

Example:
    >>> analyzer = CompositionAnalyzer()
    >>> result = analyzer.analyze(frame)
    >>> print(f"Composition: {result.scores.overall_score:.1f}")
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..core.frame import RasterFrame
from ..core.types import LineType
from .pixels import (
    FramePlanes,
    block_positions,
    central_differences,
    clamp,
    compute_planes,
    safe_ratio,
    sample,
    sample_coords,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

OVERALL_WEIGHTS = {
    "rule_of_thirds": 0.25,
    "leading_lines": 0.20,
    "visual_balance": 0.20,
    "symmetry": 0.10,
    "focal_point_strength": 0.15,
    "color_harmony": 0.10,
}

INTERSECTION_RADIUS = 20
INTERSECTION_WEIGHT_SHARE = 0.7
GRID_ALIGNMENT_SHARE = 0.3
GRID_LINE_STEP = 5

LINE_STRIDE = 2
LINE_MARGIN = 1
LINE_EDGE_THRESHOLD = 50.0
LINE_BUCKET_DEGREES = 45
LINE_DOMINANCE_THRESHOLD = 5.0
LINE_DIAGONAL_BONUS = 0.2
MAX_DOMINANT_LINES = 10

BALANCE_STRIDE = 4
BALANCE_DARKNESS_SHARE = 0.7
BALANCE_SATURATION_SHARE = 0.3

SYMMETRY_STRIDE = 4

FOCAL_BLOCK_SIZE = 32
FOCAL_BLOCK_STEP = 16
FOCAL_EDGE_SHARE = 0.7
FOCAL_VARIANCE_SHARE = 0.3
FOCAL_MIN_STRENGTH = 0.3
MAX_FOCAL_REGIONS = 5
FOCAL_THIRDS_BONUS = 20.0

HARMONY_STRIDE = 4
HARMONY_MIN_SATURATION = 0.1
HARMONY_NEUTRAL_SCORE = 50.0
HARMONIC_HUE_BANDS = {
    "red_orange": (0.0, 30.0),
    "yellow_gold": (45.0, 75.0),
    "green": (90.0, 150.0),
    "blue": (180.0, 240.0),
    "purple_magenta": (270.0, 330.0),
}

DOMINANT_COLOR_STRIDE = 8
COLOR_QUANTUM = 32
MAX_DOMINANT_COLORS = 3

CONFIDENCE_BASE = 0.5
CONFIDENCE_INTERSECTION_BONUS = 0.2
CONFIDENCE_LINE_BONUS = 0.2
CONFIDENCE_BALANCE_BONUS = 0.1
CONFIDENCE_PER_FOCAL_REGION = 0.02


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class GridIntersection:
    """Rule-of-thirds intersection and the visual weight around it."""
    x: int
    y: int
    weight: float


@dataclass
class FocalRegion:
    """Block that draws the eye; strength is in [0, 1]."""
    x: int
    y: int
    width: int
    height: int
    strength: float


@dataclass
class DominantLine:
    angle: float
    strength: float
    type: LineType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "angle": round(self.angle, 2),
            "strength": round(self.strength, 2),
            "type": self.type.value,
        }


@dataclass
class DominantColor:
    r: int
    g: int
    b: int
    percentage: float


@dataclass
class CompositionScores:
    """Composition sub-scores, all in [0, 100]."""
    rule_of_thirds: float = 0.0
    leading_lines: float = 0.0
    visual_balance: float = 0.0
    symmetry: float = 0.0
    focal_point_strength: float = 0.0
    color_harmony: float = 0.0
    overall_score: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {k: round(v, 2) for k, v in asdict(self).items()}


@dataclass
class CompositionResult:
    """Complete composition analysis of one frame.

    Attributes:
        scores: Sub-scores and weighted overall score
        grid_intersections: The four thirds intersections with weights
        focal_regions: Strongest focal blocks, best first
        dominant_lines: Dominant gradient orientations, strongest first
        balance_center: Visual-weight centroid as (x, y)
        dominant_colors: Up to three quantized colors with percentages
        analysis_confidence: Confidence in [0, 1]
    """
    scores: CompositionScores = field(default_factory=CompositionScores)
    grid_intersections: List[GridIntersection] = field(default_factory=list)
    focal_regions: List[FocalRegion] = field(default_factory=list)
    dominant_lines: List[DominantLine] = field(default_factory=list)
    balance_center: Tuple[float, float] = (0.0, 0.0)
    dominant_colors: List[DominantColor] = field(default_factory=list)
    analysis_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "scores": self.scores.to_dict(),
            "grid_intersections": [
                {"x": p.x, "y": p.y, "weight": round(p.weight, 2)}
                for p in self.grid_intersections
            ],
            "focal_regions": [
                {**asdict(r), "strength": round(r.strength, 4)}
                for r in self.focal_regions
            ],
            "dominant_lines": [line.to_dict() for line in self.dominant_lines],
            "balance_center": {
                "x": round(self.balance_center[0], 2),
                "y": round(self.balance_center[1], 2),
            },
            "dominant_colors": [
                {**asdict(c), "percentage": round(c.percentage, 2)}
                for c in self.dominant_colors
            ],
            "analysis_confidence": round(self.analysis_confidence, 4),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompositionResult":
        """Create from dictionary."""
        center = data.get("balance_center", {})
        return cls(
            scores=CompositionScores(**data.get("scores", {})),
            grid_intersections=[GridIntersection(**p) for p in data.get("grid_intersections", [])],
            focal_regions=[FocalRegion(**r) for r in data.get("focal_regions", [])],
            dominant_lines=[
                DominantLine(angle=line["angle"], strength=line["strength"], type=LineType(line["type"]))
                for line in data.get("dominant_lines", [])
            ],
            balance_center=(center.get("x", 0.0), center.get("y", 0.0)),
            dominant_colors=[DominantColor(**c) for c in data.get("dominant_colors", [])],
            analysis_confidence=data.get("analysis_confidence", 0.0),
        )


# =============================================================================
# Helpers
# =============================================================================

def classify_line_angle(angle: float) -> LineType:
    """Tag a bucket angle in degrees as horizontal, vertical or diagonal."""
    magnitude = abs(angle)
    if magnitude < 15 or magnitude > 165:
        return LineType.HORIZONTAL
    if 75 < magnitude < 105:
        return LineType.VERTICAL
    return LineType.DIAGONAL


def thirds_points(width: int, height: int) -> List[Tuple[int, int]]:
    """The four rule-of-thirds intersections."""
    xs = (width // 3, (2 * width) // 3)
    ys = (height // 3, (2 * height) // 3)
    return [(x, y) for y in ys for x in xs]


def in_harmonic_band(hue: np.ndarray) -> np.ndarray:
    """Boolean mask of hues falling inside any harmonic band (inclusive)."""
    mask = np.zeros(hue.shape, dtype=bool)
    for low, high in HARMONIC_HUE_BANDS.values():
        mask |= (hue >= low) & (hue <= high)
    return mask


# =============================================================================
# Composition Analyzer
# =============================================================================

class CompositionAnalyzer:
    """Stateless composition scorer.

    Instances hold no per-frame state and can be shared between threads.
    """

    def analyze(self, frame: RasterFrame) -> CompositionResult:
        """Analyze the composition of a frame.

        Args:
            frame: Validated RGBA raster

        Returns:
            CompositionResult with clamped scores
        """
        planes = compute_planes(frame)

        rule_score, intersections = self._analyze_rule_of_thirds(planes)
        lines_score, lines = self._analyze_leading_lines(planes)
        balance_score, balance_center = self._analyze_balance(planes)
        symmetry_score = self._analyze_symmetry(planes)
        focal_score, focal_regions = self._analyze_focal_regions(planes)
        harmony_score, dominant_colors = self._analyze_color_harmony(planes)

        scores = CompositionScores(
            rule_of_thirds=rule_score,
            leading_lines=lines_score,
            visual_balance=balance_score,
            symmetry=symmetry_score,
            focal_point_strength=focal_score,
            color_harmony=harmony_score,
        )
        scores.overall_score = clamp(sum(
            getattr(scores, name) * weight for name, weight in OVERALL_WEIGHTS.items()
        ))

        confidence = self._calculate_confidence(intersections, lines, balance_score, focal_regions)

        logger.debug(
            f"Composition {frame.width}x{frame.height}: overall={scores.overall_score:.1f}, "
            f"lines={len(lines)}, focal_regions={len(focal_regions)}"
        )

        return CompositionResult(
            scores=scores,
            grid_intersections=intersections,
            focal_regions=focal_regions,
            dominant_lines=lines,
            balance_center=balance_center,
            dominant_colors=dominant_colors,
            analysis_confidence=confidence,
        )

    def _analyze_rule_of_thirds(self, planes: FramePlanes) -> Tuple[float, List[GridIntersection]]:
        """Score visual weight at the thirds intersections.

        An intersection's weight is the mean, over a square neighborhood,
        of luminance contrast against the frame mean scaled by saturation.
        """
        width, height = planes.width, planes.height
        mean_lum = float(planes.lum.mean())
        _, saturation, _ = planes.hsv
        contrast = np.minimum(1.0, np.abs(planes.lum - mean_lum) / 128.0)
        visual_weight = contrast * (0.5 + 0.5 * saturation) * 100.0

        r = INTERSECTION_RADIUS
        intersections = []
        for x, y in thirds_points(width, height):
            region = visual_weight[max(0, y - r):min(height, y + r + 1),
                                   max(0, x - r):min(width, x + r + 1)]
            intersections.append(GridIntersection(x=x, y=y, weight=clamp(float(region.mean()))))

        # Edge energy along the four grid lines
        x_lines = sorted({width // 3, (2 * width) // 3})
        y_lines = sorted({height // 3, (2 * height) // 3})
        ys = np.arange(0, height, GRID_LINE_STEP)
        xs = np.arange(0, width, GRID_LINE_STEP)
        samples = [planes.magnitude[ys, x] for x in x_lines]
        samples += [planes.magnitude[y, xs] for y in y_lines]
        values = np.concatenate(samples)
        alignment = min(100.0, safe_ratio(float(values.sum()), values.size * 255.0) * 100.0)

        strongest = max(p.weight for p in intersections)
        score = clamp(INTERSECTION_WEIGHT_SHARE * strongest + GRID_ALIGNMENT_SHARE * alignment)
        return score, intersections

    def _analyze_leading_lines(self, planes: FramePlanes) -> Tuple[float, List[DominantLine]]:
        """Bin strong edge orientations into 8 directional buckets.

        Edges are read on odd coordinates (stride 2 from 1). Orientation
        comes from central luminance differences at each edge point.
        """
        ys = sample_coords(planes.height, LINE_STRIDE, LINE_MARGIN)
        xs = sample_coords(planes.width, LINE_STRIDE, LINE_MARGIN)
        magnitude = planes.magnitude[np.ix_(ys, xs)].ravel()

        strong = magnitude > LINE_EDGE_THRESHOLD
        if not strong.any():
            return 0.0, []

        dx, dy = central_differences(planes.lum, ys, xs)
        magnitude = magnitude[strong]
        angles = np.degrees(np.arctan2(dy.ravel()[strong], dx.ravel()[strong]))
        buckets = np.floor(angles / LINE_BUCKET_DEGREES + 0.5).astype(np.int64) % 8

        bucket_count = 360 // LINE_BUCKET_DEGREES
        accumulated = np.bincount(buckets, weights=magnitude / 255.0, minlength=bucket_count)
        magnitude_sum = np.bincount(buckets, weights=magnitude, minlength=bucket_count)
        counts = np.bincount(buckets, minlength=bucket_count)

        lines = []
        for index in range(bucket_count):
            if accumulated[index] <= LINE_DOMINANCE_THRESHOLD:
                continue
            angle = float(index * LINE_BUCKET_DEGREES)
            if angle > 180:
                angle -= 360
            strength = min(100.0, (magnitude_sum[index] / counts[index]) / 2.55)
            lines.append(DominantLine(angle=angle, strength=strength, type=classify_line_angle(angle)))

        lines.sort(key=lambda line: line.strength, reverse=True)
        lines = lines[:MAX_DOMINANT_LINES]
        if not lines:
            return 0.0, []

        mean_strength = sum(line.strength for line in lines) / len(lines)
        diagonal_bonus = sum(
            LINE_DIAGONAL_BONUS * line.strength
            for line in lines
            if line.type == LineType.DIAGONAL
        )
        return clamp(mean_strength + diagonal_bonus), lines

    def _analyze_balance(self, planes: FramePlanes) -> Tuple[float, Tuple[float, float]]:
        """Combine per-quadrant visual-weight centroids into one center."""
        width, height = planes.width, planes.height
        _, saturation, _ = planes.hsv
        weight = (
            (1.0 - sample(planes.lum, BALANCE_STRIDE) / 255.0) * BALANCE_DARKNESS_SHARE
            + sample(saturation, BALANCE_STRIDE) * BALANCE_SATURATION_SHARE
        )
        xs = sample_coords(width, BALANCE_STRIDE)
        ys = sample_coords(height, BALANCE_STRIDE)
        grid_x, grid_y = np.meshgrid(xs, ys)

        center_x, center_y = width / 2.0, height / 2.0
        left = grid_x < center_x
        top = grid_y < center_y

        total_weight = 0.0
        sum_x = 0.0
        sum_y = 0.0
        for quadrant in (left & top, ~left & top, left & ~top, ~left & ~top):
            quadrant_weight = float(weight[quadrant].sum())
            if quadrant_weight <= 0:
                continue
            qx = float((grid_x[quadrant] * weight[quadrant]).sum()) / quadrant_weight
            qy = float((grid_y[quadrant] * weight[quadrant]).sum()) / quadrant_weight
            total_weight += quadrant_weight
            sum_x += qx * quadrant_weight
            sum_y += qy * quadrant_weight

        if total_weight <= 0:
            balance_center = (center_x, center_y)
        else:
            balance_center = (sum_x / total_weight, sum_y / total_weight)

        distance = math.hypot(balance_center[0] - center_x, balance_center[1] - center_y)
        max_distance = math.hypot(center_x, center_y)
        score = max(0.0, 100.0 - safe_ratio(distance, max_distance) * 100.0)
        return clamp(score), balance_center

    def _analyze_symmetry(self, planes: FramePlanes) -> float:
        """Best of left/right and top/bottom mirror similarity.

        Left/right compares every column of every 4th row; top/bottom
        compares every 4th column of every row in the upper half.
        """
        rgb = planes.rgb
        width, height = planes.width, planes.height

        def mirror_score(original: np.ndarray, mirrored: np.ndarray) -> Optional[float]:
            if original.size == 0:
                return None
            diff = np.abs(original - mirrored).sum(axis=-1) / 3.0
            return float(((255.0 - diff) / 255.0 * 100.0).mean())

        ys = sample_coords(height, SYMMETRY_STRIDE)
        xs = np.arange(width // 2)
        horizontal = mirror_score(
            rgb[np.ix_(ys, xs)], rgb[np.ix_(ys, width - 1 - xs)]
        )

        xs = sample_coords(width, SYMMETRY_STRIDE)
        ys = np.arange(height // 2)
        vertical = mirror_score(
            rgb[np.ix_(ys, xs)], rgb[np.ix_(height - 1 - ys, xs)]
        )

        candidates = [s for s in (horizontal, vertical) if s is not None]
        if not candidates:
            # A single row and column mirror onto themselves
            return 100.0
        return clamp(max(candidates))

    def _analyze_focal_regions(self, planes: FramePlanes) -> Tuple[float, List[FocalRegion]]:
        """Find blocks combining edge energy and local contrast."""
        size = FOCAL_BLOCK_SIZE
        regions = []
        for x, y in block_positions(planes.width, planes.height, size, FOCAL_BLOCK_STEP):
            edge_mean = float(planes.magnitude[y:y + size:2, x:x + size:2].mean())
            variance = float(planes.lum[y:y + size:2, x:x + size:2].var())
            strength = min(
                1.0,
                (edge_mean / 255.0) * FOCAL_EDGE_SHARE
                + (variance / 65025.0) * FOCAL_VARIANCE_SHARE,
            )
            if strength > FOCAL_MIN_STRENGTH:
                regions.append(FocalRegion(x=x, y=y, width=size, height=size, strength=strength))

        regions.sort(key=lambda r: r.strength, reverse=True)
        regions = regions[:MAX_FOCAL_REGIONS]
        if not regions:
            return 0.0, []

        strongest = regions[0]
        cx = strongest.x + strongest.width / 2.0
        cy = strongest.y + strongest.height / 2.0
        min_distance = min(
            math.hypot(cx - px, cy - py) for px, py in thirds_points(planes.width, planes.height)
        )
        quarter_diagonal = math.hypot(planes.width, planes.height) / 4.0
        bonus = max(0.0, FOCAL_THIRDS_BONUS - safe_ratio(min_distance, quarter_diagonal) * FOCAL_THIRDS_BONUS)

        return clamp(strongest.strength * 100.0 + bonus), regions

    def _analyze_color_harmony(self, planes: FramePlanes) -> Tuple[float, List[DominantColor]]:
        """Share of saturated pixels whose hue sits in a harmonic band."""
        hue, saturation, _ = planes.hsv
        hue = sample(hue, HARMONY_STRIDE)
        saturation = sample(saturation, HARMONY_STRIDE)

        chromatic = saturation > HARMONY_MIN_SATURATION
        chromatic_count = int(chromatic.sum())
        if chromatic_count == 0:
            score = HARMONY_NEUTRAL_SCORE
        else:
            in_band = int(in_harmonic_band(hue[chromatic]).sum())
            score = in_band / chromatic_count * 100.0

        return clamp(score), self._dominant_colors(planes)

    def _dominant_colors(self, planes: FramePlanes) -> List[DominantColor]:
        pixels = sample(planes.rgb, DOMINANT_COLOR_STRIDE).reshape(-1, 3)
        if pixels.size == 0:
            return []
        quantized = (np.floor(pixels / COLOR_QUANTUM) * COLOR_QUANTUM).astype(np.int64)
        colors, counts = np.unique(quantized, axis=0, return_counts=True)
        order = np.argsort(-counts, kind="stable")[:MAX_DOMINANT_COLORS]
        total = len(quantized)
        return [
            DominantColor(
                r=int(colors[i][0]),
                g=int(colors[i][1]),
                b=int(colors[i][2]),
                percentage=counts[i] / total * 100.0,
            )
            for i in order
        ]

    def _calculate_confidence(
        self,
        intersections: List[GridIntersection],
        lines: List[DominantLine],
        balance_score: float,
        focal_regions: List[FocalRegion],
    ) -> float:
        confidence = CONFIDENCE_BASE
        if any(p.weight > 50 for p in intersections):
            confidence += CONFIDENCE_INTERSECTION_BONUS
        if any(line.strength > 70 for line in lines):
            confidence += CONFIDENCE_LINE_BONUS
        if balance_score > 70:
            confidence += CONFIDENCE_BALANCE_BONUS
        confidence += CONFIDENCE_PER_FOCAL_REGION * len(focal_regions)
        return clamp(confidence, 0.0, 1.0)


# =============================================================================
# Factory and convenience functions
# =============================================================================

def create_composition_analyzer() -> CompositionAnalyzer:
    """Create a composition analyzer."""
    return CompositionAnalyzer()


def analyze_composition(frame: RasterFrame) -> CompositionResult:
    """Analyze the composition of a frame with a fresh analyzer."""
    return CompositionAnalyzer().analyze(frame)
