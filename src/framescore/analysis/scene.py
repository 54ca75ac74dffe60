"""Scene Classifier - scene type, shot type and motion level from one frame.

All detection here is heuristic and deterministic:

- Face regions are skin-tone dense 32x32 blocks, not a trained detector
- Motion is approximated from single-frame cues (directional blur,
  edge orientation, edge intensity) since no neighbouring frames exist
- Scene type comes from an ordered rule cascade where the first
  matching rule wins, followed by an indoor/outdoor correction

Example:
    >>> result = SceneClassifier().analyze(frame)
    >>> print(result.primary_scene_type.value, result.shot_type.value)
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

import numpy as np

from ..core.frame import RasterFrame
from ..core.types import (
    CameraMovementType,
    LightingType,
    MotionLevel,
    SceneType,
    SettingType,
    ShotType,
    TimeOfDay,
)
from .pixels import (
    FramePlanes,
    block_positions,
    central_differences,
    clamp,
    compute_planes,
    every_nth_pixel,
    region_sharpness,
    safe_mean,
    sample,
    sample_coords,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CONFIDENCE_WEIGHTS = {
    "shot_type": 0.4,
    "scene_type": 0.4,
    "motion_level": 0.2,
}

MOTION_WEIGHTS = {
    "blur_indicators": 0.4,
    "camera_movement": 0.3,
    "edge_change_intensity": 0.3,
}

# (lower bound, level, confidence), checked from the top
MOTION_BANDS = (
    (80.0, MotionLevel.EXTREME_MOTION, 85.0),
    (60.0, MotionLevel.HIGH_MOTION, 80.0),
    (40.0, MotionLevel.MEDIUM_MOTION, 75.0),
    (20.0, MotionLevel.LOW_MOTION, 70.0),
)
STATIC_CONFIDENCE = 75.0

# (minimum face area ratio, shot type, confidence)
FACE_SHOT_BANDS = (
    (0.15, ShotType.EXTREME_CLOSE_UP, 85.0),
    (0.08, ShotType.CLOSE_UP, 80.0),
    (0.04, ShotType.MEDIUM_CLOSE_UP, 75.0),
    (0.02, ShotType.MEDIUM_SHOT, 70.0),
    (0.005, ShotType.WIDE_SHOT, 65.0),
)
FACELESS_WIDE_AREA_CONFIDENCE = 60.0

FACE_BLOCK_SIZE = 32
FACE_BLOCK_STEP = 16
SKIN_RATIO_RANGE = (0.2, 0.9)
FACE_LIKELIHOOD_GAIN = 1.5
FACE_MIN_LIKELIHOOD = 0.6
MAX_FACE_REGIONS = 5

EDGE_THRESHOLD = 30.0
BACKGROUND_STRIDE = 8
BACKGROUND_MARGIN = 2
DEPTH_REGION_DIVISOR = 8
NEUTRAL_DEPTH = 50.0

TEXT_BLOCK_SIZE = 48
TEXT_BLOCK_STEP = 24
TEXT_EDGE_THRESHOLD = 20.0
TEXT_HORIZONTAL_RATIO = 0.6
MAX_TEXT_REGIONS = 10

BLUR_STRIDE = 10
BLUR_MARGIN = 5
BLUR_ANGLES = (0, 45, 90, 135)
BLUR_DISTANCES = (1, 2, 3, 4, 5)

CAMERA_STRIDE = 4
CAMERA_MARGIN = 1
CAMERA_BINS = 8
EDGE_INTENSITY_STRIDE = 4
EDGE_INTENSITY_MARGIN = 1

MOTION_GRID_SIZE = 64
MOTION_VECTOR_MIN = 10.0
MAX_MOTION_VECTORS = 20

CONTEXT_STRIDE = 8
LOW_LIGHT_LUMINANCE = 50.0
MIXED_LIGHT_MARGIN = 0.1
WARM_COOL_MARGIN = 10.0

SKY_STRIDE = 4
SKY_FRACTION = 0.1
UNIFORMITY_PIXEL_STEP = 4
STUDIO_VARIANCE_SCALE = 10000.0
STUDIO_UNIFORMITY = 0.8
CEILING_STRIDE = 4
CEILING_VARIANCE_SCALE = 5000.0
INDOOR_CEILING_UNIFORMITY = 0.7

TIME_STRIDE = 16
TIME_WARM_MARGIN = 20.0
FOG_PIXEL_STEP = 4
FOG_STD_LIMIT = 30.0


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class FaceRegion:
    x: int
    y: int
    width: int
    height: int
    confidence: float


@dataclass
class TextRegion:
    x: int
    y: int
    width: int
    height: int
    text_confidence: float


@dataclass
class MotionVector:
    x: int
    y: int
    magnitude: float
    angle: int


@dataclass
class CameraMovement:
    detected: bool = False
    type: Optional[CameraMovementType] = None
    intensity: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"detected": self.detected, "intensity": round(self.intensity, 2)}
        if self.type is not None:
            data["type"] = self.type.value
        return data


@dataclass
class VisualFeatures:
    face_regions: List[FaceRegion] = field(default_factory=list)
    subject_count: int = 1
    background_complexity: float = 0.0
    foreground_focus: float = 50.0
    depth_of_field: float = NEUTRAL_DEPTH
    text_regions: List[TextRegion] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "face_regions": [
                {**asdict(f), "confidence": round(f.confidence, 2)} for f in self.face_regions
            ],
            "subject_count": self.subject_count,
            "background_complexity": round(self.background_complexity, 2),
            "foreground_focus": round(self.foreground_focus, 2),
            "depth_of_field": round(self.depth_of_field, 2),
            "text_regions": [
                {**asdict(t), "text_confidence": round(t.text_confidence, 2)} for t in self.text_regions
            ],
        }


@dataclass
class MotionFeatures:
    edge_change_intensity: float = 0.0
    motion_vectors: List[MotionVector] = field(default_factory=list)
    blur_indicators: float = 0.0
    camera_movement: CameraMovement = field(default_factory=CameraMovement)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "edge_change_intensity": round(self.edge_change_intensity, 2),
            "motion_vectors": [
                {**asdict(v), "magnitude": round(v.magnitude, 2)} for v in self.motion_vectors
            ],
            "blur_indicators": round(self.blur_indicators, 2),
            "camera_movement": self.camera_movement.to_dict(),
        }


@dataclass
class SceneContext:
    lighting_type: LightingType = LightingType.NATURAL
    setting_type: SettingType = SettingType.UNKNOWN
    time_of_day: TimeOfDay = TimeOfDay.UNKNOWN
    weather_indicators: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lighting_type": self.lighting_type.value,
            "setting_type": self.setting_type.value,
            "time_of_day": self.time_of_day.value,
            "weather_indicators": list(self.weather_indicators),
        }


@dataclass
class SceneClassification:
    """Scene, shot and motion classification of one frame.

    The three confidences are in [0, 100]; ``classification_confidence``
    is their weighted mean scaled into [0, 1].
    """
    primary_scene_type: SceneType = SceneType.MEDIUM_SHOT
    shot_type: ShotType = ShotType.MEDIUM_SHOT
    motion_level: MotionLevel = MotionLevel.STATIC
    scene_type_confidence: float = 0.0
    shot_type_confidence: float = 0.0
    motion_level_confidence: float = 0.0
    visual_features: VisualFeatures = field(default_factory=VisualFeatures)
    motion_features: MotionFeatures = field(default_factory=MotionFeatures)
    scene_context: SceneContext = field(default_factory=SceneContext)
    classification_confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "primary_scene_type": self.primary_scene_type.value,
            "shot_type": self.shot_type.value,
            "motion_level": self.motion_level.value,
            "confidence_scores": {
                "scene_type": round(self.scene_type_confidence, 2),
                "shot_type": round(self.shot_type_confidence, 2),
                "motion_level": round(self.motion_level_confidence, 2),
            },
            "visual_features": self.visual_features.to_dict(),
            "motion_features": self.motion_features.to_dict(),
            "scene_context": self.scene_context.to_dict(),
            "classification_confidence": round(self.classification_confidence, 4),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SceneClassification":
        """Create from dictionary."""
        confidences = data.get("confidence_scores", {})
        visual = data.get("visual_features", {})
        motion = data.get("motion_features", {})
        camera = motion.get("camera_movement", {})
        context = data.get("scene_context", {})
        return cls(
            primary_scene_type=SceneType(data["primary_scene_type"]),
            shot_type=ShotType(data["shot_type"]),
            motion_level=MotionLevel(data["motion_level"]),
            scene_type_confidence=confidences.get("scene_type", 0.0),
            shot_type_confidence=confidences.get("shot_type", 0.0),
            motion_level_confidence=confidences.get("motion_level", 0.0),
            visual_features=VisualFeatures(
                face_regions=[FaceRegion(**f) for f in visual.get("face_regions", [])],
                subject_count=visual.get("subject_count", 1),
                background_complexity=visual.get("background_complexity", 0.0),
                foreground_focus=visual.get("foreground_focus", 50.0),
                depth_of_field=visual.get("depth_of_field", NEUTRAL_DEPTH),
                text_regions=[TextRegion(**t) for t in visual.get("text_regions", [])],
            ),
            motion_features=MotionFeatures(
                edge_change_intensity=motion.get("edge_change_intensity", 0.0),
                motion_vectors=[MotionVector(**v) for v in motion.get("motion_vectors", [])],
                blur_indicators=motion.get("blur_indicators", 0.0),
                camera_movement=CameraMovement(
                    detected=camera.get("detected", False),
                    type=CameraMovementType(camera["type"]) if camera.get("type") else None,
                    intensity=camera.get("intensity", 0.0),
                ),
            ),
            scene_context=SceneContext(
                lighting_type=LightingType(context.get("lighting_type", "natural")),
                setting_type=SettingType(context.get("setting_type", "unknown")),
                time_of_day=TimeOfDay(context.get("time_of_day", "unknown")),
                weather_indicators=list(context.get("weather_indicators", [])),
            ),
            classification_confidence=data.get("classification_confidence", 0.0),
        )


# =============================================================================
# Scene rule cascade
# =============================================================================

@dataclass(frozen=True)
class SceneEvidence:
    """Inputs the scene rules are evaluated against."""
    text_region_count: int
    subject_count: int
    shot_type: ShotType
    setting_type: SettingType


@dataclass(frozen=True)
class SceneRule:
    name: str
    predicate: Callable[[SceneEvidence], bool]
    scene_type: SceneType
    confidence: float


SCENE_RULES: Tuple[SceneRule, ...] = (
    SceneRule("title_card", lambda e: e.text_region_count > 2, SceneType.TITLE_CARD, 80.0),
    SceneRule("crowd", lambda e: e.subject_count > 5, SceneType.CROWD_SCENE, 75.0),
    SceneRule("dialogue", lambda e: e.subject_count > 2, SceneType.DIALOGUE_SCENE, 70.0),
    SceneRule(
        "establishing",
        lambda e: e.shot_type == ShotType.EXTREME_WIDE_SHOT,
        SceneType.ESTABLISHING_SHOT,
        80.0,
    ),
    SceneRule(
        "landscape",
        lambda e: e.shot_type == ShotType.WIDE_SHOT and e.setting_type == SettingType.OUTDOOR,
        SceneType.LANDSCAPE,
        75.0,
    ),
    SceneRule("wide", lambda e: e.shot_type == ShotType.WIDE_SHOT, SceneType.WIDE_SHOT, 70.0),
    SceneRule(
        "close_up",
        lambda e: e.shot_type in (ShotType.CLOSE_UP, ShotType.EXTREME_CLOSE_UP),
        SceneType.CLOSE_UP,
        75.0,
    ),
)
DEFAULT_SCENE = (SceneType.MEDIUM_SHOT, 60.0)

# (setting, scene type it contradicts, replacement)
CONTEXT_CORRECTIONS = (
    (SettingType.INDOOR, SceneType.LANDSCAPE, SceneType.INTERIOR),
    (SettingType.OUTDOOR, SceneType.INTERIOR, SceneType.EXTERIOR),
)
CORRECTION_CONFIDENCE_DROP = 10.0
CORRECTION_CONFIDENCE_FLOOR = 65.0


def evaluate_scene_rules(evidence: SceneEvidence) -> Tuple[SceneType, float]:
    """Run the cascade; the first matching rule decides."""
    scene_type, confidence = DEFAULT_SCENE
    for rule in SCENE_RULES:
        if rule.predicate(evidence):
            scene_type, confidence = rule.scene_type, rule.confidence
            break

    for setting, contradicted, replacement in CONTEXT_CORRECTIONS:
        if evidence.setting_type == setting and scene_type == contradicted:
            scene_type = replacement
            confidence = max(CORRECTION_CONFIDENCE_FLOOR, confidence - CORRECTION_CONFIDENCE_DROP)
            break

    return scene_type, confidence


def classify_motion_level(score: float) -> Tuple[MotionLevel, float]:
    """Bucket a combined motion score into a level and its confidence."""
    for lower_bound, level, confidence in MOTION_BANDS:
        if score >= lower_bound:
            return level, confidence
    return MotionLevel.STATIC, STATIC_CONFIDENCE


def classify_shot_type(
    face_regions: List[FaceRegion],
    frame_area: int,
    foreground_focus: float,
    background_complexity: float,
) -> Tuple[ShotType, float]:
    """Shot type from the largest face area, or focus cues without faces."""
    if face_regions:
        largest = max(f.width * f.height for f in face_regions)
        ratio = largest / frame_area
        for threshold, shot_type, confidence in FACE_SHOT_BANDS:
            if ratio > threshold:
                return shot_type, confidence
        return ShotType.EXTREME_WIDE_SHOT, FACELESS_WIDE_AREA_CONFIDENCE

    if foreground_focus > 80:
        return ShotType.CLOSE_UP, 60.0
    if background_complexity > 70:
        return ShotType.WIDE_SHOT, 65.0
    return ShotType.MEDIUM_SHOT, 50.0


def skin_mask(rgb: np.ndarray) -> np.ndarray:
    """Heuristic skin-tone test per pixel."""
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    return (
        (r > 95) & (g > 40) & (b > 20)
        & (r > g) & (r > b)
        & (np.abs(r - g) > 15) & (r - b > 15)
    )


def color_uniformity(pixels: np.ndarray, variance_scale: float) -> float:
    """1 - (mean squared RGB deviation / scale), clipped to [0, 1].

    The deviation is averaged over all three channels of every pixel; no
    pixels means no uniformity.
    """
    pixels = pixels.reshape(-1, 3)
    if pixels.shape[0] == 0:
        return 0.0
    variance = float(((pixels - pixels.mean(axis=0)) ** 2).sum()) / (pixels.shape[0] * 3)
    return clamp(1.0 - variance / variance_scale, 0.0, 1.0)


# =============================================================================
# Scene Classifier
# =============================================================================

class SceneClassifier:
    """Stateless scene, shot and motion classifier."""

    def analyze(self, frame: RasterFrame) -> SceneClassification:
        """Classify a frame.

        Args:
            frame: Validated RGBA raster

        Returns:
            SceneClassification with bounded confidences
        """
        planes = compute_planes(frame)

        visual = self._analyze_visual_features(planes)
        motion = self._analyze_motion_features(planes)
        context = self._analyze_scene_context(planes)

        shot_type, shot_confidence = classify_shot_type(
            visual.face_regions,
            frame.pixel_count,
            visual.foreground_focus,
            visual.background_complexity,
        )
        scene_type, scene_confidence = evaluate_scene_rules(SceneEvidence(
            text_region_count=len(visual.text_regions),
            subject_count=visual.subject_count,
            shot_type=shot_type,
            setting_type=context.setting_type,
        ))

        camera_intensity = motion.camera_movement.intensity if motion.camera_movement.detected else 0.0
        motion_score = (
            motion.blur_indicators * MOTION_WEIGHTS["blur_indicators"]
            + camera_intensity * MOTION_WEIGHTS["camera_movement"]
            + motion.edge_change_intensity * MOTION_WEIGHTS["edge_change_intensity"]
        )
        motion_level, motion_confidence = classify_motion_level(motion_score)

        confidence = (
            shot_confidence * CONFIDENCE_WEIGHTS["shot_type"]
            + scene_confidence * CONFIDENCE_WEIGHTS["scene_type"]
            + motion_confidence * CONFIDENCE_WEIGHTS["motion_level"]
        ) / 100.0

        logger.debug(
            f"Scene {frame.width}x{frame.height}: scene={scene_type.value}, "
            f"shot={shot_type.value}, motion={motion_level.value} ({motion_score:.1f})"
        )

        return SceneClassification(
            primary_scene_type=scene_type,
            shot_type=shot_type,
            motion_level=motion_level,
            scene_type_confidence=clamp(scene_confidence),
            shot_type_confidence=clamp(shot_confidence),
            motion_level_confidence=clamp(motion_confidence),
            visual_features=visual,
            motion_features=motion,
            scene_context=context,
            classification_confidence=clamp(confidence, 0.0, 1.0),
        )

    # -------------------------------------------------------------------------
    # Visual features
    # -------------------------------------------------------------------------

    def _analyze_visual_features(self, planes: FramePlanes) -> VisualFeatures:
        faces = self._detect_face_regions(planes)
        return VisualFeatures(
            face_regions=faces,
            subject_count=max(1, len(faces)),
            background_complexity=self._background_complexity(planes),
            foreground_focus=self._foreground_focus(planes),
            depth_of_field=self._depth_of_field(planes),
            text_regions=self._detect_text_regions(planes),
        )

    def _detect_face_regions(self, planes: FramePlanes) -> List[FaceRegion]:
        """Skin-dense 32x32 blocks on a half-block grid.

        Only blocks lying wholly inside the frame are scanned.
        """
        size = FACE_BLOCK_SIZE
        skin = skin_mask(planes.rgb)
        min_ratio, max_ratio = SKIN_RATIO_RANGE

        faces = []
        for x, y in block_positions(planes.width, planes.height, size, FACE_BLOCK_STEP):
            ratio = float(skin[y:y + size:2, x:x + size:2].mean())
            if not min_ratio <= ratio <= max_ratio:
                continue
            likelihood = min(1.0, ratio * FACE_LIKELIHOOD_GAIN)
            if likelihood > FACE_MIN_LIKELIHOOD:
                faces.append(FaceRegion(x=x, y=y, width=size, height=size, confidence=likelihood * 100.0))

        faces.sort(key=lambda f: f.confidence, reverse=True)
        return faces[:MAX_FACE_REGIONS]

    def _background_complexity(self, planes: FramePlanes) -> float:
        samples = sample(planes.magnitude, BACKGROUND_STRIDE, BACKGROUND_MARGIN)
        return clamp(safe_mean(samples > EDGE_THRESHOLD) * 100.0)

    def _foreground_focus(self, planes: FramePlanes) -> float:
        """Compare center sharpness with the mean of the four edge strips.

        Region corners and sizes are floored to whole pixels. A ratio of 1
        (including the no-edge case) maps to 50.
        """
        magnitude = planes.magnitude
        width, height = planes.width, planes.height
        quarter_w, quarter_h = int(width * 0.25), int(height * 0.25)
        half_w, half_h = int(width * 0.5), int(height * 0.5)
        right, bottom = int(width * 0.75), int(height * 0.75)

        center = region_sharpness(magnitude, quarter_w, quarter_h, half_w, half_h)
        edge = sum((
            region_sharpness(magnitude, 0, 0, quarter_w, height),
            region_sharpness(magnitude, right, 0, quarter_w, height),
            region_sharpness(magnitude, quarter_w, 0, half_w, quarter_h),
            region_sharpness(magnitude, quarter_w, bottom, half_w, quarter_h),
        )) / 4

        ratio = center / edge if edge > 0 else 1.0
        return clamp((ratio - 0.5) * 100.0)

    def _depth_of_field(self, planes: FramePlanes) -> float:
        """Spread of regional sharpness; shallow focus varies more."""
        region = min(planes.width, planes.height) // DEPTH_REGION_DIVISOR
        if region < 1:
            return NEUTRAL_DEPTH
        sharpness = [
            region_sharpness(planes.magnitude, x, y, region, region)
            for x, y in block_positions(planes.width, planes.height, region, region)
        ]
        if not sharpness:
            return NEUTRAL_DEPTH
        return clamp(float(np.var(sharpness)) / 10.0)

    def _detect_text_regions(self, planes: FramePlanes) -> List[TextRegion]:
        """Blocks dominated by horizontal edges, the signature of text lines.

        Each block is read on a stride-2 grid starting one pixel in. A
        sample is a horizontal edge when the rows above and below it differ
        by more than the threshold, and a vertical edge likewise for the
        columns either side.
        """
        lum = planes.lum
        height, width = lum.shape
        if height < 3 or width < 3:
            return []

        horizontal = np.zeros_like(lum, dtype=bool)
        vertical = np.zeros_like(lum, dtype=bool)
        horizontal[1:-1, :] = np.abs(lum[2:, :] - lum[:-2, :]) > TEXT_EDGE_THRESHOLD
        vertical[:, 1:-1] = np.abs(lum[:, 2:] - lum[:, :-2]) > TEXT_EDGE_THRESHOLD

        size = TEXT_BLOCK_SIZE
        regions = []
        for x, y in block_positions(width, height, size, TEXT_BLOCK_STEP):
            rows = slice(y + 1, y + size - 1, 2)
            cols = slice(x + 1, x + size - 1, 2)
            h_edges = horizontal[rows, cols]
            any_edge = h_edges | vertical[rows, cols]
            total = int(any_edge.sum())
            if total == 0:
                continue
            ratio = int(h_edges.sum()) / total
            if ratio > TEXT_HORIZONTAL_RATIO:
                regions.append(TextRegion(x=x, y=y, width=size, height=size, text_confidence=ratio * 100.0))
                if len(regions) >= MAX_TEXT_REGIONS:
                    break
        return regions

    # -------------------------------------------------------------------------
    # Motion features
    # -------------------------------------------------------------------------

    def _analyze_motion_features(self, planes: FramePlanes) -> MotionFeatures:
        return MotionFeatures(
            edge_change_intensity=self._edge_intensity(planes),
            motion_vectors=self._motion_vectors(planes),
            blur_indicators=self._blur_indicators(planes),
            camera_movement=self._camera_movement(planes),
        )

    def _blur_indicators(self, planes: FramePlanes) -> float:
        """Mean strongest directional luminance spread at sampled points."""
        lum = planes.lum
        height, width = lum.shape
        m = BLUR_MARGIN
        ys = np.arange(m, height - m, BLUR_STRIDE)
        xs = np.arange(m, width - m, BLUR_STRIDE)
        if ys.size == 0 or xs.size == 0:
            return 0.0

        grid_y, grid_x = np.meshgrid(ys, xs, indexing="ij")
        strongest = np.zeros(grid_y.shape, dtype=np.float64)
        for angle in BLUR_ANGLES:
            dx = math.cos(math.radians(angle))
            dy = math.sin(math.radians(angle))
            total = np.zeros(grid_y.shape, dtype=np.float64)
            for distance in BLUR_DISTANCES:
                ox, oy = int(round(dx * distance)), int(round(dy * distance))
                total += np.abs(lum[grid_y + oy, grid_x + ox] - lum[grid_y - oy, grid_x - ox])
            strongest = np.maximum(strongest, total / len(BLUR_DISTANCES))

        return clamp(float(strongest.mean()) / 255.0 * 100.0)

    def _camera_movement(self, planes: FramePlanes) -> CameraMovement:
        """Dominant edge orientation as a pan/tilt proxy.

        Orientation comes from central differences at each sampled point,
        weighted by its Sobel magnitude.
        """
        ys = sample_coords(planes.height, CAMERA_STRIDE, CAMERA_MARGIN)
        xs = sample_coords(planes.width, CAMERA_STRIDE, CAMERA_MARGIN)
        magnitude = planes.magnitude[np.ix_(ys, xs)].ravel()

        strong = magnitude > EDGE_THRESHOLD
        if not strong.any():
            return CameraMovement(detected=False, intensity=0.0)

        dx, dy = central_differences(planes.lum, ys, xs)
        angles = np.degrees(np.arctan2(dy.ravel()[strong], dx.ravel()[strong]))
        bins = np.floor((angles + 180.0) / 45.0).astype(np.int64) % CAMERA_BINS
        strengths = np.bincount(bins, weights=magnitude[strong], minlength=CAMERA_BINS)

        dominant_bin = int(np.argmax(strengths))
        direction = dominant_bin * 45 - 180
        movement = CameraMovementType.PAN if direction < 45 or direction > 135 else CameraMovementType.TILT
        intensity = float(strengths[dominant_bin] / strengths.sum()) * 100.0
        return CameraMovement(detected=True, type=movement, intensity=clamp(intensity))

    def _edge_intensity(self, planes: FramePlanes) -> float:
        samples = sample(planes.magnitude, EDGE_INTENSITY_STRIDE, EDGE_INTENSITY_MARGIN)
        return clamp(safe_mean(samples) / 2.55)

    def _motion_vectors(self, planes: FramePlanes) -> List[MotionVector]:
        """Strongest luminance change from each grid cell center."""
        lum = planes.lum
        height, width = lum.shape
        size = MOTION_GRID_SIZE
        reach = size / 4

        vectors = []
        for y in range(0, height - size, size):
            for x in range(0, width - size, size):
                cx, cy = x + size // 2, y + size // 2
                center = lum[cy, cx]
                best_diff, best_angle = 0.0, 0
                for angle in range(0, 360, 45):
                    tx = int(round(cx + math.cos(math.radians(angle)) * reach))
                    ty = int(round(cy + math.sin(math.radians(angle)) * reach))
                    if 0 <= tx < width and 0 <= ty < height:
                        diff = abs(float(lum[ty, tx]) - float(center))
                        if diff > best_diff:
                            best_diff, best_angle = diff, angle
                magnitude = best_diff / 10.0
                if magnitude > MOTION_VECTOR_MIN:
                    vectors.append(MotionVector(x=x, y=y, magnitude=magnitude, angle=best_angle))
                    if len(vectors) >= MAX_MOTION_VECTORS:
                        return vectors
        return vectors

    # -------------------------------------------------------------------------
    # Scene context
    # -------------------------------------------------------------------------

    def _analyze_scene_context(self, planes: FramePlanes) -> SceneContext:
        weather = []
        if float(every_nth_pixel(planes.lum, FOG_PIXEL_STEP).std()) < FOG_STD_LIMIT:
            weather.append("fog/haze")
        return SceneContext(
            lighting_type=self._lighting_type(planes),
            setting_type=self._setting_type(planes),
            time_of_day=self._time_of_day(planes),
            weather_indicators=weather,
        )

    def _lighting_type(self, planes: FramePlanes) -> LightingType:
        rgb = sample(planes.rgb, CONTEXT_STRIDE)
        if safe_mean(sample(planes.lum, CONTEXT_STRIDE)) < LOW_LIGHT_LUMINANCE:
            return LightingType.LOW_LIGHT
        r, b = rgb[..., 0], rgb[..., 2]
        warm = safe_mean(r > b + WARM_COOL_MARGIN)
        cool = safe_mean(b > r + WARM_COOL_MARGIN)
        if abs(warm - cool) < MIXED_LIGHT_MARGIN:
            return LightingType.MIXED
        if warm > cool:
            return LightingType.ARTIFICIAL
        return LightingType.NATURAL

    def _setting_type(self, planes: FramePlanes) -> SettingType:
        """Sky in the top half means outdoor; flat frames read as studio.

        Studio uniformity uses every 4th pixel of the whole frame, the
        indoor ceiling check a stride-4 grid over the top 30% of rows.
        """
        height = planes.height
        top = planes.rgb[:math.ceil(height * 0.5)]
        sky = sample(top, SKY_STRIDE)
        r, g, b = sky[..., 0], sky[..., 1], sky[..., 2]
        sky_fraction = safe_mean((b > r) & (b > g) & (b > 100) & (b - r > 30))
        if sky_fraction > SKY_FRACTION:
            return SettingType.OUTDOOR

        frame_pixels = every_nth_pixel(planes.rgb, UNIFORMITY_PIXEL_STEP)
        if color_uniformity(frame_pixels, STUDIO_VARIANCE_SCALE) > STUDIO_UNIFORMITY:
            return SettingType.STUDIO

        ceiling = sample(planes.rgb[:math.ceil(height * 0.3)], CEILING_STRIDE)
        if color_uniformity(ceiling, CEILING_VARIANCE_SCALE) > INDOOR_CEILING_UNIFORMITY:
            return SettingType.INDOOR
        return SettingType.UNKNOWN

    def _time_of_day(self, planes: FramePlanes) -> TimeOfDay:
        """Brightness bands, with warm sunrise/sunset light read as evening.

        A sampled pixel is warm when red leads both other channels and
        exceeds blue by more than 20.
        """
        average = safe_mean(sample(planes.lum, TIME_STRIDE))
        if average < 30:
            return TimeOfDay.NIGHT
        if average > 200:
            return TimeOfDay.DAY
        rgb = sample(planes.rgb, TIME_STRIDE)
        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        warm = safe_mean((r > g) & (r > b) & (r - b > TIME_WARM_MARGIN))
        if warm > 0.3:
            return TimeOfDay.EVENING
        if average > 100:
            return TimeOfDay.MORNING
        return TimeOfDay.UNKNOWN



# =============================================================================
# Factory and convenience functions
# =============================================================================

def create_scene_classifier() -> SceneClassifier:
    """Create a scene classifier."""
    return SceneClassifier()


def classify_scene(frame: RasterFrame) -> SceneClassification:
    """Classify a frame with a fresh classifier."""
    return SceneClassifier().analyze(frame)
