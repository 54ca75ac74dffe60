"""Engagement Score Calculator - how likely a frame is to hold attention.

Consumes the composition, technical and scene results for a frame, adds
its own pixel pass (complexity, novelty, color emotion) and folds
everything into eight weighted engagement factors. Predictions and
audience-appeal scores are fixed linear combinations of those factors.

Every weighting table below sums to 1.0.

Example:
    >>> calculator = EngagementCalculator()
    >>> analysis = calculator.analyze(frame)
    >>> print(analysis.overall_engagement_score)
"""

import logging
import math
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

import numpy as np

from ..core.frame import RasterFrame
from ..core.types import (
    CameraMovementType,
    LightingType,
    MotionLevel,
    SceneType,
    ShotType,
    TimeOfDay,
)
from .composition import CompositionAnalyzer, CompositionResult, in_harmonic_band
from .pixels import (
    FramePlanes,
    block_positions,
    central_differences,
    clamp,
    compute_planes,
    every_nth_pixel,
    hsv_planes,
    sample_coords,
)
from .scene import SceneClassification, SceneClassifier
from .technical import TechnicalQualityAnalyzer, TechnicalQualityResult

logger = logging.getLogger(__name__)


# =============================================================================
# Weighting tables
# =============================================================================

FACTOR_WEIGHTS = {
    "visual_interest": 0.20,
    "emotional_appeal": 0.18,
    "human_presence": 0.15,
    "action_intensity": 0.12,
    "color_appeal": 0.10,
    "composition_strength": 0.10,
    "technical_quality": 0.08,
    "scene_type_appeal": 0.07,
}

VISUAL_INTEREST_WEIGHTS = {
    "complexity_score": 0.30,
    "contrast_appeal": 0.25,
    "focal_point_strength": 0.25,
    "visual_novelty": 0.20,
}

EMOTIONAL_APPEAL_WEIGHTS = {
    "color_emotion_score": 0.30,
    "lighting_mood_score": 0.25,
    "intimacy_level": 0.25,
    "energy_level": 0.20,
}

HUMAN_INTEREST_WEIGHTS = {
    "face_appeal": 0.40,
    "gesture_indicators": 0.20,
    "eye_contact_potential": 0.20,
    "social_context": 0.20,
}

ACTION_DYNAMICS_WEIGHTS = {
    "motion_excitement": 0.35,
    "camera_dynamics": 0.25,
    "scene_energy": 0.25,
    "tension_indicators": 0.15,
}

PREDICTION_WEIGHTS = {
    "attention_grabbing": {
        "visual_interest": 0.40,
        "action_intensity": 0.35,
        "color_appeal": 0.25,
    },
    "retention_potential": {
        "human_presence": 0.40,
        "emotional_appeal": 0.35,
        "composition_strength": 0.25,
    },
    "emotional_impact": {
        "emotional_appeal": 0.50,
        "human_presence": 0.30,
        "scene_type_appeal": 0.20,
    },
    "shareability": {
        "human_presence": 0.25,
        "visual_interest": 0.20,
        "emotional_appeal": 0.20,
        "color_appeal": 0.15,
        "action_intensity": 0.10,
        "composition_strength": 0.10,
    },
}

AUDIENCE_WEIGHTS = {
    "general_audience": {
        "visual_interest": 0.25,
        "emotional_appeal": 0.25,
        "human_presence": 0.25,
        "action_intensity": 0.25,
    },
    "social_media": {
        "color_appeal": 0.25,
        "visual_interest": 0.25,
        "human_presence": 0.20,
        "action_intensity": 0.15,
        "emotional_appeal": 0.15,
    },
    "professional": {
        "technical_quality": 0.35,
        "composition_strength": 0.30,
        "visual_interest": 0.20,
        "scene_type_appeal": 0.15,
    },
    "artistic": {
        "composition_strength": 0.30,
        "emotional_appeal": 0.25,
        "visual_interest": 0.20,
        "color_appeal": 0.15,
        "technical_quality": 0.10,
    },
}


# =============================================================================
# Lookup tables
# =============================================================================

SCENE_TYPE_APPEAL = {
    SceneType.ACTION_SCENE: 85.0,
    SceneType.CLOSE_UP: 80.0,
    SceneType.DIALOGUE_SCENE: 70.0,
    SceneType.PORTRAIT: 75.0,
    SceneType.CROWD_SCENE: 65.0,
    SceneType.MONTAGE: 70.0,
    SceneType.LANDSCAPE: 60.0,
    SceneType.ESTABLISHING_SHOT: 55.0,
    SceneType.WIDE_SHOT: 50.0,
    SceneType.MEDIUM_SHOT: 55.0,
    SceneType.EXTREME_CLOSE_UP: 75.0,
    SceneType.TRANSITION: 30.0,
    SceneType.TITLE_CARD: 25.0,
    SceneType.INTERIOR: 45.0,
    SceneType.EXTERIOR: 50.0,
}

LIGHTING_MOOD_BONUS = {
    LightingType.NATURAL: 15.0,
    LightingType.ARTIFICIAL: 5.0,
    LightingType.MIXED: 10.0,
    LightingType.LOW_LIGHT: 20.0,
}

TIME_OF_DAY_MOOD_BONUS = {
    TimeOfDay.MORNING: 10.0,
    TimeOfDay.DAY: 5.0,
    TimeOfDay.EVENING: 20.0,
    TimeOfDay.NIGHT: 15.0,
}

SHOT_INTIMACY = {
    ShotType.EXTREME_CLOSE_UP: 95.0,
    ShotType.CLOSE_UP: 85.0,
    ShotType.MEDIUM_CLOSE_UP: 70.0,
    ShotType.MEDIUM_SHOT: 55.0,
    ShotType.WIDE_SHOT: 30.0,
    ShotType.EXTREME_WIDE_SHOT: 15.0,
}
DEFAULT_INTIMACY = 20.0

MOTION_ENERGY = {
    MotionLevel.STATIC: 20.0,
    MotionLevel.LOW_MOTION: 35.0,
    MotionLevel.MEDIUM_MOTION: 60.0,
    MotionLevel.HIGH_MOTION: 85.0,
    MotionLevel.EXTREME_MOTION: 95.0,
}

MOTION_EXCITEMENT = {
    MotionLevel.STATIC: 15.0,
    MotionLevel.LOW_MOTION: 30.0,
    MotionLevel.MEDIUM_MOTION: 55.0,
    MotionLevel.HIGH_MOTION: 80.0,
    MotionLevel.EXTREME_MOTION: 95.0,
}

CAMERA_MOVEMENT_BONUS = {
    CameraMovementType.ZOOM: 15.0,
    CameraMovementType.DOLLY: 12.0,
    CameraMovementType.PAN: 8.0,
    CameraMovementType.TILT: 6.0,
    CameraMovementType.SHAKE: 20.0,
}

SCENE_ENERGY = {
    SceneType.ACTION_SCENE: 90.0,
    SceneType.DIALOGUE_SCENE: 50.0,
    SceneType.CROWD_SCENE: 70.0,
    SceneType.CLOSE_UP: 65.0,
    SceneType.ESTABLISHING_SHOT: 45.0,
}
DEFAULT_SCENE_ENERGY = 50.0

MOTION_ENERGY_MULTIPLIER = {
    MotionLevel.STATIC: 0.7,
    MotionLevel.LOW_MOTION: 0.85,
    MotionLevel.MEDIUM_MOTION: 1.0,
    MotionLevel.HIGH_MOTION: 1.2,
    MotionLevel.EXTREME_MOTION: 1.4,
}

EYE_CONTACT = {
    ShotType.EXTREME_CLOSE_UP: 90.0,
    ShotType.CLOSE_UP: 80.0,
    ShotType.MEDIUM_CLOSE_UP: 60.0,
    ShotType.MEDIUM_SHOT: 40.0,
}
DEFAULT_EYE_CONTACT = 25.0
NO_FACE_EYE_CONTACT = 20.0

SOCIAL_CONTEXT = {
    SceneType.DIALOGUE_SCENE: 85.0,
    SceneType.CROWD_SCENE: 75.0,
    SceneType.ACTION_SCENE: 70.0,
    SceneType.PORTRAIT: 60.0,
}
DEFAULT_SOCIAL_CONTEXT = 40.0

# Face appeal by face count; counts beyond the table use CROWD_FACE_APPEAL
FACE_COUNT_APPEAL = {0: 10.0, 1: 70.0, 2: 80.0, 3: 75.0, 4: 75.0}
CROWD_FACE_APPEAL = 60.0
FACE_CONFIDENCE_BONUS = 20.0

COMPLEXITY_STRIDE = 4
COMPLEXITY_MARGIN = 2
COMPLEXITY_EDGE_THRESHOLD = 20.0

NOVELTY_COLOR_STEP = 16
NOVELTY_COLOR_QUANTUM = 32
NOVELTY_COLOR_BUCKETS = 50
# Each block is compared with the block one offset to its right
PATTERN_OFFSET = 16
PATTERN_WINDOW = 32
PATTERN_SAMPLE_STEP = 2
NOVELTY_SIMILARITY = 0.8
NOVELTY_ASYMMETRY_STRIDE = 8

COLOR_PIXEL_STEP = 4


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class EngagementFactors:
    """The eight engagement factors, each in [0, 100]."""
    visual_interest: float = 0.0
    emotional_appeal: float = 0.0
    human_presence: float = 0.0
    action_intensity: float = 0.0
    color_appeal: float = 0.0
    composition_strength: float = 0.0
    technical_quality: float = 0.0
    scene_type_appeal: float = 0.0


@dataclass
class VisualInterestDetails:
    complexity_score: float = 0.0
    contrast_appeal: float = 0.0
    focal_point_strength: float = 0.0
    visual_novelty: float = 0.0


@dataclass
class EmotionalAppealDetails:
    color_emotion_score: float = 0.0
    lighting_mood_score: float = 0.0
    intimacy_level: float = 0.0
    energy_level: float = 0.0


@dataclass
class HumanInterestDetails:
    face_appeal: float = 0.0
    gesture_indicators: float = 0.0
    eye_contact_potential: float = 0.0
    social_context: float = 0.0


@dataclass
class ActionDynamicsDetails:
    motion_excitement: float = 0.0
    camera_dynamics: float = 0.0
    scene_energy: float = 0.0
    tension_indicators: float = 0.0


@dataclass
class EngagementDetails:
    visual_interest: VisualInterestDetails = field(default_factory=VisualInterestDetails)
    emotional_appeal: EmotionalAppealDetails = field(default_factory=EmotionalAppealDetails)
    human_interest: HumanInterestDetails = field(default_factory=HumanInterestDetails)
    action_dynamics: ActionDynamicsDetails = field(default_factory=ActionDynamicsDetails)


@dataclass
class EngagementPredictions:
    attention_grabbing: float = 0.0
    retention_potential: float = 0.0
    emotional_impact: float = 0.0
    shareability: float = 0.0


@dataclass
class AudienceAppeal:
    general_audience: float = 0.0
    social_media: float = 0.0
    professional: float = 0.0
    artistic: float = 0.0


def _rounded(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        k: _rounded(v) if isinstance(v, dict) else round(v, 2)
        for k, v in data.items()
    }


@dataclass
class EngagementAnalysis:
    """Complete engagement analysis of one frame.

    Attributes:
        overall_engagement_score: Weighted sum of the factors (0-100)
        engagement_factors: Eight factor scores
        engagement_details: Sub-scores behind four of the factors
        engagement_predictions: Derived attention/retention/impact/share scores
        target_audience_appeal: Appeal per audience
        confidence_score: Mean of the upstream confidences (0-1)
    """
    overall_engagement_score: float = 0.0
    engagement_factors: EngagementFactors = field(default_factory=EngagementFactors)
    engagement_details: EngagementDetails = field(default_factory=EngagementDetails)
    engagement_predictions: EngagementPredictions = field(default_factory=EngagementPredictions)
    target_audience_appeal: AudienceAppeal = field(default_factory=AudienceAppeal)
    confidence_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "overall_engagement_score": round(self.overall_engagement_score, 2),
            "engagement_factors": _rounded(asdict(self.engagement_factors)),
            "engagement_details": _rounded(asdict(self.engagement_details)),
            "engagement_predictions": _rounded(asdict(self.engagement_predictions)),
            "target_audience_appeal": _rounded(asdict(self.target_audience_appeal)),
            "confidence_score": round(self.confidence_score, 4),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngagementAnalysis":
        """Create from dictionary."""
        details = data.get("engagement_details", {})
        return cls(
            overall_engagement_score=data.get("overall_engagement_score", 0.0),
            engagement_factors=EngagementFactors(**data.get("engagement_factors", {})),
            engagement_details=EngagementDetails(
                visual_interest=VisualInterestDetails(**details.get("visual_interest", {})),
                emotional_appeal=EmotionalAppealDetails(**details.get("emotional_appeal", {})),
                human_interest=HumanInterestDetails(**details.get("human_interest", {})),
                action_dynamics=ActionDynamicsDetails(**details.get("action_dynamics", {})),
            ),
            engagement_predictions=EngagementPredictions(**data.get("engagement_predictions", {})),
            target_audience_appeal=AudienceAppeal(**data.get("target_audience_appeal", {})),
            confidence_score=data.get("confidence_score", 0.0),
        )


def weighted_sum(values: Any, weights: Dict[str, float]) -> float:
    """Combine named attributes of ``values`` with a weighting table."""
    return sum(getattr(values, name) * weight for name, weight in weights.items())


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Unlike ``round``, 2.5 becomes 3 and -0.5 becomes 0.
    """
    return math.floor(value + 0.5)


# =============================================================================
# Scoring curves
# =============================================================================

def complexity_curve(raw: float) -> float:
    """Boost sparse frames and damp very busy ones."""
    if raw < 50:
        raw *= 1.2
    elif raw > 80:
        raw = 80 + (raw - 80) * 0.5
    return clamp(raw)


def contrast_appeal_curve(std: float) -> float:
    """Contrast appeal of a luminance standard deviation."""
    if std < 20:
        return clamp(std * 2.0)
    if std > 100:
        return clamp(100.0 - (std - 100.0) * 0.3)
    return clamp(40.0 + (std - 20.0) * 0.75)


def face_appeal_score(face_count: int, average_confidence: float) -> float:
    """Appeal of detected faces; no faces gives the minimal constant 10."""
    if face_count == 0:
        return FACE_COUNT_APPEAL[0]
    base = FACE_COUNT_APPEAL.get(face_count, CROWD_FACE_APPEAL)
    return clamp(base + average_confidence / 100.0 * FACE_CONFIDENCE_BONUS)


# =============================================================================
# Engagement Calculator
# =============================================================================

class EngagementCalculator:
    """Aggregates the other analyzers into engagement scores.

    The three upstream analyzers can be injected; by default fresh
    stateless instances are used.
    """

    def __init__(
        self,
        composition_analyzer: Optional[CompositionAnalyzer] = None,
        technical_analyzer: Optional[TechnicalQualityAnalyzer] = None,
        scene_classifier: Optional[SceneClassifier] = None,
    ) -> None:
        self.composition_analyzer = composition_analyzer or CompositionAnalyzer()
        self.technical_analyzer = technical_analyzer or TechnicalQualityAnalyzer()
        self.scene_classifier = scene_classifier or SceneClassifier()

    def analyze(self, frame: RasterFrame) -> EngagementAnalysis:
        """Run the three upstream analyzers in turn and aggregate.

        Use ``FrameAnalyzer`` to run the upstream analyzers concurrently.
        """
        composition = self.composition_analyzer.analyze(frame)
        technical = self.technical_analyzer.analyze(frame)
        scene = self.scene_classifier.analyze(frame)
        return self.calculate(frame, composition, technical, scene)

    def calculate(
        self,
        frame: RasterFrame,
        composition: CompositionResult,
        technical: TechnicalQualityResult,
        scene: SceneClassification,
    ) -> EngagementAnalysis:
        """Combine precomputed analyzer results with a direct pixel pass.

        Args:
            frame: The frame the three results were computed from
            composition: Composition result for the frame
            technical: Technical quality result for the frame
            scene: Scene classification for the frame

        Returns:
            EngagementAnalysis with clamped scores
        """
        planes = compute_planes(frame)

        visual = self._visual_interest(planes, composition)
        emotional = self._emotional_appeal(planes, scene)
        human = self._human_interest(scene)
        action = self._action_dynamics(scene, technical)

        factors = EngagementFactors(
            visual_interest=clamp(weighted_sum(visual, VISUAL_INTEREST_WEIGHTS)),
            emotional_appeal=clamp(weighted_sum(emotional, EMOTIONAL_APPEAL_WEIGHTS)),
            human_presence=clamp(weighted_sum(human, HUMAN_INTEREST_WEIGHTS)),
            action_intensity=clamp(weighted_sum(action, ACTION_DYNAMICS_WEIGHTS)),
            color_appeal=self._color_appeal(planes),
            composition_strength=clamp(composition.scores.overall_score),
            technical_quality=clamp(technical.scores.overall_score),
            scene_type_appeal=SCENE_TYPE_APPEAL[scene.primary_scene_type],
        )

        overall = clamp(round_half_up(weighted_sum(factors, FACTOR_WEIGHTS)))
        predictions = EngagementPredictions(**{
            name: clamp(round_half_up(weighted_sum(factors, weights)))
            for name, weights in PREDICTION_WEIGHTS.items()
        })
        audience = AudienceAppeal(**{
            name: clamp(round_half_up(weighted_sum(factors, weights)))
            for name, weights in AUDIENCE_WEIGHTS.items()
        })

        confidence = (
            composition.analysis_confidence
            + technical.analysis_confidence
            + scene.classification_confidence
        ) / 3.0

        logger.debug(
            f"Engagement {frame.width}x{frame.height}: overall={overall:.1f}, "
            f"scene={scene.primary_scene_type.value}"
        )

        return EngagementAnalysis(
            overall_engagement_score=overall,
            engagement_factors=factors,
            engagement_details=EngagementDetails(
                visual_interest=visual,
                emotional_appeal=emotional,
                human_interest=human,
                action_dynamics=action,
            ),
            engagement_predictions=predictions,
            target_audience_appeal=audience,
            confidence_score=clamp(confidence, 0.0, 1.0),
        )

    # -------------------------------------------------------------------------
    # Visual interest
    # -------------------------------------------------------------------------

    def _visual_interest(self, planes: FramePlanes, composition: CompositionResult) -> VisualInterestDetails:
        lum_samples = every_nth_pixel(planes.lum[..., np.newaxis], COLOR_PIXEL_STEP)
        std = float(lum_samples.std()) if lum_samples.size else 0.0
        return VisualInterestDetails(
            complexity_score=self._complexity(planes),
            contrast_appeal=contrast_appeal_curve(std),
            focal_point_strength=clamp(composition.scores.focal_point_strength),
            visual_novelty=self._novelty(planes),
        )

    def _complexity(self, planes: FramePlanes) -> float:
        """Average strength and density of central-difference edges.

        Only grid points whose gradient exceeds the edge threshold count.
        Density is relative to one point per 16 pixels of frame area.
        """
        lum = planes.lum
        height, width = lum.shape
        ys = sample_coords(height, COMPLEXITY_STRIDE, COMPLEXITY_MARGIN)
        xs = sample_coords(width, COMPLEXITY_STRIDE, COMPLEXITY_MARGIN)
        if ys.size == 0 or xs.size == 0:
            return complexity_curve(0.0)

        dx, dy = central_differences(lum, ys, xs)
        gradient = np.sqrt(dx * dx + dy * dy)
        edges = gradient[gradient > COMPLEXITY_EDGE_THRESHOLD]

        average_strength = float(edges.mean()) if edges.size else 0.0
        density = edges.size / ((width * height) / 16.0)
        raw = min(100.0, average_strength / 5.0 + density * 200.0)
        return complexity_curve(raw)

    def _novelty(self, planes: FramePlanes) -> float:
        """Color uniqueness, pattern complexity and left/right asymmetry."""
        pixels = every_nth_pixel(planes.rgb, NOVELTY_COLOR_STEP)
        quantized = np.floor(pixels / NOVELTY_COLOR_QUANTUM).astype(np.int64)
        buckets = len(np.unique(quantized, axis=0)) if quantized.size else 0
        color_uniqueness = min(1.0, buckets / NOVELTY_COLOR_BUCKETS)

        return clamp(
            50.0
            + 20.0 * color_uniqueness
            + 15.0 * self._pattern_complexity(planes)
            + 15.0 * self._asymmetry(planes)
        )

    def _pattern_complexity(self, planes: FramePlanes) -> float:
        """One minus the share of blocks resembling their right neighbour.

        A block is compared pixel by pixel (stride 2) with the block
        ``PATTERN_OFFSET`` pixels to its right. Frames too small for a
        single comparison score 0.5.
        """
        lum = planes.lum
        offsets = np.arange(0, PATTERN_OFFSET, PATTERN_SAMPLE_STEP)
        total = 0
        repetitive = 0
        for x, y in block_positions(planes.width, planes.height, PATTERN_WINDOW, PATTERN_OFFSET):
            ys = y + offsets
            xs = x + offsets
            left = lum[np.ix_(ys, xs)]
            right = lum[np.ix_(ys, xs + PATTERN_OFFSET)]
            similarity = np.maximum(0.0, 1.0 - np.abs(left - right) / 255.0).mean()
            if similarity > NOVELTY_SIMILARITY:
                repetitive += 1
            total += 1

        if total == 0:
            return 0.5
        return 1.0 - repetitive / total

    def _asymmetry(self, planes: FramePlanes) -> float:
        lum = planes.lum
        width = planes.width
        ys = sample_coords(planes.height, NOVELTY_ASYMMETRY_STRIDE)
        # x < width / 2, so an odd width includes its middle column
        xs = sample_coords(math.ceil(width / 2), NOVELTY_ASYMMETRY_STRIDE)
        if ys.size == 0 or xs.size == 0:
            return 0.0
        diff = np.abs(lum[np.ix_(ys, xs)] - lum[np.ix_(ys, width - 1 - xs)])
        return min(1.0, float(diff.mean()) / 100.0)

    # -------------------------------------------------------------------------
    # Emotional appeal
    # -------------------------------------------------------------------------

    def _emotional_appeal(self, planes: FramePlanes, scene: SceneClassification) -> EmotionalAppealDetails:
        color_emotion = self._color_emotion(planes)
        context = scene.scene_context
        face_count = len(scene.visual_features.face_regions)

        lighting_mood = (
            50.0
            + LIGHTING_MOOD_BONUS.get(context.lighting_type, 0.0)
            + TIME_OF_DAY_MOOD_BONUS.get(context.time_of_day, 0.0)
        )
        intimacy = SHOT_INTIMACY.get(scene.shot_type, DEFAULT_INTIMACY) + min(20.0, face_count * 10.0)
        energy = MOTION_ENERGY[scene.motion_level] + color_emotion * 0.2

        return EmotionalAppealDetails(
            color_emotion_score=color_emotion,
            lighting_mood_score=clamp(lighting_mood),
            intimacy_level=clamp(intimacy),
            energy_level=clamp(energy),
        )

    def _color_emotion(self, planes: FramePlanes) -> float:
        """Warm, cool and vibrant pixel shares.

        Gray pixels have hue 0 and so count as warm.
        """
        pixels = every_nth_pixel(planes.rgb, COLOR_PIXEL_STEP)
        hue, saturation, value = hsv_planes(pixels)
        warm = float(((hue < 60) | (hue >= 300)).mean())
        cool = float(((hue >= 180) & (hue < 300)).mean())
        vibrant = float(((saturation > 0.7) & (value > 0.4)).mean())
        return clamp(40.0 + 35.0 * warm + 25.0 * cool + 40.0 * vibrant)

    # -------------------------------------------------------------------------
    # Human interest
    # -------------------------------------------------------------------------

    def _human_interest(self, scene: SceneClassification) -> HumanInterestDetails:
        faces = scene.visual_features.face_regions
        face_count = len(faces)
        average_confidence = (
            sum(f.confidence for f in faces) / face_count if face_count else 0.0
        )

        gesture = 30.0
        if scene.primary_scene_type == SceneType.ACTION_SCENE:
            gesture += 30.0
        if scene.motion_level in (MotionLevel.HIGH_MOTION, MotionLevel.EXTREME_MOTION):
            gesture += 25.0
        elif scene.motion_level == MotionLevel.MEDIUM_MOTION:
            gesture += 15.0

        if face_count == 0:
            eye_contact = NO_FACE_EYE_CONTACT
        else:
            eye_contact = EYE_CONTACT.get(scene.shot_type, DEFAULT_EYE_CONTACT)

        subjects = scene.visual_features.subject_count
        social = SOCIAL_CONTEXT.get(scene.primary_scene_type, DEFAULT_SOCIAL_CONTEXT)
        if subjects >= 2:
            social += min(20.0, (subjects - 1) * 8.0)

        return HumanInterestDetails(
            face_appeal=face_appeal_score(face_count, average_confidence),
            gesture_indicators=clamp(gesture),
            eye_contact_potential=clamp(eye_contact),
            social_context=clamp(social),
        )

    # -------------------------------------------------------------------------
    # Action dynamics
    # -------------------------------------------------------------------------

    def _action_dynamics(
        self,
        scene: SceneClassification,
        technical: TechnicalQualityResult,
    ) -> ActionDynamicsDetails:
        motion = scene.motion_features
        excitement = MOTION_EXCITEMENT[scene.motion_level] + motion.blur_indicators * 0.2

        camera = motion.camera_movement
        if camera.detected:
            camera_dynamics = 50.0 + camera.intensity * 0.5 + CAMERA_MOVEMENT_BONUS.get(camera.type, 0.0)
        else:
            camera_dynamics = 25.0

        scene_energy = (
            SCENE_ENERGY.get(scene.primary_scene_type, DEFAULT_SCENE_ENERGY)
            * MOTION_ENERGY_MULTIPLIER[scene.motion_level]
        )

        tension = 30.0
        if scene.scene_context.lighting_type == LightingType.LOW_LIGHT:
            tension += 25.0
        if technical.scores.contrast > 80:
            tension += 15.0
        if technical.scores.motion_blur < 50:
            tension += 20.0
        if scene.primary_scene_type == SceneType.ACTION_SCENE:
            tension += 30.0

        return ActionDynamicsDetails(
            motion_excitement=clamp(excitement),
            camera_dynamics=clamp(camera_dynamics),
            scene_energy=clamp(scene_energy),
            tension_indicators=clamp(tension),
        )

    # -------------------------------------------------------------------------
    # Color appeal
    # -------------------------------------------------------------------------

    def _color_appeal(self, planes: FramePlanes) -> float:
        """Saturation, vibrancy and share of hues in a harmonic band."""
        pixels = every_nth_pixel(planes.rgb, COLOR_PIXEL_STEP)
        hue, saturation, value = hsv_planes(pixels)
        average_saturation = float(saturation.mean())
        vibrant = float(((saturation > 0.6) & (value > 0.3) & (value < 0.9)).mean())
        harmonic = float(in_harmonic_band(hue).mean())
        return clamp(50.0 + min(30.0, average_saturation * 50.0) + vibrant * 30.0 + harmonic * 20.0)


# =============================================================================
# Factory and convenience functions
# =============================================================================

def create_engagement_calculator(
    composition_analyzer: Optional[CompositionAnalyzer] = None,
    technical_analyzer: Optional[TechnicalQualityAnalyzer] = None,
    scene_classifier: Optional[SceneClassifier] = None,
) -> EngagementCalculator:
    """Create an engagement calculator with optional injected analyzers."""
    return EngagementCalculator(
        composition_analyzer=composition_analyzer,
        technical_analyzer=technical_analyzer,
        scene_classifier=scene_classifier,
    )


def calculate_engagement(frame: RasterFrame) -> EngagementAnalysis:
    """Calculate the engagement analysis of a frame."""
    return EngagementCalculator().analyze(frame)
