"""Tests for the scene classifier."""
import numpy as np
import pytest

from framescore.analysis.scene import (
    CONFIDENCE_WEIGHTS,
    MOTION_WEIGHTS,
    SCENE_RULES,
    FaceRegion,
    SceneClassification,
    SceneClassifier,
    SceneEvidence,
    classify_motion_level,
    classify_scene,
    classify_shot_type,
    color_uniformity,
    create_scene_classifier,
    evaluate_scene_rules,
    skin_mask,
)
from framescore.core.types import (
    CameraMovementType,
    LightingType,
    MotionLevel,
    SceneType,
    SettingType,
    ShotType,
    TimeOfDay,
)


def _face(size: int) -> FaceRegion:
    return FaceRegion(x=0, y=0, width=size, height=size, confidence=80.0)


def _evidence(text=0, subjects=1, shot=ShotType.MEDIUM_SHOT, setting=SettingType.UNKNOWN):
    return SceneEvidence(
        text_region_count=text,
        subject_count=subjects,
        shot_type=shot,
        setting_type=setting,
    )


class TestMotionLevel:
    """Tests for motion score bucketing."""

    def test_weights_sum_to_one(self):
        """Test weighting tables are normalized."""
        assert sum(MOTION_WEIGHTS.values()) == pytest.approx(1.0)
        assert sum(CONFIDENCE_WEIGHTS.values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("score,level,confidence", [
        (100.0, MotionLevel.EXTREME_MOTION, 85.0),
        (80.0, MotionLevel.EXTREME_MOTION, 85.0),
        (79.9, MotionLevel.HIGH_MOTION, 80.0),
        (60.0, MotionLevel.HIGH_MOTION, 80.0),
        (45.0, MotionLevel.MEDIUM_MOTION, 75.0),
        (20.0, MotionLevel.LOW_MOTION, 70.0),
        (19.99, MotionLevel.STATIC, 75.0),
        (0.0, MotionLevel.STATIC, 75.0),
    ])
    def test_bands(self, score, level, confidence):
        """Test lower bounds are inclusive."""
        assert classify_motion_level(score) == (level, confidence)


class TestShotType:
    """Tests for shot type classification."""

    @pytest.mark.parametrize("size,shot,confidence", [
        (40, ShotType.EXTREME_CLOSE_UP, 85.0),
        (30, ShotType.CLOSE_UP, 80.0),
        (21, ShotType.MEDIUM_CLOSE_UP, 75.0),
        (15, ShotType.MEDIUM_SHOT, 70.0),
        (8, ShotType.WIDE_SHOT, 65.0),
        (5, ShotType.EXTREME_WIDE_SHOT, 60.0),
    ])
    def test_face_area_bands(self, size, shot, confidence):
        """Test the largest face area ratio picks the shot."""
        assert classify_shot_type([_face(size)], 10000, 50.0, 0.0) == (shot, confidence)

    def test_largest_face_wins(self):
        """Test only the largest face is considered."""
        faces = [_face(5), _face(40)]
        assert classify_shot_type(faces, 10000, 50.0, 0.0)[0] == ShotType.EXTREME_CLOSE_UP

    def test_faceless_focus(self):
        """Test strong center focus reads as a close-up."""
        assert classify_shot_type([], 10000, 90.0, 0.0) == (ShotType.CLOSE_UP, 60.0)

    def test_faceless_busy_background(self):
        """Test busy backgrounds read as wide shots."""
        assert classify_shot_type([], 10000, 50.0, 80.0) == (ShotType.WIDE_SHOT, 65.0)

    def test_faceless_default(self):
        """Test the fallback is a medium shot."""
        assert classify_shot_type([], 10000, 50.0, 10.0) == (ShotType.MEDIUM_SHOT, 50.0)


class TestSceneRules:
    """Tests for the ordered scene rule cascade."""

    def test_rule_order(self):
        """Test rules are evaluated in priority order."""
        assert [rule.name for rule in SCENE_RULES] == [
            "title_card", "crowd", "dialogue", "establishing", "landscape", "wide", "close_up",
        ]

    @pytest.mark.parametrize("evidence,scene,confidence", [
        (_evidence(text=3), SceneType.TITLE_CARD, 80.0),
        (_evidence(subjects=6), SceneType.CROWD_SCENE, 75.0),
        (_evidence(subjects=3), SceneType.DIALOGUE_SCENE, 70.0),
        (_evidence(shot=ShotType.EXTREME_WIDE_SHOT), SceneType.ESTABLISHING_SHOT, 80.0),
        (_evidence(shot=ShotType.WIDE_SHOT, setting=SettingType.OUTDOOR), SceneType.LANDSCAPE, 75.0),
        (_evidence(shot=ShotType.WIDE_SHOT), SceneType.WIDE_SHOT, 70.0),
        (_evidence(shot=ShotType.CLOSE_UP), SceneType.CLOSE_UP, 75.0),
        (_evidence(shot=ShotType.EXTREME_CLOSE_UP), SceneType.CLOSE_UP, 75.0),
        (_evidence(), SceneType.MEDIUM_SHOT, 60.0),
    ])
    def test_first_match_wins(self, evidence, scene, confidence):
        """Test each rule and the default."""
        assert evaluate_scene_rules(evidence) == (scene, confidence)

    def test_text_beats_crowd(self):
        """Test earlier rules take precedence."""
        assert evaluate_scene_rules(_evidence(text=5, subjects=10))[0] == SceneType.TITLE_CARD

    def test_two_text_regions_not_title(self):
        """Test the text rule needs more than two regions."""
        assert evaluate_scene_rules(_evidence(text=2))[0] == SceneType.MEDIUM_SHOT

    def test_indoor_wide_shot_is_not_landscape(self):
        """Test landscape requires an outdoor setting."""
        scene, _ = evaluate_scene_rules(_evidence(shot=ShotType.WIDE_SHOT, setting=SettingType.INDOOR))
        assert scene == SceneType.WIDE_SHOT


class TestSkinMask:
    """Tests for the skin-tone heuristic."""

    def test_skin_and_non_skin(self):
        """Test typical skin passes while gray and blue fail."""
        pixels = np.array([
            [220.0, 170.0, 140.0],
            [128.0, 128.0, 128.0],
            [40.0, 60.0, 200.0],
        ])
        assert skin_mask(pixels).tolist() == [True, False, False]


class TestColorUniformity:
    """Tests for RGB variance uniformity."""

    def test_flat_pixels_are_uniform(self):
        """Test identical pixels score 1."""
        assert color_uniformity(np.full((10, 3), 77.0), 10000.0) == 1.0

    def test_two_tone_variance(self):
        """Test a +/-40 spread in every channel costs 1600 / scale."""
        pixels = np.array([[88.0] * 3, [168.0] * 3] * 4)
        assert color_uniformity(pixels, 10000.0) == pytest.approx(0.84)
        assert color_uniformity(pixels, 5000.0) == pytest.approx(0.68)

    def test_clipped_to_zero(self):
        """Test very busy pixels bottom out at 0."""
        pixels = np.array([[0.0] * 3, [255.0] * 3])
        assert color_uniformity(pixels, 5000.0) == 0.0

    def test_empty(self):
        """Test no pixels gives no uniformity."""
        assert color_uniformity(np.zeros((0, 3)), 10000.0) == 0.0


class TestSceneClassifier:
    """Tests for SceneClassifier.analyze."""

    @pytest.fixture
    def classifier(self):
        return SceneClassifier()

    def test_flat_frame(self, classifier, flat_gray_frame):
        """Test a uniform gray frame."""
        result = classifier.analyze(flat_gray_frame)
        assert result.primary_scene_type == SceneType.MEDIUM_SHOT
        assert result.shot_type == ShotType.MEDIUM_SHOT
        assert result.motion_level == MotionLevel.STATIC
        assert result.scene_type_confidence == 60.0
        assert result.shot_type_confidence == 50.0
        assert result.motion_level_confidence == 75.0
        assert result.classification_confidence == pytest.approx(0.59)
        assert result.visual_features.face_regions == []
        assert result.visual_features.subject_count == 1
        assert result.visual_features.foreground_focus == pytest.approx(50.0)
        assert result.motion_features.camera_movement.detected is False
        assert result.scene_context.lighting_type == LightingType.MIXED
        assert result.scene_context.setting_type == SettingType.STUDIO
        assert result.scene_context.time_of_day == TimeOfDay.MORNING
        assert result.scene_context.weather_indicators == ["fog/haze"]

    def test_skin_patch_detected_as_face(self, classifier, skin_patch_frame):
        """Test a skin-toned patch produces face regions."""
        result = classifier.analyze(skin_patch_frame)
        faces = result.visual_features.face_regions
        assert faces
        assert (faces[0].x, faces[0].y, faces[0].width, faces[0].height) == (32, 32, 32, 32)
        assert faces[0].confidence == pytest.approx(84.375)
        assert result.shot_type == ShotType.MEDIUM_CLOSE_UP
        assert result.visual_features.subject_count == len(faces)

    def test_dark_frame_context(self, classifier, skin_patch_frame):
        """Test mostly black frames read as low light at night."""
        context = classifier.analyze(skin_patch_frame).scene_context
        assert context.lighting_type == LightingType.LOW_LIGHT
        assert context.time_of_day == TimeOfDay.NIGHT

    def test_sky_means_outdoor(self, classifier, frame_from_array):
        """Test a blue upper half is classified outdoor."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:32] = (90, 140, 230)
        array[32:] = (60, 120, 40)
        context = classifier.analyze(frame_from_array(array)).scene_context
        assert context.setting_type == SettingType.OUTDOOR

    def test_warm_light_is_artificial(self, classifier, frame_from_array):
        """Test a warm bright frame reads as artificial light."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:, :] = (220, 160, 90)
        assert classifier.analyze(frame_from_array(array)).scene_context.lighting_type == LightingType.ARTIFICIAL

    def test_neutral_bright_frame_is_morning(self, classifier, frame_from_array):
        """Test red equal to green is not warm light for time of day."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:, :] = (150, 150, 135)
        context = classifier.analyze(frame_from_array(array)).scene_context
        assert context.time_of_day == TimeOfDay.MORNING
        assert context.lighting_type == LightingType.ARTIFICIAL

    def test_red_dominant_frame_is_evening(self, classifier, frame_from_array):
        """Test red leading both channels by enough reads as evening."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:, :] = (200, 140, 100)
        assert classifier.analyze(frame_from_array(array)).scene_context.time_of_day == TimeOfDay.EVENING

    def test_two_tone_frame_is_studio(self, classifier, frame_from_array):
        """Test halves of 88 and 168 are still uniform enough for a studio."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:, :32] = 88
        array[:, 32:] = 168
        context = classifier.analyze(frame_from_array(array)).scene_context
        assert context.setting_type == SettingType.STUDIO

    def test_flat_ceiling_is_indoor(self, classifier, frame_from_array):
        """Test a flat top 30% over a busy lower frame reads as indoor."""
        array = np.zeros((64, 64, 3), dtype=np.uint8)
        array[:20] = 128
        array[21::2] = 255
        context = classifier.analyze(frame_from_array(array)).scene_context
        assert context.setting_type == SettingType.INDOOR

    def test_faces_only_in_full_blocks(self, classifier, frame_from_array):
        """Test a skin band along the bottom edge is found only by blocks inside the frame."""
        array = np.zeros((120, 128, 3), dtype=np.uint8)
        array[96:120] = (220, 170, 140)
        faces = classifier.analyze(frame_from_array(array)).visual_features.face_regions
        assert faces
        assert all(face.y == 80 for face in faces)
        assert all(face.width == 32 and face.height == 32 for face in faces)
        assert faces[0].confidence == pytest.approx(75.0)

    def test_edges_in_both_directions_count_once(self, classifier, frame_from_array):
        """Test a sample that is both a horizontal and a vertical edge adds to both sides of the ratio."""
        yy, xx = np.mgrid[0:96, 0:96]
        array = np.zeros((96, 96, 3), dtype=np.uint8)
        array[((yy // 2) + (xx // 2)) % 2 == 1] = 255
        regions = classifier.analyze(frame_from_array(array)).visual_features.text_regions
        assert len(regions) == 4
        assert all(region.text_confidence == pytest.approx(100.0) for region in regions)

    def test_vertical_stripes_are_not_text(self, classifier, frame_from_array):
        """Test vertical edges alone never make a text region."""
        array = np.zeros((96, 96, 3), dtype=np.uint8)
        cols = (np.arange(96) // 4) % 2 == 1
        array[:, cols] = 255
        assert classifier.analyze(frame_from_array(array)).visual_features.text_regions == []

    def test_horizontal_stripes_are_text(self, classifier, frame_from_array):
        """Test dense horizontal edges produce a title card."""
        array = np.zeros((96, 96, 3), dtype=np.uint8)
        rows = (np.arange(96) // 4) % 2 == 1
        array[rows] = 255
        result = classifier.analyze(frame_from_array(array))
        assert len(result.visual_features.text_regions) > 2
        assert result.primary_scene_type == SceneType.TITLE_CARD
        assert result.scene_type_confidence == 80.0

    def test_checkerboard_motion(self, classifier, fine_checkerboard_frame):
        """Test strong edges register camera movement and vectors."""
        motion = classifier.analyze(fine_checkerboard_frame).motion_features
        assert motion.camera_movement.detected
        assert motion.camera_movement.type in (CameraMovementType.PAN, CameraMovementType.TILT)
        assert 0.0 < motion.camera_movement.intensity <= 100.0
        assert 0 < len(motion.motion_vectors) <= 20
        assert all(v.magnitude > 10 for v in motion.motion_vectors)
        assert motion.edge_change_intensity > 0

    def test_bounded_outputs(self, classifier, noise_frame, tiny_frame, gradient_frame):
        """Test confidences and features stay in range."""
        for frame in (noise_frame, tiny_frame, gradient_frame):
            result = classifier.analyze(frame)
            for value in (
                result.scene_type_confidence,
                result.shot_type_confidence,
                result.motion_level_confidence,
                result.visual_features.background_complexity,
                result.visual_features.foreground_focus,
                result.visual_features.depth_of_field,
                result.motion_features.blur_indicators,
                result.motion_features.edge_change_intensity,
            ):
                assert 0.0 <= value <= 100.0
            assert 0.0 <= result.classification_confidence <= 1.0
            assert len(result.visual_features.face_regions) <= 5
            assert len(result.visual_features.text_regions) <= 10

    def test_deterministic(self, classifier, noise_frame):
        """Test repeated analysis is identical."""
        assert classifier.analyze(noise_frame).to_dict() == classifier.analyze(noise_frame).to_dict()


class TestSceneClassification:
    """Tests for serialization."""

    def test_to_dict_shape(self, fine_checkerboard_frame):
        """Test confidences are grouped and enums are strings."""
        data = classify_scene(fine_checkerboard_frame).to_dict()
        assert set(data["confidence_scores"]) == {"scene_type", "shot_type", "motion_level"}
        assert isinstance(data["primary_scene_type"], str)
        assert data["motion_features"]["camera_movement"]["type"] in ("pan", "tilt")

    def test_from_dict(self, skin_patch_frame):
        """Test a serialized result can be restored."""
        data = classify_scene(skin_patch_frame).to_dict()
        assert SceneClassification.from_dict(data).to_dict() == data

    def test_factory(self):
        """Test the factory returns a classifier."""
        assert isinstance(create_scene_classifier(), SceneClassifier)
