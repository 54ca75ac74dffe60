"""Tests for the RasterFrame model and categorical types."""
import json

import numpy as np
import pytest

from framescore.core.frame import RasterFrame
from framescore.core.types import AnalysisType, MotionLevel, SceneType, ShotType
from framescore.exceptions import InvalidFrameError


class TestRasterFrameValidation:
    """Tests for construction-time validation."""

    def test_valid_frame(self):
        """Test a correctly sized buffer is accepted."""
        frame = RasterFrame(width=2, height=3, buffer=bytes(2 * 3 * 4))
        assert frame.width == 2
        assert frame.height == 3
        assert frame.pixel_count == 6

    def test_buffer_length_mismatch(self):
        """Test a short buffer raises InvalidFrameError with lengths."""
        with pytest.raises(InvalidFrameError) as exc_info:
            RasterFrame(width=2, height=2, buffer=bytes(15))
        assert exc_info.value.details["buffer_length"] == 15
        assert exc_info.value.details["expected_length"] == 16

    @pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 4), (True, 4), (2.0, 2)])
    def test_invalid_dimensions(self, width, height):
        """Test non-positive or non-integer dimensions are rejected."""
        with pytest.raises(InvalidFrameError):
            RasterFrame(width=width, height=height, buffer=bytes(16))

    def test_bytearray_is_frozen(self):
        """Test mutable buffers are copied to bytes."""
        data = bytearray(16)
        frame = RasterFrame(width=2, height=2, buffer=data)
        data[0] = 255
        assert isinstance(frame.buffer, bytes)
        assert frame.buffer[0] == 0

    def test_non_bytes_buffer(self):
        """Test a list buffer is rejected."""
        with pytest.raises(InvalidFrameError):
            RasterFrame(width=1, height=1, buffer=[0, 0, 0, 0])


class TestRasterFrameArrays:
    """Tests for numpy conversion."""

    def test_from_rgb_array_adds_alpha(self):
        """Test RGB input receives an opaque alpha channel."""
        array = np.full((2, 3, 3), 7, dtype=np.uint8)
        frame = RasterFrame.from_array(array)
        rgba = frame.to_array()
        assert rgba.shape == (2, 3, 4)
        assert (rgba[:, :, 3] == 255).all()
        assert (rgba[:, :, :3] == 7).all()

    def test_from_array_rejects_bad_shape(self):
        """Test 2D arrays are rejected."""
        with pytest.raises(InvalidFrameError):
            RasterFrame.from_array(np.zeros((4, 4), dtype=np.uint8))

    def test_from_array_rejects_dtype(self):
        """Test float arrays are rejected."""
        with pytest.raises(InvalidFrameError):
            RasterFrame.from_array(np.zeros((4, 4, 3), dtype=np.float32))

    def test_to_array_is_read_only(self, flat_gray_frame):
        """Test the pixel view cannot be written."""
        with pytest.raises(ValueError):
            flat_gray_frame.to_array()[0, 0, 0] = 1

    def test_rgb_float_view(self, flat_gray_frame):
        """Test rgb() drops alpha and converts to float."""
        rgb = flat_gray_frame.rgb()
        assert rgb.shape == (64, 64, 3)
        assert rgb.dtype == np.float64


class TestContentHash:
    """Tests for content hashing and cache keys."""

    def test_hash_is_deterministic(self, frame_from_array):
        """Test identical pixels hash identically."""
        array = np.arange(48, dtype=np.uint8).reshape(4, 4, 3)
        assert frame_from_array(array).content_hash() == frame_from_array(array.copy()).content_hash()

    def test_hash_depends_on_dimensions(self):
        """Test same bytes with different shapes hash differently."""
        buffer = bytes(range(16)) * 2
        assert (
            RasterFrame(width=2, height=4, buffer=buffer).content_hash()
            != RasterFrame(width=4, height=2, buffer=buffer).content_hash()
        )

    def test_hash_depends_on_pixels(self, frame_from_array):
        """Test a single changed pixel changes the hash."""
        array = np.zeros((4, 4, 3), dtype=np.uint8)
        other = array.copy()
        other[0, 0, 0] = 1
        assert frame_from_array(array).content_hash() != frame_from_array(other).content_hash()

    def test_cache_key(self, flat_gray_frame):
        """Test cache keys are prefixed by analysis type."""
        digest = flat_gray_frame.content_hash()
        assert flat_gray_frame.cache_key(AnalysisType.SCENE) == f"scene:{digest}"
        assert flat_gray_frame.cache_key("technical") == f"technical:{digest}"


class TestEnums:
    """Tests for closed categorical types."""

    def test_scene_type_count(self):
        """Test all fifteen scene types exist."""
        assert len(SceneType) == 15

    def test_shot_type_count(self):
        """Test all nine shot types exist."""
        assert len(ShotType) == 9

    def test_motion_level_values(self):
        """Test motion level string values."""
        assert [m.value for m in MotionLevel] == [
            "static", "low_motion", "medium_motion", "high_motion", "extreme_motion",
        ]

    def test_members_compare_as_strings(self):
        """Test enum members are interchangeable with their string values."""
        assert SceneType.CLOSE_UP == "close_up"
        assert isinstance(ShotType.WIDE_SHOT, str)
        assert json.dumps({"type": AnalysisType.SCENE}) == '{"type": "scene"}'
