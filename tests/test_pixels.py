"""Tests for shared pixel primitives."""
import math

import numpy as np
import pytest

from framescore.analysis.pixels import (
    block_positions,
    block_variance,
    clamp,
    compute_planes,
    every_nth_pixel,
    hsv_planes,
    laplacian,
    luminance,
    luminance_histogram,
    luminance_plane,
    region_sharpness,
    rgb_to_hsv,
    safe_mean,
    safe_ratio,
    sample,
    sample_coords,
    sobel,
)


class TestScalarHelpers:
    """Tests for scalar conversions and guards."""

    def test_luminance_white_and_black(self):
        """Test BT.601 weights sum to one."""
        assert luminance(255, 255, 255) == pytest.approx(255.0)
        assert luminance(0, 0, 0) == 0.0

    def test_luminance_weights(self):
        """Test green dominates luminance."""
        assert luminance(0, 255, 0) > luminance(255, 0, 0) > luminance(0, 0, 255)

    @pytest.mark.parametrize("rgb,expected", [
        ((255, 0, 0), (0.0, 1.0, 1.0)),
        ((0, 255, 0), (120.0, 1.0, 1.0)),
        ((0, 0, 255), (240.0, 1.0, 1.0)),
        ((128, 128, 128), (0.0, 0.0, 128 / 255)),
        ((0, 0, 0), (0.0, 0.0, 0.0)),
    ])
    def test_rgb_to_hsv(self, rgb, expected):
        """Test primary colors and grays."""
        assert rgb_to_hsv(*rgb) == pytest.approx(expected)

    def test_clamp(self):
        """Test clamping and NaN handling."""
        assert clamp(150) == 100.0
        assert clamp(-5) == 0.0
        assert clamp(42.5) == 42.5
        assert clamp(float("nan")) == 0.0
        assert clamp(2.0, 0.0, 1.0) == 1.0

    def test_safe_mean_empty(self):
        """Test empty arrays fall back to the default."""
        assert safe_mean(np.array([]), default=7.0) == 7.0
        assert safe_mean(np.array([1.0, 3.0])) == 2.0

    def test_safe_ratio(self):
        """Test division by zero returns the default."""
        assert safe_ratio(1.0, 0.0) == 0.0
        assert safe_ratio(1.0, 4.0) == 0.25


class TestPlanes:
    """Tests for vectorized plane operations."""

    def test_hsv_planes_matches_scalar(self):
        """Test vectorized HSV agrees with the scalar version."""
        rng = np.random.default_rng(1)
        pixels = rng.integers(0, 256, size=(50, 3)).astype(np.float64)
        hue, sat, val = hsv_planes(pixels)
        for i, (r, g, b) in enumerate(pixels):
            h, s, v = rgb_to_hsv(r, g, b)
            assert hue[i] == pytest.approx(h)
            assert sat[i] == pytest.approx(s)
            assert val[i] == pytest.approx(v)

    def test_luminance_plane(self):
        """Test per-pixel luminance."""
        rgb = np.zeros((2, 2, 3))
        rgb[0, 0] = (255, 255, 255)
        lum = luminance_plane(rgb)
        assert lum[0, 0] == pytest.approx(255.0)
        assert lum[1, 1] == 0.0

    def test_sobel_vertical_edge(self):
        """Test a vertical step produces a horizontal gradient."""
        lum = np.zeros((5, 6))
        lum[:, 3:] = 255.0
        gx, gy, magnitude = sobel(lum)
        assert gx[2, 3] == pytest.approx(1020.0)
        assert gy[2, 3] == pytest.approx(0.0)
        assert magnitude[2, 3] == pytest.approx(1020.0)

    def test_sobel_corner_is_diagonal(self):
        """Test the pixel touching a bright quadrant's corner has a 45 degree gradient."""
        lum = np.zeros((6, 6))
        lum[3:, 3:] = 255.0
        gx, gy, _ = sobel(lum)
        assert gx[2, 2] == pytest.approx(255.0)
        assert gy[2, 2] == pytest.approx(255.0)

    def test_sobel_border_is_zero(self):
        """Test the one-pixel border is never filled."""
        rng = np.random.default_rng(2)
        _, _, magnitude = sobel(rng.uniform(0, 255, size=(8, 8)))
        assert (magnitude[0, :] == 0).all()
        assert (magnitude[-1, :] == 0).all()
        assert (magnitude[:, 0] == 0).all()
        assert (magnitude[:, -1] == 0).all()

    def test_sobel_small_plane(self):
        """Test planes under 3 pixels produce all-zero output."""
        _, _, magnitude = sobel(np.ones((2, 2)))
        assert magnitude.shape == (2, 2)
        assert not magnitude.any()

    def test_laplacian_single_peak(self):
        """Test the 4-neighbour response of an isolated bright pixel."""
        lum = np.zeros((5, 5))
        lum[2, 2] = 10.0
        response = laplacian(lum)
        assert response[2, 2] == pytest.approx(40.0)
        assert response[1, 2] == pytest.approx(-10.0)
        assert response[1, 1] == 0.0

    def test_block_variance(self):
        """Test variance over a clipped region."""
        lum = np.zeros((4, 4))
        lum[:, 2:] = 10.0
        assert block_variance(lum, 0, 0, 4, 4) == pytest.approx(25.0)
        assert block_variance(lum, 0, 0, 2, 2) == 0.0
        assert block_variance(lum, 10, 10, 2, 2) == 0.0

    def test_luminance_histogram(self):
        """Test floored 256-bin histogram."""
        histogram = luminance_histogram(np.array([[0.0, 0.9, 255.0, 128.5]]))
        assert histogram.shape == (256,)
        assert histogram[0] == 2
        assert histogram[128] == 1
        assert histogram[255] == 1


class TestSampling:
    """Tests for margin-start sampling."""

    def test_sample_stride(self):
        """Test grid points are multiples of the stride without a margin."""
        plane = np.arange(100).reshape(10, 10)
        sampled = sample(plane, 4)
        assert sampled.tolist() == [[0, 4, 8], [40, 44, 48], [80, 84, 88]]

    def test_sample_margin(self):
        """Test the grid starts at the margin and stops before size - margin."""
        plane = np.arange(100).reshape(10, 10)
        sampled = sample(plane, 4, margin=2)
        assert sampled.tolist() == [[22, 26], [62, 66]]

    def test_sample_margin_one_hits_odd_coordinates(self):
        """Test a margin of one with stride two samples odd positions."""
        assert sample_coords(8, 2, 1).tolist() == [1, 3, 5]

    def test_sample_coords_match_sample(self):
        """Test coordinate helper selects the same positions."""
        assert sample_coords(10, 4, 2).tolist() == [2, 6]
        assert sample_coords(10, 4).tolist() == [0, 4, 8]

    def test_sample_keeps_channels(self):
        """Test trailing channel axes survive sampling."""
        assert sample(np.zeros((9, 9, 3)), 4).shape == (3, 3, 3)

    def test_sample_empty(self):
        """Test a margin larger than the plane gives an empty sample."""
        assert sample(np.zeros((3, 3)), 2, margin=5).size == 0
        assert sample_coords(3, 2, 5).size == 0

    def test_every_nth_pixel(self):
        """Test raster-order decimation."""
        plane = np.arange(2 * 4 * 3).reshape(2, 4, 3)
        picked = every_nth_pixel(plane, 4)
        assert picked.shape == (2, 3)
        assert picked[1].tolist() == [12, 13, 14]

    def test_block_positions(self):
        """Test corners stop strictly before dimension - size."""
        assert list(block_positions(64, 48, 32, 16)) == [(0, 0), (16, 0)]
        assert list(block_positions(10, 10, 32, 16)) == []

    def test_block_positions_skip_flush_block(self):
        """Test a block touching the bottom edge is not produced."""
        corners = list(block_positions(120, 128, 32, 16))
        assert max(y for _, y in corners) == 80
        assert max(x for x, _ in corners) == 80
        assert list(block_positions(32, 32, 32, 16)) == []


class TestRegionSharpness:
    """Tests for stride-2 regional gradient means."""

    def test_uniform_magnitude(self):
        """Test a constant interior averages to itself."""
        magnitude = np.zeros((10, 10))
        magnitude[1:-1, 1:-1] = 8.0
        assert region_sharpness(magnitude, 0, 0, 10, 10) == pytest.approx(8.0)

    def test_samples_start_inside_border(self):
        """Test the grid starts at row and column 1 for a region at the origin."""
        magnitude = np.zeros((10, 10))
        magnitude[1, 1] = 90.0
        # rows 1,3,5,7 x cols 1,3,5,7
        assert region_sharpness(magnitude, 0, 0, 10, 10) == pytest.approx(90.0 / 16)

    def test_inset_shifts_grid(self):
        """Test an inset of one starts sampling at y + 1 and x + 1."""
        magnitude = np.zeros((10, 10))
        magnitude[3, 3] = 40.0
        assert region_sharpness(magnitude, 2, 2, 6, 6) == 0.0
        assert region_sharpness(magnitude, 2, 2, 6, 6, inset=1) == pytest.approx(40.0 / 4)

    def test_empty_region(self):
        """Test regions without interior samples score 0."""
        assert region_sharpness(np.ones((4, 4)), 3, 3, 1, 1) == 0.0


class TestComputePlanes:
    """Tests for per-frame plane bundles."""

    def test_shapes(self, gradient_frame):
        """Test every plane matches the frame."""
        planes = compute_planes(gradient_frame)
        assert planes.rgb.shape == (120, 160, 3)
        assert planes.lum.shape == (120, 160)
        assert planes.magnitude.shape == (120, 160)

    def test_hsv_is_lazy_and_cached(self, gradient_frame):
        """Test HSV is computed once on demand."""
        planes = compute_planes(gradient_frame)
        first = planes.hsv
        assert planes.hsv is first

    def test_angle_range(self, checkerboard_frame):
        """Test gradient angles lie in (-180, 180]."""
        angle = compute_planes(checkerboard_frame).angle
        assert angle.min() >= -180.0
        assert angle.max() <= 180.0
        assert not math.isnan(float(angle.sum()))
