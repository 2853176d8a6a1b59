"""
Tests for brightness and normalization math.
"""

import pytest

from autocrop.core.color import brightness, clamp8, normalize_color, normalized_brightness
from autocrop.core.errors import NormalizationRangeError


class TestBrightness:
    def test_rec601_weights(self):
        assert brightness(1, 0, 0) == pytest.approx(0.299)
        assert brightness(0, 1, 0) == pytest.approx(0.587)
        assert brightness(0, 0, 1) == pytest.approx(0.114)

    def test_white_and_black(self):
        assert brightness(255, 255, 255) == pytest.approx(255)
        assert brightness(0, 0, 0) == 0

    def test_clamp8(self):
        assert clamp8(-3) == 0
        assert clamp8(300) == 255
        assert clamp8(12.5) == 12.5


class TestNormalizeColor:
    def test_linear_stretch(self):
        assert normalize_color(33, 6, 60, 1) == pytest.approx(127.5)
        assert normalize_color(6, 6, 60, 1) == 0
        assert normalize_color(60, 6, 60, 1) == pytest.approx(255)

    def test_below_black_point_is_zero(self):
        assert normalize_color(0, 6, 60, 1) == 0
        assert normalize_color(0, 6, 60, 2.2) == 0

    def test_above_white_point_is_clamped(self):
        assert normalize_color(255, 6, 60, 1) == 255

    def test_out_of_range_input_is_clamped(self):
        assert normalize_color(400, 0, 255, 1) == 255
        assert normalize_color(-20, 0, 255, 1) == 0

    def test_gamma(self):
        assert normalize_color(63.75, 0, 255, 2) == pytest.approx(127.5)

    def test_equal_points_fail_fast(self):
        with pytest.raises(NormalizationRangeError):
            normalize_color(100, 40, 40, 1)

    def test_white_below_black_fails_fast(self):
        # White point is raised to the black point, leaving no range.
        with pytest.raises(NormalizationRangeError):
            normalize_color(100, 80, 40, 1)

    def test_points_clamped_to_8bit(self):
        with pytest.raises(NormalizationRangeError):
            normalize_color(100, 300, 400, 1)


class TestNormalizedBrightness:
    def test_grey(self):
        assert normalized_brightness(33, 33, 33, 6, 60, 1) == pytest.approx(127.5)

    def test_saturates(self):
        assert normalized_brightness(255, 255, 255, 6, 60, 1) == pytest.approx(255)
        assert normalized_brightness(0, 0, 0, 6, 60, 1) == 0
