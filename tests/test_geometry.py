"""
Tests for side geometry and scan length correction.
"""

import pytest

from autocrop.core.errors import InvalidSideError
from autocrop.core.geometry import (
    SIDES,
    Side,
    correct_scan_ratio,
    pixel_from_edge,
    side_axes,
    side_scan_length,
)


class TestSideAxes:
    def test_horizontal_sides(self):
        assert side_axes(Side.TOP, 200, 100) == (200, 100)
        assert side_axes(Side.BOTTOM, 200, 100) == (200, 100)

    def test_vertical_sides(self):
        assert side_axes(Side.LEFT, 200, 100) == (100, 200)
        assert side_axes(Side.RIGHT, 200, 100) == (100, 200)

    def test_invalid_side(self):
        with pytest.raises(InvalidSideError):
            side_axes(3, 200, 100)

    def test_all_sides_in_order(self):
        assert [s.value for s in SIDES] == ["top", "right", "bottom", "left"]


class TestPixelFromEdge:
    def test_top(self):
        assert pixel_from_edge(Side.TOP, 7, 3, 200, 100) == (7, 3)

    def test_bottom(self):
        assert pixel_from_edge(Side.BOTTOM, 7, 3, 200, 100) == (7, 96)

    def test_left(self):
        assert pixel_from_edge(Side.LEFT, 7, 3, 200, 100) == (3, 7)

    def test_right(self):
        assert pixel_from_edge(Side.RIGHT, 7, 3, 200, 100) == (196, 7)

    def test_depth_zero_is_the_outermost_pixel(self):
        assert pixel_from_edge(Side.BOTTOM, 0, 0, 200, 100) == (0, 99)
        assert pixel_from_edge(Side.RIGHT, 0, 0, 200, 100) == (199, 0)

    def test_invalid_side(self):
        with pytest.raises(InvalidSideError):
            pixel_from_edge("top", 0, 0, 10, 10)


class TestCorrectScanRatio:
    @pytest.mark.parametrize("length", [1, 100, 333.3])
    @pytest.mark.parametrize("ratio", [0.5, 1.0, 16 / 9])
    def test_equal_ratios_unchanged(self, length, ratio):
        assert correct_scan_ratio(length, ratio, ratio, True) == length

    def test_not_applied_unchanged(self):
        assert correct_scan_ratio(100, 1.0, 2.0, False) == 100
        assert correct_scan_ratio(100, 3.0, 0.5, False) == 100

    def test_shrinks_by_ratio_of_ratios(self):
        assert correct_scan_ratio(100, 1.0, 2.0, True) == pytest.approx(50)
        assert correct_scan_ratio(100, 2.0, 1.0, True) == pytest.approx(50)
        assert correct_scan_ratio(90, 4 / 3, 16 / 9, True) == pytest.approx(90 * 0.75)

    def test_never_grows(self):
        for r1, r2 in [(0.3, 0.9), (2.5, 1.1), (1.0, 1.0001)]:
            assert correct_scan_ratio(100, r1, r2, True) <= 100


class TestSideScanLength:
    def test_pillarbox_narrows_top_and_bottom(self):
        # Canvas 2:1, image 1:1: bars left and right.
        assert side_scan_length(Side.TOP, 200, 100, 1.0, 2.0) == pytest.approx(100)
        assert side_scan_length(Side.BOTTOM, 200, 100, 1.0, 2.0) == pytest.approx(100)
        assert side_scan_length(Side.LEFT, 200, 100, 1.0, 2.0) == 100
        assert side_scan_length(Side.RIGHT, 200, 100, 1.0, 2.0) == 100

    def test_letterbox_narrows_left_and_right(self):
        # Canvas 1:1, image 2:1: bars top and bottom.
        assert side_scan_length(Side.LEFT, 100, 100, 2.0, 1.0) == pytest.approx(50)
        assert side_scan_length(Side.RIGHT, 100, 100, 2.0, 1.0) == pytest.approx(50)
        assert side_scan_length(Side.TOP, 100, 100, 2.0, 1.0) == 100

    def test_matching_ratio(self):
        for side in SIDES:
            along, _ = side_axes(side, 160, 90)
            assert side_scan_length(side, 160, 90, 16 / 9, 16 / 9) == along
