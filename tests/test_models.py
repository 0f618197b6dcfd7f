"""Unit tests for the geometry value types and clamping helpers."""

import pytest

from cropper.errors import InvalidArgument
from cropper.models import Point, Rect, ViewportBox, clamp_position, clamp_to_bounds


class TestPoint:
    def test_add_and_subtract(self):
        assert Point(5, 7) - Point(2, 3) == Point(3, 4)
        assert Point(1, 1) + Point(2, 3) == Point(3, 4)


class TestRect:
    def test_edges(self):
        r = Rect(10, 20, 30, 40)
        assert r.right == 40
        assert r.bottom == 60
        assert r.origin == Point(10, 20)
        assert r.as_box() == (10, 20, 40, 60)

    def test_negative_size_is_rejected(self):
        with pytest.raises(InvalidArgument):
            Rect(0, 0, -1, 10)
        with pytest.raises(InvalidArgument):
            Rect(0, 0, 10, -1)

    def test_non_numeric_is_rejected(self):
        with pytest.raises(InvalidArgument):
            Rect(0, 0, "10", 10)

    def test_invalid_argument_is_a_value_error(self):
        with pytest.raises(ValueError):
            Rect(0, 0, float("nan"), 10)


class TestViewportBox:
    def test_must_be_positive(self):
        with pytest.raises(InvalidArgument):
            ViewportBox(0, 100)


class TestClamping:
    def test_clamp_position(self):
        assert clamp_position(-5, 100) == 0
        assert clamp_position(150, 100) == 100
        assert clamp_position(42, 100) == 42

    def test_position_clamped_before_size(self):
        # Translated past the right edge: x pulled back, width shrunk to what is left
        result = clamp_to_bounds(Rect(120, 10, 50, 50), 100, 100)
        assert result == Rect(100, 10, 0, 50)

    def test_oversized_rect_shrinks(self):
        result = clamp_to_bounds(Rect(60, 70, 50, 50), 100, 100)
        assert result == Rect(60, 70, 40, 30)

    def test_inside_rect_unchanged(self):
        r = Rect(10, 10, 20, 20)
        assert clamp_to_bounds(r, 100, 100) == r
