"""Unit tests for display/source coordinate conversion."""

import pytest

from cropper.errors import InvalidArgument
from cropper.models import Point, ViewportBox
from cropper.transform import CoordinateTransform, compute_scale, to_display_space, to_source_space


class TestComputeScale:
    def test_wide_source_scales_by_width(self):
        dimens = compute_scale(ViewportBox(300, 300), 600, 200)
        assert dimens.factor == 0.5
        assert (dimens.width, dimens.height) == (300, 100)

    def test_tall_source_scales_by_height(self):
        dimens = compute_scale(ViewportBox(300, 300), 200, 600)
        assert dimens.factor == 0.5
        assert (dimens.width, dimens.height) == (100, 300)

    def test_square_source_still_scales(self):
        dimens = compute_scale(ViewportBox(300, 300), 600, 600)
        assert dimens.factor == 0.5
        assert (dimens.width, dimens.height) == (300, 300)

    def test_tie_uses_width(self):
        # Equal gaps: width branch wins
        dimens = compute_scale(ViewportBox(400, 300), 200, 100)
        assert dimens.factor == 2.0
        assert (dimens.width, dimens.height) == (400, 200)

    def test_small_source_is_enlarged(self):
        dimens = compute_scale(ViewportBox(300, 300), 100, 50)
        # width gap 200 < height gap 250
        assert dimens.factor == 3.0
        assert (dimens.width, dimens.height) == (300, 150)

    def test_display_size_is_floored(self):
        dimens = compute_scale(ViewportBox(100, 100), 400, 399)
        assert dimens.width == 100
        assert dimens.height == 99
        assert dimens.factor == 0.25

    def test_other_axis_may_overflow(self):
        # Width gap (-300) is the smaller one, so height follows at the same factor
        dimens = compute_scale(ViewportBox(300, 100), 600, 300)
        assert dimens.factor == 0.5
        assert dimens.height == 150

    @pytest.mark.parametrize("vw,vh,sw,sh", [
        (300, 300, 600, 200), (300, 300, 200, 600), (640, 480, 1920, 1080),
        (640, 480, 1080, 1920), (800, 600, 123, 457), (50, 900, 1000, 10),
    ])
    def test_scaled_axis_fits_viewport(self, vw, vh, sw, sh):
        dimens = compute_scale(ViewportBox(vw, vh), sw, sh)
        if (vw - sw) <= (vh - sh):
            assert dimens.width <= vw
        else:
            assert dimens.height <= vh

    def test_rejects_empty_source(self):
        with pytest.raises(InvalidArgument):
            compute_scale(ViewportBox(300, 300), 0, 100)


class TestSpaceConversion:
    def test_to_source_floors(self):
        assert to_source_space(Point(51, 77), 0.5, 600, 200) == Point(102, 154)
        assert to_source_space(Point(10, 10), 3.0, 100, 100) == Point(3, 3)

    def test_to_source_clamps(self):
        assert to_source_space(Point(-10, 500), 0.5, 600, 200) == Point(0, 200)

    def test_to_source_rejects_bad_factor(self):
        with pytest.raises(InvalidArgument):
            to_source_space(Point(1, 1), 0, 10, 10)

    @pytest.mark.parametrize("factor", [0.1, 0.37, 0.5, 1.0, 2.5, 7.0])
    def test_round_trip_within_one_pixel(self, factor):
        for p in (Point(0, 0), Point(13, 29), Point(99.5, 47.25)):
            back = to_display_space(to_source_space(p, factor, 10_000, 10_000), factor)
            assert abs(back.x - p.x) <= max(1, factor)
            assert abs(back.y - p.y) <= max(1, factor)


class TestCoordinateTransform:
    def test_defaults_before_load(self):
        transform = CoordinateTransform(ViewportBox(300, 300))
        assert transform.dimensions is None
        assert transform.factor == 1.0

    def test_recompute_and_convert(self):
        transform = CoordinateTransform(ViewportBox(300, 300))
        transform.recompute(600, 200)
        assert transform.factor == 0.5
        assert transform.to_source(Point(150, 50)) == Point(300, 100)
        assert transform.to_display(Point(300, 100)) == Point(150, 50)

    def test_clear(self):
        transform = CoordinateTransform(ViewportBox(300, 300))
        transform.recompute(600, 200)
        transform.clear()
        assert transform.dimensions is None
