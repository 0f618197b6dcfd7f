"""Unit tests for the Pillow raster surface."""

import io

import pytest
from PIL import Image

from cropper.errors import DecodeError, EncodeError
from cropper.models import Rect
from cropper.surface import PillowSurface, RasterRef, resolve_format

from conftest import make_png


@pytest.fixture
def surface():
    return PillowSurface()


class TestDecode:
    def test_png(self, surface):
        raster = surface.decode(make_png(64, 32))
        assert (raster.width, raster.height) == (64, 32)
        assert raster.image.size == (64, 32)

    @pytest.mark.parametrize("data", [b"", b"not an image", b"8BPSgarbage"])
    def test_garbage_raises(self, surface, data):
        with pytest.raises(DecodeError):
            surface.decode(data)


class TestDrawAndCopy:
    def test_draw_scaled(self, surface):
        raster = surface.decode(make_png(600, 200))
        preview = surface.draw_scaled(raster, 300, 100)
        assert preview.size == (300, 100)
        assert raster.image.size == (600, 200)

    def test_copy_region_returns_new_raster(self, surface):
        raster = surface.decode(make_png(50, 50))
        region = surface.copy_region(raster, Rect(10, 10, 20, 5))
        assert (region.width, region.height) == (20, 5)
        assert region.image is not raster.image


class TestEncode:
    @pytest.mark.parametrize("mime,fmt", [
        (None, "PNG"), ("image/png", "PNG"), ("png", "PNG"),
        ("image/jpeg", "JPEG"), ("jpg", "JPEG"), ("image/webp", "WEBP"), ("image/bmp", "BMP"),
    ])
    def test_formats(self, surface, mime, fmt):
        raster = RasterRef.from_image(Image.new("RGBA", (8, 6), (10, 20, 30, 255)))
        data = surface.encode(raster, mime)
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == fmt
            assert img.size == (8, 6)

    def test_unknown_type(self, surface):
        raster = RasterRef.from_image(Image.new("RGB", (2, 2)))
        with pytest.raises(EncodeError):
            surface.encode(raster, "image/x-nope")

    def test_resolve_format(self):
        assert resolve_format(None) == ("image/png", "PNG")
        assert resolve_format("JPEG") == ("image/jpeg", "JPEG")
