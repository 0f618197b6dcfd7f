"""
Pillow-backed raster surface (Qt-free).

The crop engine never touches pixel buffers itself.  It hands a ``RasterRef``
and a rectangle to a surface, which decodes, scales, copies and encodes.
PSD files are composited with psd-tools, everything else goes through Pillow.
"""

import io
import logging
from dataclasses import dataclass

from PIL import Image
from psd_tools import PSDImage

from cropper.config import DEFAULT_MIME_TYPE, JPEG_QUALITY_DEFAULT, MIME_FORMATS, PNG_COMPRESS_LEVEL
from cropper.errors import DecodeError, EncodeError
from cropper.models import Rect

# Allow very large images (Pillow's default limit is ~178MP)
Image.MAX_IMAGE_PIXELS = None

logger = logging.getLogger(__name__)

_PSD_SIGNATURE = b"8BPS"


@dataclass(frozen=True)
class RasterRef:
    """A decoded image and its natural (un-scaled) size."""
    image: Image.Image
    width: int
    height: int

    @classmethod
    def from_image(cls, image: Image.Image) -> "RasterRef":
        return cls(image, image.width, image.height)


def resolve_format(mime_type: str | None) -> tuple[str, str]:
    """Return ``(mime_type, pillow_format)`` for a MIME type or bare name like ``"png"``."""
    mime = (mime_type or DEFAULT_MIME_TYPE).strip().lower()
    if "/" not in mime:
        mime = f"image/{'jpeg' if mime == 'jpg' else mime}"
    fmt = MIME_FORMATS.get(mime)
    if fmt is None:
        raise EncodeError(f"Unsupported output type: {mime_type!r}")
    return mime, fmt


class PillowSurface:
    """Raster operations implemented with Pillow."""

    def decode(self, data: bytes) -> RasterRef:
        """Decode *data* into a fully loaded raster."""
        if not data:
            raise DecodeError("No image data")
        try:
            if data[:4] == _PSD_SIGNATURE:
                image = PSDImage.open(io.BytesIO(data)).composite()
            else:
                image = Image.open(io.BytesIO(data))
                image.load()
        except Exception as exc:
            raise DecodeError(f"Could not decode image: {exc}") from exc
        logger.debug("Decoded %dx%d %s raster", image.width, image.height, image.mode)
        return RasterRef.from_image(image)

    def draw_scaled(self, raster: RasterRef, dest_width: int, dest_height: int) -> Image.Image:
        """Return a preview of *raster* scaled to the destination size."""
        return raster.image.resize(
            (max(1, dest_width), max(1, dest_height)),
            Image.Resampling.LANCZOS,
        )

    def copy_region(self, raster: RasterRef, src_rect: Rect) -> RasterRef:
        """Copy *src_rect* (integer source pixels) out of *raster* into a new raster."""
        box = tuple(int(v) for v in src_rect.as_box())
        return RasterRef.from_image(raster.image.crop(box))

    def encode(self, raster: RasterRef, mime_type: str | None = None) -> bytes:
        mime, fmt = resolve_format(mime_type)
        img = raster.image
        options = {}
        if fmt == "PNG":
            options["compress_level"] = PNG_COMPRESS_LEVEL
        elif fmt == "JPEG":
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")
            options["quality"] = JPEG_QUALITY_DEFAULT
        elif fmt == "BMP" and img.mode not in ("RGB", "RGBA", "L", "1", "P"):
            img = img.convert("RGBA")

        buf = io.BytesIO()
        try:
            img.save(buf, fmt, **options)
        except (OSError, ValueError, KeyError, SystemError) as exc:
            raise EncodeError(f"Could not encode {mime}: {exc}") from exc
        logger.debug("Encoded %dx%d raster as %s (%d bytes)", img.width, img.height, mime, buf.tell())
        return buf.getvalue()
