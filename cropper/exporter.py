"""
Mapping a selection back to source pixels, and producing the cropped output.

``compute_source_rect`` is the one place a display-space selection becomes an
integer source rectangle.  Each edge value is divided by the scale factor and
floored on its own, then the position is clamped into the raster before the
size is shrunk to fit.
"""

import logging
import math

from cropper.models import Rect, clamp_to_bounds
from cropper.surface import PillowSurface, RasterRef

logger = logging.getLogger(__name__)


def compute_source_rect(
    overlay_rect: Rect,
    factor: float,
    source_width: int,
    source_height: int,
    entire_image: bool,
    cropping: bool = True,
) -> Rect:
    """Return the integer source-space rectangle to export."""
    if entire_image or not cropping:
        return Rect(0, 0, source_width, source_height)

    # Truncate each component independently
    raw = Rect(
        math.floor(overlay_rect.x / factor),
        math.floor(overlay_rect.y / factor),
        math.floor(overlay_rect.width / factor),
        math.floor(overlay_rect.height / factor),
    )
    return clamp_to_bounds(raw, source_width, source_height)


class CropExporter:
    """Copies a source rectangle out of a raster and encodes it."""

    def __init__(self, surface: PillowSurface):
        self._surface = surface

    def crop(self, raster: RasterRef | None, source_rect: Rect) -> RasterRef | None:
        """Return a new raster holding *source_rect*.

        None if there is no raster, or if the selection has no overlap with
        the image (an overlay parked in the unused part of the viewport).
        """
        if raster is None:
            logger.warning("Crop requested with no image loaded")
            return None
        if source_rect.width == 0 or source_rect.height == 0:
            logger.warning("Selection does not overlap the image; nothing to crop")
            return None
        logger.debug(
            "Cropping %dx%d raster to (%d, %d, %d, %d)",
            raster.width, raster.height,
            source_rect.x, source_rect.y, source_rect.width, source_rect.height,
        )
        return self._surface.copy_region(raster, source_rect)

    def export(self, raster: RasterRef | None, source_rect: Rect, mime_type: str | None = None) -> bytes | None:
        """Crop and encode; None if there is no raster or the selection is empty."""
        cropped = self.crop(raster, source_rect)
        if cropped is None:
            return None
        return self._surface.encode(cropped, mime_type)
