"""
Display-space / source-space coordinate conversion.

A loaded raster is drawn into the viewport at a single scale factor.  The
factor is chosen by comparing how far each source dimension overshoots (or
undershoots) the viewport and fitting the axis with the smaller gap; the
other axis follows at the same factor and may still overflow.  This is the
long-standing preview behaviour and is kept as-is.

Display sizes are floor-truncated, the factor itself keeps full precision so
selections can be mapped back to exact source pixels.
"""

import math
from dataclasses import dataclass

from cropper.errors import InvalidArgument
from cropper.models import Point, ViewportBox


@dataclass(frozen=True)
class DisplayDimensions:
    """Rendered size of a raster and the source -> display factor."""
    width: int
    height: int
    factor: float


def compute_scale(viewport: ViewportBox, source_width: int, source_height: int) -> DisplayDimensions:
    """Pick the scale factor for drawing a source raster into *viewport*."""
    if source_width <= 0 or source_height <= 0:
        raise InvalidArgument(f"Source size must be positive, got {source_width}x{source_height}")

    # if/else, not two ifs: square sources must still scale
    if (viewport.width - source_width) <= (viewport.height - source_height):
        factor = viewport.width / source_width
    else:
        factor = viewport.height / source_height

    return DisplayDimensions(
        width=math.floor(source_width * factor),
        height=math.floor(source_height * factor),
        factor=factor,
    )


def to_source_space(point: Point, factor: float, source_width: int, source_height: int) -> Point:
    """Map a display point to integer source pixels, clamped to the raster."""
    if factor <= 0:
        raise InvalidArgument(f"Scale factor must be positive, got {factor!r}")
    sx = math.floor(point.x / factor)
    sy = math.floor(point.y / factor)
    sx = max(0, min(sx, source_width))
    sy = max(0, min(sy, source_height))
    return Point(sx, sy)


def to_display_space(point: Point, factor: float) -> Point:
    """Map a source point into display space (no truncation)."""
    return Point(point.x * factor, point.y * factor)


class CoordinateTransform:
    """Holds the viewport and the scale of the currently loaded raster."""

    def __init__(self, viewport: ViewportBox):
        self._viewport = viewport
        self._dimens: DisplayDimensions | None = None
        self._source_w = 0
        self._source_h = 0

    @property
    def viewport(self) -> ViewportBox:
        return self._viewport

    @property
    def dimensions(self) -> DisplayDimensions | None:
        """Display size and factor, or None before any raster is loaded."""
        return self._dimens

    @property
    def factor(self) -> float:
        return self._dimens.factor if self._dimens else 1.0

    def recompute(self, source_width: int, source_height: int) -> DisplayDimensions:
        self._source_w = source_width
        self._source_h = source_height
        self._dimens = compute_scale(self._viewport, source_width, source_height)
        return self._dimens

    def clear(self):
        self._dimens = None
        self._source_w = 0
        self._source_h = 0

    def to_source(self, point: Point) -> Point:
        return to_source_space(point, self.factor, self._source_w, self._source_h)

    def to_display(self, point: Point) -> Point:
        return to_display_space(point, self.factor)
