"""
Geometry value types and clamping helpers.

``Point`` and ``Rect`` are immutable; every overlay mutation produces a new
``Rect`` rather than editing one in place.  ``ViewportBox`` is the size of
the rendering surface, fixed for the lifetime of a session.
"""

import math
from dataclasses import dataclass

from cropper.errors import InvalidArgument


# =============================================================================
# Data classes
# =============================================================================
@dataclass(frozen=True)
class Point:
    """A display- or source-space coordinate."""
    x: float = 0
    y: float = 0

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; width and height must be non-negative."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or math.isnan(value):
                raise InvalidArgument(f"Rect.{name} must be a number, got {value!r}")
        if self.width < 0 or self.height < 0:
            raise InvalidArgument(f"Rect size must be non-negative, got {self.width}x{self.height}")

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_box(self) -> tuple:
        """Return ``(left, upper, right, lower)`` as used by ``Image.crop``."""
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True)
class ViewportBox:
    """Size of the rendering surface."""
    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidArgument(f"Viewport must be positive, got {self.width}x{self.height}")


# =============================================================================
# Clamping utilities
# =============================================================================
def clamp_position(value: float, upper: float) -> float:
    """Clamp a coordinate into ``[0, upper]``; the lower bound is checked first."""
    if value < 0:
        return 0
    if value > upper:
        return upper
    return value


def clamp_to_bounds(rect: Rect, width: int, height: int) -> Rect:
    """Clamp position into the bounds, then shrink the size to fit.

    The position is clamped first so a rect translated past an edge never
    grows the result back beyond it.
    """
    x = clamp_position(rect.x, width)
    y = clamp_position(rect.y, height)
    w = rect.width
    h = rect.height
    if x + w > width:
        w = width - x
    if y + h > height:
        h = height - y
    return Rect(x, y, w, h)
