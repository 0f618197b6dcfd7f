"""
The selection overlay: a rectangle with a locked aspect ratio.

``OverlayModel`` owns the overlay rectangle and keeps it inside the viewport
on every mutation.  It never redraws or does I/O; callers decide when to
repaint.  Coordinates are display-space pixels.
"""

import math

from cropper.config import (
    DEFAULT_ASPECT_RATIO, DEFAULT_OVERLAY, HANDLE_DRAW_OFFSET, HANDLE_SIZE, MIN_OVERLAY_WIDTH,
)
from cropper.errors import InvalidArgument
from cropper.models import Point, Rect, ViewportBox, clamp_position


class OverlayModel:
    """Draggable, resizable selection rectangle clamped to a viewport."""

    def __init__(
        self,
        viewport: ViewportBox,
        rect: Rect | None = None,
        aspect_ratio: float | None = None,
        handle_size: int = HANDLE_SIZE,
    ):
        self._viewport = viewport
        self._handle_size = handle_size
        self._aspect_ratio = DEFAULT_ASPECT_RATIO
        self._rect = rect if rect is not None else Rect(*DEFAULT_OVERLAY)
        if aspect_ratio is not None:
            self.set_aspect_ratio(aspect_ratio)

    # --- State ---

    @property
    def rect(self) -> Rect:
        return self._rect

    @property
    def aspect_ratio(self) -> float:
        """Locked height / width ratio."""
        return self._aspect_ratio

    @property
    def handle_size(self) -> int:
        return self._handle_size

    @property
    def viewport(self) -> ViewportBox:
        return self._viewport

    def reset(self, rect: Rect | None = None):
        """Put the overlay back to its default position at the current ratio."""
        self._rect = rect if rect is not None else Rect(*DEFAULT_OVERLAY)
        self.set_aspect_ratio(self._aspect_ratio)

    # --- Mutators ---

    def set_aspect_ratio(self, ratio: float):
        """Lock the overlay to *ratio* (height / width) and re-derive its height."""
        if not isinstance(ratio, (int, float)) or not math.isfinite(ratio) or ratio <= 0:
            raise InvalidArgument(f"Aspect ratio must be a positive number, got {ratio!r}")
        self._aspect_ratio = ratio
        r = self._rect
        height = math.floor(r.width * ratio)
        vh = self._viewport.height
        if r.y + height > vh:
            # Too tall at this width.  Lift the overlay so the minimum width
            # still fits below it, then refit from the anchor.
            min_height = MIN_OVERLAY_WIDTH * ratio
            if r.y + min_height > vh:
                self.move_to(r.x, vh - min_height)
            self.resize_from_anchor(r.width)
            return
        self._rect = Rect(r.x, r.y, r.width, height)

    def move_to(self, x: float, y: float):
        """Move the top-left corner, clamping each axis into the viewport."""
        r = self._rect
        x = clamp_position(x, self._viewport.width - r.width)
        y = clamp_position(y, self._viewport.height - r.height)
        self._rect = Rect(x, y, r.width, r.height)

    def move_by(self, dx: float, dy: float):
        self.move_to(self._rect.x + dx, self._rect.y + dy)

    def resize_from_anchor(self, new_width: float):
        """Resize with the top-left corner fixed, keeping the aspect ratio.

        Width is clamped against the right edge first, then the height that
        follows from it against the bottom edge.  When the bottom clamp fires
        the width is re-derived from the clamped height, so height has the
        final say.
        """
        r = self._rect
        ratio = self._aspect_ratio
        vw = self._viewport.width
        vh = self._viewport.height

        width = max(new_width, MIN_OVERLAY_WIDTH)
        if r.x + width > vw:
            width = vw - r.x

        height = width * ratio
        if r.y + height > vh:
            height = vh - r.y
            width = height / ratio

        self._rect = Rect(r.x, r.y, width, height)

    # --- Hit testing ---

    def contains_point(self, p: Point) -> bool:
        """True if *p* is strictly inside the overlay."""
        r = self._rect
        return r.x < p.x < r.right and r.y < p.y < r.bottom

    def is_on_resize_handle(self, p: Point) -> bool:
        """True if *p* is within ``handle_size`` of the bottom-right corner.

        The zone reaches both inside and outside the corner, so it is larger
        than the painted handle.
        """
        r = self._rect
        s = self._handle_size
        return (r.right - s < p.x < r.right + s) and (r.bottom - s < p.y < r.bottom + s)

    def handle_rect(self) -> Rect:
        """Visible resize handle square."""
        r = self._rect
        return Rect(
            r.right - HANDLE_DRAW_OFFSET,
            r.bottom - HANDLE_DRAW_OFFSET,
            self._handle_size,
            self._handle_size,
        )
