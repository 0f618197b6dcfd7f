"""
Pointer gesture state machine for the overlay.

``DragController`` consumes canonical ``PointerEvent`` values (mouse and
touch are unified upstream) and turns them into ``OverlayModel`` mutations.
A gesture starts on pointer-down, follows pointer-moves, and ends on
pointer-up or when the pointer leaves the viewport.  Only one gesture is in
flight at a time.
"""

import logging
from dataclasses import dataclass

from cropper.errors import InvalidArgument
from cropper.models import Point, Rect
from cropper.overlay import OverlayModel

logger = logging.getLogger(__name__)

# Pointer event kinds
POINTER_DOWN = "down"
POINTER_MOVE = "move"
POINTER_UP = "up"
POINTER_LEAVE = "leave"

# Cursor hints
CURSOR_DEFAULT = "default"
CURSOR_MOVE = "move"
CURSOR_RESIZE = "nwse-resize"


@dataclass(frozen=True)
class PointerEvent:
    """A pointer event in viewport-relative display coordinates."""
    kind: str
    position: Point


@dataclass(frozen=True)
class DragState:
    """Transient gesture state; ``grab_offset`` for moves, ``anchor``/``start_rect`` for resizes."""
    mode: int = 0
    grab_offset: Point | None = None
    anchor: Point | None = None
    start_rect: Rect | None = None


class DragController:
    """Turns pointer gestures into overlay moves and resizes."""

    MODE_IDLE = 0
    MODE_MOVE = 1
    MODE_RESIZE = 2

    def __init__(self, overlay: OverlayModel):
        self._overlay = overlay
        self._state = DragState(self.MODE_IDLE)

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def mode(self) -> int:
        return self._state.mode

    def handle(self, event: PointerEvent) -> bool:
        """Dispatch *event*; returns True if the overlay changed."""
        if event.kind == POINTER_DOWN:
            self.pointer_down(event.position)
            return False
        if event.kind == POINTER_MOVE:
            return self.pointer_move(event.position)
        if event.kind in (POINTER_UP, POINTER_LEAVE):
            self.release()
            return False
        raise InvalidArgument(f"Unknown pointer event kind: {event.kind!r}")

    def pointer_down(self, p: Point):
        overlay = self._overlay
        # The handle sits on the overlay's corner, so it is checked first
        if overlay.is_on_resize_handle(p):
            self._state = DragState(self.MODE_RESIZE, anchor=p, start_rect=overlay.rect)
        elif overlay.contains_point(p):
            self._state = DragState(self.MODE_MOVE, grab_offset=p - overlay.rect.origin)
        else:
            self._state = DragState(self.MODE_IDLE)
        logger.debug("Pointer down at (%s, %s): mode %d", p.x, p.y, self._state.mode)

    def pointer_move(self, p: Point) -> bool:
        state = self._state
        if state.mode == self.MODE_MOVE:
            target = p - state.grab_offset
            self._overlay.move_to(target.x, target.y)
            return True
        if state.mode == self.MODE_RESIZE:
            self._overlay.resize_from_anchor(state.start_rect.width + (p.x - state.anchor.x))
            return True
        return False

    def release(self):
        """End any gesture (pointer-up or pointer-leave)."""
        self._state = DragState(self.MODE_IDLE)

    def cursor_for(self, p: Point) -> str:
        """Cursor hint for the pointer at *p*."""
        if self._state.mode == self.MODE_RESIZE or self._overlay.is_on_resize_handle(p):
            return CURSOR_RESIZE
        if self._overlay.contains_point(p):
            return CURSOR_MOVE
        return CURSOR_DEFAULT
