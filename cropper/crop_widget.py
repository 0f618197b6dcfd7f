"""
Interactive crop-overlay widget and Qt image helpers.

This module contains everything that touches both Qt **and** image display:
``pil_to_qpixmap``, the pointer adapter that turns Qt mouse/touch input into
``PointerEvent`` values, the background ``ImageLoaderThread``, and the
``ImageCropWidget`` that paints a ``Session``.
"""

from PIL import Image
from PyQt6.QtWidgets import QWidget, QSizePolicy
from PyQt6.QtCore import Qt, QEvent, QPointF, QRectF, pyqtSignal, QThread
from PyQt6.QtGui import (
    QPainter, QPainterPath, QPixmap, QColor, QPen, QBrush, QImage,
    QKeyEvent, QMouseEvent, QPaintEvent,
)

from cropper.config import NUDGE_SMALL, NUDGE_LARGE, OVERLAY_DIM_COLOR
from cropper.drag import (
    CURSOR_MOVE, CURSOR_RESIZE, POINTER_DOWN, POINTER_LEAVE, POINTER_MOVE, POINTER_UP, PointerEvent,
)
from cropper.errors import DecodeError
from cropper.models import Point, ViewportBox
from cropper.session import Session
from cropper.surface import PillowSurface


# =============================================================================
# Qt ↔ PIL helpers
# =============================================================================

def pil_to_qpixmap(pil_img: Image.Image) -> QPixmap:
    """Convert a PIL Image to QPixmap."""
    img_rgb = pil_img.convert("RGBA")
    data = img_rgb.tobytes("raw", "RGBA")
    qimg = QImage(data, img_rgb.width, img_rgb.height, QImage.Format.Format_RGBA8888)
    return QPixmap.fromImage(qimg.copy())


# =============================================================================
# Pointer adapter
# =============================================================================

def pointer_event(kind: str, position: QPointF) -> PointerEvent:
    """Build a canonical pointer event from a widget-relative Qt position."""
    return PointerEvent(kind, Point(position.x(), position.y()))


_TOUCH_KINDS = {
    QEvent.Type.TouchBegin: POINTER_DOWN,
    QEvent.Type.TouchUpdate: POINTER_MOVE,
    QEvent.Type.TouchEnd: POINTER_UP,
    QEvent.Type.TouchCancel: POINTER_UP,
}

_CURSORS = {
    CURSOR_RESIZE: Qt.CursorShape.SizeFDiagCursor,
    CURSOR_MOVE: Qt.CursorShape.SizeAllCursor,
}


# =============================================================================
# Background image loader
# =============================================================================

class ImageLoaderThread(QThread):
    """Background thread for decoding images (especially large PSDs)."""
    finished = pyqtSignal(object, int)
    error = pyqtSignal(str, int)

    def __init__(self, data: bytes, generation: int, surface: PillowSurface, parent=None):
        super().__init__(parent)
        self._data = data
        self._generation = generation
        self._surface = surface

    def run(self):
        try:
            raster = self._surface.decode(self._data)
            self.finished.emit(raster, self._generation)
        except DecodeError as e:
            self.error.emit(str(e), self._generation)


# =============================================================================
# Image Crop Widget — interactive crop overlay on image
# =============================================================================

class ImageCropWidget(QWidget):
    """Widget that displays a session's image with its crop overlay."""

    image_loaded = pyqtSignal()
    load_failed = pyqtSignal(str)

    def __init__(self, viewport: ViewportBox, aspect_ratio: float | None = None, parent=None):
        super().__init__(parent)
        self.setFixedSize(viewport.width, viewport.height)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setMouseTracking(True)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents)

        self._surface = PillowSurface()
        self._preview: QPixmap | None = None
        self._preview_source = None
        self._loading = False
        self._generation = 0
        self._loaders: dict[int, ImageLoaderThread] = {}
        self._session = Session(viewport, self._surface, aspect_ratio=aspect_ratio, on_redraw=self._on_redraw)

    @property
    def session(self) -> Session:
        return self._session

    # --- Loading ---

    def load_bytes(self, data: bytes):
        """Decode *data* in the background; a newer call supersedes an older one."""
        self._generation += 1
        self._loading = True
        self.update()
        loader = ImageLoaderThread(data, self._generation, self._surface, self)
        loader.finished.connect(self._on_loaded)
        loader.error.connect(self._on_load_error)
        self._loaders[self._generation] = loader
        loader.start()

    def _release_loader(self, generation: int):
        loader = self._loaders.pop(generation, None)
        if loader is not None:
            # Signals are emitted from run(); join before deleting
            loader.wait()
            loader.deleteLater()

    def _on_loaded(self, raster, generation: int):
        self._release_loader(generation)
        if generation != self._generation:
            return
        self._loading = False
        self._session.set_raster(raster)
        self.image_loaded.emit()

    def _on_load_error(self, message: str, generation: int):
        self._release_loader(generation)
        if generation != self._generation:
            return
        self._loading = False
        self.update()
        self.load_failed.emit(message)

    def _on_redraw(self):
        raster = self._session.current_raster
        if raster is not None and raster is not self._preview_source:
            self._preview = pil_to_qpixmap(self._session.preview())
            self._preview_source = raster
        self.update()

    # --- Painting ---

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor(30, 30, 30))

        if self._preview is None:
            painter.setPen(QColor(128, 128, 128))
            msg = "Loading image…" if self._loading else "No image loaded"
            painter.drawText(self.rect(), Qt.AlignmentFlag.AlignCenter, msg)
            painter.end()
            return

        painter.drawPixmap(0, 0, self._preview)

        if self._session.is_cropping:
            self._paint_overlay(painter)

        painter.end()

    def _paint_overlay(self, painter: QPainter):
        overlay = self._session.overlay
        r = overlay.rect
        w, h = self.width(), self.height()
        crop = QRectF(r.x, r.y, r.width, r.height)

        # Shade everything outside the selection
        shade = QPainterPath()
        shade.addRect(QRectF(0, 0, w, h))
        hole = QPainterPath()
        hole.addRect(crop)
        painter.fillPath(shade.subtracted(hole), QColor(*OVERLAY_DIM_COLOR))

        # Resize handle
        hr = overlay.handle_rect()
        painter.setPen(QPen(QColor(255, 255, 255), 1))
        painter.setBrush(QBrush(QColor(0, 0, 0)))
        painter.drawRect(QRectF(hr.x, hr.y, hr.width, hr.height))

    # --- Pointer interaction ---

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self._dispatch(pointer_event(POINTER_DOWN, event.position()))

    def mouseMoveEvent(self, event: QMouseEvent):
        pos = event.position()
        self._update_cursor(pos)
        self._dispatch(pointer_event(POINTER_MOVE, pos))

    def mouseReleaseEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._dispatch(pointer_event(POINTER_UP, event.position()))

    def leaveEvent(self, event):
        self._dispatch(PointerEvent(POINTER_LEAVE, Point(-1, -1)))
        super().leaveEvent(event)

    def event(self, event):
        kind = _TOUCH_KINDS.get(event.type())
        if kind is not None:
            points = event.points()
            if points:
                self._dispatch(pointer_event(kind, points[0].position()))
            event.accept()
            return True
        return super().event(event)

    def _dispatch(self, ev: PointerEvent):
        self._session.handle_pointer(ev)

    def _update_cursor(self, pos: QPointF):
        hint = self._session.cursor_at(Point(pos.x(), pos.y()))
        self.setCursor(_CURSORS.get(hint, Qt.CursorShape.ArrowCursor))

    # --- Keyboard nudge ---

    def keyPressEvent(self, event: QKeyEvent):
        amount = NUDGE_LARGE if event.modifiers() & Qt.KeyboardModifier.ShiftModifier else NUDGE_SMALL
        deltas = {
            Qt.Key.Key_Left: (-amount, 0),
            Qt.Key.Key_Right: (amount, 0),
            Qt.Key.Key_Up: (0, -amount),
            Qt.Key.Key_Down: (0, amount),
        }
        delta = deltas.get(event.key())
        if delta is None or not self._session.nudge(*delta):
            super().keyPressEvent(event)
