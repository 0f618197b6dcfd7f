"""
A crop session: one loaded image, its selection overlay and export state.

``Session`` ties the overlay, drag controller, coordinate transform and
exporter together and is the only piece with outside effects: it calls the
``on_redraw`` callback after every change and hands out encoded exports.
Sessions share no state, so any number can live side by side.

Operations that need an image (start, export, restore) report failure
through their return value instead of raising.  This module is Qt-free.
"""

import logging

from cropper.config import DEFAULT_VIEWPORT
from cropper.drag import CURSOR_DEFAULT, DragController, PointerEvent
from cropper.exporter import CropExporter, compute_source_rect
from cropper.image_io import to_data_url
from cropper.models import Point, Rect, ViewportBox
from cropper.overlay import OverlayModel
from cropper.surface import PillowSurface, RasterRef, resolve_format
from cropper.transform import CoordinateTransform

logger = logging.getLogger(__name__)


class Session:
    """Holds the current raster, the prior raster for restore, and the cropping flag."""

    def __init__(
        self,
        viewport: ViewportBox | None = None,
        surface: PillowSurface | None = None,
        aspect_ratio: float | None = None,
        on_redraw=None,
    ):
        self._viewport = viewport or ViewportBox(*DEFAULT_VIEWPORT)
        self._surface = surface or PillowSurface()
        self._on_redraw = on_redraw

        self._transform = CoordinateTransform(self._viewport)
        self._overlay = OverlayModel(self._viewport, aspect_ratio=aspect_ratio)
        self._drag = DragController(self._overlay)
        self._exporter = CropExporter(self._surface)

        self._current: RasterRef | None = None
        self._prior: RasterRef | None = None
        self._cropping = False

    # --- State ---

    @property
    def viewport(self) -> ViewportBox:
        return self._viewport

    @property
    def overlay(self) -> OverlayModel:
        return self._overlay

    @property
    def drag(self) -> DragController:
        return self._drag

    @property
    def transform(self) -> CoordinateTransform:
        return self._transform

    @property
    def current_raster(self) -> RasterRef | None:
        return self._current

    @property
    def prior_raster(self) -> RasterRef | None:
        return self._prior

    @property
    def is_cropping(self) -> bool:
        return self._cropping

    def has_image(self) -> bool:
        return self._current is not None

    def _redraw(self):
        if self._on_redraw is not None:
            self._on_redraw()

    # --- Loading ---

    def load_image(self, data: bytes) -> RasterRef:
        """Decode *data* and make it the current raster.

        Decode failures from the surface propagate as DecodeError.
        """
        raster = self._surface.decode(data)
        self.set_raster(raster)
        return raster

    def set_raster(self, raster: RasterRef):
        """Install an already decoded raster (decode-complete callback)."""
        self._current = raster
        self._cropping = False
        self._drag.release()
        dimens = self._transform.recompute(raster.width, raster.height)
        logger.debug(
            "Loaded %dx%d raster, display %dx%d (factor %.4f)",
            raster.width, raster.height, dimens.width, dimens.height, dimens.factor,
        )
        self._redraw()

    # --- Cropping lifecycle ---

    def start_cropping(self) -> bool:
        """Enter cropping mode, remembering the current raster for restore."""
        if self._current is None:
            logger.warning("Cannot start cropping: no image loaded")
            return False
        self._prior = self._current
        self._cropping = True
        self._redraw()
        return True

    def source_rect(self, entire_image: bool | None = None) -> Rect | None:
        """The source-space rectangle an export would use right now."""
        raster = self._current
        if raster is None:
            return None
        if entire_image is None:
            entire_image = not self._cropping
        return compute_source_rect(
            self._overlay.rect, self._transform.factor,
            raster.width, raster.height,
            entire_image, cropping=self._cropping,
        )

    def export_selection(self, entire_image: bool | None = None, mime_type: str | None = None) -> bytes | None:
        """Encode the selection (or the whole image when not cropping).

        While cropping, the cropped raster also becomes the current raster
        and cropping ends.  Returns None when no image is loaded, or when the
        selection does not overlap the image; the session is then unchanged.
        """
        raster = self._current
        if raster is None:
            logger.warning("Cannot export: no image loaded")
            return None

        rect = self.source_rect(entire_image)
        cropped = self._exporter.crop(raster, rect)
        if cropped is None:
            return None
        data = self._surface.encode(cropped, mime_type)

        if self._cropping:
            # Commit: the crop becomes the displayed image
            self.set_raster(cropped)
        return data

    def export_data_url(self, entire_image: bool | None = None, mime_type: str | None = None) -> str | None:
        """Like ``export_selection`` but returns a base64 ``data:`` URL."""
        mime, _fmt = resolve_format(mime_type)
        data = self.export_selection(entire_image, mime_type=mime)
        if data is None:
            return None
        return to_data_url(data, mime)

    def restore(self) -> bool:
        """Go back to the image saved when cropping last started, and crop again."""
        if self._prior is None:
            logger.warning("Nothing to restore")
            return False
        raster = self._prior
        self._prior = None
        self._cropping = False
        self.set_raster(raster)
        logger.debug("Restored %dx%d raster", raster.width, raster.height)
        return self.start_cropping()

    # --- Overlay interaction ---

    def handle_pointer(self, event: PointerEvent) -> bool:
        """Feed a pointer event to the drag controller while cropping."""
        if not self._cropping:
            return False
        changed = self._drag.handle(event)
        if changed:
            self._redraw()
        return changed

    def cursor_at(self, point: Point) -> str:
        if not self._cropping:
            return CURSOR_DEFAULT
        return self._drag.cursor_for(point)

    def set_aspect_ratio(self, ratio: float):
        """Lock the overlay to *ratio* (height / width); raises InvalidArgument if not positive."""
        self._overlay.set_aspect_ratio(ratio)
        self._redraw()

    def nudge(self, dx: float, dy: float) -> bool:
        if not self._cropping:
            return False
        self._overlay.move_by(dx, dy)
        self._redraw()
        return True

    # --- Rendering ---

    def preview(self):
        """Scaled preview image of the current raster, or None."""
        dimens = self._transform.dimensions
        if self._current is None or dimens is None:
            return None
        return self._surface.draw_scaled(self._current, dimens.width, dimens.height)
