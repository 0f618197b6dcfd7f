"""
Main application window.

Hosts one ``ImageCropWidget`` and wires the toolbar actions (open, crop,
restore, save) and the aspect-ratio selector to its ``Session``.
"""

import logging
from pathlib import Path

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QFileDialog, QMessageBox,
    QStatusBar, QToolBar, QComboBox, QLabel,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence

from cropper.config import ASPECT_PRESETS, DEFAULT_VIEWPORT, IMAGE_EXTENSIONS
from cropper.crop_widget import ImageCropWidget
from cropper.errors import CropperError
from cropper.image_io import read_image_bytes, write_export
from cropper.models import ViewportBox

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, viewport: ViewportBox | None = None):
        super().__init__()
        self.setWindowTitle("Cropper")

        self._viewport = viewport or ViewportBox(*DEFAULT_VIEWPORT)
        self._image_path: Path | None = None

        self._build_ui()
        self._update_button_states()

    # =========================================================================
    # UI construction
    # =========================================================================

    def _build_ui(self):
        self._build_toolbar()

        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(4, 4, 4, 4)

        first_ratio = next(iter(ASPECT_PRESETS.values()))
        self._crop_widget = ImageCropWidget(self._viewport, aspect_ratio=first_ratio)
        self._crop_widget.image_loaded.connect(self._on_image_loaded)
        self._crop_widget.load_failed.connect(self._on_image_load_error)
        layout.addWidget(self._crop_widget, alignment=Qt.AlignmentFlag.AlignCenter)

        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._status.showMessage("Open an image to begin.")

    def _build_toolbar(self):
        toolbar = QToolBar("Main")
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        act_open = QAction("📂 Open Image", self)
        act_open.setShortcut(QKeySequence.StandardKey.Open)
        act_open.triggered.connect(self._select_image)
        toolbar.addAction(act_open)

        toolbar.addSeparator()

        self._act_start = QAction("✂ Start Cropping", self)
        self._act_start.triggered.connect(self._start_cropping)
        toolbar.addAction(self._act_start)

        self._act_crop = QAction("✔ Crop", self)
        self._act_crop.setShortcut(QKeySequence(Qt.Key.Key_Return))
        self._act_crop.triggered.connect(self._commit_crop)
        toolbar.addAction(self._act_crop)

        self._act_restore = QAction("↺ Restore", self)
        self._act_restore.triggered.connect(self._restore)
        toolbar.addAction(self._act_restore)

        toolbar.addSeparator()

        toolbar.addWidget(QLabel(" Ratio: "))
        self._ratio_combo = QComboBox()
        self._ratio_combo.addItems(list(ASPECT_PRESETS))
        self._ratio_combo.currentTextChanged.connect(self._on_ratio_selected)
        toolbar.addWidget(self._ratio_combo)

        toolbar.addSeparator()

        self._act_save = QAction("💾 Save As…", self)
        self._act_save.setShortcut(QKeySequence.StandardKey.Save)
        self._act_save.triggered.connect(self._save_as)
        toolbar.addAction(self._act_save)

    # =========================================================================
    # Image loading
    # =========================================================================

    def open_path(self, path: Path):
        try:
            data = read_image_bytes(path)
        except OSError as exc:
            QMessageBox.warning(self, "Open Failed", f"Could not read {path}:\n{exc}")
            return
        self._image_path = path
        self._status.showMessage(f"Loading {path.name}…")
        self._crop_widget.load_bytes(data)

    def _select_image(self):
        patterns = " ".join(f"*{ext}" for ext in sorted(IMAGE_EXTENSIONS))
        filename, _ = QFileDialog.getOpenFileName(self, "Open Image", "", f"Images ({patterns})")
        if filename:
            self.open_path(Path(filename))

    def _on_image_loaded(self):
        raster = self._crop_widget.session.current_raster
        name = self._image_path.name if self._image_path else "image"
        self._status.showMessage(f"{name}: {raster.width} × {raster.height}")
        self._update_button_states()

    def _on_image_load_error(self, error: str):
        self._status.showMessage(f"Failed to load image: {error}")
        QMessageBox.warning(self, "Open Failed", f"Could not load image:\n{error}")
        self._update_button_states()

    # =========================================================================
    # Cropping
    # =========================================================================

    def _on_ratio_selected(self, label: str):
        self._crop_widget.session.set_aspect_ratio(ASPECT_PRESETS[label])

    def _start_cropping(self):
        if not self._crop_widget.session.start_cropping():
            self._status.showMessage("Load an image before cropping.")
            return
        self._crop_widget.setFocus()
        self._status.showMessage("Drag the selection, or its corner to resize. Press Enter to crop.")
        self._update_button_states()

    def _commit_crop(self):
        session = self._crop_widget.session
        if not session.is_cropping:
            return
        try:
            data = session.export_selection()
        except CropperError as exc:
            QMessageBox.critical(self, "Crop Failed", str(exc))
            return
        if data is None:
            self._status.showMessage("The selection does not overlap the image.")
            return
        raster = session.current_raster
        self._status.showMessage(f"Cropped to {raster.width} × {raster.height}")
        self._update_button_states()

    def _restore(self):
        if not self._crop_widget.session.restore():
            self._status.showMessage("Nothing to restore.")
            return
        self._status.showMessage("Restored the original image.")
        self._update_button_states()

    def _save_as(self):
        default = ""
        if self._image_path:
            default = str(self._image_path.with_name(f"{self._image_path.stem}-cropped.png"))
        filename, _ = QFileDialog.getSaveFileName(
            self, "Save Image", default, "PNG (*.png);;JPEG (*.jpg *.jpeg);;WebP (*.webp)",
        )
        if not filename:
            return
        try:
            written = write_export(self._crop_widget.session, Path(filename))
        except (CropperError, OSError) as exc:
            logger.error("Save failed: %s", exc)
            QMessageBox.critical(self, "Save Failed", f"Could not save image:\n{exc}")
            return
        self._status.showMessage(f"Saved: {written}")
        self._update_button_states()

    def _update_button_states(self):
        session = self._crop_widget.session
        has_image = session.has_image()
        self._act_start.setEnabled(has_image and not session.is_cropping)
        self._act_crop.setEnabled(session.is_cropping)
        self._act_restore.setEnabled(session.prior_raster is not None)
        self._act_save.setEnabled(has_image)
