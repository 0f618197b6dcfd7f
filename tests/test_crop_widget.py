"""Tests for the crop widget's background loading, on Qt's offscreen platform."""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt6.QtWidgets")

from cropper.crop_widget import ImageCropWidget
from cropper.models import ViewportBox

from conftest import make_png


@pytest.fixture(scope="module")
def qapp():
    return QtWidgets.QApplication.instance() or QtWidgets.QApplication([])


@pytest.fixture
def widget(qapp):
    w = ImageCropWidget(ViewportBox(300, 300))
    yield w
    w.deleteLater()


def settle(qapp, widget):
    """Wait for every pending loader and deliver its queued signals."""
    for loader in list(widget._loaders.values()):
        loader.wait()
    qapp.processEvents()


class TestLoaderLifetime:
    def test_finished_loader_is_released(self, qapp, widget):
        widget.load_bytes(make_png(60, 30))
        assert len(widget._loaders) == 1

        settle(qapp, widget)

        assert widget._loaders == {}
        assert widget.session.current_raster.width == 60

    def test_superseded_loaders_are_released(self, qapp, widget):
        widget.load_bytes(make_png(60, 30))
        widget.load_bytes(make_png(40, 20))
        widget.load_bytes(make_png(20, 10))

        settle(qapp, widget)

        assert widget._loaders == {}
        assert widget.session.current_raster.width == 20

    def test_failed_loader_is_released(self, qapp, widget):
        failures = []
        widget.load_failed.connect(failures.append)

        widget.load_bytes(b"not an image")
        settle(qapp, widget)

        assert widget._loaders == {}
        assert len(failures) == 1
        assert widget.session.current_raster is None
