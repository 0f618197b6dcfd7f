"""
Pytest configuration and shared fixtures for cropper tests.

Fixtures build small in-memory Pillow rasters and headless sessions; no Qt
display is needed.
"""

import io

import pytest
from PIL import Image

from cropper.models import ViewportBox
from cropper.session import Session


def make_png(width, height, color=(200, 40, 40)):
    """Encode a solid-colour RGB image as PNG bytes."""
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def viewport():
    """A square 300x300 rendering surface."""
    return ViewportBox(300, 300)


@pytest.fixture
def png_600x200():
    return make_png(600, 200)


@pytest.fixture
def gradient_png():
    """
    A 600x600 image whose pixel at (x, y) is (x // 3, y // 3, 0).

    Lets tests check exactly which source region a crop came from.
    """
    img = Image.new("RGB", (600, 600))
    img.putdata([(x // 3, y // 3, 0) for y in range(600) for x in range(600)])
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def redraws():
    """A list that records one entry per redraw request."""
    return []


@pytest.fixture
def session(viewport, redraws):
    return Session(viewport, on_redraw=lambda: redraws.append(1))
