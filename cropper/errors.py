"""
Exception types shared by the crop engine and its collaborators.

Session and exporter operations report "no image loaded" through their
return values; these classes exist for the places that do raise: argument
validation, the Pillow-backed surface, and the UI boundary that turns a
failed export into a user-visible error.
"""


class CropperError(Exception):
    """Base class for all cropper errors."""


class NoImageLoaded(CropperError):
    """An export, crop or restore was attempted without an active raster."""


class EmptySelection(CropperError):
    """The selection lies entirely outside the displayed image."""


class InvalidArgument(CropperError, ValueError):
    """A non-positive aspect ratio, malformed rectangle or bad dimension."""


class DecodeError(CropperError):
    """The raster decoder could not read the given bytes."""


class EncodeError(CropperError):
    """The raster surface could not encode the output."""
