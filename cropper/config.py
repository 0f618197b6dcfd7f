"""
Application constants and configuration.

Overlay geometry defaults, hit-test sizes, export encoding options and the
aspect-ratio presets offered by the main window.  Everything here is a plain
module-level constant; there is no on-disk configuration because a crop
session keeps no durable state.
"""

# =============================================================================
# APP IDENTITY
# =============================================================================
APP_NAME = "cropper"

# =============================================================================
# OVERLAY GEOMETRY (display-space pixels)
# =============================================================================
# Smallest width a resize may produce
MIN_OVERLAY_WIDTH = 10

# Half-extent of the resize hit zone around the bottom-right corner
HANDLE_SIZE = 10

# The visible handle square is drawn this far up/left of the corner
HANDLE_DRAW_OFFSET = 5

# Initial overlay rectangle: (x, y, width, height)
DEFAULT_OVERLAY = (50, 50, 100, 100)

# height / width
DEFAULT_ASPECT_RATIO = 1.0

# Rendering surface used when the caller does not give one
DEFAULT_VIEWPORT = (800, 600)

# Shade painted outside the selection (RGBA, alpha 0.6)
OVERLAY_DIM_COLOR = (0, 0, 0, 153)

# Nudge amounts (display pixels)
NUDGE_SMALL = 1
NUDGE_LARGE = 10

# =============================================================================
# EXPORT ENCODING
# =============================================================================
# PNG compression level (0-9, 9 = maximum compression)
PNG_COMPRESS_LEVEL = 9

JPEG_QUALITY_DEFAULT = 95

DEFAULT_MIME_TYPE = "image/png"

# Map MIME types to Pillow format names
MIME_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
    "image/bmp": "BMP",
    "image/tiff": "TIFF",
}

# File extension -> MIME type for loading and saving
EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".psd": "image/vnd.adobe.photoshop",
}

# Supported image extensions for the open dialog
IMAGE_EXTENSIONS = set(EXTENSION_MIME_TYPES)

# Aspect presets offered in the UI: label -> height / width
ASPECT_PRESETS = {
    "1:1": 1.0,
    "4:3": 3 / 4,
    "3:2": 2 / 3,
    "16:9": 9 / 16,
    "3:4": 4 / 3,
    "9:16": 16 / 9,
}
