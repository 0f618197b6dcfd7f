"""
Qt-free image I/O utilities.

Reads image files for the session, converts encoded output to and from
``data:`` URLs, and picks output paths that never overwrite an existing file.
"""

import base64
import binascii
import logging
from pathlib import Path

from cropper.config import DEFAULT_MIME_TYPE, EXTENSION_MIME_TYPES
from cropper.errors import DecodeError, EmptySelection, NoImageLoaded

logger = logging.getLogger(__name__)


def read_image_bytes(path: Path) -> bytes:
    """Read an image file's raw bytes."""
    return Path(path).read_bytes()


def mime_type_for_path(path: Path) -> str:
    """Guess the output MIME type from a file extension, defaulting to PNG."""
    return EXTENSION_MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def to_data_url(data: bytes, mime_type: str = DEFAULT_MIME_TYPE) -> str:
    """Wrap encoded image bytes in a base64 ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def data_url_to_bytes(url: str) -> tuple[bytes, str]:
    """
    Split a base64 ``data:`` URL into ``(bytes, mime_type)``.

    Raises DecodeError for anything that is not a base64 data URL.
    """
    if not isinstance(url, str) or not url.startswith("data:") or "," not in url:
        raise DecodeError("Not a data URL")
    header, payload = url[5:].split(",", 1)
    parts = header.split(";")
    if "base64" not in parts[1:]:
        raise DecodeError("Only base64 data URLs are supported")
    mime_type = parts[0] or "text/plain"
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError(f"Invalid base64 payload: {exc}") from exc
    return data, mime_type


def unique_path(out_path: Path) -> Path:
    """Return a unique path by appending -01, -02, etc. if file already exists."""
    if not out_path.exists():
        return out_path
    stem = out_path.stem
    suffix = out_path.suffix
    parent = out_path.parent
    counter = 1
    while True:
        candidate = parent / f"{stem}-{counter:02d}{suffix}"
        if not candidate.exists():
            return candidate
        counter += 1


def write_export(session, out_path: Path, entire_image: bool | None = None) -> Path:
    """
    Export from *session* and write it next to *out_path* without overwriting.

    The output type follows the file extension.  Returns the path actually
    written.  Raises NoImageLoaded when the session has nothing to export and
    EmptySelection when the overlay does not overlap the image.
    """
    out_path = Path(out_path)
    data = session.export_selection(entire_image, mime_type=mime_type_for_path(out_path))
    if data is None:
        if session.current_raster is None:
            raise NoImageLoaded("There is no image to export")
        raise EmptySelection("The selection does not overlap the image")
    target = unique_path(out_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info("Wrote %d bytes to %s", len(data), target)
    return target
