"""
Media kind detection for uploaded files.

The kind is sniffed from the bytes on disk; the client's declared content
type is not trusted.
"""

from enum import Enum
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from projectninjas.exceptions import BadRequestError

PDF_MAGIC = b"%PDF-"

# Raster formats Pillow can decode without external tools
CONVERTIBLE_IMAGE_FORMATS = frozenset({"PNG", "JPEG", "GIF", "BMP", "TIFF", "WEBP"})


class MediaKind(str, Enum):
    """How the ingestion pipeline treats an upload."""
    IMAGE = "image"
    PDF = "pdf"
    OTHER = "other"


def detect_media_kind(path: Path) -> MediaKind:
    """
    Classify a received artifact.

    Raises:
        BadRequestError: If the file is an image too large to decode safely
    """
    with path.open("rb") as fh:
        head = fh.read(len(PDF_MAGIC))
    if head == PDF_MAGIC:
        return MediaKind.PDF

    try:
        with Image.open(path) as image:
            image_format = image.format
    except Image.DecompressionBombError:
        raise BadRequestError("Image is too large to convert.")
    except (UnidentifiedImageError, OSError, ValueError):
        return MediaKind.OTHER

    if image_format in CONVERTIBLE_IMAGE_FORMATS:
        return MediaKind.IMAGE
    return MediaKind.OTHER
