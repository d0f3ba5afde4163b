"""
Watermark stamp and image-to-PDF conversion.

The stamp is a fixed visual overlay: the text ``ProjectNinjas`` drawn five
times per page, rotated 45 degrees, in translucent grey. It is a deterrent,
not a tamper-evident mark.

Overlays are drawn with reportlab and merged onto existing pages with pypdf.
"""

import io
from typing import List, Tuple

from PIL import Image, UnidentifiedImageError
from pypdf import PdfReader, PdfWriter, Transformation
from pypdf.errors import PyPdfError
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from projectninjas.exceptions import BadRequestError

WATERMARK_TEXT = "ProjectNinjas"

STAMP_FONT = "Helvetica"
STAMP_FONT_SIZE = 50
STAMP_GRAY = 0.5
STAMP_OPACITY = 0.5
STAMP_ANGLE = 45  # degrees, counter-clockwise
STAMP_ROWS = 5


def stamp_positions(width: float, height: float) -> List[Tuple[float, float]]:
    """
    Anchor points for the stamp text, in PDF user space (origin bottom-left).

    Row i sits at i * height / 5. Even rows use the left column
    (width / 4), odd rows the right one (3 * width / 4).
    """
    positions = []
    for row in range(STAMP_ROWS):
        x = width / 4 if row % 2 == 0 else 3 * width / 4
        y = row * height / STAMP_ROWS
        positions.append((x, y))
    return positions


def render_stamp_overlay(width: float, height: float) -> bytes:
    """Render a single transparent page holding only the stamp."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(width, height))
    _draw_stamp(pdf, width, height)
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def _draw_stamp(pdf: canvas.Canvas, width: float, height: float) -> None:
    pdf.setFont(STAMP_FONT, STAMP_FONT_SIZE)
    pdf.setFillColorRGB(STAMP_GRAY, STAMP_GRAY, STAMP_GRAY)
    pdf.setFillAlpha(STAMP_OPACITY)
    for x, y in stamp_positions(width, height):
        pdf.saveState()
        pdf.translate(x, y)
        pdf.rotate(STAMP_ANGLE)
        pdf.drawString(0, 0, WATERMARK_TEXT)
        pdf.restoreState()


def stamp_pdf(data: bytes) -> bytes:
    """
    Stamp every page of a PDF document.

    Page count and page boxes are left as they were.

    Raises:
        BadRequestError: If the document cannot be read or is encrypted
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        if reader.is_encrypted:
            raise BadRequestError("Encrypted PDFs cannot be watermarked.")

        writer = PdfWriter(clone_from=reader)
        for page in writer.pages:
            box = page.mediabox
            width, height = float(box.width), float(box.height)
            overlay = PdfReader(io.BytesIO(render_stamp_overlay(width, height))).pages[0]
            page.merge_transformed_page(
                overlay,
                Transformation().translate(float(box.left), float(box.bottom)),
            )

        output = io.BytesIO()
        writer.write(output)
    except (PyPdfError, ValueError, KeyError) as e:
        raise BadRequestError("Uploaded PDF could not be read.") from e

    return output.getvalue()


def image_to_pdf(data: bytes) -> bytes:
    """
    Wrap an image in a one-page PDF sized to its pixel dimensions.

    One pixel maps to one point, and the image fills the page.

    Raises:
        BadRequestError: If the image cannot be decoded
    """
    buffer = io.BytesIO()
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            width, height = image.size
            image = _normalise_mode(image)

            pdf = canvas.Canvas(buffer, pagesize=(width, height))
            pdf.drawImage(
                ImageReader(image),
                0,
                0,
                width=width,
                height=height,
                mask="auto" if image.mode == "RGBA" else None,
            )
            pdf.showPage()
            pdf.save()
    except Image.DecompressionBombError as e:
        raise BadRequestError("Image is too large to convert.") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise BadRequestError("Uploaded image could not be decoded.") from e

    return buffer.getvalue()


def _normalise_mode(image: Image.Image) -> Image.Image:
    """Bring palette, CMYK and 16-bit images into a mode reportlab embeds."""
    if image.mode in ("RGB", "RGBA", "L"):
        return image
    if "A" in image.getbands() or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")
