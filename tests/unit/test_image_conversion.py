"""Unit tests for image to PDF conversion."""

import io

import pytest
from pypdf import PdfReader

from projectninjas.exceptions import BadRequestError
from projectninjas.kernel.files.watermark import image_to_pdf


class TestImageToPdf:

    def test_page_matches_pixel_size(self, png_bytes):
        reader = PdfReader(io.BytesIO(image_to_pdf(png_bytes)))

        assert len(reader.pages) == 1
        page = reader.pages[0]
        assert float(page.mediabox.width) == 320
        assert float(page.mediabox.height) == 200

    def test_image_is_embedded(self, png_bytes):
        reader = PdfReader(io.BytesIO(image_to_pdf(png_bytes)))

        assert len(reader.pages[0].images) == 1

    @pytest.mark.parametrize(
        "mode, fmt",
        [
            ("RGBA", "PNG"),
            ("L", "PNG"),
            ("P", "GIF"),
            ("RGB", "JPEG"),
            ("RGB", "BMP"),
        ],
    )
    def test_colour_modes_and_formats(self, image_factory, mode, fmt):
        data = image_factory((64, 48), mode=mode, fmt=fmt)

        reader = PdfReader(io.BytesIO(image_to_pdf(data)))

        assert float(reader.pages[0].mediabox.width) == 64
        assert float(reader.pages[0].mediabox.height) == 48

    def test_undecodable_image_rejected(self):
        with pytest.raises(BadRequestError):
            image_to_pdf(b"\x89PNG\r\n\x1a\nbroken")
