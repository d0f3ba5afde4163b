"""Unit tests for the watermark stamp."""

import io

import pytest
from pypdf import PdfReader, PdfWriter

from projectninjas.exceptions import BadRequestError
from projectninjas.kernel.files.watermark import (
    STAMP_ROWS,
    WATERMARK_TEXT,
    render_stamp_overlay,
    stamp_pdf,
    stamp_positions,
)


def _stamp_count(page) -> int:
    return page.get_contents().get_data().count(WATERMARK_TEXT.encode())


class TestStampPositions:

    def test_five_rows_from_the_bottom(self):
        positions = stamp_positions(400, 1000)

        assert [y for _, y in positions] == [0, 200, 400, 600, 800]

    def test_columns_alternate(self):
        positions = stamp_positions(400, 1000)

        assert [x for x, _ in positions] == [100, 300, 100, 300, 100]


class TestStampPdf:

    def test_every_page_gets_five_stamps(self, pdf_bytes):
        stamped = PdfReader(io.BytesIO(stamp_pdf(pdf_bytes)))

        assert len(stamped.pages) == 2
        for page in stamped.pages:
            assert _stamp_count(page) == STAMP_ROWS

    def test_page_boxes_unchanged(self, pdf_bytes):
        original = PdfReader(io.BytesIO(pdf_bytes))
        stamped = PdfReader(io.BytesIO(stamp_pdf(pdf_bytes)))

        for before, after in zip(original.pages, stamped.pages):
            assert float(after.mediabox.width) == float(before.mediabox.width)
            assert float(after.mediabox.height) == float(before.mediabox.height)

    def test_original_content_kept(self, pdf_bytes):
        stamped = PdfReader(io.BytesIO(stamp_pdf(pdf_bytes)))

        assert "Quarterly report" in stamped.pages[0].extract_text()

    def test_encrypted_pdf_rejected(self, pdf_bytes):
        writer = PdfWriter(clone_from=PdfReader(io.BytesIO(pdf_bytes)))
        writer.encrypt(user_password="secret", algorithm="RC4-128")
        buffer = io.BytesIO()
        writer.write(buffer)

        with pytest.raises(BadRequestError):
            stamp_pdf(buffer.getvalue())

    def test_unreadable_pdf_rejected(self):
        with pytest.raises(BadRequestError):
            stamp_pdf(b"%PDF-1.7\nthis is not really a pdf")


class TestOverlay:

    def test_overlay_is_single_page_of_requested_size(self):
        overlay = PdfReader(io.BytesIO(render_stamp_overlay(300, 500)))

        assert len(overlay.pages) == 1
        assert float(overlay.pages[0].mediabox.width) == 300
        assert float(overlay.pages[0].mediabox.height) == 500
        assert _stamp_count(overlay.pages[0]) == STAMP_ROWS
