import pytest

from ingestion.pdf.exceptions import PdfExtractionError, RasterizationError
from ingestion.pdf.pymupdf_adapter import PyMuPdfAdapter
from ingestion.pdf.pymupdf_rasterizer import PyMuPdfRasterizer

PNG_SIGNATURE = b"\x89PNG"


class TestPyMuPdfAdapter:
    def test_extract_multi_page(self, multi_page_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(multi_page_pdf_bytes)
        assert "Page one content" in result.text
        assert "Page two content" in result.text
        assert result.page_count == 2

    def test_extract_empty_pdf(self, empty_pdf_bytes: bytes) -> None:
        result = PyMuPdfAdapter().extract(empty_pdf_bytes)
        assert result.text == ""
        assert result.page_count == 1

    def test_extract_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(PdfExtractionError, match="pymupdf"):
            PyMuPdfAdapter().extract(b"not a pdf")


class TestPyMuPdfRasterizer:
    def test_renders_requested_pages_as_png(self, multi_page_pdf_bytes: bytes) -> None:
        images = PyMuPdfRasterizer().rasterize(multi_page_pdf_bytes, 1, 2, 72)
        assert len(images) == 2
        assert all(image.startswith(PNG_SIGNATURE) for image in images)

    def test_last_page_beyond_document_is_clamped(self, sample_pdf_bytes: bytes) -> None:
        images = PyMuPdfRasterizer().rasterize(sample_pdf_bytes, 1, 10, 72)
        assert len(images) == 1

    def test_raises_on_invalid_bytes(self) -> None:
        with pytest.raises(RasterizationError):
            PyMuPdfRasterizer().rasterize(b"not a pdf", 1, 1, 72)
