from unittest.mock import patch

import pytest

from ingestion.pdf.factory import PdfExtractorFactory, PdfRasterizerFactory
from ingestion.pdf.pdfplumber_adapter import PdfPlumberAdapter
from ingestion.pdf.poppler_rasterizer import PopplerRasterizer
from ingestion.pdf.pymupdf_adapter import PyMuPdfAdapter
from ingestion.pdf.pymupdf_rasterizer import PyMuPdfRasterizer


def _make_settings(**fields: str):  # type: ignore[no-untyped-def]
    """Create a minimal Settings-like object with only the given fields."""
    with patch("ingestion.config.settings.Settings") as mock_cls:
        settings = mock_cls.return_value
        settings.pdf_engine = fields.get("pdf_engine", "pdfplumber")
        settings.pdf_rasterizer = fields.get("pdf_rasterizer", "poppler")
        settings.poppler_path = fields.get("poppler_path", "")
        return settings


class TestPdfExtractorFactory:
    def test_creates_pdfplumber_adapter(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings(pdf_engine="pdfplumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    def test_creates_pymupdf_adapter(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings(pdf_engine="pymupdf"))
        assert isinstance(adapter, PyMuPdfAdapter)

    def test_is_case_insensitive(self) -> None:
        adapter = PdfExtractorFactory.create(_make_settings(pdf_engine="PdfPlumber"))
        assert isinstance(adapter, PdfPlumberAdapter)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfExtractorFactory.create(_make_settings(pdf_engine="unknown"))


class TestPdfRasterizerFactory:
    def test_creates_poppler_rasterizer(self) -> None:
        rasterizer = PdfRasterizerFactory.create(_make_settings(pdf_rasterizer="poppler"))
        assert isinstance(rasterizer, PopplerRasterizer)

    def test_creates_pymupdf_rasterizer(self) -> None:
        rasterizer = PdfRasterizerFactory.create(_make_settings(pdf_rasterizer="PyMuPDF"))
        assert isinstance(rasterizer, PyMuPdfRasterizer)

    def test_raises_for_unknown_rasterizer(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF rasterizer"):
            PdfRasterizerFactory.create(_make_settings(pdf_rasterizer="ghostscript"))
