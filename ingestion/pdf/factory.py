from ingestion.config.settings import Settings
from ingestion.pdf.base import BasePdfExtractor
from ingestion.pdf.pdfplumber_adapter import PdfPlumberAdapter
from ingestion.pdf.poppler_rasterizer import PopplerRasterizer
from ingestion.pdf.pymupdf_adapter import PyMuPdfAdapter
from ingestion.pdf.pymupdf_rasterizer import PyMuPdfRasterizer
from ingestion.pdf.rasterizer_base import BasePdfRasterizer


class PdfExtractorFactory:
    """Creates the correct PDF text extractor based on settings."""

    ADAPTERS: dict[str, type[BasePdfExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()


class PdfRasterizerFactory:
    """Creates the configured PDF rasterizer."""

    RASTERIZERS: tuple[str, ...] = ("poppler", "pymupdf")

    @classmethod
    def create(cls, settings: Settings) -> BasePdfRasterizer:
        name = settings.pdf_rasterizer.lower()
        if name == "poppler":
            return PopplerRasterizer(poppler_path=settings.poppler_path)
        if name == "pymupdf":
            return PyMuPdfRasterizer()
        raise ValueError(
            f"Unknown PDF rasterizer '{name}'. Choose from: {list(cls.RASTERIZERS)}"
        )
