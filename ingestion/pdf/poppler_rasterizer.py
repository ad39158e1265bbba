from pdf2image import convert_from_bytes
from pdf2image.exceptions import PDFInfoNotInstalledError

from ingestion.imaging.restoration import encode_png
from ingestion.pdf.exceptions import RasterizationError, RasterizerUnavailableError
from ingestion.pdf.rasterizer_base import BasePdfRasterizer


class PopplerRasterizer(BasePdfRasterizer):
    """Renders pages with poppler's pdftoppm through pdf2image."""

    def __init__(self, poppler_path: str = "") -> None:
        self._poppler_path = poppler_path or None

    def rasterize(self, pdf_bytes: bytes, first_page: int, last_page: int, dpi: int) -> list[bytes]:
        try:
            images = convert_from_bytes(
                pdf_bytes,
                dpi=dpi,
                first_page=first_page,
                last_page=last_page,
                poppler_path=self._poppler_path,
            )
            return [encode_png(image) for image in images]
        except PDFInfoNotInstalledError as exc:
            raise RasterizerUnavailableError(
                "poppler is not installed; install poppler-utils or set PDF_RASTERIZER=pymupdf"
            ) from exc
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"poppler rasterization failed: {exc}") from exc
