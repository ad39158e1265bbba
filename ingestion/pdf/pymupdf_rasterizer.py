import pymupdf

from ingestion.pdf.exceptions import RasterizationError
from ingestion.pdf.rasterizer_base import BasePdfRasterizer


class PyMuPdfRasterizer(BasePdfRasterizer):
    """Renders pages in-process with PyMuPDF; needs no external binary."""

    def rasterize(self, pdf_bytes: bytes, first_page: int, last_page: int, dpi: int) -> list[bytes]:
        try:
            with pymupdf.open(stream=pdf_bytes, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                stop = min(last_page, doc.page_count)
                return [
                    doc[index].get_pixmap(dpi=dpi).tobytes("png")
                    for index in range(first_page - 1, stop)
                ]
        except RasterizationError:
            raise
        except Exception as exc:
            raise RasterizationError(f"pymupdf rasterization failed: {exc}") from exc
