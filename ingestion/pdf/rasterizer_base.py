from abc import ABC, abstractmethod


class BasePdfRasterizer(ABC):
    """Contract for adapters that turn PDF pages into page images."""

    @abstractmethod
    def rasterize(self, pdf_bytes: bytes, first_page: int, last_page: int, dpi: int) -> list[bytes]:
        """Render pages ``first_page``..``last_page`` (1-based, inclusive).

        Returns:
            PNG-encoded page images in page order.

        Raises:
            RasterizerUnavailableError: if the backend is not installed.
            RasterizationError: on any other failure.
        """
