class PdfError(Exception):
    """Base exception for all PDF-related errors."""


class PdfExtractionError(PdfError):
    """Raised when the embedded text layer cannot be read."""


class RasterizationError(PdfError):
    """Raised when PDF pages cannot be converted to images."""


class RasterizerUnavailableError(RasterizationError):
    """Raised when the rasterizer backend is not installed or not configured."""
