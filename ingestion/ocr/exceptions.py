class OcrError(Exception):
    """Raised when local OCR fails."""


class OcrEngineUnavailableError(OcrError):
    """Raised when the local OCR engine binary is missing or misconfigured."""
