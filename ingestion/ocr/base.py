from abc import ABC, abstractmethod

from ingestion.ocr.models import OcrAttempt


class BaseOcrEngine(ABC):
    """Contract for all local OCR engine adapters."""

    name: str = "local"

    @abstractmethod
    def recognize(self, image_bytes: bytes, languages: str, dpi: int = 300) -> OcrAttempt:
        """Recognize text in an encoded image.

        Args:
            image_bytes: Encoded image (PNG, JPEG, ...).
            languages: Engine language hints, e.g. ``"pol+eng"``.
            dpi: Resolution hint for the engine.

        Returns:
            OcrAttempt with the text and the engine's confidence (0-100).

        Raises:
            OcrError: on any failure.
        """
