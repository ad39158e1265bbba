from typing import ClassVar

from ingestion.config.settings import Settings
from ingestion.ocr.base import BaseOcrEngine
from ingestion.ocr.tesseract_adapter import TesseractAdapter


class OcrEngineFactory:
    """Creates the configured local OCR engine."""

    ENGINES: ClassVar[tuple[str, ...]] = ("none", "tesseract")

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine | None:
        """Return the local engine, or None when local OCR is disabled."""
        engine = settings.ocr_engine.lower()
        if engine == "none":
            return None
        if engine == "tesseract":
            return TesseractAdapter(tesseract_cmd=settings.tesseract_cmd)
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
