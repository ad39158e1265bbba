from abc import ABC, abstractmethod
from dataclasses import dataclass

from ingestion.processor.models import ProcessingMethod, ProcessingRequest


@dataclass(slots=True)
class ExtractionOutcome:
    text: str
    processing_method: ProcessingMethod
    page_count: int | None = None
    confidence: float | None = None  # 0-1
    ocr_engine: str | None = None
    pages_processed: int | None = None
    skipped_pages: int | None = None
    failed_pages: int | None = None
    stt_model: str | None = None


class FormatHandler(ABC):
    """One processing strategy selected by the format classifier."""

    @abstractmethod
    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        """Extract text from the request buffer.

        Raises:
            ProcessorError: when no usable text can be produced.
        """
        raise NotImplementedError
