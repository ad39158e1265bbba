from dataclasses import dataclass, field
from enum import Enum

from ingestion.config.settings import Settings
from ingestion.metadata.dedup import DeduplicationKey
from ingestion.metadata.models import NormalizedMetadata


class FileKind(str, Enum):
    """Processing strategy selected by the format classifier."""

    TEXT = "text"
    IMAGE = "image"
    PDF = "pdf"
    DOCX = "docx"
    AUDIO_VIDEO = "audio"


class ProcessingMethod(str, Enum):
    DIRECT = "direct"
    TEXT_EXTRACTION = "text-extraction"
    OCR = "ocr"
    VISION = "vision"
    STT = "stt"


@dataclass(frozen=True)
class ProcessingOptions:
    """Per-call tuning of the tiered OCR pipeline."""

    use_vision_only: bool = False
    local_confidence_threshold: float = 75.0
    local_engine_dpi: int = 300
    vision_max_dimension: int = 768
    use_async_vision_queue: bool = True
    accept_weak_local_on_vision_failure: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.local_confidence_threshold <= 100:
            raise ValueError(
                "local_confidence_threshold must be within 0-100, "
                f"got {self.local_confidence_threshold}"
            )
        if self.vision_max_dimension <= 0:
            raise ValueError("vision_max_dimension must be positive")
        if self.local_engine_dpi <= 0:
            raise ValueError("local_engine_dpi must be positive")

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProcessingOptions":
        return cls(
            use_vision_only=settings.vision_only,
            local_confidence_threshold=settings.local_confidence_threshold,
            local_engine_dpi=settings.ocr_engine_dpi,
            vision_max_dimension=settings.vision_max_dimension,
            use_async_vision_queue=settings.use_async_vision_queue,
            accept_weak_local_on_vision_failure=settings.accept_weak_local_on_vision_failure,
        )


@dataclass(frozen=True)
class ProcessingRequest:
    """Immutable input of a single processing call."""

    buffer: bytes
    file_name: str
    mime_type: str
    options: ProcessingOptions = field(default_factory=ProcessingOptions)

    @property
    def file_size(self) -> int:
        return len(self.buffer)


@dataclass(frozen=True)
class DocumentMetadata:
    """Descriptive metadata attached to every processing result."""

    file_name: str
    file_type: str
    mime_type: str
    file_size: int
    processing_method: ProcessingMethod
    page_count: int | None = None
    confidence: float | None = None  # 0-1
    language: str | None = None
    ocr_engine: str | None = None
    pages_processed: int | None = None
    skipped_pages: int | None = None
    failed_pages: int | None = None
    stt_model: str | None = None


@dataclass(frozen=True)
class ProcessedDocument:
    """Final output of the pipeline. A failed document never carries text."""

    success: bool
    text: str
    metadata: DocumentMetadata
    error: str | None = None

    def __post_init__(self) -> None:
        if not self.success and self.text:
            raise ValueError("A failed ProcessedDocument must have empty text")

    @classmethod
    def failure(cls, metadata: DocumentMetadata, error: str) -> "ProcessedDocument":
        return cls(success=False, text="", metadata=metadata, error=error)


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of ``DocumentProcessor.ingest``: what was extracted and whether the sink saved it."""

    document: ProcessedDocument
    metadata: NormalizedMetadata | None = None
    key: DeduplicationKey | None = None
    saved: bool = False
