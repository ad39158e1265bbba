from dataclasses import replace

from ingestion.config.settings import Settings
from ingestion.logging.logger import Log
from ingestion.metadata.dedup import DeduplicationKey
from ingestion.metadata.normalizer import extract_normalized_metadata
from ingestion.ocr.factory import OcrEngineFactory
from ingestion.ocr.tiered import TieredOcrEngine
from ingestion.pdf.factory import PdfExtractorFactory, PdfRasterizerFactory
from ingestion.processor.exceptions import OversizeInputError, ProcessorError, UnsupportedFormatError
from ingestion.processor.format_classifier import FormatClassifier
from ingestion.processor.handlers import AudioHandler, DocxHandler, ImageHandler, PdfHandler, TextHandler
from ingestion.processor.models import (
    DocumentMetadata,
    FileKind,
    IngestionResult,
    ProcessedDocument,
    ProcessingMethod,
    ProcessingOptions,
    ProcessingRequest,
)
from ingestion.processor.pipeline import ExtractionOutcome, FormatHandler
from ingestion.storage.base import BaseDocumentSink
from ingestion.transcription.factory import TranscriberFactory
from ingestion.vision.factory import VisionServiceFactory

MB = 1024 * 1024


class DocumentProcessor:
    """Turns an uploaded file into extracted text.

    Pipeline: classify -> size check -> format handler -> ProcessedDocument.
    Every failure is returned as ``success=False`` with an error message;
    only cancellation of the whole request propagates.
    """

    def __init__(
        self,
        *,
        handlers: dict[FileKind, FormatHandler],
        classifier: FormatClassifier | None = None,
        default_options: ProcessingOptions | None = None,
        max_file_size_mb: int = 10,
        max_audio_file_size_mb: int = 25,
        language: str | None = None,
    ) -> None:
        self._handlers = handlers
        self._classifier = classifier or FormatClassifier()
        self._default_options = default_options or ProcessingOptions()
        self._max_file_size_mb = max_file_size_mb
        self._max_audio_file_size_mb = max_audio_file_size_mb
        self._language = language

    async def process_file(
        self,
        buffer: bytes,
        file_name: str,
        mime_type: str,
        options: ProcessingOptions | None = None,
    ) -> ProcessedDocument:
        request = ProcessingRequest(
            buffer=buffer,
            file_name=file_name,
            mime_type=mime_type,
            options=options or self._default_options,
        )
        return await self.process(request)

    async def process(self, request: ProcessingRequest) -> ProcessedDocument:
        effective_mime = self._classifier.effective_mime_type(request.file_name, request.mime_type)
        metadata = DocumentMetadata(
            file_name=request.file_name,
            file_type=self._classifier.file_type_label(effective_mime),
            mime_type=effective_mime,
            file_size=request.file_size,
            processing_method=ProcessingMethod.DIRECT,
        )
        Log.info(
            f"Processing {request.file_name}",
            mime=effective_mime,
            size=request.file_size,
        )

        try:
            kind = self._classifier.classify(request.file_name, request.mime_type)
            self._check_size(kind, request.file_size)
            handler = self._handlers.get(kind)
            if handler is None:
                raise UnsupportedFormatError(f"No handler registered for {kind.value} files")
            outcome = await handler.handle(request)
        except ProcessorError as exc:
            Log.warning(f"Processing failed: {exc}", file=request.file_name)
            return ProcessedDocument.failure(metadata, str(exc))
        except Exception as exc:
            Log.exception(f"Unexpected processing error: {exc}", file=request.file_name)
            return ProcessedDocument.failure(metadata, f"Processing failed: {exc}")

        Log.info(
            f"Processed {request.file_name}",
            method=outcome.processing_method.value,
            chars=len(outcome.text),
        )
        return ProcessedDocument(
            success=True,
            text=outcome.text,
            metadata=self._merge(metadata, outcome),
        )

    async def ingest(
        self,
        request: ProcessingRequest,
        *,
        title: str,
        sink: BaseDocumentSink,
        source_url: str | None = None,
        document_type: str | None = None,
    ) -> IngestionResult:
        """Process a file, derive its metadata and hand both to the storage sink."""
        document = await self.process(request)
        if not document.success:
            return IngestionResult(document=document)

        metadata = extract_normalized_metadata(title, document.text)
        key = DeduplicationKey.build(
            source_url=source_url,
            normalized_title=metadata.normalized_title or title,
            document_type=document_type,
        )
        saved = await sink.save(document, metadata, key)
        Log.info(f"Ingested {request.file_name}", saved=saved, session=metadata.session_number)
        return IngestionResult(document=document, metadata=metadata, key=key, saved=saved)

    def _check_size(self, kind: FileKind, size: int) -> None:
        limit_mb = (
            self._max_audio_file_size_mb if kind is FileKind.AUDIO_VIDEO else self._max_file_size_mb
        )
        if size > limit_mb * MB:
            raise OversizeInputError(
                f"File too large: {size / MB:.1f}MB exceeds the {limit_mb}MB limit"
            )

    def _merge(self, metadata: DocumentMetadata, outcome: ExtractionOutcome) -> DocumentMetadata:
        return replace(
            metadata,
            processing_method=outcome.processing_method,
            page_count=outcome.page_count,
            confidence=outcome.confidence,
            language=self._language,
            ocr_engine=outcome.ocr_engine,
            pages_processed=outcome.pages_processed,
            skipped_pages=outcome.skipped_pages,
            failed_pages=outcome.failed_pages,
            stt_model=outcome.stt_model,
        )


def build_processor(settings: Settings) -> DocumentProcessor:
    """Build a DocumentProcessor with all configured collaborators."""
    Log.configure(settings.log_level)
    tiered = TieredOcrEngine(
        local_engine=OcrEngineFactory.create(settings),
        vision=VisionServiceFactory.create(settings),
        languages=settings.ocr_languages,
        page_concurrency=settings.page_concurrency,
        vision_concurrency=settings.vision_concurrency,
        page_timeout_seconds=settings.page_timeout_seconds,
    )
    handlers: dict[FileKind, FormatHandler] = {
        FileKind.TEXT: TextHandler(),
        FileKind.DOCX: DocxHandler(),
        FileKind.IMAGE: ImageHandler(tiered),
        FileKind.PDF: PdfHandler(
            extractor=PdfExtractorFactory.create(settings),
            rasterizer=PdfRasterizerFactory.create(settings),
            tiered=tiered,
            max_pages=settings.pdf_max_pages,
            dpi=settings.pdf_rasterize_dpi,
        ),
        FileKind.AUDIO_VIDEO: AudioHandler(
            TranscriberFactory.create(settings), language=settings.default_language
        ),
    }
    return DocumentProcessor(
        handlers=handlers,
        default_options=ProcessingOptions.from_settings(settings),
        max_file_size_mb=settings.max_file_size_mb,
        max_audio_file_size_mb=settings.max_audio_file_size_mb,
        language=settings.default_language,
    )
