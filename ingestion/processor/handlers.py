import asyncio
import io
import statistics
import zipfile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError

from ingestion.logging.logger import Log
from ingestion.ocr.models import PageResult, PageState
from ingestion.ocr.tiered import TieredOcrEngine
from ingestion.pdf.base import BasePdfExtractor, PdfText
from ingestion.pdf.exceptions import PdfExtractionError, RasterizationError, RasterizerUnavailableError
from ingestion.pdf.rasterizer_base import BasePdfRasterizer
from ingestion.pdf.text_classifier import classify_text_layer
from ingestion.processor.exceptions import (
    CollaboratorUnavailableError,
    DecodeFailureError,
    EmptyExtractionError,
)
from ingestion.processor.models import ProcessingMethod, ProcessingRequest
from ingestion.processor.pipeline import ExtractionOutcome, FormatHandler
from ingestion.transcription.base import BaseTranscriber
from ingestion.transcription.exceptions import TranscriptionError
from ingestion.vision.service import VISION_ENGINE


class TextHandler(FormatHandler):
    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        text = request.buffer.decode("utf-8-sig", errors="replace").strip()
        if not text:
            raise EmptyExtractionError("Text extraction failed: file is empty")
        return ExtractionOutcome(text=text, processing_method=ProcessingMethod.DIRECT, confidence=1.0)


class DocxHandler(FormatHandler):
    """Reads paragraph text, then table rows, from a DOCX document."""

    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        text = await asyncio.to_thread(self.extract_text, request.buffer)
        if not text:
            raise EmptyExtractionError("Text extraction failed: document has no text")
        return ExtractionOutcome(
            text=text, processing_method=ProcessingMethod.TEXT_EXTRACTION, confidence=1.0
        )

    @staticmethod
    def extract_text(data: bytes) -> str:
        try:
            document = Document(io.BytesIO(data))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as exc:
            raise DecodeFailureError(f"Could not read DOCX document: {exc}") from exc

        lines = [paragraph.text for paragraph in document.paragraphs if paragraph.text.strip()]
        for table in document.tables:
            for row in table.rows:
                row_text = " | ".join(cell.text.strip() for cell in row.cells)
                if row_text.strip(" |"):
                    lines.append(row_text)
        return "\n".join(lines).strip()


def _summarize_pages(
    pages: list[PageResult],
) -> tuple[ProcessingMethod, str | None, float | None]:
    """Processing method, engine label and mean 0-1 confidence of the accepted pages."""
    accepted = [page for page in pages if page.state.is_accepted]
    engines = sorted({page.engine for page in accepted if page.engine})
    confidences = [page.confidence for page in accepted if page.confidence is not None]
    only_vision = bool(accepted) and all(page.engine == VISION_ENGINE for page in accepted)
    method = ProcessingMethod.VISION if only_vision else ProcessingMethod.OCR
    confidence = statistics.fmean(confidences) / 100 if confidences else None
    return method, "+".join(engines) or None, confidence


class ImageHandler(FormatHandler):
    def __init__(self, tiered: TieredOcrEngine) -> None:
        self._tiered = tiered

    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        page = await self._tiered.process_page(request.buffer, request.options)
        if page.state is PageState.SKIPPED_BLANK:
            raise EmptyExtractionError("Text extraction failed: image is blank")
        if not page.state.is_accepted:
            raise EmptyExtractionError(
                f"Text extraction failed: {page.error or 'no OCR tier produced text'}"
            )
        method, engine, confidence = _summarize_pages([page])
        return ExtractionOutcome(
            text=page.text, processing_method=method, confidence=confidence, ocr_engine=engine
        )


class PdfHandler(FormatHandler):
    """Uses the embedded text layer when trustworthy, otherwise rasterizes and OCRs."""

    def __init__(
        self,
        *,
        extractor: BasePdfExtractor,
        rasterizer: BasePdfRasterizer,
        tiered: TieredOcrEngine,
        max_pages: int = 10,
        dpi: int = 200,
    ) -> None:
        self._extractor = extractor
        self._rasterizer = rasterizer
        self._tiered = tiered
        self._max_pages = max_pages
        self._dpi = dpi

    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        text_layer = await self._read_text_layer(request)
        if text_layer is not None:
            verdict = classify_text_layer(text_layer.text, text_layer.page_count)
            if verdict.usable:
                Log.info("Using PDF text layer", file=request.file_name, pages=text_layer.page_count)
                return ExtractionOutcome(
                    text=text_layer.text,
                    processing_method=ProcessingMethod.TEXT_EXTRACTION,
                    page_count=text_layer.page_count,
                )
            Log.info(f"PDF text layer rejected: {verdict.reason}", file=request.file_name)

        page_count = text_layer.page_count if text_layer is not None else 0
        last_page = min(page_count or self._max_pages, self._max_pages)
        images = await self._rasterize(request.buffer, last_page)
        pages = await self._tiered.process_pages(images, request.options)

        accepted = [page for page in pages if page.state.is_accepted]
        skipped = sum(1 for page in pages if page.state is PageState.SKIPPED_BLANK)
        failed = [page for page in pages if page.state is PageState.FAILED]
        if failed:
            Log.warning(f"{len(failed)} of {len(pages)} PDF pages failed", file=request.file_name)
        if not accepted:
            detail = failed[-1].error if failed else "all pages are blank"
            raise EmptyExtractionError(
                f"Text extraction failed for all {len(pages)} pages: {detail}"
            )

        method, engine, confidence = _summarize_pages(pages)
        text = "\n\n".join(f"--- Page {page.page_number} ---\n{page.text}" for page in accepted)
        return ExtractionOutcome(
            text=text,
            page_count=page_count or len(images),
            pages_processed=len(pages),
            skipped_pages=skipped,
            failed_pages=len(failed),
            processing_method=method,
            confidence=confidence,
            ocr_engine=engine,
        )

    async def _read_text_layer(self, request: ProcessingRequest) -> PdfText | None:
        try:
            return await asyncio.to_thread(self._extractor.extract, request.buffer)
        except PdfExtractionError as exc:
            Log.warning(f"PDF text layer unreadable, rasterizing: {exc}", file=request.file_name)
            return None

    async def _rasterize(self, pdf_bytes: bytes, last_page: int) -> list[bytes]:
        try:
            images = await asyncio.to_thread(
                self._rasterizer.rasterize, pdf_bytes, 1, last_page, self._dpi
            )
        except RasterizerUnavailableError as exc:
            raise CollaboratorUnavailableError(str(exc)) from exc
        except RasterizationError as exc:
            raise DecodeFailureError(f"PDF could not be decoded: {exc}") from exc
        if not images:
            raise DecodeFailureError("PDF could not be decoded: rasterizer returned no pages")
        Log.debug(f"Rasterized {len(images)} pages at {self._dpi} DPI")
        return images


class AudioHandler(FormatHandler):
    def __init__(self, transcriber: BaseTranscriber | None, language: str | None = None) -> None:
        self._transcriber = transcriber
        self._language = language

    async def handle(self, request: ProcessingRequest) -> ExtractionOutcome:
        if self._transcriber is None:
            raise CollaboratorUnavailableError(
                "Speech-to-text not configured; set STT_PROVIDER to transcribe audio and video"
            )
        try:
            text = await self._transcriber.transcribe(
                request.buffer, request.file_name, request.mime_type, self._language
            )
        except TranscriptionError as exc:
            raise CollaboratorUnavailableError(
                f"{exc} (check STT_* credentials / network)"
            ) from exc
        if not text:
            raise EmptyExtractionError("Text extraction failed: transcript is empty")
        return ExtractionOutcome(
            text=text,
            processing_method=ProcessingMethod.STT,
            stt_model=self._transcriber.model_name,
        )
