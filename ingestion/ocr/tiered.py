"""Tiered OCR decision engine.

Each image or PDF page walks a small state machine::

    START -> SKIPPED_BLANK                      (blank page, no OCR at all)
    START -> LOCAL_OCR -> ACCEPTED_LOCAL        (confident local result)
    START -> LOCAL_OCR -> VISION -> ACCEPTED_VISION | FAILED
    START -> VISION -> ACCEPTED_VISION | FAILED (vision-only mode)

``transition`` is pure; ``TieredOcrEngine`` performs the work each state
calls for and feeds the outcome back into it.
"""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from ingestion.config.thresholds import QualityThresholds, TieringThresholds
from ingestion.imaging.quality import ImageQualityStats, analyze_image
from ingestion.imaging.recipe import plan_restoration
from ingestion.imaging.restoration import downscale_for_vision, restore_image
from ingestion.logging.logger import Log
from ingestion.ocr.base import BaseOcrEngine
from ingestion.ocr.models import OcrAttempt, PageResult, PageState
from ingestion.processor.models import ProcessingOptions
from ingestion.vision.service import VisionService

_DEFAULT_QUALITY = QualityThresholds()
_DEFAULT_TIERING = TieringThresholds()

T = TypeVar("T")

WEAK_LOCAL_ENGINE = "tesseract-fallback"
VISION_NOT_CONFIGURED = "Vision tier not configured; check VISION_* credentials / network"


@dataclass(slots=True)
class TierContext:
    options: ProcessingOptions
    blank: bool = False
    local: OcrAttempt | None = None
    vision: OcrAttempt | None = None
    local_engine: str = "local"
    vision_engine: str = "vision"
    escalated: bool = False
    error: str | None = None


def transition(
    state: PageState,
    context: TierContext,
    thresholds: TieringThresholds = _DEFAULT_TIERING,
) -> PageState:
    """Return the state that follows ``state`` given what is known so far."""
    if state is PageState.START:
        if context.blank:
            return PageState.SKIPPED_BLANK
        if context.options.use_vision_only:
            return PageState.VISION
        return PageState.LOCAL_OCR

    if state is PageState.LOCAL_OCR:
        local = context.local
        if (
            local is not None
            and local.confidence >= context.options.local_confidence_threshold
            and len(local.text) > thresholds.min_local_text_length
        ):
            return PageState.ACCEPTED_LOCAL
        return PageState.VISION

    if state is PageState.VISION:
        if context.vision is not None and not context.vision.is_empty:
            return PageState.ACCEPTED_VISION
        if (
            context.options.accept_weak_local_on_vision_failure
            and context.local is not None
            and not context.local.is_empty
        ):
            return PageState.ACCEPTED_LOCAL
        return PageState.FAILED

    raise ValueError(f"No transition out of terminal state {state.value}")


class TieredOcrEngine:
    """Runs local OCR first and escalates to the vision model when unsure."""

    def __init__(
        self,
        *,
        local_engine: BaseOcrEngine | None,
        vision: VisionService | None,
        languages: str = "pol+eng",
        page_concurrency: int = 1,
        vision_concurrency: int = 3,
        page_timeout_seconds: float = 300,
        quality_thresholds: QualityThresholds = _DEFAULT_QUALITY,
        tiering_thresholds: TieringThresholds = _DEFAULT_TIERING,
    ) -> None:
        self._local_engine = local_engine
        self._vision = vision
        self._languages = languages
        self._page_concurrency = max(page_concurrency, 1)
        self._vision_concurrency = max(vision_concurrency, 1)
        self._page_timeout = page_timeout_seconds
        self._quality = quality_thresholds
        self._tiering = tiering_thresholds

    async def process_page(
        self,
        image_bytes: bytes,
        options: ProcessingOptions,
        page_number: int = 1,
        *,
        cpu_gate: asyncio.Semaphore | None = None,
        vision_gate: asyncio.Semaphore | None = None,
    ) -> PageResult:
        """Drive one image through the tier state machine.

        The page timeout bounds each step once its gate is held.
        """
        cpu_gate = cpu_gate or asyncio.Semaphore(self._page_concurrency)
        vision_gate = vision_gate or asyncio.Semaphore(self._vision_concurrency)
        context = TierContext(options=options)

        try:
            async with cpu_gate:
                stats = await self._within_timeout(
                    asyncio.to_thread(analyze_image, image_bytes, self._quality)
                )
            context.blank = stats.is_blank(self._quality)

            state = PageState.START
            while True:
                if state is PageState.LOCAL_OCR:
                    async with cpu_gate:
                        context.local = await self._within_timeout(
                            self._run_local(image_bytes, stats, context, page_number)
                        )
                elif state is PageState.VISION:
                    context.escalated = True
                    async with vision_gate:
                        context.vision = await self._within_timeout(
                            self._run_vision(image_bytes, context, page_number)
                        )

                next_state = transition(state, context, self._tiering)
                Log.info(f"Tier {state.value} -> {next_state.value}", page=page_number)
                state = next_state
                if state.is_terminal:
                    return self._result(page_number, state, context)
        except asyncio.TimeoutError:
            error = f"Timeout after {self._page_timeout}s"
            Log.error(f"Page {page_number} failed: {error}", page=page_number)
            return PageResult(page_number=page_number, state=PageState.FAILED, error=error)

    async def process_pages(
        self, images: list[bytes], options: ProcessingOptions
    ) -> list[PageResult]:
        """Process pages concurrently; results come back ordered by page number."""
        cpu_gate = asyncio.Semaphore(self._page_concurrency)
        vision_gate = asyncio.Semaphore(self._vision_concurrency)
        results = await asyncio.gather(
            *(
                self._guarded_page(image, options, number, cpu_gate, vision_gate)
                for number, image in enumerate(images, start=1)
            )
        )
        return sorted(results, key=lambda result: result.page_number)

    async def _guarded_page(
        self,
        image_bytes: bytes,
        options: ProcessingOptions,
        page_number: int,
        cpu_gate: asyncio.Semaphore,
        vision_gate: asyncio.Semaphore,
    ) -> PageResult:
        try:
            return await self.process_page(
                image_bytes,
                options,
                page_number,
                cpu_gate=cpu_gate,
                vision_gate=vision_gate,
            )
        except Exception as exc:
            error = f"{type(exc).__name__}: {exc}"
        Log.error(f"Page {page_number} failed: {error}", page=page_number)
        return PageResult(page_number=page_number, state=PageState.FAILED, error=error)

    async def _within_timeout(self, step: Awaitable[T]) -> T:
        return await asyncio.wait_for(step, timeout=self._page_timeout)

    async def _run_local(
        self,
        image_bytes: bytes,
        stats: ImageQualityStats,
        context: TierContext,
        page_number: int,
    ) -> OcrAttempt | None:
        if self._local_engine is None:
            Log.debug("No local OCR engine configured", page=page_number)
            return None
        engine = self._local_engine
        context.local_engine = engine.name
        dpi = context.options.local_engine_dpi
        recipe = plan_restoration(stats, dpi=dpi, thresholds=self._quality)
        try:
            restored = await asyncio.to_thread(restore_image, image_bytes, recipe)
            attempt = await asyncio.to_thread(engine.recognize, restored, self._languages, dpi)
        except Exception as exc:
            Log.warning(f"Local OCR failed: {exc}", page=page_number)
            context.error = str(exc)
            return None
        Log.debug(
            "Local OCR finished",
            page=page_number,
            confidence=f"{attempt.confidence:.1f}",
            chars=len(attempt.text),
        )
        return attempt

    async def _run_vision(
        self, image_bytes: bytes, context: TierContext, page_number: int
    ) -> OcrAttempt | None:
        if self._vision is None:
            Log.warning(VISION_NOT_CONFIGURED, page=page_number)
            context.error = VISION_NOT_CONFIGURED
            return None
        context.vision_engine = self._vision.engine_name
        options = context.options
        scaled = await asyncio.to_thread(
            downscale_for_vision, image_bytes, options.vision_max_dimension
        )
        try:
            return await self._vision.recognize(
                scaled,
                use_queue=options.use_async_vision_queue,
                metadata={"page": str(page_number)},
            )
        except Exception as exc:
            Log.warning(f"Vision tier failed: {exc}", page=page_number)
            context.error = str(exc)
            return None

    def _result(self, page_number: int, state: PageState, context: TierContext) -> PageResult:
        if state is PageState.ACCEPTED_VISION and context.vision is not None:
            return PageResult(
                page_number=page_number,
                state=state,
                text=context.vision.text,
                confidence=context.vision.confidence,
                engine=context.vision_engine,
            )
        if state is PageState.ACCEPTED_LOCAL and context.local is not None:
            return PageResult(
                page_number=page_number,
                state=state,
                text=context.local.text,
                confidence=context.local.confidence,
                engine=WEAK_LOCAL_ENGINE if context.escalated else context.local_engine,
            )
        if state is PageState.FAILED:
            return PageResult(
                page_number=page_number,
                state=state,
                error=context.error or "No text extracted by any OCR tier",
            )
        return PageResult(page_number=page_number, state=state)
