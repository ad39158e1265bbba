from ingestion.config.thresholds import TieringThresholds
from ingestion.logging.logger import Log
from ingestion.ocr.models import OcrAttempt
from ingestion.vision.client_base import BaseVisionClient
from ingestion.vision.exceptions import VisionError, VisionQueueError
from ingestion.vision.queue_base import BaseVisionQueue

_DEFAULT_TIERING = TieringThresholds()

VISION_ENGINE = "vision-api"


class VisionService:
    """Vision tier: sends a page image either directly or through the queue.

    The queue is used only when one is configured and the caller asks for it.
    Confidence is the value reported by the queue worker, otherwise the
    assumed vision confidence.
    """

    def __init__(
        self,
        *,
        instruction: str,
        client: BaseVisionClient | None = None,
        queue: BaseVisionQueue | None = None,
        queue_timeout_seconds: float = 300,
        thresholds: TieringThresholds = _DEFAULT_TIERING,
    ) -> None:
        if client is None and queue is None:
            raise ValueError("VisionService needs a client or a queue")
        self._instruction = instruction
        self._client = client
        self._queue = queue
        self._queue_timeout = queue_timeout_seconds
        self._assumed_confidence = thresholds.assumed_vision_confidence

    @property
    def engine_name(self) -> str:
        return VISION_ENGINE

    async def recognize(
        self,
        image_bytes: bytes,
        *,
        use_queue: bool = True,
        metadata: dict[str, str] | None = None,
    ) -> OcrAttempt:
        """Transcribe one image.

        Raises:
            VisionError: when the provider or queue fails.
        """
        if self._queue is not None and (use_queue or self._client is None):
            return await self._recognize_queued(self._queue, image_bytes, metadata)
        if self._client is None:
            raise VisionError("Vision client not configured; check VISION_* credentials")
        text = await self._client.extract(image_bytes, self._instruction)
        return OcrAttempt(text=text, confidence=self._assumed_confidence)

    async def _recognize_queued(
        self, queue: BaseVisionQueue, image_bytes: bytes, metadata: dict[str, str] | None
    ) -> OcrAttempt:
        job_id = await queue.submit(image_bytes, self._instruction, metadata=metadata)
        result = await queue.wait_for_result(job_id, self._queue_timeout)
        if not result.success:
            raise VisionQueueError(f"Vision job {job_id} failed: {result.error or 'unknown error'}")
        confidence = result.confidence if result.confidence is not None else self._assumed_confidence
        Log.debug("Vision job finished", job_id=job_id, confidence=confidence)
        return OcrAttempt(text=result.text.strip(), confidence=confidence)

    async def close(self) -> None:
        if self._queue is not None:
            await self._queue.close()
