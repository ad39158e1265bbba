from abc import ABC, abstractmethod

from ingestion.vision.models import VisionJobResult


class BaseVisionQueue(ABC):
    """Contract for the external async vision queue.

    The queue owns rate limiting of the vision provider. Callers submit a job
    and poll for its result.
    """

    @abstractmethod
    async def submit(
        self,
        image_bytes: bytes,
        instruction: str,
        *,
        mime_type: str = "image/png",
        metadata: dict[str, str] | None = None,
    ) -> str:
        """Enqueue a vision job and return its id.

        Raises:
            VisionQueueError: if the job cannot be enqueued.
        """

    @abstractmethod
    async def wait_for_result(self, job_id: str, timeout_seconds: float) -> VisionJobResult:
        """Wait for a job to finish.

        A job that does not finish in time yields ``success=False`` with a
        ``"Timeout after ..."`` error instead of raising.
        """

    async def close(self) -> None:
        """Release connections held by the queue."""
