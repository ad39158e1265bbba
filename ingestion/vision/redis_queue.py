import asyncio
import base64
import json
import time
import uuid

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ingestion.logging.logger import Log
from ingestion.vision.exceptions import VisionQueueError
from ingestion.vision.models import VisionJobResult
from ingestion.vision.queue_base import BaseVisionQueue


class RedisVisionQueue(BaseVisionQueue):
    """Vision queue backed by a Redis list.

    Jobs are pushed as JSON onto ``queue_name``; the external worker stores
    each result as JSON under ``vision-result:<job_id>``.
    """

    RESULT_KEY_PREFIX = "vision-result:"

    def __init__(
        self,
        *,
        redis_url: str = "",
        queue_name: str = "vision-jobs",
        poll_interval_seconds: float = 0.5,
        client: aioredis.Redis | None = None,
    ) -> None:
        if client is None:
            client = aioredis.from_url(redis_url, decode_responses=True)
        self._client = client
        self._queue_name = queue_name
        self._poll_interval = poll_interval_seconds

    async def submit(
        self,
        image_bytes: bytes,
        instruction: str,
        *,
        mime_type: str = "image/png",
        metadata: dict[str, str] | None = None,
    ) -> str:
        job_id = uuid.uuid4().hex
        payload = {
            "job_id": job_id,
            "image": base64.b64encode(image_bytes).decode("ascii"),
            "mime_type": mime_type,
            "instruction": instruction,
            "metadata": metadata or {},
            "submitted_at": time.time(),
        }
        try:
            await self._client.lpush(self._queue_name, json.dumps(payload))
        except RedisError as exc:
            raise VisionQueueError(f"Failed to enqueue vision job: {exc}") from exc
        Log.debug("Vision job submitted", job_id=job_id, queue=self._queue_name)
        return job_id

    async def wait_for_result(self, job_id: str, timeout_seconds: float) -> VisionJobResult:
        key = f"{self.RESULT_KEY_PREFIX}{job_id}"
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout_seconds
        while True:
            try:
                raw = await self._client.get(key)
            except RedisError as exc:
                raise VisionQueueError(f"Failed to read vision job result: {exc}") from exc

            if raw is not None:
                await self._discard(key)
                return self._parse(job_id, raw)

            if loop.time() >= deadline:
                return VisionJobResult(success=False, error=f"Timeout after {timeout_seconds}s")
            await asyncio.sleep(self._poll_interval)

    async def close(self) -> None:
        await self._client.aclose()

    async def _discard(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except RedisError as exc:
            Log.warning(f"Failed to delete vision result {key}: {exc}")

    @staticmethod
    def _parse(job_id: str, raw: str | bytes) -> VisionJobResult:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise VisionQueueError(f"Invalid result for vision job {job_id}: {exc}") from exc
        if not isinstance(payload, dict):
            raise VisionQueueError(f"Result for vision job {job_id} must be an object")
        return VisionJobResult.from_payload(payload)
