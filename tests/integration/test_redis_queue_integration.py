import asyncio
import base64
import json
import uuid

import pytest
import redis.asyncio as aioredis

from ingestion.vision.redis_queue import RedisVisionQueue
from ingestion.vision.service import VisionService


async def _serve_one_job(client: aioredis.Redis, queue_name: str, text: str) -> dict[str, object]:
    """Act as the external vision worker for a single job."""
    raw = None
    while raw is None:
        raw = await client.rpop(queue_name)
        await asyncio.sleep(0.01)
    job = json.loads(raw)
    result = {"success": True, "text": text, "confidence": 87.5}
    await client.set(f"{RedisVisionQueue.RESULT_KEY_PREFIX}{job['job_id']}", json.dumps(result))
    return job


@pytest.mark.integration
class TestRedisVisionQueue:
    def test_job_round_trip(self, redis_url: str) -> None:
        queue_name = f"vision-jobs-test-{uuid.uuid4().hex}"

        async def scenario() -> tuple[dict[str, object], object]:
            client = aioredis.from_url(redis_url, decode_responses=True)
            queue = RedisVisionQueue(redis_url=redis_url, queue_name=queue_name, poll_interval_seconds=0.05)
            try:
                job_id = await queue.submit(b"png-bytes", "Transcribe", metadata={"page": "1"})
                job = await _serve_one_job(client, queue_name, "Sesja nr 5")
                assert job["job_id"] == job_id
                result = await queue.wait_for_result(job_id, timeout_seconds=5)
                leftover = await client.get(f"{RedisVisionQueue.RESULT_KEY_PREFIX}{job_id}")
                assert leftover is None
                return job, result
            finally:
                await queue.close()
                await client.aclose()

        job, result = asyncio.run(scenario())

        assert base64.b64decode(str(job["image"])) == b"png-bytes"
        assert job["metadata"] == {"page": "1"}
        assert result.success  # type: ignore[attr-defined]
        assert result.text == "Sesja nr 5"  # type: ignore[attr-defined]

    def test_service_through_queue(self, redis_url: str) -> None:
        queue_name = f"vision-jobs-test-{uuid.uuid4().hex}"

        async def scenario() -> object:
            client = aioredis.from_url(redis_url, decode_responses=True)
            queue = RedisVisionQueue(redis_url=redis_url, queue_name=queue_name, poll_interval_seconds=0.05)
            service = VisionService(instruction="Transcribe", queue=queue, queue_timeout_seconds=5)
            try:
                worker = asyncio.create_task(_serve_one_job(client, queue_name, " Porządek obrad "))
                attempt = await service.recognize(b"png-bytes")
                await worker
                return attempt
            finally:
                await service.close()
                await client.aclose()

        attempt = asyncio.run(scenario())

        assert attempt.text == "Porządek obrad"  # type: ignore[attr-defined]
        assert attempt.confidence == 87.5  # type: ignore[attr-defined]

    def test_missing_result_times_out(self, redis_url: str) -> None:
        async def scenario() -> object:
            queue = RedisVisionQueue(redis_url=redis_url, poll_interval_seconds=0.05)
            try:
                return await queue.wait_for_result(uuid.uuid4().hex, timeout_seconds=0.2)
            finally:
                await queue.close()

        result = asyncio.run(scenario())

        assert not result.success  # type: ignore[attr-defined]
        assert result.error == "Timeout after 0.2s"  # type: ignore[attr-defined]
