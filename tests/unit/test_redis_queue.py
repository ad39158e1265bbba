import asyncio
import base64
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ingestion.vision.exceptions import VisionQueueError
from ingestion.vision.redis_queue import RedisVisionQueue


def _make_mock_redis(get_values: list[str | None] | None = None) -> MagicMock:
    client = MagicMock()
    client.lpush = AsyncMock(return_value=1)
    client.get = AsyncMock(side_effect=get_values or [None])
    client.delete = AsyncMock(return_value=1)
    client.aclose = AsyncMock()
    return client


def _queue(client: MagicMock) -> RedisVisionQueue:
    return RedisVisionQueue(queue_name="jobs", poll_interval_seconds=0.01, client=client)


class TestSubmit:
    def test_pushes_json_job(self) -> None:
        client = _make_mock_redis()
        job_id = asyncio.run(
            _queue(client).submit(b"png", "Transcribe", metadata={"page": "2"})
        )

        queue_name, raw = client.lpush.call_args.args
        payload = json.loads(raw)
        assert queue_name == "jobs"
        assert payload["job_id"] == job_id
        assert base64.b64decode(payload["image"]) == b"png"
        assert payload["mime_type"] == "image/png"
        assert payload["instruction"] == "Transcribe"
        assert payload["metadata"] == {"page": "2"}

    def test_job_ids_are_unique(self) -> None:
        queue = _queue(_make_mock_redis())
        first = asyncio.run(queue.submit(b"a", "x"))
        second = asyncio.run(queue.submit(b"a", "x"))
        assert first != second

    def test_redis_failure_raises_queue_error(self) -> None:
        client = _make_mock_redis()
        client.lpush.side_effect = RedisConnectionError("refused")
        with pytest.raises(VisionQueueError, match="enqueue"):
            asyncio.run(_queue(client).submit(b"png", "Transcribe"))


class TestWaitForResult:
    def test_polls_until_result_arrives(self) -> None:
        stored = json.dumps({"success": True, "text": "Sesja nr 5", "confidence": 88})
        client = _make_mock_redis([None, None, stored])

        result = asyncio.run(_queue(client).wait_for_result("abc", timeout_seconds=5))

        assert result.success
        assert result.text == "Sesja nr 5"
        assert result.confidence == 88.0
        assert client.get.await_count == 3
        client.get.assert_awaited_with("vision-result:abc")
        client.delete.assert_awaited_once_with("vision-result:abc")

    def test_failed_job_result(self) -> None:
        stored = json.dumps({"success": False, "error": "model overloaded"})
        result = asyncio.run(
            _queue(_make_mock_redis([stored])).wait_for_result("abc", timeout_seconds=5)
        )
        assert not result.success
        assert result.error == "model overloaded"

    def test_times_out(self) -> None:
        client = _make_mock_redis()
        client.get.side_effect = None
        client.get.return_value = None

        result = asyncio.run(_queue(client).wait_for_result("abc", timeout_seconds=0.05))

        assert not result.success
        assert result.error == "Timeout after 0.05s"

    def test_invalid_json_raises_queue_error(self) -> None:
        with pytest.raises(VisionQueueError, match="Invalid result"):
            asyncio.run(
                _queue(_make_mock_redis(["{broken"])).wait_for_result("abc", timeout_seconds=5)
            )

    def test_non_object_result_raises_queue_error(self) -> None:
        with pytest.raises(VisionQueueError, match="must be an object"):
            asyncio.run(
                _queue(_make_mock_redis(["[1, 2]"])).wait_for_result("abc", timeout_seconds=5)
            )

    def test_close_closes_client(self) -> None:
        client = _make_mock_redis()
        asyncio.run(_queue(client).close())
        client.aclose.assert_awaited_once()
