from unittest.mock import patch

import pytest

from ingestion.config.settings import Settings
from ingestion.vision.example_client_adapter import ExampleClientAdapter
from ingestion.vision.factory import VisionClientFactory, VisionQueueFactory, VisionServiceFactory
from ingestion.vision.redis_queue import RedisVisionQueue
from ingestion.vision.service import VisionService

ADAPTER = "ingestion.vision.factory.OpenAIClientAdapter"


class TestVisionClientFactory:
    def test_none_disables_vision(self) -> None:
        assert VisionClientFactory.create(Settings(vision_provider="none")) is None

    def test_example_provider(self) -> None:
        client = VisionClientFactory.create(Settings(vision_provider="example"))
        assert isinstance(client, ExampleClientAdapter)

    def test_openai_provider(self) -> None:
        settings = Settings(
            vision_provider="openai",
            vision_openai_api_key="sk-test",
            vision_openai_model_name="gpt-4o",
            vision_timeout_seconds=45,
        )
        with patch(ADAPTER) as mock_adapter:
            VisionClientFactory.create(settings)
        mock_adapter.assert_called_once_with(
            api_key="sk-test",
            model="gpt-4o",
            timeout_seconds=45,
            max_completion_tokens=4096,
            base_url=None,
        )

    def test_ollama_uses_default_base_url(self) -> None:
        with patch(ADAPTER) as mock_adapter:
            VisionClientFactory.create(Settings(vision_provider="Ollama"))
        kwargs = mock_adapter.call_args.kwargs
        assert kwargs["base_url"] == "http://localhost:11434/v1"
        assert kwargs["model"] == "qwen3-vl"
        assert kwargs["api_key"] == "ollama"

    def test_openrouter_uses_its_credentials(self) -> None:
        settings = Settings(
            vision_provider="openrouter",
            vision_openrouter_api_key="or-key",
            vision_openrouter_model_name="google/gemini-2.5-flash",
        )
        with patch(ADAPTER) as mock_adapter:
            VisionClientFactory.create(settings)
        kwargs = mock_adapter.call_args.kwargs
        assert kwargs["base_url"] == "https://openrouter.ai/api/v1"
        assert kwargs["api_key"] == "or-key"

    def test_openai_compatible_requires_base_url(self) -> None:
        with pytest.raises(ValueError, match="base_url is required"):
            VisionClientFactory.create(Settings(vision_provider="openai_compatible"))

    def test_openai_compatible_with_base_url(self) -> None:
        settings = Settings(
            vision_provider="openai_compatible",
            vision_openai_compatible_base_url=" http://vllm:8000/v1 ",
            vision_openai_compatible_model_name="qwen2-vl",
        )
        with patch(ADAPTER) as mock_adapter:
            VisionClientFactory.create(settings)
        assert mock_adapter.call_args.kwargs["base_url"] == "http://vllm:8000/v1"

    def test_unknown_provider_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown vision provider"):
            VisionClientFactory.create(Settings(vision_provider="watson"))


class TestVisionQueueFactory:
    def test_no_url_means_no_queue(self) -> None:
        assert VisionQueueFactory.create(Settings(vision_queue_redis_url="")) is None

    def test_creates_redis_queue(self) -> None:
        queue = VisionQueueFactory.create(
            Settings(vision_queue_redis_url="redis://localhost:6379/0")
        )
        assert isinstance(queue, RedisVisionQueue)


class TestVisionServiceFactory:
    def test_disabled_when_nothing_configured(self) -> None:
        settings = Settings(vision_provider="none", vision_queue_redis_url="")
        assert VisionServiceFactory.create(settings) is None

    def test_builds_service_with_client(self) -> None:
        service = VisionServiceFactory.create(Settings(vision_provider="example"))
        assert isinstance(service, VisionService)

    def test_queue_only_service(self) -> None:
        settings = Settings(
            vision_provider="none", vision_queue_redis_url="redis://localhost:6379/0"
        )
        assert isinstance(VisionServiceFactory.create(settings), VisionService)
