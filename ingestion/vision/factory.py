from typing import ClassVar

from ingestion.config.settings import Settings
from ingestion.logging.logger import Log
from ingestion.vision.client_base import BaseVisionClient
from ingestion.vision.example_client_adapter import ExampleClientAdapter
from ingestion.vision.openai_client_adapter import OpenAIClientAdapter
from ingestion.vision.prompt_loader import load_vision_prompt
from ingestion.vision.queue_base import BaseVisionQueue
from ingestion.vision.redis_queue import RedisVisionQueue
from ingestion.vision.service import VisionService


class VisionClientFactory:
    """Creates the configured vision client adapter."""

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionClient | None:
        """Create a vision client, or None when the vision tier is disabled."""
        provider = settings.vision_provider.lower()
        if provider == "none":
            return None
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            api_key=cls._resolve_api_key(provider, settings),
            model=cls._resolve_model_name(provider, settings),
            timeout_seconds=settings.vision_timeout_seconds,
            max_completion_tokens=settings.vision_max_completion_tokens,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.vision_openai_compatible_base_url or "").strip()
            if not url:
                raise ValueError(
                    "vision_openai_compatible_base_url is required for "
                    "vision_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "none",
            "example",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(f"Unknown vision provider '{provider}'. Choose from: {supported}")

    @classmethod
    def _resolve_api_key(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_api_key,
            "openai_compatible": settings.vision_openai_compatible_api_key,
            "openrouter": settings.vision_openrouter_api_key,
            "ollama": settings.vision_ollama_api_key,
        }
        return key_map.get(provider, "") or ""

    @classmethod
    def _resolve_model_name(cls, provider: str, settings: Settings) -> str:
        key_map = {
            "openai": settings.vision_openai_model_name,
            "openai_compatible": settings.vision_openai_compatible_model_name,
            "openrouter": settings.vision_openrouter_model_name,
            "ollama": settings.vision_ollama_model_name,
        }
        return key_map.get(provider, "") or ""


class VisionQueueFactory:
    """Creates the async vision queue when a Redis URL is configured."""

    @classmethod
    def create(cls, settings: Settings) -> BaseVisionQueue | None:
        url = settings.vision_queue_redis_url.strip()
        if not url:
            return None
        return RedisVisionQueue(
            redis_url=url,
            queue_name=settings.vision_queue_name,
            poll_interval_seconds=settings.vision_queue_poll_interval_seconds,
        )


class VisionServiceFactory:
    """Wires client, queue and prompt into the vision tier."""

    @classmethod
    def create(cls, settings: Settings) -> VisionService | None:
        client = VisionClientFactory.create(settings)
        queue = VisionQueueFactory.create(settings)
        if client is None and queue is None:
            Log.warning("Vision tier disabled: no vision provider or queue configured")
            return None
        return VisionService(
            instruction=load_vision_prompt(),
            client=client,
            queue=queue,
            queue_timeout_seconds=settings.vision_queue_timeout_seconds,
        )
