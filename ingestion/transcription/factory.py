from ingestion.config.settings import Settings
from ingestion.transcription.base import BaseTranscriber
from ingestion.transcription.openai_adapter import OpenAITranscriber


class TranscriberFactory:
    """Creates the configured speech-to-text collaborator."""

    @classmethod
    def create(cls, settings: Settings) -> BaseTranscriber | None:
        provider = settings.stt_provider.lower()
        if provider == "none":
            return None
        if provider == "openai":
            return OpenAITranscriber(
                api_key=settings.stt_openai_api_key,
                model=settings.stt_model_name,
                timeout_seconds=settings.stt_timeout_seconds,
                base_url=settings.stt_base_url or None,
            )
        raise ValueError(f"Unknown STT provider '{provider}'. Choose from: ['none', 'openai']")
