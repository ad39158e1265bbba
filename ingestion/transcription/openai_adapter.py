import httpx
import openai

from ingestion.transcription.base import BaseTranscriber
from ingestion.transcription.exceptions import TranscriptionError


class OpenAITranscriber(BaseTranscriber):
    """Speech-to-text through the OpenAI-compatible audio transcription API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str = "whisper-1",
        timeout_seconds: int = 300,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self.model_name = model

    async def transcribe(
        self, audio_bytes: bytes, file_name: str, mime_type: str, language: str | None = None
    ) -> str:
        options: dict[str, str] = {}
        if language:
            options["language"] = language
        try:
            response = await self._client.audio.transcriptions.create(
                model=self.model_name,
                file=(file_name, audio_bytes, mime_type),
                **options,
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise TranscriptionError(f"Transcription network error: {exc}") from exc
        except openai.APIError as exc:
            raise TranscriptionError(f"Transcription API error: {exc}") from exc
        return (response.text or "").strip()
