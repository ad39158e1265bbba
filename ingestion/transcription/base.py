from abc import ABC, abstractmethod


class BaseTranscriber(ABC):
    """Contract for speech-to-text collaborators used for audio and video files."""

    model_name: str = ""

    @abstractmethod
    async def transcribe(
        self, audio_bytes: bytes, file_name: str, mime_type: str, language: str | None = None
    ) -> str:
        """Return the transcript of the recording.

        Raises:
            TranscriptionError: on any failure.
        """
