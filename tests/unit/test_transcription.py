import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import openai
import pytest

from ingestion.config.settings import Settings
from ingestion.transcription.exceptions import TranscriptionError
from ingestion.transcription.factory import TranscriberFactory
from ingestion.transcription.openai_adapter import OpenAITranscriber

ASYNC_OPENAI = "ingestion.transcription.openai_adapter.openai.AsyncOpenAI"


def _make_mock_client(**create_kwargs: object) -> MagicMock:
    mock_client = MagicMock()
    mock_client.audio.transcriptions.create = AsyncMock(**create_kwargs)
    return mock_client


class TestOpenAITranscriber:
    def test_returns_stripped_transcript(self) -> None:
        response = MagicMock()
        response.text = " Otwieram sesję. \n"
        mock_client = _make_mock_client(return_value=response)
        with patch(ASYNC_OPENAI, return_value=mock_client):
            transcriber = OpenAITranscriber(api_key="k")
            text = asyncio.run(transcriber.transcribe(b"mp3", "sesja.mp3", "audio/mpeg", "pl"))

        assert text == "Otwieram sesję."
        mock_client.audio.transcriptions.create.assert_awaited_once_with(
            model="whisper-1", file=("sesja.mp3", b"mp3", "audio/mpeg"), language="pl"
        )

    def test_language_omitted_when_not_set(self) -> None:
        response = MagicMock()
        response.text = "tekst"
        mock_client = _make_mock_client(return_value=response)
        with patch(ASYNC_OPENAI, return_value=mock_client):
            asyncio.run(OpenAITranscriber(api_key="k").transcribe(b"x", "a.wav", "audio/wav"))

        assert "language" not in mock_client.audio.transcriptions.create.call_args.kwargs

    def test_connection_error(self) -> None:
        mock_client = _make_mock_client(side_effect=openai.APIConnectionError(request=MagicMock()))
        with patch(ASYNC_OPENAI, return_value=mock_client):
            with pytest.raises(TranscriptionError, match="network error"):
                asyncio.run(OpenAITranscriber(api_key="k").transcribe(b"x", "a.wav", "audio/wav"))

    def test_api_error(self) -> None:
        error = openai.APIError(message="unsupported format", request=MagicMock(), body=None)
        mock_client = _make_mock_client(side_effect=error)
        with patch(ASYNC_OPENAI, return_value=mock_client):
            with pytest.raises(TranscriptionError, match="API error"):
                asyncio.run(OpenAITranscriber(api_key="k").transcribe(b"x", "a.wav", "audio/wav"))


class TestTranscriberFactory:
    def test_none(self) -> None:
        assert TranscriberFactory.create(Settings(stt_provider="none")) is None

    def test_openai(self) -> None:
        with patch(ASYNC_OPENAI):
            transcriber = TranscriberFactory.create(
                Settings(stt_provider="OpenAI", stt_model_name="whisper-large")
            )
        assert isinstance(transcriber, OpenAITranscriber)
        assert transcriber.model_name == "whisper-large"

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown STT provider"):
            TranscriberFactory.create(Settings(stt_provider="deepgram"))
