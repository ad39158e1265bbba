import base64

import httpx
import openai

from ingestion.vision.client_base import BaseVisionClient
from ingestion.vision.exceptions import VisionAuthError, VisionError, VisionNetworkError


class OpenAIClientAdapter(BaseVisionClient):
    """Vision client adapter built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        max_completion_tokens: int = 4096,
        base_url: str | None = None,
    ) -> None:
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )
        self.model_name = model
        self._max_completion_tokens = max_completion_tokens

    async def extract(
        self, image_bytes: bytes, instruction: str, mime_type: str = "image/png"
    ) -> str:
        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        try:
            response = await self._client.chat.completions.create(
                model=self.model_name,
                max_completion_tokens=self._max_completion_tokens,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {"type": "image_url", "image_url": {"url": data_url}},
                        ],
                    }
                ],
            )
        except openai.AuthenticationError as exc:
            raise VisionAuthError(
                f"Vision provider rejected credentials (check VISION_* credentials): {exc}"
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise VisionNetworkError(
                f"Vision provider network error (check network): {exc}"
            ) from exc
        except openai.APIError as exc:
            raise VisionNetworkError(f"Vision provider API error: {exc}") from exc

        if not response.choices:
            raise VisionError("Vision model returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise VisionError("Vision model returned empty response")
        return content.strip()
