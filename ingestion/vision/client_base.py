from abc import ABC, abstractmethod


class BaseVisionClient(ABC):
    """Contract for provider-specific vision-language model clients."""

    model_name: str = ""

    @abstractmethod
    async def extract(
        self, image_bytes: bytes, instruction: str, mime_type: str = "image/png"
    ) -> str:
        """Return the text the model transcribed from the image."""
