"""Example vision client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseVisionClient and register the provider in VisionClientFactory.
"""

from typing import ClassVar

from ingestion.vision.client_base import BaseVisionClient


class ExampleClientAdapter(BaseVisionClient):
    """Example adapter that returns a fixed transcription.

    No network calls. Useful for local development and tests.
    """

    DEFAULT_RESPONSE: ClassVar[str] = (
        "Example transcription produced without calling a vision model. "
        "Configure VISION_PROVIDER to use a real provider."
    )

    model_name = "example"

    async def extract(
        self, image_bytes: bytes, instruction: str, mime_type: str = "image/png"
    ) -> str:
        _ = image_bytes, instruction, mime_type
        return self.DEFAULT_RESPONSE
