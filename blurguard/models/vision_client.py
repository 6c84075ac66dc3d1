import base64
from typing import Optional

import structlog
from openai import OpenAI, OpenAIError

from blurguard.core.config import settings
from blurguard.core.exceptions import VisionServiceError

logger = structlog.get_logger()

class VisionClient:
    """
    Sends an image plus a text prompt to a multimodal model behind an
    OpenAI-compatible chat completions endpoint and returns the raw reply.
    """

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or settings.AI_API_KEY
        self.base_url = base_url or settings.AI_BASE_URL
        self.model = model or settings.UNDERSTANDING_MODEL
        self._client = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise VisionServiceError("AI_API_KEY is not configured")
            self._client = OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def generate_text(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        data_url = f"data:{mime_type};base64,{base64.b64encode(image_bytes).decode('ascii')}"
        logger.info("vision_request", model=self.model, mime_type=mime_type, size=len(image_bytes))

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "image_url", "image_url": {"url": data_url}},
                            {"type": "text", "text": prompt},
                        ],
                    }
                ],
            )
        except OpenAIError as e:
            logger.error("vision_request_failed", error=str(e), model=self.model)
            raise VisionServiceError(f"AI request failed: {e}") from e

        if not response.choices:
            return "[]"
        return response.choices[0].message.content or "[]"
