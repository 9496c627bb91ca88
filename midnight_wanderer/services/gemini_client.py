import logging
from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from midnight_wanderer.core.errors import (
    ImageGenerationFailure,
    MalformedResponse,
    TransportError,
)
from midnight_wanderer.core.settings import Settings

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (genai_errors.APIError, httpx.HTTPError)


class GeminiClient:
    """
    Thin wrapper around the Gemini API: JSON text turns and Imagen stills.
    """

    def __init__(
        self,
        api_key: str,
        text_model: str = "gemini-2.5-flash",
        image_model: str = "imagen-4.0-generate-001",
        image_mime_type: str = "image/jpeg",
        aspect_ratio: str = "16:9",
        timeout_ms: int = 120_000,
        client: Optional[Any] = None,
    ):
        self.text_model = text_model
        self.image_model = image_model
        self.image_mime_type = image_mime_type
        self.aspect_ratio = aspect_ratio
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=timeout_ms),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.gemini_api_key,
            text_model=settings.text_model,
            image_model=settings.image_model,
            image_mime_type=settings.image_mime_type,
            aspect_ratio=settings.image_aspect_ratio,
            timeout_ms=settings.request_timeout_ms,
        )

    @staticmethod
    def to_contents(messages: List[Dict[str, str]]) -> List[types.Content]:
        return [
            types.Content(role=m["role"], parts=[types.Part(text=m["content"])])
            for m in messages
        ]

    def generate_json(self, messages: List[Dict[str, str]], system_instruction: str) -> str:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
        )
        try:
            resp = self._client.models.generate_content(
                model=self.text_model,
                contents=self.to_contents(messages),
                config=config,
            )
        except _TRANSPORT_ERRORS as e:
            logger.warning("Gemini text call failed: %s", e)
            raise TransportError(f"Gemini text call failed: {e}") from e

        text = getattr(resp, "text", None)
        if not text:
            raise MalformedResponse("Gemini returned an empty reply")
        return text

    def generate_image(self, prompt: str) -> bytes:
        config = types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type=self.image_mime_type,
            aspect_ratio=self.aspect_ratio,
        )
        try:
            resp = self._client.models.generate_images(
                model=self.image_model,
                prompt=prompt,
                config=config,
            )
        except _TRANSPORT_ERRORS as e:
            raise TransportError(f"Imagen call failed: {e}") from e

        images = getattr(resp, "generated_images", None) or []
        if not images or images[0].image is None or not images[0].image.image_bytes:
            # Imagen drops filtered images rather than raising
            raise ImageGenerationFailure("Imagen returned no image")
        return images[0].image.image_bytes
