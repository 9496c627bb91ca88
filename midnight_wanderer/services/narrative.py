import base64
import json
import logging
import re
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from pydantic import ValidationError

from midnight_wanderer.core.errors import ImageGenerationFailure, MalformedResponse
from midnight_wanderer.core.models import Turn, TurnResult
from midnight_wanderer.core.settings import Settings
from midnight_wanderer.services.gemini_client import GeminiClient
from midnight_wanderer.services.ollama_client import OllamaClient
from midnight_wanderer.services.prompts import SCENE_IMAGE_TEMPLATE, SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)


class TextBackend(Protocol):
    def generate_json(self, messages: List[Dict[str, str]], system_instruction: str) -> str: ...


class ImageBackend(Protocol):
    def generate_image(self, prompt: str) -> bytes: ...


# ——— JSON extraction ——————————————————————————————————

def _extract_json(raw: str) -> str:
    # Strip a leading/trailing fence only (case-insensitive), then grab the outermost {...}
    cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", raw.strip(), flags=re.IGNORECASE)
    m = re.search(r"\{.*\}", cleaned, flags=re.DOTALL)
    return m.group(0) if m else cleaned


def parse_turn_result(raw: str) -> TurnResult:
    try:
        data = json.loads(_extract_json(raw))
        return TurnResult.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("Parse error: %s\nRaw: %s", e, raw)
        raise MalformedResponse(f"Narrator reply did not match the turn schema: {e}", raw=raw) from e


def to_messages(history: Sequence[Turn], latest_input: str) -> List[Dict[str, str]]:
    """Role-tag the log oldest first, player turns as 'user', narrator as 'model'."""
    messages = [
        {"role": "user" if t.is_player_input else "model", "content": t.text}
        for t in history
    ]
    messages.append({"role": "user", "content": latest_input})
    return messages


class NarrativeClient:
    """
    Asks the text backend for the next story beat and the image backend
    for its illustration. Holds no game state.
    """

    def __init__(
        self,
        text_backend: TextBackend,
        image_backend: Optional[ImageBackend] = None,
        image_mime_type: str = "image/jpeg",
        system_instruction: str = SYSTEM_INSTRUCTION,
    ):
        self.text_backend = text_backend
        self.image_backend = image_backend
        self.image_mime_type = image_mime_type
        self.system_instruction = system_instruction

    def generate_structured_turn(self, history: Sequence[Turn], latest_input: str) -> TurnResult:
        """
        Raises TransportError if the backend call fails and MalformedResponse
        if the reply is not a valid turn.
        """
        raw = self.text_backend.generate_json(to_messages(history, latest_input), self.system_instruction)
        return parse_turn_result(raw)

    def generate_scene_image(
        self,
        prompt: str,
        on_failure: Optional[Callable[[ImageGenerationFailure], None]] = None,
    ) -> Optional[str]:
        """
        Return the illustration as a data URI, or None. Failures are
        reported through `on_failure` and never raised.
        """
        if self.image_backend is None:
            return None
        try:
            data = self.image_backend.generate_image(SCENE_IMAGE_TEMPLATE.format(prompt=prompt))
            if not data:
                raise ImageGenerationFailure("Image backend returned no data")
        except Exception as e:
            logger.exception("Image generation failed: %s", e)
            if on_failure is not None:
                failure = e if isinstance(e, ImageGenerationFailure) else ImageGenerationFailure(str(e))
                on_failure(failure)
            return None
        encoded = base64.b64encode(data).decode("ascii")
        return f"data:{self.image_mime_type};base64,{encoded}"


def build_narrative_client(settings: Settings) -> NarrativeClient:
    gemini = GeminiClient.from_settings(settings)
    if settings.text_backend == "ollama":
        text_backend: TextBackend = OllamaClient.from_settings(settings)
    else:
        text_backend = gemini
    logger.info("Text backend: %s, images: %s", settings.text_backend, settings.enable_images)
    return NarrativeClient(
        text_backend=text_backend,
        image_backend=gemini if settings.enable_images else None,
        image_mime_type=settings.image_mime_type,
    )
