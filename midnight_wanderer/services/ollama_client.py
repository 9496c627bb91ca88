import logging
from typing import Any, Dict, List, Optional

import httpx
from ollama import Client, ResponseError

from midnight_wanderer.core.errors import MalformedResponse, TransportError
from midnight_wanderer.core.settings import Settings

logger = logging.getLogger(__name__)


class OllamaClient:
    """
    Thin wrapper around Ollama's chat API, used as a local text backend.
    Produces the same JSON reply contract as GeminiClient.generate_json.
    """

    def __init__(self, host: str = "http://localhost:11434", model: str = "gemma3:4b",
                 client: Optional[Any] = None):
        self.model = model
        self._client = client or Client(host=host)

    @classmethod
    def from_settings(cls, settings: Settings) -> "OllamaClient":
        return cls(host=str(settings.ollama_host), model=settings.ollama_model)

    @staticmethod
    def to_messages(messages: List[Dict[str, str]], system_instruction: str) -> List[Dict[str, str]]:
        out = [{"role": "system", "content": system_instruction}]
        for m in messages:
            role = "assistant" if m["role"] == "model" else m["role"]
            out.append({"role": role, "content": m["content"]})
        return out

    def _chat(self, messages: List[Dict[str, str]]) -> Any:
        try:
            return self._client.chat(model=self.model, messages=messages, format="json")
        except ResponseError as e:
            if e.status_code == 404:
                logger.warning("Model %s not found, pulling...", self.model)
                self._client.pull(self.model)
                return self._client.chat(model=self.model, messages=messages, format="json")
            raise

    def generate_json(self, messages: List[Dict[str, str]], system_instruction: str) -> str:
        try:
            resp = self._chat(self.to_messages(messages, system_instruction))
        except (ResponseError, ConnectionError, httpx.HTTPError) as e:
            logger.warning("Ollama chat failed: %s", e)
            raise TransportError(f"Ollama chat failed: {e}") from e

        text = resp["message"]["content"]
        if not text:
            raise MalformedResponse("Ollama returned an empty reply")
        return text
