"""Tests for OllamaClient against a fake ollama.Client."""

import httpx
import pytest
from ollama import ResponseError

from midnight_wanderer.core.errors import MalformedResponse, TransportError
from midnight_wanderer.services.ollama_client import OllamaClient


class FakeOllama:
    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.chats = []
        self.pulled = []

    def chat(self, **kwargs):
        self.chats.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return {"message": {"role": "assistant", "content": outcome}}

    def pull(self, model):
        self.pulled.append(model)


def test_maps_roles_and_prepends_system():
    fake = FakeOllama('{"ok": true}')
    client = OllamaClient(model="gemma3:4b", client=fake)
    out = client.generate_json(
        [{"role": "model", "content": "Midnight."}, {"role": "user", "content": "I wake"}],
        "be a narrator",
    )

    assert out == '{"ok": true}'
    call = fake.chats[0]
    assert call["model"] == "gemma3:4b"
    assert call["format"] == "json"
    assert call["messages"] == [
        {"role": "system", "content": "be a narrator"},
        {"role": "assistant", "content": "Midnight."},
        {"role": "user", "content": "I wake"},
    ]


def test_missing_model_is_pulled_once():
    fake = FakeOllama(ResponseError("model not found", 404), '{"ok": true}')
    client = OllamaClient(model="gemma3:4b", client=fake)
    assert client.generate_json([{"role": "user", "content": "hi"}], "sys") == '{"ok": true}'
    assert fake.pulled == ["gemma3:4b"]
    assert len(fake.chats) == 2


@pytest.mark.parametrize("error", [
    ResponseError("overloaded", 500),
    ConnectionError("Failed to connect to Ollama"),
    httpx.ConnectError("refused"),
])
def test_failures_are_transport(error):
    client = OllamaClient(client=FakeOllama(error))
    with pytest.raises(TransportError):
        client.generate_json([{"role": "user", "content": "hi"}], "sys")


def test_empty_reply_is_malformed():
    client = OllamaClient(client=FakeOllama(""))
    with pytest.raises(MalformedResponse):
        client.generate_json([{"role": "user", "content": "hi"}], "sys")
