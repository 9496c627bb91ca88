"""Tests for GeminiClient against a fake google-genai client object."""

from types import SimpleNamespace

import httpx
import pytest

from midnight_wanderer.core.errors import ImageGenerationFailure, MalformedResponse, TransportError
from midnight_wanderer.services.gemini_client import GeminiClient


class FakeModels:
    def __init__(self, text="{}", images=None, error=None):
        self.text = text
        self.images = images
        self.error = error
        self.calls = []

    def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)

    def generate_images(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return SimpleNamespace(generated_images=self.images)


def make_client(**kw):
    models = FakeModels(**kw)
    client = GeminiClient(api_key="k", image_mime_type="image/png", aspect_ratio="1:1",
                          client=SimpleNamespace(models=models))
    return client, models


def image(data):
    return SimpleNamespace(image=SimpleNamespace(image_bytes=data))


class TestGenerateJson:
    def test_request_shape(self):
        client, models = make_client(text='{"ok": true}')
        messages = [
            {"role": "model", "content": "Midnight."},
            {"role": "user", "content": "I wake up"},
        ]
        assert client.generate_json(messages, "be a narrator") == '{"ok": true}'

        call = models.calls[0]
        assert call["model"] == "gemini-2.5-flash"
        assert [c.role for c in call["contents"]] == ["model", "user"]
        assert call["contents"][1].parts[0].text == "I wake up"
        assert call["config"].system_instruction == "be a narrator"
        assert call["config"].response_mime_type == "application/json"

    @pytest.mark.parametrize("text", [None, ""])
    def test_empty_reply_is_malformed(self, text):
        client, _ = make_client(text=text)
        with pytest.raises(MalformedResponse):
            client.generate_json([{"role": "user", "content": "hi"}], "sys")

    def test_http_error_is_transport(self):
        client, _ = make_client(error=httpx.ConnectError("no route"))
        with pytest.raises(TransportError):
            client.generate_json([{"role": "user", "content": "hi"}], "sys")


class TestGenerateImage:
    def test_returns_first_image(self):
        client, models = make_client(images=[image(b"png")])
        assert client.generate_image("a corridor") == b"png"

        call = models.calls[0]
        assert call["model"] == "imagen-4.0-generate-001"
        assert call["prompt"] == "a corridor"
        assert call["config"].number_of_images == 1
        assert call["config"].output_mime_type == "image/png"
        assert call["config"].aspect_ratio == "1:1"

    @pytest.mark.parametrize("images", [None, [], [image(None)], [SimpleNamespace(image=None)]])
    def test_missing_image_is_failure(self, images):
        client, _ = make_client(images=images)
        with pytest.raises(ImageGenerationFailure):
            client.generate_image("a corridor")

    def test_http_error_is_transport(self):
        client, _ = make_client(error=httpx.ReadTimeout("slow"))
        with pytest.raises(TransportError):
            client.generate_image("a corridor")
