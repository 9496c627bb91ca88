"""Shared fakes for the narrator backends. No network anywhere."""

import json

import pytest

from midnight_wanderer.core.errors import TransportError
from midnight_wanderer.services.game_runner import GameRunner
from midnight_wanderer.services.narrative import NarrativeClient


def turn_json(**overrides):
    reply = {
        "sceneDescription": "You tiptoe past your sleeping housemates.",
        "location": "Dormitory",
        "promptForImage": "a student tiptoeing",
        "isGameOver": False,
        "gameOverReason": None,
    }
    reply.update(overrides)
    return json.dumps(reply)


class FakeTextBackend:
    """Replays queued replies; an Exception instance in the queue is raised."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def generate_json(self, messages, system_instruction):
        self.calls.append({"messages": messages, "system_instruction": system_instruction})
        reply = self.replies.pop(0) if self.replies else turn_json()
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeImageBackend:
    def __init__(self, data=b"\xff\xd8jpeg", error=None):
        self.data = data
        self.error = error
        self.prompts = []

    def generate_image(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.data


@pytest.fixture
def text_backend():
    return FakeTextBackend()


@pytest.fixture
def image_backend():
    return FakeImageBackend()


@pytest.fixture
def narrator(text_backend, image_backend):
    return NarrativeClient(text_backend=text_backend, image_backend=image_backend)


@pytest.fixture
def runner(narrator):
    return GameRunner(narrator)


@pytest.fixture
def started_runner(runner, text_backend):
    text_backend.replies.append(turn_json(sceneDescription="The clock strikes midnight."))
    runner.start_adventure()
    text_backend.calls.clear()
    return runner


@pytest.fixture
def transport_error():
    return TransportError("backend unreachable")
