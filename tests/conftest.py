import json
import os
from types import SimpleNamespace

# backend.main builds an OpenAI client at import time.
os.environ.setdefault("OPENAI_API_KEY", "test-key")

import pytest

from backend.services.invoker import GenerationClient
from backend.services.prompting import PromptRenderer

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
PHOTO_URI = f"data:image/jpeg;base64,{PNG_B64}"

POST_DRAFT = {
    "engaging_caption": "Ready to reset your desk? Tell us your must-have item!",
    "professional_caption": "A tidy workspace supports deep work.",
    "hashtags": "#homeoffice, #minimalism, #productivity",
    "suggested_post_time": "Weekdays 9-11 AM EST",
    "headline_text": "Simplify Your Workspace",
    "category": "Lifestyle",
}


class _Endpoint:
    """Plays back scripted results; exceptions in the script are raised."""

    def __init__(self, name, calls):
        self.name = name
        self.calls = calls
        self.script = []

    def _call(self, **kwargs):
        self.calls.append((self.name, kwargs))
        if not self.script:
            raise AssertionError(f"Unexpected call to {self.name}")
        result = self.script.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    generate = _call
    create = _call


class FakeOpenAI:
    def __init__(self):
        self.calls = []
        self.images = _Endpoint("images.generate", self.calls)
        self.responses = _Endpoint("responses.create", self.calls)


def image_response(b64=PNG_B64):
    return SimpleNamespace(data=[SimpleNamespace(b64_json=b64, url=None)])


def tool_image_response(b64=PNG_B64):
    return SimpleNamespace(
        output_text="",
        output=[
            SimpleNamespace(type="reasoning", content=None),
            SimpleNamespace(type="image_generation_call", result=b64),
        ],
    )


def text_response(text):
    return SimpleNamespace(output_text=text, output=[])


def json_response(data):
    return text_response(json.dumps(data))


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def invoker(fake_openai, sleeps):
    return GenerationClient(client=fake_openai, sleep=sleeps.append, retry_delay=1.0, max_attempts=2)


@pytest.fixture(scope="session")
def renderer():
    return PromptRenderer()
