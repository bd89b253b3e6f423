from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from openai import OpenAIError

from backend import main
from backend.errors import ExternalCallError, GenerationFailedError, InvalidInputError
from backend.schemas import ImageResponse, LogoResponse
from backend.services.caption_generator import CaptionGenerator
from backend.services.image_generator import ImageGenerator
from backend.services.post_details import PostDetailsGenerator
from conftest import PHOTO_URI, POST_DRAFT as DRAFT, json_response, text_response


@pytest.fixture
def client():
    return TestClient(main.app)


def _stub(result=None, error=None):
    def generate(request):
        if error is not None:
            raise error
        return result

    return SimpleNamespace(generate=generate)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_images_ok(client, monkeypatch):
    monkeypatch.setattr(main, "image_generator", _stub(ImageResponse(image_data_uris=[PHOTO_URI])))

    response = client.post("/images", json={"prompt": "A red bicycle"})

    assert response.status_code == 200
    assert response.json() == {"image_data_uris": [PHOTO_URI]}


def test_invalid_input_is_400(client, monkeypatch):
    monkeypatch.setattr(main, "image_generator", _stub(error=InvalidInputError("need a prompt")))

    response = client.post("/images", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "need a prompt"


@pytest.mark.parametrize("error", [ExternalCallError("OpenAI error: down"), GenerationFailedError("no image")])
def test_generation_errors_are_502(client, monkeypatch, error):
    monkeypatch.setattr(main, "logo_generator", _stub(error=error))

    response = client.post("/logos", json={"niche": "Coffee", "logo_description": "bean"})

    assert response.status_code == 502


def test_unexpected_error_is_500(client, monkeypatch):
    monkeypatch.setattr(main, "logo_generator", _stub(error=RuntimeError("kaboom")))

    response = client.post("/logos", json={"niche": "Coffee", "logo_description": "bean"})

    assert response.status_code == 500
    assert "kaboom" not in response.text


def test_logos_ok(client, monkeypatch):
    monkeypatch.setattr(main, "logo_generator", _stub(LogoResponse(logo_image_data_uri=PHOTO_URI)))

    response = client.post("/logos", json={"niche": "Coffee", "logo_description": "bean"})

    assert response.json() == {"logo_image_data_uri": PHOTO_URI}


def test_schema_rejects_missing_required_field(client):
    assert client.post("/post-details", json={}).status_code == 422
    assert client.post("/captions", json={}).status_code == 422


def test_captions_end_to_end(client, monkeypatch, fake_openai, invoker, renderer):
    monkeypatch.setattr(main, "caption_generator", CaptionGenerator(invoker, renderer))
    fake_openai.responses.script = [json_response({"caption": "Sunlight and sea salt."})]

    response = client.post("/captions", json={"photo_data_uri": PHOTO_URI})

    assert response.status_code == 200
    assert response.json() == {"caption": "Sunlight and sea salt."}
    name, kwargs = fake_openai.calls[0]
    assert name == "responses.create"
    assert kwargs["text"] == {"format": {"type": "json_object"}}


def test_post_details_end_to_end(client, monkeypatch, fake_openai, invoker, renderer):
    monkeypatch.setattr(main, "post_details_generator", PostDetailsGenerator(invoker, renderer))
    fake_openai.responses.script = [json_response(DRAFT)]

    response = client.post(
        "/post-details",
        json={"niche": "Minimalist Home Office Setup", "logo_url": "not-a-url"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["headline_text"] == DRAFT["headline_text"]
    assert 'says: "Simplify Your Workspace"' in body["image_generation_prompt"]
    assert body["logo_url"] is None


def test_bad_model_output_detail_is_short(client, monkeypatch, fake_openai, invoker, renderer):
    monkeypatch.setattr(main, "caption_generator", CaptionGenerator(invoker, renderer))
    fake_openai.responses.script = [text_response("Here is my hidden reasoning, no JSON at all")]

    response = client.post("/captions", json={"photo_data_uri": PHOTO_URI})

    assert response.status_code == 502
    assert "hidden reasoning" not in response.json()["detail"]


def test_images_end_to_end_retry_exhausted(client, monkeypatch, fake_openai, invoker, sleeps):
    monkeypatch.setattr(main, "image_generator", ImageGenerator(invoker))
    fake_openai.responses.script = [OpenAIError("down"), OpenAIError("still down")]

    response = client.post(
        "/images",
        json={"prompt": "A red bicycle", "logo_image_url": "https://example.com/logo.png"},
    )

    assert response.status_code == 502
    assert len(fake_openai.calls) == 2
    assert sleeps == [1.0]
