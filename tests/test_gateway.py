import httpx
import pytest

from tryon_api.config import Settings
from tryon_api.core.errors import (
    GenerationFailedError,
    QuotaExhaustedError,
    RateLimitedError,
    classify_transport_failure,
)
from tryon_api.core.gateway import (
    EmptyResponse,
    GeneratedImage,
    TransportFailure,
    build_generation_payload,
    parse_completion,
    request_generation,
)

from conftest import CLOTHING_PHOTO, RESULT_IMAGE, USER_PHOTO, UpstreamStub, image_completion, text_completion

SETTINGS = Settings(api_key="secret", gateway_url="https://gateway.test/v1/chat/completions")


def test_payload_orders_prompt_then_user_then_garment():
    payload = build_generation_payload("PROMPT", USER_PHOTO, CLOTHING_PHOTO, "some/model")

    content = payload["messages"][0]["content"]
    assert payload["model"] == "some/model"
    assert payload["modalities"] == ["image", "text"]
    assert [part["type"] for part in content] == ["text", "image_url", "image_url"]
    assert content[0]["text"] == "PROMPT"
    assert content[1]["image_url"]["url"] == USER_PHOTO
    assert content[2]["image_url"]["url"] == CLOTHING_PHOTO


def test_parse_completion_extracts_first_image_and_text():
    data = image_completion(text="Here you go")
    data["choices"][0]["message"]["images"].append(
        {"type": "image_url", "image_url": {"url": "data:image/png;base64,U0VDT05E"}}
    )

    outcome = parse_completion(200, data)

    assert outcome == GeneratedImage(status_code=200, image=RESULT_IMAGE, text="Here you go")


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"choices": []},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"images": []}}]},
        {"choices": [{"message": {"images": [{"image_url": {}}]}}]},
        [],
    ],
)
def test_parse_completion_without_image_is_empty(data):
    assert isinstance(parse_completion(200, data), EmptyResponse)


def test_parse_completion_keeps_refusal_text():
    outcome = parse_completion(200, text_completion("I can't help with that."))

    assert outcome == EmptyResponse(status_code=200, text="I can't help with that.")


async def test_request_sends_bearer_token():
    stub = UpstreamStub.json_sequence(image_completion())

    async with stub.client() as client:
        outcome = await request_generation(client, SETTINGS, {"model": "m"})

    assert isinstance(outcome, GeneratedImage)
    request = stub.requests[0]
    assert request.method == "POST"
    assert str(request.url) == SETTINGS.gateway_url
    assert request.headers["Authorization"] == "Bearer secret"


async def test_non_success_status_is_transport_failure():
    stub = UpstreamStub(httpx.Response(503, text="upstream down"))

    async with stub.client() as client:
        outcome = await request_generation(client, SETTINGS, {})

    assert outcome == TransportFailure(status_code=503, body="upstream down")


async def test_non_json_success_body_is_empty():
    stub = UpstreamStub(httpx.Response(200, text="<html>oops</html>"))

    async with stub.client() as client:
        outcome = await request_generation(client, SETTINGS, {})

    assert outcome == EmptyResponse(status_code=200)


@pytest.mark.parametrize(
    "exc", [httpx.ConnectError("refused"), httpx.ReadTimeout("too slow")]
)
async def test_network_errors_raise_generation_failed(exc):
    def handler(request):
        raise exc

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(GenerationFailedError) as exc_info:
            await request_generation(client, SETTINGS, {})

    assert exc_info.value.status_code == 500
    assert exc_info.value.details


@pytest.mark.parametrize(
    "status_code, error_type, http_status",
    [
        (429, RateLimitedError, 429),
        (402, QuotaExhaustedError, 402),
        (401, GenerationFailedError, 500),
        (500, GenerationFailedError, 500),
    ],
)
def test_transport_failure_classification(status_code, error_type, http_status):
    error = classify_transport_failure(TransportFailure(status_code=status_code, body="raw"))

    assert type(error) is error_type
    assert error.status_code == http_status
    assert error.details == "raw"
