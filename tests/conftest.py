from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from tryon_api.main import app
from tryon_api.routers.tryon.dependencies import get_http_client

USER_PHOTO = "data:image/png;base64,AAAA"
CLOTHING_PHOTO = "data:image/jpeg;base64,BBBB"
RESULT_IMAGE = "data:image/png;base64,UkVTVUxU"


def image_completion(url: str = RESULT_IMAGE, text: str = "") -> Dict[str, Any]:
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "content": text,
                    "images": [{"type": "image_url", "image_url": {"url": url}}],
                }
            }
        ]
    }


def text_completion(text: str = "I cannot edit this photo.") -> Dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class UpstreamStub:
    """Scripted gateway: answers with the queued responses in order, repeating the last."""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    @classmethod
    def json_sequence(cls, *bodies: Dict[str, Any], status_code: int = 200) -> "UpstreamStub":
        return cls(*(httpx.Response(status_code, json=body) for body in bodies))

    @property
    def calls(self) -> int:
        return len(self.requests)

    def sent_payload(self, index: int = 0) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        scripted = self.responses[min(len(self.requests), len(self.responses)) - 1]
        # Fresh response per call so a repeated entry can be read again
        return httpx.Response(
            scripted.status_code,
            headers=scripted.headers,
            content=scripted.content,
        )

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def gateway_env(monkeypatch):
    monkeypatch.setenv("AI_GATEWAY_API_KEY", "test-key")
    monkeypatch.setenv("AI_GATEWAY_URL", "https://gateway.test/v1/chat/completions")
    monkeypatch.delenv("TRYON_MAX_ATTEMPTS", raising=False)
    monkeypatch.delenv("TRYON_MODEL", raising=False)


@pytest.fixture
def api_client():
    """Build a TestClient whose upstream gateway is the given stub."""

    def _build(stub: Optional[UpstreamStub] = None) -> TestClient:
        stub = stub or UpstreamStub.json_sequence(image_completion())

        async def _client():
            async with stub.client() as client:
                yield client

        app.dependency_overrides[get_http_client] = _client
        return TestClient(app)

    yield _build
    app.dependency_overrides.clear()
