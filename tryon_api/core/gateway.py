from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from tryon_api.config import Settings, logger
from tryon_api.core.errors import GenerationFailedError

# Upstream error bodies are kept for diagnostics only
MAX_ERROR_BODY_CHARS = 1000


@dataclass(frozen=True)
class TransportFailure:
    """The gateway answered with a non-2xx status."""

    status_code: int
    body: str = ""


@dataclass(frozen=True)
class EmptyResponse:
    """The gateway answered 2xx but the model produced no image."""

    status_code: int
    text: Optional[str] = None


@dataclass(frozen=True)
class GeneratedImage:
    status_code: int
    image: str
    text: Optional[str] = None


GenerationOutcome = Union[TransportFailure, EmptyResponse, GeneratedImage]


def build_generation_payload(
    prompt: str,
    user_photo: str,
    clothing_photo: str,
    model: str,
) -> Dict[str, Any]:
    """
    Build the chat-completions request body.

    The message content is ordered: prompt text, user photo, garment photo.
    The prompt refers to the photos by that position.
    """
    return {
        "model": model,
        "messages": [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": user_photo}},
                    {"type": "image_url", "image_url": {"url": clothing_photo}},
                ],
            }
        ],
        "modalities": ["image", "text"],
    }


def _message_text(message: Dict[str, Any]) -> Optional[str]:
    content = message.get("content")
    if isinstance(content, str):
        return content.strip() or None
    if isinstance(content, list):
        text = "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
        return text.strip() or None
    return None


def parse_completion(status_code: int, data: Any) -> Union[EmptyResponse, GeneratedImage]:
    """Extract the first generated image from a 2xx completion payload."""
    try:
        message = data["choices"][0]["message"]
    except (KeyError, IndexError, TypeError):
        return EmptyResponse(status_code=status_code)

    if not isinstance(message, dict):
        return EmptyResponse(status_code=status_code)

    text = _message_text(message)

    try:
        image = message["images"][0]["image_url"]["url"]
    except (KeyError, IndexError, TypeError):
        image = None

    if not image or not isinstance(image, str):
        return EmptyResponse(status_code=status_code, text=text)

    return GeneratedImage(status_code=status_code, image=image, text=text)


async def request_generation(
    client: httpx.AsyncClient,
    settings: Settings,
    payload: Dict[str, Any],
) -> GenerationOutcome:
    """
    Send one generation request to the AI gateway.

    Returns:
        TransportFailure for non-2xx responses, EmptyResponse when the model
        replied without an image, GeneratedImage otherwise

    Raises:
        GenerationFailedError: If the gateway could not be reached or timed out
    """
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }

    try:
        response = await client.post(
            settings.gateway_url,
            json=payload,
            headers=headers,
            timeout=settings.timeout_seconds,
        )
    except httpx.TimeoutException as exc:
        logger.error("AI gateway timed out", extra={"error": str(exc)})
        raise GenerationFailedError(
            "The AI service took too long to respond. Please try again.",
            details=str(exc) or exc.__class__.__name__,
        ) from exc
    except httpx.RequestError as exc:
        logger.error("Network error calling AI gateway", extra={"error": str(exc)})
        raise GenerationFailedError(
            "Failed to connect to AI service",
            details=str(exc) or exc.__class__.__name__,
        ) from exc

    if not response.is_success:
        body = response.text[:MAX_ERROR_BODY_CHARS]
        logger.error(
            f"AI gateway error: {response.status_code}",
            extra={"status_code": response.status_code, "body": body},
        )
        return TransportFailure(status_code=response.status_code, body=body)

    try:
        data = response.json()
    except ValueError:
        logger.warning(
            "AI gateway returned a non-JSON body",
            extra={"status_code": response.status_code},
        )
        return EmptyResponse(status_code=response.status_code)

    return parse_completion(response.status_code, data)


__all__ = [
    "TransportFailure",
    "EmptyResponse",
    "GeneratedImage",
    "GenerationOutcome",
    "build_generation_payload",
    "parse_completion",
    "request_generation",
]
