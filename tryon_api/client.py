"""Async client for the try-on endpoint.

Always returns a :class:`TryOnResult`; connection problems and error
payloads are folded into ``success=False`` results instead of raising.
"""

import json
from typing import Any, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from tryon_api.config import DEFAULT_TIMEOUT_SECONDS, logger
from tryon_api.routers.tryon.models import GarmentCategory, TryOnResult

TRYON_PATH = "/api/v1/tryon"


def _as_text(value: Any) -> Optional[str]:
    """Flatten a payload field to text; gateway-style errors nest a message."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict) and isinstance(value.get("message"), str):
        return value["message"]
    return json.dumps(value)


async def generate_tryon(
    user_photo: str,
    clothing_photo: str,
    *,
    base_url: str,
    garment_description: Optional[str] = None,
    category: Optional[GarmentCategory] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> TryOnResult:
    """
    Request a try-on image from a running service.

    Args:
        user_photo: Data URL of the person photo
        clothing_photo: Data URL of the garment photo
        base_url: Service root, e.g. ``http://localhost:8000``
        garment_description: Optional free-text garment description
        category: Garment category, defaults to upper_body on the server
        client: Reuse an existing client instead of opening one

    Returns:
        TryOnResult with either ``image`` or ``error`` set
    """
    body = {"userPhoto": user_photo, "clothingPhoto": clothing_photo}
    if garment_description:
        body["garmentDescription"] = garment_description
    if category:
        body["category"] = category

    url = base_url.rstrip("/") + TRYON_PATH

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT_SECONDS + 10) as own_client:
                response = await own_client.post(url, json=body)
        else:
            response = await client.post(url, json=body)
    except httpx.RequestError as exc:
        logger.error(f"Try-on service request failed: {exc}")
        return TryOnResult(success=False, error="Failed to connect to AI service")

    try:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("response body is not a JSON object")
    except ValueError:
        logger.error(f"Try-on service returned a non-JSON body: {response.status_code}")
        return TryOnResult(
            success=False,
            error=f"Unexpected response from AI service ({response.status_code})",
        )

    try:
        if data.get("error"):
            return TryOnResult(
                success=False,
                error=_as_text(data["error"]),
                code=_as_text(data.get("code")),
                details=_as_text(data.get("details")),
            )

        return TryOnResult(
            success=True,
            image=data.get("image"),
            message=_as_text(data.get("message")),
        )
    except PydanticValidationError:
        logger.error(f"Try-on service returned an unusable payload: {response.status_code}")
        return TryOnResult(success=False, error="An unexpected error occurred")
