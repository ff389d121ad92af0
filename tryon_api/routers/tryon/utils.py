"""Utility helpers for the try-on router."""

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from tryon_api.config import CORS_HEADERS

from .models import TryOnResult


def get_client_ip(request: Request) -> Optional[str]:
    """Extract the requester IP from common proxy headers."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip

    if request.client:
        return request.client.host

    return None


def result_response(result: TryOnResult, status_code: int = 200) -> JSONResponse:
    """Serialize a result with the CORS headers every try-on response carries."""
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(exclude_none=True),
        headers=dict(CORS_HEADERS),
    )
