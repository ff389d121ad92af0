"""FastAPI dependencies shared across try-on endpoints."""

from typing import AsyncIterator

import httpx
from fastapi import Depends

from tryon_api.config import Settings, get_settings


async def get_http_client(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[httpx.AsyncClient]:
    """Provide an HTTP client for the upstream gateway, closed after the request."""
    async with httpx.AsyncClient(timeout=settings.timeout_seconds) as client:
        yield client
