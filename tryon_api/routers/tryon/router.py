"""FastAPI router for virtual try-on endpoints."""

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from tryon_api.config import CORS_HEADERS, Settings, get_settings, logger
from tryon_api.services.tryon_service import TryOnJob, run_tryon

from .dependencies import get_http_client
from .models import HealthResponse, TryOnRequest, TryOnResult
from .utils import get_client_ip, result_response

router = APIRouter(prefix="/api/v1", tags=["Virtual Try-On"])

# Path used by existing frontends of the hosted function
legacy_router = APIRouter(tags=["Virtual Try-On"])


async def create_virtual_tryon(
    payload: TryOnRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> JSONResponse:
    """Generate a try-on image from a person photo and a garment photo.

    Errors raised here are TryOnError subclasses and are turned into
    TryOnResult payloads by the application's exception handlers.
    """
    logger.info(
        "Virtual try-on request received",
        extra={"client_ip": get_client_ip(request), "category": payload.category},
    )

    job = TryOnJob(
        user_photo=payload.userPhoto,
        clothing_photo=payload.clothingPhoto,
        garment_description=payload.garmentDescription,
        category=payload.category,
    )
    success = await run_tryon(job, settings, client)

    logger.info(
        "Virtual try-on image generated successfully",
        extra={"attempts": len(success.attempts)},
    )
    return result_response(TryOnResult.from_image(success.image, success.message))


async def tryon_preflight() -> PlainTextResponse:
    """Answer CORS pre-flight requests."""
    return PlainTextResponse("ok", headers=dict(CORS_HEADERS))


for _router, _path in ((router, "/tryon"), (legacy_router, "/virtual-tryon")):
    _router.add_api_route(
        _path,
        create_virtual_tryon,
        methods=["POST"],
        response_model=TryOnResult,
        response_model_exclude_none=True,
    )
    _router.add_api_route(_path, tryon_preflight, methods=["OPTIONS"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Simple health check endpoint."""

    return HealthResponse(
        status="healthy",
        service="virtual-try-on-api",
        version="1.0.0",
    )
