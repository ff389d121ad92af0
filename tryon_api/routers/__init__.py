"""Router package exposing all API routers."""

from fastapi import APIRouter

from .tryon.router import legacy_router, router as tryon_router

router = APIRouter()
router.include_router(tryon_router)
router.include_router(legacy_router)

__all__ = ["router", "tryon_router", "legacy_router"]
