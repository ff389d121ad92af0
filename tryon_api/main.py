from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tryon_api.config import logger
from tryon_api.core.errors import GenerationFailedError, TryOnError, ValidationError

from .routers import router
from .routers.tryon.models import TryOnResult
from .routers.tryon.utils import result_response

# Initialize FastAPI application
app = FastAPI(
    title="Virtual Try-On API",
    description="AI-powered virtual clothing try-on service",
    version="1.0.0",
)

app.include_router(router)


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TryOnError)
async def tryon_error_handler(request: Request, exc: TryOnError) -> JSONResponse:
    logger.warning(
        "Try-on request failed",
        extra={"code": exc.code, "status_code": exc.status_code, "error": exc.message},
    )
    return result_response(TryOnResult.from_error(exc), exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    details = errors[0].get("msg") if errors else None
    logger.warning("Invalid try-on request body", extra={"error": details})
    error = ValidationError("Invalid request body", details=details)
    return result_response(TryOnResult.from_error(error), error.status_code)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error in try-on request", exc_info=True)
    error = GenerationFailedError("An unexpected error occurred")
    return result_response(TryOnResult.from_error(error), error.status_code)


logger.info("Virtual Try-On API initialized successfully")
