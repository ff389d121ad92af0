"""Orchestration of a single virtual try-on request."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, List, Optional

import httpx

from tryon_api.config import Settings, logger
from tryon_api.core.errors import (
    ConfigurationError,
    GenerationFailedError,
    classify_transport_failure,
)
from tryon_api.core.gateway import (
    GeneratedImage,
    TransportFailure,
    build_generation_payload,
    request_generation,
)
from tryon_api.core.prompt_templates import build_tryon_prompt
from tryon_api.core.validation import validate_photos

SUCCESS_MESSAGE = "Virtual try-on generated successfully!"
EXHAUSTED_MESSAGE = (
    "Failed to generate try-on image. The AI could not process the images. "
    "Please try again with different photos."
)
NO_DETAILS = "No additional details available"


def _log(level: int, message: str, **context: Any) -> None:
    """Helper to emit structured logs with contextual metadata."""
    logger.log(level, "%s | context=%s", message, context)


@dataclass(slots=True)
class TryOnJob:
    """Inputs for one try-on request, as received."""

    user_photo: Optional[str]
    clothing_photo: Optional[str]
    garment_description: Optional[str] = None
    category: Optional[str] = None


@dataclass(slots=True)
class GenerationAttempt:
    """What happened on one upstream call. Lives only for the request."""

    attempt: int
    status_code: int
    outcome: str
    reason: Optional[str] = None


@dataclass(slots=True)
class TryOnSuccess:
    image: str
    message: str
    attempts: List[GenerationAttempt]


async def run_tryon(
    job: TryOnJob,
    settings: Settings,
    client: httpx.AsyncClient,
) -> TryOnSuccess:
    """
    Validate the job, build the prompt and call the gateway until an image
    comes back or the attempt budget runs out.

    Only content misses (2xx without an image) are retried. Non-2xx
    responses are classified and raised on the first occurrence.

    Raises:
        ValidationError: Missing or malformed photos
        ConfigurationError: The gateway API key is not set
        RateLimitedError, QuotaExhaustedError: Upstream 429 / 402
        GenerationFailedError: Other upstream errors or exhausted retries
    """
    validate_photos(job.user_photo, job.clothing_photo)

    if not settings.api_key:
        logger.error("AI_GATEWAY_API_KEY is not configured")
        raise ConfigurationError("AI service is not configured")

    _log(
        logging.INFO,
        "tryon_started",
        user_photo_size=len(job.user_photo),
        clothing_photo_size=len(job.clothing_photo),
        category=job.category,
        max_attempts=settings.max_attempts,
    )

    prompt = build_tryon_prompt(job.category, job.garment_description)
    payload = build_generation_payload(
        prompt, job.user_photo, job.clothing_photo, settings.model
    )

    start_time = time.time()
    attempts: List[GenerationAttempt] = []
    last_text: Optional[str] = None

    for attempt_idx in range(1, settings.max_attempts + 1):
        _log(logging.INFO, "generation_attempt_started", attempt=attempt_idx)

        outcome = await request_generation(client, settings, payload)

        if isinstance(outcome, TransportFailure):
            attempts.append(
                GenerationAttempt(
                    attempt=attempt_idx,
                    status_code=outcome.status_code,
                    outcome="transport_failure",
                    reason=outcome.body or None,
                )
            )
            error = classify_transport_failure(outcome)
            _log(
                logging.ERROR,
                "generation_transport_failure",
                attempt=attempt_idx,
                status_code=outcome.status_code,
                code=error.code,
            )
            raise error

        if isinstance(outcome, GeneratedImage):
            attempts.append(
                GenerationAttempt(
                    attempt=attempt_idx,
                    status_code=outcome.status_code,
                    outcome="image",
                )
            )
            _log(
                logging.INFO,
                "tryon_completed",
                attempt=attempt_idx,
                processing_time_ms=int((time.time() - start_time) * 1000),
            )
            return TryOnSuccess(
                image=outcome.image,
                message=outcome.text or SUCCESS_MESSAGE,
                attempts=attempts,
            )

        # EmptyResponse: content miss, resend the identical payload
        last_text = outcome.text or last_text
        attempts.append(
            GenerationAttempt(
                attempt=attempt_idx,
                status_code=outcome.status_code,
                outcome="empty",
                reason=outcome.text,
            )
        )
        _log(
            logging.WARNING,
            "generation_no_image",
            attempt=attempt_idx,
            text=(outcome.text or "")[:200],
        )

    _log(
        logging.WARNING,
        "tryon_failed",
        reason="No image generated after retries",
        attempts=len(attempts),
    )
    raise GenerationFailedError(EXHAUSTED_MESSAGE, details=last_text or NO_DETAILS)


__all__ = [
    "TryOnJob",
    "GenerationAttempt",
    "TryOnSuccess",
    "run_tryon",
    "SUCCESS_MESSAGE",
    "EXHAUSTED_MESSAGE",
]
