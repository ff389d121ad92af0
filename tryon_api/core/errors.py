"""Error taxonomy for try-on requests and mapping of upstream failures."""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tryon_api.core.gateway import TransportFailure


class TryOnError(Exception):
    """Base class for every classified try-on failure."""

    status_code: int = 500
    code: str = "generation_failed"

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(TryOnError):
    status_code = 400
    code = "validation_error"


class ConfigurationError(TryOnError):
    status_code = 500
    code = "configuration_error"


class RateLimitedError(TryOnError):
    status_code = 429
    code = "rate_limited"


class QuotaExhaustedError(TryOnError):
    status_code = 402
    code = "quota_exhausted"


class GenerationFailedError(TryOnError):
    status_code = 500
    code = "generation_failed"


RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again in a moment."
QUOTA_MESSAGE = "AI credits exhausted. Please add credits to continue."


def classify_transport_failure(failure: "TransportFailure") -> TryOnError:
    """Map a non-2xx upstream response to the error surfaced to the caller."""
    if failure.status_code == 429:
        return RateLimitedError(RATE_LIMIT_MESSAGE, details=failure.body or None)
    if failure.status_code == 402:
        return QuotaExhaustedError(QUOTA_MESSAGE, details=failure.body or None)
    return GenerationFailedError(
        f"AI gateway error: {failure.status_code}",
        details=failure.body or None,
    )


__all__ = [
    "TryOnError",
    "ValidationError",
    "ConfigurationError",
    "RateLimitedError",
    "QuotaExhaustedError",
    "GenerationFailedError",
    "classify_transport_failure",
]
