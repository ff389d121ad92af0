"""
Configuration module for the Virtual Try-On API
Contains logger setup, environment-backed settings and fixed constants
"""

import os
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional

from dotenv import load_dotenv

from tryon_api.core.errors import ConfigurationError

# Load environment variables
load_dotenv()


# -------------------------
# Logger Setup
# -------------------------
def setup_logger(name: str = __name__, log_file: Optional[str] = None) -> logging.Logger:
    """
    Set up and return a logger with a console handler and an optional file handler

    Args:
        name: Logger name (usually __name__)
        log_file: Path to log file, skipped when empty

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)

    # Avoid adding duplicate handlers
    if logger.handlers:
        return logger

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # File handler
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# Create the main application logger
logger = setup_logger("tryon_api", os.getenv("TRYON_LOG_FILE"))


# -------------------------
# Constants
# -------------------------
DEFAULT_GATEWAY_URL = "https://ai.gateway.lovable.dev/v1/chat/completions"
DEFAULT_MODEL = "google/gemini-2.5-flash-image"
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_TIMEOUT_SECONDS = 120.0

CORS_HEADERS = MappingProxyType(
    {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Headers": (
            "authorization, x-client-info, apikey, content-type"
        ),
    }
)


# -------------------------
# Environment Variables
# -------------------------
@dataclass(frozen=True)
class Settings:
    """Per-request snapshot of the upstream gateway configuration."""

    api_key: Optional[str]
    gateway_url: str = DEFAULT_GATEWAY_URL
    model: str = DEFAULT_MODEL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


def get_settings() -> Settings:
    """
    Read settings from the process environment.

    Called once per request so that the API credential is picked up at
    request time rather than frozen at import.

    Raises:
        ConfigurationError: If a numeric setting cannot be parsed
    """
    try:
        max_attempts = int(os.getenv("TRYON_MAX_ATTEMPTS", DEFAULT_MAX_ATTEMPTS))
        timeout_seconds = float(
            os.getenv("TRYON_UPSTREAM_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)
        )
    except ValueError as exc:
        logger.error(f"Invalid numeric setting: {exc}")
        raise ConfigurationError("AI service is not configured", details=str(exc)) from exc

    return Settings(
        api_key=os.getenv("AI_GATEWAY_API_KEY") or None,
        gateway_url=os.getenv("AI_GATEWAY_URL", DEFAULT_GATEWAY_URL),
        model=os.getenv("TRYON_MODEL", DEFAULT_MODEL),
        max_attempts=max(1, max_attempts),
        timeout_seconds=timeout_seconds,
    )


# Log configuration status
logger.info("Configuration loaded successfully")
logger.debug(f"AI_GATEWAY_API_KEY configured: {bool(os.getenv('AI_GATEWAY_API_KEY'))}")
