"""Server-side checks for the photo data URLs sent by the upload widget."""

import base64
import binascii
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from tryon_api.core.errors import ValidationError

SUPPORTED_IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "webp"})

_DATA_URL_PATTERN = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.+)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class DataUrl:
    mime_type: str
    payload: str


def parse_data_url(value: str, field: str) -> DataUrl:
    """
    Parse and check a single photo field.

    Args:
        value: Data URL of the form ``data:image/<type>;base64,<payload>``
        field: Request field name, used in error messages

    Raises:
        ValidationError: If the value is malformed or the image type is unsupported
    """
    # Forwarded upstream unmodified, so surrounding whitespace is rejected
    match = _DATA_URL_PATTERN.fullmatch(value) if value == value.strip() else None
    if not match:
        raise ValidationError(
            f"{field} must be a base64 data URL (data:image/<type>;base64,...)"
        )

    mime_type = match.group("mime").lower()
    kind, _, subtype = mime_type.partition("/")
    if kind != "image" or subtype not in SUPPORTED_IMAGE_TYPES:
        raise ValidationError(
            f"Unsupported image format for {field}: {mime_type}. "
            "Please use JPEG, PNG or WebP."
        )

    payload = match.group("payload")
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(f"{field} does not contain valid base64 image data") from exc

    return DataUrl(mime_type=mime_type, payload=payload)


def validate_photos(
    user_photo: Optional[str], clothing_photo: Optional[str]
) -> Tuple[DataUrl, DataUrl]:
    """Check both photos, rejecting missing ones before any format check."""
    if not user_photo or not clothing_photo:
        raise ValidationError("Both user photo and clothing photo are required")

    return (
        parse_data_url(user_photo, "userPhoto"),
        parse_data_url(clothing_photo, "clothingPhoto"),
    )
