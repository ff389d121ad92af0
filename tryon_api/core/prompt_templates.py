"""Prompt templates and builders for the virtual try-on generation request."""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional


# --- GENERATION PROMPT ---

PROMPT_TEMPLATE = """You are a professional virtual try-on AI. Create a realistic photo of the person from the first image wearing the clothing item from the second image.

Images:
- Image 1 (person): the only source for the person's identity, face, hair, skin tone, body shape, pose and background.
- Image 2 (garment): the only source for the garment's appearance. Use it for color, pattern, fabric, cut and details of {GARMENT_DESCRIPTION}.

Instructions:
- Replace the person's {GARMENT_REGION} with {GARMENT_DESCRIPTION} from Image 2.
- Change ONLY that garment. Keep every other part of Image 1 identical.
- Preserve the person's identity, facial features, hair, skin tone, body proportions and pose exactly.
- Preserve the original background, framing and camera perspective.
- Warp the garment to the person's body so it fits naturally, with realistic fabric draping, folds and wrinkles.
- Match the lighting, shadows and color tone of Image 1 so the garment does not look pasted on.
- Do not borrow anything other than the garment from Image 2 (no model, background or text).

Output exactly ONE photorealistic image of the person wearing the garment. It must look like a natural photograph, not a collage.
"""

DEFAULT_CATEGORY = "upper_body"
DEFAULT_GARMENT_DESCRIPTION = "the clothing item"

GARMENT_REGIONS = MappingProxyType(
    {
        "upper_body": "top/shirt/upper-body garment",
        "lower_body": "pants/skirt/lower-body garment",
        "dresses": "dress/full-body outfit",
    }
)


def garment_region(category: Optional[str]) -> str:
    """Human wording for a garment category, falling back to upper body."""
    return GARMENT_REGIONS.get(category or DEFAULT_CATEGORY, GARMENT_REGIONS[DEFAULT_CATEGORY])


def build_tryon_prompt(
    category: Optional[str] = None,
    garment_description: Optional[str] = None,
) -> str:
    """Render the try-on prompt. Same inputs always yield the same text."""
    description = (garment_description or "").strip() or DEFAULT_GARMENT_DESCRIPTION

    return PROMPT_TEMPLATE.format(
        GARMENT_REGION=garment_region(category),
        GARMENT_DESCRIPTION=description,
    )


__all__ = [
    "PROMPT_TEMPLATE",
    "GARMENT_REGIONS",
    "DEFAULT_CATEGORY",
    "DEFAULT_GARMENT_DESCRIPTION",
    "garment_region",
    "build_tryon_prompt",
]
