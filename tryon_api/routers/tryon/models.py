"""Pydantic models used by the try-on router."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from tryon_api.core.errors import TryOnError

GarmentCategory = Literal["upper_body", "lower_body", "dresses"]


class TryOnRequest(BaseModel):
    """Request payload sent by the upload widget."""

    userPhoto: Optional[str] = Field(None, description="Data URL of the person photo")
    clothingPhoto: Optional[str] = Field(
        None, description="Data URL of the garment photo"
    )
    garmentDescription: Optional[str] = Field(
        None, description="Free-text garment description embedded in the prompt"
    )
    category: Optional[str] = Field(
        "upper_body",
        description="upper_body, lower_body or dresses. Unknown values are treated as upper_body",
    )


class TryOnResult(BaseModel):
    """Response payload. Carries either an image or an error, never both."""

    success: bool
    image: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    code: Optional[str] = Field(None, description="Machine-readable error code")
    details: Optional[str] = None

    @model_validator(mode="after")
    def _image_xor_error(self) -> "TryOnResult":
        if (self.image is None) == (self.error is None):
            raise ValueError("TryOnResult must carry exactly one of image or error")
        if self.success != (self.image is not None):
            raise ValueError("success must be true exactly when an image is present")
        return self

    @classmethod
    def from_image(cls, image: str, message: Optional[str] = None) -> "TryOnResult":
        return cls(success=True, image=image, message=message)

    @classmethod
    def from_error(cls, exc: TryOnError) -> "TryOnResult":
        return cls(
            success=False,
            error=exc.message,
            code=exc.code,
            details=exc.details,
        )


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
