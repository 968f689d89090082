"""Pydantic models shared by the FastAPI endpoints, the bridge and the UI."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator


class GenerateImageRequest(BaseModel):
    text: StrictStr = Field(..., description="Text prompt for image generation")

    @field_validator("text")
    @classmethod
    def _strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("prompt must not be blank")
        return value


class GenerationResult(BaseModel):
    """Envelope returned by the generate endpoint and the bridge."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    success: bool
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    error: Optional[str] = None
    details: Optional[str] = None

    @model_validator(mode="after")
    def _check_envelope(self) -> "GenerationResult":
        if self.success and (self.image_url is None or self.error is not None):
            raise ValueError("a successful result carries imageUrl and no error")
        if not self.success and (self.error is None or self.image_url is not None):
            raise ValueError("a failed result carries error and no imageUrl")
        return self

    @classmethod
    def ok(cls, image_url: str) -> "GenerationResult":
        return cls(success=True, image_url=image_url)

    @classmethod
    def failed(cls, error: str, details: Optional[str] = None) -> "GenerationResult":
        return cls(success=False, error=error, details=details)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ImageListResult(BaseModel):
    """Envelope returned by the list endpoint."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    success: bool
    image_urls: Optional[List[str]] = Field(default=None, alias="imageUrls")
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_envelope(self) -> "ImageListResult":
        if self.success and (self.image_urls is None or self.error is not None):
            raise ValueError("a successful listing carries imageUrls and no error")
        if not self.success and self.error is None:
            raise ValueError("a failed listing carries an error")
        return self

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class StoredImage(BaseModel):
    url: str = Field(..., description="Public URL of the stored object")
    pathname: Optional[str] = Field(default=None, description="Name of the object inside the store")
