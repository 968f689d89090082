from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the PixelAlchemy backend."""

    #----------------------------------------------------------
    # Image provider settings
    #----------------------------------------------------------
    provider_url: str = Field(
        default="http://localhost:8080/generate",
        description="Endpoint of the external image generation API.",
    )

    provider_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="API key sent to the image generation API in the X-API-KEY header.",
    )

    #----------------------------------------------------------
    # Blob store settings
    #----------------------------------------------------------
    blob_api_url: str = Field(
        default="https://blob.vercel-storage.com",
        description="Base URL of the blob storage REST API.",
    )

    blob_read_write_token: SecretStr = Field(
        default=SecretStr(""),
        description="Token authorising writes to and listings of the blob store.",
    )

    blob_api_version: str = Field(
        default="7",
        description="Value of the x-api-version header expected by the blob store.",
    )

    persist_images: bool = Field(
        default=True,
        description="If false, return generated images inline as data URLs instead of uploading them.",
    )

    image_content_type: str = Field(
        default="image/jpeg",
        description="Content type requested from the provider and recorded in the store.",
    )

    image_extension: str = Field(
        default="jpg",
        description="File extension used for stored image names.",
    )

    #----------------------------------------------------------
    # Bridge settings
    #----------------------------------------------------------
    api_secret: SecretStr = Field(
        default=SecretStr(""),
        description="Secret attached by the server-side bridge when calling the generate endpoint.",
    )

    generate_endpoint_url: str = Field(
        default="http://localhost:8000/api/generate-image",
        description="URL of the generate endpoint as seen from the server itself.",
    )

    #----------------------------------------------------------
    # Runtime settings
    #----------------------------------------------------------
    http_timeout: Optional[float] = Field(
        default=None,
        description="Timeout in seconds for outbound HTTP calls. None waits indefinitely.",
    )

    log_level: str = Field(
        default="INFO",
        description="Level passed to logging.basicConfig when the server starts.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PIXELALCHEMY_",
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
