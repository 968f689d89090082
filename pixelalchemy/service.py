"""Domain logic behind the generate and list endpoints."""

from __future__ import annotations

import base64
import logging
from functools import lru_cache
from typing import Any, List

from pydantic import ValidationError

from .aiservices.httpimagegenerationclient import HTTPImageGenerationClient
from .aiservices.imagegenerationclient import ImageGenerationClient
from .config import Settings, get_settings
from .errors import PromptValidationError
from .schemas import GenerateImageRequest, GenerationResult, ImageListResult
from .storageservice.storageservice import StorageService

logger = logging.getLogger(__name__)

NO_PROMPT_MESSAGE = "No prompt was provided"


def validate_prompt(body: Any) -> str:
    """Return the trimmed prompt from a request body or raise PromptValidationError."""
    if not isinstance(body, dict):
        raise PromptValidationError(NO_PROMPT_MESSAGE)
    try:
        return GenerateImageRequest.model_validate(body).text
    except ValidationError as exc:
        raise PromptValidationError(NO_PROMPT_MESSAGE) from exc


class PixelAlchemyService:
    """Runs one prompt through the provider and the blob store."""

    def __init__(self, settings: Settings, image_client: ImageGenerationClient) -> None:
        self.settings = settings
        self._image_client = image_client

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate_image(self, body: Any, storage: StorageService) -> GenerationResult:
        """Validate, generate and persist.

        PromptValidationError, ProviderError and StoreError propagate so the
        route can pick the status code.
        """
        prompt = validate_prompt(body)
        image = self._image_client.fetch_image(prompt)
        content_type = self.settings.image_content_type

        if not self.settings.persist_images:
            encoded = base64.b64encode(image).decode("ascii")
            return GenerationResult.ok(f"data:{content_type};base64,{encoded}")

        stored = storage.store(image, content_type)
        return GenerationResult.ok(stored.url)

    # ------------------------------------------------------------------
    # Gallery
    # ------------------------------------------------------------------
    def close(self) -> None:
        self._image_client.close()

    @staticmethod
    def list_images(storage: StorageService) -> ImageListResult:
        urls: List[str] = [item.url for item in storage.list_all()]
        return ImageListResult(success=True, image_urls=urls)


@lru_cache
def get_pixelalchemy_service() -> PixelAlchemyService:
    settings = get_settings()
    return PixelAlchemyService(settings, HTTPImageGenerationClient(settings))


def close_pixelalchemy_service() -> None:
    """Close the cached service's provider client without creating one."""
    if get_pixelalchemy_service.cache_info().currsize:
        get_pixelalchemy_service().close()
        get_pixelalchemy_service.cache_clear()
