"""Server-side calls into the PixelAlchemy API.

The page routes use these helpers instead of letting the browser talk to the
generate endpoint directly, so the API secret never leaves the server.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

import httpx

from .config import Settings, get_settings
from .errors import NetworkError
from .schemas import GenerationResult, ImageListResult

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_ERROR = "Failed attempt to generate image"
DEFAULT_LIST_ERROR = "Failed to fetch images generated before"
NO_IMAGE_URL_ERROR = "No image URL was received"


def _error_from_response(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), str) and payload["error"]:
        return payload["error"]
    return f"HTTP error! status: {response.reason_phrase or response.status_code}"


def _send(client: Optional[httpx.Client], settings: Settings, method: str, **kwargs) -> httpx.Response:
    try:
        if client is not None:
            return client.request(method, settings.generate_endpoint_url, **kwargs)
        with httpx.Client(timeout=settings.http_timeout) as own_client:
            return own_client.request(method, settings.generate_endpoint_url, **kwargs)
    except httpx.HTTPError as exc:
        raise NetworkError(f"Could not reach the generate endpoint: {exc}") from exc


def generate_image(
    text: str,
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> GenerationResult:
    """Forward a prompt to the generate endpoint and return its envelope.

    Never raises: every failure comes back as ``success=False``.
    """
    settings = settings or get_settings()
    headers = {"X-API-SECRET": settings.api_secret.get_secret_value()}

    try:
        response = _send(client, settings, "POST", json={"text": text}, headers=headers)
        if response.is_error:
            logger.warning("Generate endpoint answered %s: %s", response.status_code, response.text)
            return GenerationResult.failed(_error_from_response(response))
        payload = response.json()
        if isinstance(payload, dict) and payload.get("success") is True and not payload.get("imageUrl"):
            return GenerationResult.failed(NO_IMAGE_URL_ERROR)
        return GenerationResult.model_validate(payload)
    except NetworkError as exc:
        logger.warning("Server error: %s", exc)
        return GenerationResult.failed(exc.message)
    except Exception as exc:
        logger.exception("Unexpected failure while generating an image")
        return GenerationResult.failed(DEFAULT_GENERATION_ERROR, details=str(exc))


def fetch_saved_images(
    settings: Optional[Settings] = None,
    client: Optional[httpx.Client] = None,
) -> ImageListResult:
    """Plain GET against the list endpoint; never raises."""
    settings = settings or get_settings()

    try:
        response = _send(client, settings, "GET")
        if response.is_error:
            return ImageListResult(success=False, error=_error_from_response(response))
        return ImageListResult.model_validate(response.json())
    except NetworkError as exc:
        logger.warning("Error fetching images: %s", exc)
        return ImageListResult(success=False, error=exc.message)
    except Exception:
        logger.exception("Unexpected failure while listing images")
        return ImageListResult(success=False, error=DEFAULT_LIST_ERROR)


class Bridge:
    """Binds the bridge calls to one settings object for the page routes."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self.settings = settings
        self.client = client

    def generate_image(self, text: str) -> GenerationResult:
        return generate_image(text, self.settings, self.client)

    def fetch_saved_images(self) -> ImageListResult:
        return fetch_saved_images(self.settings, self.client)


@lru_cache
def get_bridge() -> Bridge:
    return Bridge(get_settings())
