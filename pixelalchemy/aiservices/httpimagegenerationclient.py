# aiservices/httpimagegenerationclient.py
from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ProviderError
from .imagegenerationclient import ImageGenerationClient

logger = logging.getLogger(__name__)


class HTTPImageGenerationClient(ImageGenerationClient):
    """
    Talks to an external text-to-image endpoint that answers
    GET <provider_url>?prompt=... with the image bytes.
    """

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None) -> None:
        self.settings = settings or get_settings()
        self._client = http_client or httpx.Client(timeout=self.settings.http_timeout)

    def fetch_image(self, prompt: str) -> bytes:
        headers = {
            "X-API-KEY": self.settings.provider_api_key.get_secret_value(),
            "Accept": self.settings.image_content_type,
        }
        logger.info("Requesting image from %s", self.settings.provider_url)

        try:
            response = self._client.get(
                self.settings.provider_url,
                params={"prompt": prompt},
                headers=headers,
            )
        except httpx.HTTPError as exc:
            raise ProviderError(None, f"Image provider unreachable: {exc}") from exc

        if response.is_error:
            error_msg = response.text
            logger.warning("Image provider answered %s: %s", response.status_code, error_msg)
            raise ProviderError(
                response.status_code,
                f"HTTP error status: {response.status_code}, message: {error_msg}",
            )

        # Passed through untouched; the provider declares the format.
        return response.content

    def close(self) -> None:
        self._client.close()
