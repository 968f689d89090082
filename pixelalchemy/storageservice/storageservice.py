import logging
import threading
import uuid
from typing import Any, Dict, List, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import StoreError
from ..schemas import StoredImage

logger = logging.getLogger(__name__)


class StorageService:
    """Persists generated images in the blob store and lists what it holds."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.Client] = None):
        self.settings = settings
        self.base_url = settings.blob_api_url.rstrip("/")
        self._client = http_client or httpx.Client(timeout=settings.http_timeout)

    # ---------- internal ----------
    def _headers(self) -> Dict[str, str]:
        return {
            "authorization": f"Bearer {self.settings.blob_read_write_token.get_secret_value()}",
            "x-api-version": self.settings.blob_api_version,
        }

    def _request(self, method: str, url: str, **kwargs: Any) -> Dict[str, Any]:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise StoreError(f"Blob store unreachable: {exc}") from exc

        if response.is_error:
            raise StoreError(
                f"Blob store error status: {response.status_code}, message: {response.text}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise StoreError("Blob store returned an invalid response") from exc

    def new_filename(self) -> str:
        return f"{uuid.uuid4()}.{self.settings.image_extension}"

    def close(self) -> None:
        self._client.close()

    # ---------- images ----------
    def store(self, data: bytes, content_type: str) -> StoredImage:
        filename = self.new_filename()
        headers = self._headers()
        headers.update({
            "x-content-type": content_type,
            "x-add-random-suffix": "0",
            "x-vercel-blob-access": "public",
        })

        payload = self._request("PUT", f"{self.base_url}/{filename}", content=data, headers=headers)
        url = payload.get("url")
        if not url:
            raise StoreError("Blob store response did not include a URL")

        logger.info("Stored %s bytes as %s", len(data), filename)
        return StoredImage(url=url, pathname=payload.get("pathname", filename))

    def list_all(self) -> List[StoredImage]:
        payload = self._request("GET", self.base_url, headers=self._headers())
        blobs = payload.get("blobs") or []
        return [
            StoredImage(url=blob["url"], pathname=blob.get("pathname"))
            for blob in blobs
            if blob.get("url")
        ]


_SERVICE: Optional[StorageService] = None
_SERVICE_LOCK = threading.Lock()

def get_storage_service() -> StorageService:
    """Return the process-wide blob store client.

    Created on first use from the cached settings, so every request shares one
    connection pool and the write token is taken from the environment once.
    """
    global _SERVICE
    if _SERVICE is not None:
        return _SERVICE
    with _SERVICE_LOCK:
        if _SERVICE is None:
            _SERVICE = StorageService(get_settings())
    return _SERVICE


def close_storage_service() -> None:
    """Close the shared client's connection pool, if one was created."""
    global _SERVICE
    with _SERVICE_LOCK:
        if _SERVICE is not None:
            _SERVICE.close()
            _SERVICE = None
