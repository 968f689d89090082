"""Error taxonomy shared by the handlers, clients and the bridge."""

from __future__ import annotations

from typing import Optional

from fastapi import status


class PixelAlchemyError(Exception):
    """Base class for failures that are reported to the caller as an envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PromptValidationError(PixelAlchemyError):
    """The submitted prompt is missing, not a string or blank."""

    status_code = status.HTTP_400_BAD_REQUEST


class ProviderError(PixelAlchemyError):
    """The image generation API answered with an error or was unreachable."""

    def __init__(self, status: Optional[int], message: str) -> None:
        super().__init__(message)
        self.status = status


class StoreError(PixelAlchemyError):
    """The blob store rejected a write or a listing."""


class NetworkError(PixelAlchemyError):
    """The bridge could not reach the generate endpoint."""
