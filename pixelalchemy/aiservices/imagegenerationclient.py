from __future__ import annotations

from abc import ABC, abstractmethod


class ImageGenerationClient(ABC):
    """Abstract interface for an image generation client.

    Implementations must provide synchronous generation methods
    used by the rest of the application.
    """

    @abstractmethod
    def fetch_image(self, prompt: str) -> bytes:
        """Generate an image from a validated prompt and return its raw bytes.

        Should raise ProviderError when the provider does not deliver an image.
        """

    def close(self) -> None:
        """Release any connection held by the client."""
