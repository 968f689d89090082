"""Tests for :mod:`pixelalchemy.bridge`."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from respx import MockRouter

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))
from pixelalchemy import bridge
from pixelalchemy.config import Settings
from pixelalchemy.main import app
from pixelalchemy.schemas import StoredImage
from pixelalchemy.service import PixelAlchemyService, get_pixelalchemy_service
from pixelalchemy.storageservice.storageservice import get_storage_service

ENDPOINT = "http://app.example/api/generate-image"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, generate_endpoint_url=ENDPOINT, api_secret="top-secret")


def test_generate_image_returns_handler_envelope(settings: Settings, respx_mock: MockRouter) -> None:
    route = respx_mock.post(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"success": True, "imageUrl": "https://store.example/abc.jpg"})
    )

    result = bridge.generate_image("a red fox", settings)

    assert result.success is True
    assert result.image_url == "https://store.example/abc.jpg"
    request = route.calls.last.request
    assert request.headers["x-api-secret"] == "top-secret"
    assert json.loads(request.read()) == {"text": "a red fox"}


def test_generate_image_surfaces_handler_error_message(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.post(ENDPOINT).mock(
        return_value=httpx.Response(400, json={"success": False, "error": "No prompt was provided"})
    )

    result = bridge.generate_image("", settings)

    assert result.success is False
    assert result.error == "No prompt was provided"
    assert result.image_url is None


def test_generate_image_falls_back_to_status_text(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.post(ENDPOINT).mock(return_value=httpx.Response(500, text="<html>oops</html>"))

    result = bridge.generate_image("a red fox", settings)

    assert result.success is False
    assert result.error == "HTTP error! status: Internal Server Error"


def test_generate_image_never_raises_on_network_failure(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.post(ENDPOINT).mock(side_effect=httpx.ConnectError("connection refused"))

    result = bridge.generate_image("a red fox", settings)

    assert result.success is False
    assert "connection refused" in result.error


def test_generate_image_rejects_success_without_url(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.post(ENDPOINT).mock(return_value=httpx.Response(200, json={"success": True}))

    result = bridge.generate_image("a red fox", settings)

    assert result.success is False
    assert result.error == "No image URL was received"


def test_generate_image_handles_unparseable_body(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.post(ENDPOINT).mock(return_value=httpx.Response(200, text="not json"))

    result = bridge.generate_image("a red fox", settings)

    assert result.success is False
    assert result.error == bridge.DEFAULT_GENERATION_ERROR
    assert result.details


def test_fetch_saved_images_returns_listing(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.get(ENDPOINT).mock(
        return_value=httpx.Response(200, json={"success": True, "imageUrls": ["https://store.example/a.jpg"]})
    )

    result = bridge.fetch_saved_images(settings)

    assert result.success is True
    assert result.image_urls == ["https://store.example/a.jpg"]


def test_fetch_saved_images_reports_failure(settings: Settings, respx_mock: MockRouter) -> None:
    respx_mock.get(ENDPOINT).mock(
        return_value=httpx.Response(500, json={"success": False, "error": "Blob store unreachable"})
    )

    result = bridge.fetch_saved_images(settings)

    assert result.success is False
    assert result.error == "Blob store unreachable"


class _StubImageClient:
    def fetch_image(self, prompt: str) -> bytes:
        return b"jpeg"


class _InMemoryStorage:
    def __init__(self) -> None:
        self.urls: list[str] = []

    def store(self, data: bytes, content_type: str) -> StoredImage:
        url = f"https://store.example/{len(self.urls)}.jpg"
        self.urls.append(url)
        return StoredImage(url=url)

    def list_all(self) -> list[StoredImage]:
        return [StoredImage(url=url) for url in self.urls]


def test_bridge_round_trip_through_the_api() -> None:
    storage = _InMemoryStorage()
    service = PixelAlchemyService(Settings(_env_file=None), _StubImageClient())
    app.dependency_overrides[get_pixelalchemy_service] = lambda: service
    app.dependency_overrides[get_storage_service] = lambda: storage
    settings = Settings(_env_file=None, generate_endpoint_url="http://testserver/api/generate-image")

    try:
        with TestClient(app) as test_client:
            bound = bridge.Bridge(settings, test_client)
            generated = bound.generate_image("a red fox")
            listing = bound.fetch_saved_images()
            rejected = bound.generate_image("   ")
    finally:
        app.dependency_overrides.clear()

    assert generated.success is True
    assert generated.image_url == "https://store.example/0.jpg"
    assert listing.image_urls == [generated.image_url]
    assert rejected.success is False
    assert rejected.error == "No prompt was provided"
