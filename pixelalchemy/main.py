"""FastAPI entry point exposing the PixelAlchemy API and page."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Form, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from starlette.concurrency import run_in_threadpool

from .bridge import Bridge, get_bridge
from .config import Settings, get_settings
from .errors import PixelAlchemyError, PromptValidationError
from .schemas import GenerationResult, ImageListResult
from .service import (
    NO_PROMPT_MESSAGE,
    PixelAlchemyService,
    close_pixelalchemy_service,
    get_pixelalchemy_service,
)
from .storageservice.storageservice import StorageService, close_storage_service, get_storage_service
from .ui import ImageGeneratorView, render_page

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Failed to process request"


def _envelope(result: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(content=result.to_payload(), status_code=status_code)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Close the shared provider and blob store clients on shutdown."""
    yield

    close_pixelalchemy_service()
    close_storage_service()
    logger.info("Outbound HTTP clients closed on shutdown.")


app = FastAPI(title="PixelAlchemy Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", summary="Health Check Endpoint")
async def healthcheck(settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "persistImages": settings.persist_images,
    }


@app.post(
    "/api/generate-image",
    response_model=GenerationResult,
    summary="Generate an image from a prompt and persist it",
)
async def generate_image(
    request: Request,
    service: PixelAlchemyService = Depends(get_pixelalchemy_service),
    storage: StorageService = Depends(get_storage_service),
):
    try:
        try:
            body = await request.json()
        except ValueError as exc:
            raise PromptValidationError(NO_PROMPT_MESSAGE) from exc

        result = await run_in_threadpool(service.generate_image, body, storage)
    except PixelAlchemyError as exc:
        logger.warning("Image generation failed: %s", exc.message)
        return _envelope(GenerationResult.failed(exc.message), exc.status_code)
    except Exception as exc:
        logger.exception("Image generation failed unexpectedly")
        return _envelope(
            GenerationResult.failed(GENERIC_FAILURE, details=str(exc)),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return _envelope(result)


@app.get(
    "/api/generate-image",
    response_model=ImageListResult,
    summary="List every image held by the blob store",
)
async def list_images(storage: StorageService = Depends(get_storage_service)):
    try:
        result = await run_in_threadpool(PixelAlchemyService.list_images, storage)
    except PixelAlchemyError as exc:
        logger.warning("Listing images failed: %s", exc.message)
        return _envelope(ImageListResult(success=False, error=exc.message), status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as exc:
        logger.exception("Listing images failed unexpectedly")
        return _envelope(ImageListResult(success=False, error=str(exc) or GENERIC_FAILURE), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return _envelope(result)


@app.get("/", response_class=HTMLResponse, summary="Prompt form and gallery")
async def index(bridge: Bridge = Depends(get_bridge)):
    view = ImageGeneratorView()
    await run_in_threadpool(view.load_saved_images, bridge.fetch_saved_images)
    return HTMLResponse(render_page(view))


@app.post("/", response_class=HTMLResponse, summary="Submit a prompt from the page form")
async def submit_prompt(
    prompt: str = Form(""),
    bridge: Bridge = Depends(get_bridge),
):
    view = ImageGeneratorView()
    await run_in_threadpool(view.load_saved_images, bridge.fetch_saved_images)
    await run_in_threadpool(view.submit, prompt, bridge.generate_image)
    return HTMLResponse(render_page(view))


__all__ = ["app", "main"]


def main() -> None:  # pragma: no cover - convenience entry point
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("pixelalchemy.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":  # pragma: no cover
    main()
