"""Prompt form and gallery page.

:class:`ImageGeneratorView` holds the per-request page state and implements
the two transitions the page supports (loading the saved images and
submitting a prompt).  :func:`render_page` renders a view through the
Jinja2 template in ``templates/index.html``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .schemas import GenerationResult, ImageListResult

LOAD_IMAGES_ERROR = "Unable to load images"
GENERATION_FAILED = "Failed trying to generate the image"
NO_IMAGE_URL = "No image URL was received"


@dataclass
class ImageGeneratorView:
    prompt: str = ""
    is_loading: bool = False
    loading_images: bool = False
    image_url: Optional[str] = None
    error: Optional[str] = None
    saved_images: List[str] = field(default_factory=list)

    def load_saved_images(self, fetch: Callable[[], ImageListResult]) -> None:
        """Replace the gallery with what the list endpoint returns."""
        self.loading_images = True
        try:
            result = fetch()
            if not result.success:
                self.error = LOAD_IMAGES_ERROR
                self.saved_images = []
            else:
                self.saved_images = list(result.image_urls or [])
        finally:
            self.loading_images = False

    def submit(self, prompt: str, generate: Callable[[str], GenerationResult]) -> None:
        """Run one generation and fold its envelope into the view."""
        self.prompt = prompt
        self.is_loading = True
        self.image_url = None
        self.error = None
        try:
            result = generate(prompt)
            if not result.success:
                self.error = result.error or GENERATION_FAILED
            elif not result.image_url:
                self.error = NO_IMAGE_URL
            else:
                self.image_url = result.image_url
                self.saved_images.insert(0, result.image_url)
                self.prompt = ""
        finally:
            self.is_loading = False


_TEMPLATE_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "xml"]),
)


def render_page(view: ImageGeneratorView) -> str:
    """Render ``templates/index.html`` for a settled view.

    The page is produced after the view's requests have resolved; the
    in-flight state of a new submission is shown by the page's own script.
    """
    return _env.get_template("index.html").render(view=view)
