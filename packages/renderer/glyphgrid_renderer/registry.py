"""Named renderer backends; unknown names fall back to the text renderer."""

from __future__ import annotations

from typing import Callable

from .canvas_renderer import CanvasRenderer
from .models import Renderer
from .text_renderer import TextRenderer

DEFAULT_RENDERER_NAME = "text"

RendererFactory = Callable[[], Renderer]

RENDERERS: dict[str, RendererFactory] = {
    "text": TextRenderer,
    "canvas": CanvasRenderer,
}


def register_renderer(name: str, factory: RendererFactory) -> None:
    if not name:
        raise ValueError("renderer name must not be empty")
    RENDERERS[name] = factory


def list_renderers() -> list[str]:
    return sorted(RENDERERS.keys())


def create_renderer(name: str | None) -> Renderer:
    factory = RENDERERS.get(name or DEFAULT_RENDERER_NAME, RENDERERS[DEFAULT_RENDERER_NAME])
    return factory()
