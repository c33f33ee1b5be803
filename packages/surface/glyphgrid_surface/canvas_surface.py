"""Pixel canvas surface backed by a Pillow image."""

from __future__ import annotations

from io import BytesIO
from pathlib import Path

from PIL import Image, ImageDraw

from .base import Surface
from .models import SurfaceKind


class CanvasSurface(Surface):
    """Canvas with a CSS size (``width``/``height``) and a scaled backing image."""

    kind = SurfaceKind.CANVAS

    def __init__(
        self,
        width: float = 800,
        height: float = 480,
        left: float = 0.0,
        top: float = 0.0,
        device_pixel_ratio: float = 1.0,
    ) -> None:
        super().__init__(width, height, left, top)
        self.device_pixel_ratio = float(device_pixel_ratio)
        self.image: Image.Image | None = None

    @property
    def backing_size(self) -> tuple[int, int]:
        if self.image is None:
            return (0, 0)
        return self.image.size

    def resize_backing(self, width: int, height: int) -> Image.Image:
        size = (max(1, int(width)), max(1, int(height)))
        if self.image is None or self.image.size != size:
            self.image = Image.new("RGB", size, (255, 255, 255))
        return self.image

    def draw(self) -> ImageDraw.ImageDraw:
        if self.image is None:
            raise RuntimeError("Canvas has no backing image yet")
        return ImageDraw.Draw(self.image)

    def to_png_bytes(self) -> bytes:
        if self.image is None:
            raise RuntimeError("Canvas has no backing image yet")
        buf = BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()

    def save(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_png_bytes())
        return path
