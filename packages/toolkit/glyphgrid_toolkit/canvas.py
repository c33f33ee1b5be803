"""Pixel canvas for sampling images onto the character grid.

A ``Canvas`` holds a Pillow image plus a flat, row-major ``pixels`` list of
``Pixel(r, g, b, a, v)`` values read back from it, where ``v`` is the
luminance in [0, 1]. Typical use in a program is to size the canvas to the
grid, place an image with ``cover``/``fit``/``center``, then read cells with
``get`` or ``sample``:

    canvas.resize(context.cols, context.rows).cover(img, context.metrics.aspect)
    v = canvas.get(coord.x, coord.y).v

Placing an image reloads ``pixels``; ``mirror_x``, ``normalize`` and
``quantize`` then edit ``pixels`` only, leaving the image untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable, Union

from PIL import Image, ImageOps

from .num import map as remap
from .num import mix

_RESAMPLE = Image.Resampling.BILINEAR
_OPAQUE_BLACK = (0, 0, 0, 255)


@dataclass(frozen=True)
class Pixel:
    r: float
    g: float
    b: float
    a: float = 1.0
    v: float = 0.0


# Returned by out-of-bounds reads.
BLACK = Pixel(0, 0, 0, 1.0, 0.0)
WHITE = Pixel(255, 255, 255, 1.0, 1.0)


def to_gray(r: float, g: float, b: float) -> float:
    """Rec. 709 luminance, rounded half up to an 8-bit level, scaled to [0, 1]."""
    return math.floor(r * 0.2126 + g * 0.7152 + b * 0.0722 + 0.5) / 255.0


def mix_pixels(a: Pixel, b: Pixel, t: float) -> Pixel:
    return Pixel(
        r=mix(a.r, b.r, t),
        g=mix(a.g, b.g, t),
        b=mix(a.b, b.b, t),
        a=mix(a.a, b.a, t),
        v=mix(a.v, b.v, t),
    )


def redmean_distance(a: Pixel, b: Pixel) -> float:
    # https://en.wikipedia.org/wiki/Color_difference#sRGB
    r = (a.r + b.r) * 0.5
    s = (2 + r / 256) * (a.r - b.r) ** 2
    s += 4 * (a.g - b.g) ** 2
    s += (2 + (255 - r) / 256) * (a.b - b.b) ** 2
    return math.sqrt(s)


class Canvas:
    def __init__(self, width: int = 1, height: int = 1) -> None:
        self.image = Image.new("RGBA", (1, 1), (0, 0, 0, 0))
        self.pixels: list[Pixel] = []
        self.resize(width, height)
        self.load_pixels()

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    # -- placing images --------------------------------------------------

    def resize(self, width: int, height: int) -> Canvas:
        """Resize to a cleared, transparent canvas; ``pixels`` is emptied until the next placement."""
        size = (max(1, int(width)), max(1, int(height)))
        self.image = Image.new("RGBA", size, (0, 0, 0, 0))
        self.pixels = []
        return self

    def copy(
        self,
        source: ImageSource,
        sx: int = 0,
        sy: int = 0,
        s_width: int | None = None,
        s_height: int | None = None,
        dx: int = 0,
        dy: int = 0,
        d_width: int | None = None,
        d_height: int | None = None,
    ) -> Canvas:
        """Draw a source region over a destination region, stretching as needed."""
        src = _rgba(source)
        s_width = src.width if s_width is None else s_width
        s_height = src.height if s_height is None else s_height
        d_width = self.width if d_width is None else d_width
        d_height = self.height if d_height is None else d_height

        region = src.crop((sx, sy, sx + s_width, sy + s_height))
        region = region.resize((max(1, round(d_width)), max(1, round(d_height))), _RESAMPLE)
        self._composite(region, round(dx), round(dy))
        return self.load_pixels()

    def draw_image(self, source: ImageSource) -> Canvas:
        """Resize the canvas to the source and paint it 1:1."""
        src = _rgba(source)
        self.resize(src.width, src.height)
        return self.copy(src)

    def cover(self, source: ImageSource, aspect: float = 1.0) -> Canvas:
        """Fill the canvas with the source, cropping the overflow symmetrically.

        ``aspect`` stretches the source vertically before placement; pass the
        cell aspect so images keep their proportions on non-square cells.
        """
        src = _stretch(_flatten(source), aspect)
        self.image = ImageOps.fit(src, self.image.size, method=_RESAMPLE)
        return self.load_pixels()

    def fit(self, source: ImageSource, aspect: float = 1.0) -> Canvas:
        """Show the whole source, letterboxed with black bars."""
        src = _stretch(_flatten(source), aspect)
        self.image = ImageOps.pad(src, self.image.size, method=_RESAMPLE, color=_OPAQUE_BLACK)
        return self.load_pixels()

    def center(self, source: ImageSource, scale_x: float = 1.0, scale_y: float = 1.0) -> Canvas:
        """Draw the source at its own size (times the scale factors), centred on black."""
        src = _rgba(source)
        dw = max(1, round(src.width * scale_x))
        dh = max(1, round(src.height * scale_y))
        self.image = Image.new("RGBA", self.image.size, _OPAQUE_BLACK)
        self._composite(
            src.resize((dw, dh), _RESAMPLE),
            round((self.width - dw) / 2),
            round((self.height - dh) / 2),
        )
        return self.load_pixels()

    def _composite(self, layer_image: Image.Image, x: int, y: int) -> None:
        # Layers may hang off any edge; paste clips, alpha_composite does the blending.
        layer = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        layer.paste(layer_image, (x, y))
        self.image = Image.alpha_composite(self.image, layer)

    def load_pixels(self) -> Canvas:
        data = self.image.tobytes()
        self.pixels = [
            Pixel(
                r=data[i],
                g=data[i + 1],
                b=data[i + 2],
                a=data[i + 3] / 255.0,
                v=to_gray(data[i], data[i + 1], data[i + 2]),
            )
            for i in range(0, len(data), 4)
        ]
        return self

    # -- editing the pixel array -----------------------------------------

    def mirror_x(self) -> Canvas:
        w = self.width
        self.pixels = [p for j in range(self.height) for p in reversed(self.pixels[j * w : (j + 1) * w])]
        return self

    def normalize(self, lower: float = 0.0, upper: float = 1.0) -> Canvas:
        """Stretch gray values so the darkest pixel maps to ``lower`` and the brightest to ``upper``."""
        if not self.pixels:
            return self
        low = min(p.v for p in self.pixels)
        high = max(p.v for p in self.pixels)
        if low == high:
            return self
        self.pixels = [replace(p, v=remap(p.v, low, high, lower, upper)) for p in self.pixels]
        return self

    def quantize(self, palette: Iterable[Pixel]) -> Canvas:
        """Snap each pixel to the nearest palette color; gray values are kept."""
        colors = list(palette)
        if not colors:
            return self
        self.pixels = [
            replace(min(colors, key=lambda c: redmean_distance(p, c)), v=p.v) for p in self.pixels
        ]
        return self

    # -- reading ---------------------------------------------------------

    def get(self, x: int, y: int) -> Pixel:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return BLACK
        i = int(x) + int(y) * self.width
        if i >= len(self.pixels):
            return BLACK
        return self.pixels[i]

    def sample(self, sx: float, sy: float, gray: bool = False) -> Pixel | float:
        """Bilinearly sample at normalized coordinates; edges blend towards black."""
        x = sx * self.width - 0.5
        y = sy * self.height - 0.5
        left = math.floor(x)
        bottom = math.floor(y)
        right = left + 1
        top = bottom + 1
        lr = x - left
        bt = y - bottom

        if gray:
            p1 = mix(self.get(left, bottom).v, self.get(right, bottom).v, lr)
            p2 = mix(self.get(left, top).v, self.get(right, top).v, lr)
            return mix(p1, p2, bt)
        p1 = mix_pixels(self.get(left, bottom), self.get(right, bottom), lr)
        p2 = mix_pixels(self.get(left, top), self.get(right, top), lr)
        return mix_pixels(p1, p2, bt)

    def write_to(self, target: list) -> Canvas:
        target[: len(self.pixels)] = self.pixels
        return self


ImageSource = Union[Image.Image, Canvas]


def _rgba(source: ImageSource) -> Image.Image:
    img = source.image if isinstance(source, Canvas) else source
    return img if img.mode == "RGBA" else img.convert("RGBA")


def _flatten(source: ImageSource) -> Image.Image:
    # Transparent areas show the black backdrop, as on a cleared canvas.
    src = _rgba(source)
    return Image.alpha_composite(Image.new("RGBA", src.size, _OPAQUE_BLACK), src)


def _stretch(img: Image.Image, aspect: float) -> Image.Image:
    if aspect == 1.0:
        return img
    return img.resize((img.width, max(1, round(img.height * aspect))), _RESAMPLE)
