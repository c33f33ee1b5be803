"""Structured text tree surface: a block container holding one line node per row."""

from __future__ import annotations

import html
import re

from .base import Surface
from .models import SurfaceKind


_TAG_RE = re.compile(r"<[^>]*>")

_CSS_NAMES = {
    "background_color": "background",
    "color": "color",
    "font_family": "font-family",
    "font_size": "font-size",
    "font_weight": "font-weight",
    "letter_spacing": "letter-spacing",
    "line_height": "line-height",
    "text_align": "text-align",
}


class LineNode:
    __slots__ = ("content", "writes")

    def __init__(self) -> None:
        self.content = ""
        self.writes = 0


class TextSurface(Surface):
    """In-memory text tree with mutation counters for each line."""

    kind = SurfaceKind.TEXT

    def __init__(self, width: float = 800, height: float = 480, left: float = 0.0, top: float = 0.0) -> None:
        super().__init__(width, height, left, top)
        self._lines: list[LineNode] = []
        self.mutations = 0

    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def lines(self) -> list[str]:
        return [line.content for line in self._lines]

    def line_writes(self) -> list[int]:
        return [line.writes for line in self._lines]

    def append_line(self) -> None:
        self._lines.append(LineNode())

    def remove_last_line(self) -> None:
        if self._lines:
            self._lines.pop()

    def write_line(self, index: int, markup: str) -> None:
        line = self._lines[index]
        line.content = markup
        line.writes += 1
        self.mutations += 1

    def reset_counters(self) -> None:
        self.mutations = 0
        for line in self._lines:
            line.writes = 0

    def plain_text(self) -> str:
        return "\n".join(html.unescape(_TAG_RE.sub("", line.content)) for line in self._lines)

    def to_html(self) -> str:
        css = "".join(f"{_CSS_NAMES[k]}:{v};" for k, v in sorted(self.style.items()))
        if not self.selectable:
            css += "user-select:none;"
        attr = f' style="{css}"' if css else ""
        body = "".join(f'<span style="display:block">{line.content}</span>' for line in self._lines)
        return f"<pre{attr}>{body}</pre>"
