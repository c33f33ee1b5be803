"""Word wrapping and measuring for text blocks drawn into a cell buffer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TextMetrics:
    text: str
    num_lines: int
    max_width: int


def wrap(text: str, width: int = 0) -> TextMetrics:
    """Wrap ``text`` to ``width`` columns without breaking words.

    A word longer than ``width`` stays on its own line, so ``max_width`` may
    exceed ``width``. ``width=0`` only measures.
    """
    if width == 0:
        return measure(text)

    lines: list[str] = []
    max_width = 0
    for paragraph in text.split("\n"):
        line = ""
        started = False
        for word in paragraph.split(" "):
            if not started:
                line = word
                started = True
            elif len(line) + 1 + len(word) <= width:
                line = f"{line} {word}"
            else:
                lines.append(line)
                line = word
            max_width = max(max_width, len(line))
        lines.append(line)

    out = "\n".join(lines)
    num_lines = len(lines)
    # A trailing newline in the input does not count as an extra line.
    if out.endswith("\n"):
        num_lines -= 1
    return TextMetrics(text=out, num_lines=num_lines, max_width=max_width)


def measure(text: str) -> TextMetrics:
    """Count lines and the widest line; a trailing newline does not open a new line."""
    if not text:
        return TextMetrics(text=text, num_lines=0, max_width=0)
    lines = text.split("\n")
    num_lines = len(lines)
    if text.endswith("\n"):
        num_lines -= 1
    max_width = max(len(line) for line in lines)
    return TextMetrics(text=text, num_lines=num_lines, max_width=max_width)
