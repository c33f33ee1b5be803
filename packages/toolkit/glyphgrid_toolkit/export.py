"""Write rendered frames and arbitrary payloads to disk."""

from __future__ import annotations

import re
from pathlib import Path

from glyphgrid_core.logging_setup import get_logger
from glyphgrid_renderer import Context
from glyphgrid_surface import CanvasSurface

logger = get_logger("export")

_FILENAME_RE = re.compile(r"(.+)\.([0-9a-z]+)$", re.IGNORECASE)


def save_bytes(data: bytes | str, filename: str, directory: Path | None = None) -> Path:
    path = Path(directory or Path.cwd()) / filename
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        path.write_text(data, encoding="utf-8")
    else:
        path.write_bytes(data)
    return path


def frame_filename(filename: str, frame: int) -> str | None:
    """``shot.png`` on frame 42 becomes ``shot_00042.png``; None if there is no extension."""
    match = _FILENAME_RE.match(filename)
    if not match:
        return None
    return f"{match.group(1)}_{frame:05d}.{match.group(2)}"


def export_frame(
    context: Context,
    filename: str,
    start: int = 1,
    end: int | None = None,
    directory: Path | None = None,
) -> Path | None:
    """Save the canvas surface if the current frame lies in [start, end].

    Call it from a program hook every frame; frames outside the range are
    ignored. ``end`` defaults to ``start``.
    """
    surface = context.settings.element
    if not isinstance(surface, CanvasSurface) or surface.image is None:
        logger.warning("can't export, a canvas renderer is required", extra={"event": "export_skipped"})
        return None
    if not filename:
        logger.warning("can't export, filename not provided", extra={"event": "export_skipped"})
        return None

    out_name = frame_filename(filename, context.frame)
    if out_name is None:
        logger.warning(
            "can't export, invalid filename %r (expected name.ext)",
            filename,
            extra={"event": "export_skipped"},
        )
        return None

    last = start if end is None else end
    if not start <= context.frame <= last:
        return None

    path = Path(directory or Path.cwd()) / out_name
    path.parent.mkdir(parents=True, exist_ok=True)
    surface.image.save(path)
    logger.info("exported frame %s, will stop at %s", path.name, last, extra={"event": "frame_exported", "frame": context.frame})
    return path
