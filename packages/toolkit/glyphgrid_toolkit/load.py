"""Asset loaders for programs.

Each loader accepts a filesystem path or an ``http(s)``/``file`` URL and never
raises: failures are logged and a sentinel is returned (``""``, ``{}``, or
``None``).
"""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from io import BytesIO
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from glyphgrid_core.logging_setup import get_logger

logger = get_logger("load")

_URL_SCHEMES = ("http://", "https://", "file://")


def _read_bytes(source: str | Path, timeout_s: float) -> bytes:
    text = str(source)
    if text.startswith(_URL_SCHEMES):
        req = urllib.request.Request(text)
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            return resp.read()
    return Path(source).read_bytes()


def load_text(source: str | Path, timeout_s: float = 30) -> str:
    try:
        return _read_bytes(source, timeout_s).decode("utf-8")
    except (OSError, urllib.error.URLError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("error loading text %s: %s", source, exc, extra={"event": "asset_load_failed"})
        return ""


def load_json(source: str | Path, timeout_s: float = 30) -> Any:
    try:
        return json.loads(_read_bytes(source, timeout_s).decode("utf-8"))
    except (OSError, urllib.error.URLError, UnicodeDecodeError, ValueError) as exc:
        logger.warning("error loading json %s: %s", source, exc, extra={"event": "asset_load_failed"})
        return {}


def load_image(source: str | Path, timeout_s: float = 30) -> Image.Image | None:
    """Decode an image fully into memory so no file handle outlives the call."""
    try:
        with Image.open(BytesIO(_read_bytes(source, timeout_s))) as img:
            img.load()
            return img.copy()
    except (OSError, urllib.error.URLError, UnidentifiedImageError, ValueError) as exc:
        logger.warning("error loading image %s: %s", source, exc, extra={"event": "asset_load_failed"})
        return None
