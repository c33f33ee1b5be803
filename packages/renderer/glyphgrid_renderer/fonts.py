"""Font resolution for measuring and rasterizing glyphs with Pillow."""

from __future__ import annotations

from functools import lru_cache

from PIL import ImageFont

GENERIC_FAMILIES: dict[str, tuple[str, ...]] = {
    "monospace": ("DejaVuSansMono.ttf", "JetBrainsMono-Regular.ttf", "Menlo.ttc", "Consolas.ttf", "cour.ttf"),
    "sans-serif": ("DejaVuSans.ttf", "Arial.ttf", "Helvetica.ttc"),
    "serif": ("DejaVuSerif.ttf", "Times New Roman.ttf", "Times.ttc"),
}

BOLD_WEIGHTS = {"bold", "bolder"}


def is_bold(weight: str | int | None) -> bool:
    if weight is None:
        return False
    text = str(weight).strip().lower()
    if text in BOLD_WEIGHTS:
        return True
    try:
        return float(text) >= 600
    except ValueError:
        return False


def _candidates(family: str) -> list[str]:
    names: list[str] = []
    for raw in family.split(","):
        name = raw.strip().strip("'\"")
        if not name:
            continue
        generic = GENERIC_FAMILIES.get(name.lower())
        if generic:
            names.extend(generic)
        else:
            names.append(name)
            if "." not in name:
                names.append(f"{name}.ttf")
    names.extend(GENERIC_FAMILIES["monospace"])
    return names


@lru_cache(maxsize=64)
def load_font(family: str, size: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for candidate in _candidates(family):
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)
