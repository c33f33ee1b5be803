"""Typed renderer models: cells, metrics, settings, and the per-frame context."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Protocol, TypedDict, Union

from glyphgrid_surface import Surface
from glyphgrid_surface.base import parse_line_height

EMPTY_GLYPH = " "

Glyph = Union[str, int, float]


@dataclass(frozen=True)
class Cell:
    char: Glyph = EMPTY_GLYPH
    color: str | None = None
    background_color: str | None = None
    font_weight: str | int | None = None
    # Raw markup spliced before/after the glyph by the text renderer.
    begin_markup: str | None = None
    end_markup: str | None = None

    def style_key(self) -> tuple[Any, Any, Any]:
        return (self.color, self.background_color, self.font_weight)


class CellPatch(TypedDict, total=False):
    char: Glyph
    color: str | None
    background_color: str | None
    font_weight: str | int | None
    begin_markup: str | None
    end_markup: str | None


CellValue = Union[Cell, CellPatch, Mapping[str, Any], Glyph, None]

# Returned by out-of-bounds reads; compare with ``is``.
NULL_CELL = Cell(char="")

_CELL_FIELDS = tuple(f.name for f in fields(Cell))


def merge_cell(cell: Cell, value: CellValue) -> Cell:
    """Return ``cell`` with ``value`` applied on top; never mutates its inputs."""
    if value is None:
        return cell
    if isinstance(value, Cell):
        changes = {name: getattr(value, name) for name in _CELL_FIELDS if getattr(value, name) is not None}
    elif isinstance(value, Mapping):
        changes = dict(value)
    else:
        changes = {"char": value}
    unknown = set(changes) - set(_CELL_FIELDS)
    if unknown:
        raise TypeError(f"Unknown cell fields: {', '.join(sorted(unknown))}")
    return replace(cell, **changes)


def to_cell(value: CellValue, default: Cell | None = None) -> Cell:
    if isinstance(value, Cell):
        return value
    return merge_cell(default or Cell(), value)


@dataclass(frozen=True)
class Coord:
    x: int
    y: int
    index: int


@dataclass(frozen=True)
class Metrics:
    cell_width: float
    line_height: float
    aspect: float
    font_family: str
    font_size: float


@dataclass(frozen=True)
class Settings:
    element: Surface | None = None
    cols: int = 0
    rows: int = 0
    once: bool = False
    fps: float = 30
    renderer_type: str = "text"
    allow_select: bool = False
    restore_state: bool = False
    background_color: str | None = None
    color: str | None = None
    font_family: str | None = None
    font_size: str | float | None = None
    font_weight: str | int | None = None
    letter_spacing: str | float | None = None
    line_height: str | float | None = None
    text_align: str | None = None
    canvas_size: tuple[int, int] | None = None
    canvas_offset: tuple[Any, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def style_fields(self) -> dict[str, Any]:
        return {
            "background_color": self.background_color,
            "color": self.color,
            "font_family": self.font_family,
            "font_size": self.font_size,
            "font_weight": self.font_weight,
            "letter_spacing": self.letter_spacing,
            "line_height": self.line_height,
            "text_align": self.text_align,
        }


DEFAULT_SETTINGS = Settings()

_SETTINGS_FIELDS = tuple(f.name for f in fields(Settings) if f.name != "extra")


def merge_settings(base: Settings, *overrides: Mapping[str, Any] | None) -> Settings:
    """Layer mappings over ``base``; unknown keys land in ``extra``."""
    known: dict[str, Any] = {}
    extra = dict(base.extra)
    for layer in overrides:
        if not layer:
            continue
        for key, value in layer.items():
            if key in _SETTINGS_FIELDS:
                known[key] = value
            elif key == "extra":
                extra.update(value or {})
            else:
                extra[key] = value
    merged = replace(base, extra=extra, **known)
    _validate(merged)
    return merged


def _validate(settings: Settings) -> None:
    if not settings.fps or settings.fps <= 0:
        raise ValueError(f"fps must be positive, got {settings.fps!r}")
    if settings.cols < 0 or settings.rows < 0:
        raise ValueError("cols and rows must be >= 0")
    if settings.line_height is not None and parse_line_height(settings.line_height, 16.0) <= 0:
        raise ValueError(f"line_height must be positive, got {settings.line_height!r}")
    if settings.canvas_size is not None and len(settings.canvas_size) != 2:
        raise ValueError("canvas_size must be a (width, height) pair")


@dataclass(frozen=True)
class RuntimeInfo:
    cycle: int
    fps: float


@dataclass(frozen=True)
class Context:
    frame: int
    time: float
    cols: int
    rows: int
    metrics: Metrics
    width: float
    height: float
    settings: Settings
    runtime: RuntimeInfo
    user_vars: Any = None


class Renderer(Protocol):
    preferred_surface_kind: str

    def render(self, context: Context, buffer: Any, settings: Settings) -> None:
        ...
