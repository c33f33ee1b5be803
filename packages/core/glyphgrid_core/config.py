"""Persistent runtime settings schema and load/save helpers."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from glyphgrid_renderer import DEFAULT_SETTINGS, Settings, list_renderers, merge_settings

from .logging_setup import config_root


CONFIG_VERSION = 1


@dataclass
class RunConfig:
    fps: float = 30.0
    renderer: str = "text"
    cols: int = 0
    rows: int = 0
    once: bool = False
    allow_select: bool = False


@dataclass
class StyleConfig:
    font_family: str = "monospace"
    font_size: float = 16.0
    line_height: float = 1.2
    font_weight: str | None = None
    letter_spacing: str | None = None
    color: str | None = None
    background_color: str | None = None
    text_align: str | None = None


@dataclass
class SurfaceConfig:
    width: int = 800
    height: int = 480
    device_pixel_ratio: float = 1.0


@dataclass
class StateConfig:
    restore_state: bool = False
    state_file: str = "state.json"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    max_events: int = 1000


@dataclass
class PerformanceConfig:
    cpu_percent_max: float = 50.0
    rss_mb_max: float = 300.0
    fps_min: float = 10.0


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    run: RunConfig = field(default_factory=RunConfig)
    style: StyleConfig = field(default_factory=StyleConfig)
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    state: StateConfig = field(default_factory=StateConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)


def config_path() -> Path:
    return config_root() / "config.json"


def state_path(cfg: AppConfig) -> Path:
    path = Path(cfg.state.state_file).expanduser()
    if path.is_absolute():
        return path
    return config_root() / path


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_run(cfg: AppConfig) -> None:
    cfg.run.fps = float(max(1.0, min(240.0, float(cfg.run.fps))))
    cfg.run.cols = max(0, int(cfg.run.cols))
    cfg.run.rows = max(0, int(cfg.run.rows))
    if cfg.run.renderer not in list_renderers():
        cfg.run.renderer = "text"


def _normalize_surface(cfg: AppConfig) -> None:
    cfg.surface.width = max(1, int(cfg.surface.width))
    cfg.surface.height = max(1, int(cfg.surface.height))
    cfg.surface.device_pixel_ratio = float(max(0.25, cfg.surface.device_pixel_ratio))


def _normalize_style(cfg: AppConfig) -> None:
    cfg.style.font_size = float(max(1.0, cfg.style.font_size))
    cfg.style.line_height = float(max(0.1, cfg.style.line_height))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        run=_merge(RunConfig, data.get("run", {})),
        style=_merge(StyleConfig, data.get("style", {})),
        surface=_merge(SurfaceConfig, data.get("surface", {})),
        state=_merge(StateConfig, data.get("state", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
        performance=_merge(PerformanceConfig, data.get("performance", {})),
    )

    _normalize_run(cfg)
    _normalize_surface(cfg)
    _normalize_style(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def settings_from_config(cfg: AppConfig, **overrides: Any) -> Settings:
    """Build runtime settings from the persisted config; keyword overrides win."""
    base = {
        "fps": cfg.run.fps,
        "renderer_type": cfg.run.renderer,
        "cols": cfg.run.cols,
        "rows": cfg.run.rows,
        "once": cfg.run.once,
        "allow_select": cfg.run.allow_select,
        "restore_state": cfg.state.restore_state,
        "font_family": cfg.style.font_family,
        "font_size": cfg.style.font_size,
        "line_height": cfg.style.line_height,
        "font_weight": cfg.style.font_weight,
        "letter_spacing": cfg.style.letter_spacing,
        "color": cfg.style.color,
        "background_color": cfg.style.background_color,
        "text_align": cfg.style.text_align,
    }
    return merge_settings(DEFAULT_SETTINGS, base, {k: v for k, v in overrides.items() if v is not None})
