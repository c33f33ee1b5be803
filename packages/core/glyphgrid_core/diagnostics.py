"""Diagnostics export helpers for local support bundles."""

from __future__ import annotations

import json
import platform
import re
import tempfile
import zipfile
from dataclasses import asdict, is_dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import PIL
import psutil
from PIL import features

from glyphgrid_renderer import calc_metrics, list_renderers, load_font
from glyphgrid_surface import TextSurface

from .config import AppConfig, config_path
from .logging_setup import log_dir


_SECRET_RE = re.compile(r"(token|secret|password|apikey|api_key|auth)", re.IGNORECASE)


def _jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Path):
        return str(value)
    return value


def redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if _SECRET_RE.search(str(k)):
                out[k] = "***REDACTED***"
            else:
                out[k] = redact(v)
        return out
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


def describe_font(family: str, size: float) -> dict[str, Any]:
    font = load_font(family, size)
    path = getattr(font, "path", None)
    return {
        "family": family,
        "size": size,
        "resolved": str(path) if path else "pillow-default",
        "fallback": path is None,
    }


def describe_metrics(cfg: AppConfig) -> dict[str, Any]:
    """Cell metrics for the configured style, as the runner would measure them."""
    surface = TextSurface(width=cfg.surface.width, height=cfg.surface.height)
    surface.apply_style(
        font_family=cfg.style.font_family,
        font_size=cfg.style.font_size,
        line_height=cfg.style.line_height,
        letter_spacing=cfg.style.letter_spacing,
    )
    try:
        metrics = calc_metrics(surface)
    except ValueError as exc:
        return {"error": str(exc)}
    return {
        **asdict(metrics),
        "fit_cols": int(cfg.surface.width // metrics.cell_width),
        "fit_rows": int(cfg.surface.height // metrics.line_height),
    }


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    memory = psutil.virtual_memory()
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "pillow": PIL.__version__,
        "freetype": features.check("freetype2"),
        "cpu_count": psutil.cpu_count(logical=True),
        "memory_total_mb": round(memory.total / (1024 * 1024), 1),
        "renderers": list_renderers(),
        "font": describe_font(cfg.style.font_family, cfg.style.font_size),
        "metrics": describe_metrics(cfg),
        "config": redact(asdict(cfg)),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "Glyphgrid") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        recent_runner_events: list[dict[str, Any]] | None = None,
        output_dir: Path | None = None,
        runner: Any = None,
    ) -> Path:
        """Zip doctor output, redacted config, runner events and logs.

        With a ``runner``, its status and recent events are exported too;
        explicit ``recent_runner_events`` take precedence over the runner's.
        """
        if recent_runner_events is None and runner is not None:
            recent_runner_events = runner.recent_events()
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"glyphgrid-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(redact(doctor_payload), indent=2, sort_keys=True, default=_jsonable))
            zf.writestr("config.redacted.json", json.dumps(redact(asdict(cfg)), indent=2, sort_keys=True))
            zf.writestr(
                "runner_events.json",
                json.dumps(redact(recent_runner_events or []), indent=2, sort_keys=True, default=_jsonable),
            )
            if runner is not None:
                zf.writestr("runner_status.json", json.dumps(asdict(runner.status), indent=2, sort_keys=True, default=str))

            for item in logs:
                if item.name == "fault.log":
                    continue
                zf.write(item, arcname=f"logs/{item.name}")

            fault_file = log_dir() / "fault.log"
            if fault_file.exists():
                zf.write(fault_file, arcname="logs/fault.log")

        return zip_path
