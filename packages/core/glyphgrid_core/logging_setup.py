"""Structured local logging for the frame loop, plus crash hooks."""

from __future__ import annotations

import faulthandler
import json
import logging
import logging.handlers
import os
import platform
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Mapping


_LOGGER_NAME = "glyphgrid"
# Structured fields lifted from ``extra=`` into the JSON line.
_FRAME_FIELDS = ("frame", "cycle", "state", "renderer", "hook")
_EXTRA_FIELDS = ("event",) + _FRAME_FIELDS + ("crash_id",)


def config_root() -> Path:
    override = os.environ.get("GLYPHGRID_HOME")
    if override:
        return Path(override)
    if platform.system() == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Glyphgrid"
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Glyphgrid"
    return Path.home() / ".config" / "glyphgrid"


def log_dir() -> Path:
    path = config_root() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


class JsonFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's own creation time."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts_utc": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        return json.dumps(payload, ensure_ascii=True, default=str)


class ConsoleFormatter(logging.Formatter):
    """Short console lines; records from inside the loop get a ``[frame N]`` tag."""

    def format(self, record: logging.LogRecord) -> str:
        line = f"{record.levelname} {record.getMessage()}"
        frame = getattr(record, "frame", None)
        if frame is not None:
            hook = getattr(record, "hook", None)
            tag = f"frame {frame}" if hook is None else f"frame {frame} {hook}"
            line = f"{record.levelname} [{tag}] {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class FrameLogAdapter(logging.LoggerAdapter):
    """Stamps every record with the loop position reported by ``fields``.

    Values passed through ``extra=`` win over the stamped ones.
    """

    def __init__(self, logger: logging.Logger, fields: Callable[[], Mapping[str, Any]]) -> None:
        super().__init__(logger, {})
        self._fields = fields

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        extra = {key: value for key, value in self._fields().items() if key in _FRAME_FIELDS}
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs


def configure_logging(keep_files: int = 7, console: bool = True, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(_LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(log_dir() / "glyphgrid.log"),
        when="midnight",
        backupCount=max(2, keep_files),
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    if console:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(ConsoleFormatter())
        logger.addHandler(stream_handler)

    logger.info("logging configured", extra={"event": "logging_configured"})
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    if name:
        return logging.getLogger(f"{_LOGGER_NAME}.{name}")
    return logging.getLogger(_LOGGER_NAME)


def _install_fault_handler(logger: logging.Logger) -> None:
    fh = (log_dir() / "fault.log").open("a", encoding="utf-8")
    faulthandler.enable(file=fh, all_threads=True)
    logger.info("fault handler enabled", extra={"event": "fault_handler_enabled"})


def install_crash_hooks() -> None:
    """Log uncaught exceptions with a crash id; the frame loop itself runs on the main thread."""
    logger = get_logger()

    def _log_uncaught(exc_type, exc_value, exc_tb) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        crash_id = str(uuid.uuid4())
        logger.critical(
            f"uncaught exception crash_id={crash_id}",
            exc_info=(exc_type, exc_value, exc_tb),
            extra={"event": "uncaught_exception", "crash_id": crash_id},
        )

    sys.excepthook = _log_uncaught
    _install_fault_handler(logger)
