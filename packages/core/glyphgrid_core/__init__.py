"""Core runtime: frame runner, configuration, persistence, input and diagnostics."""

from .config import AppConfig, load_config, save_config, settings_from_config, state_path
from .diagnostics import DiagnosticsExporter, build_doctor_payload, redact
from .logging_setup import configure_logging, get_logger, install_crash_hooks, log_dir
from .performance import BudgetStatus, FpsMeter, PerformanceController, PerformanceTargets
from .pointer import Cursor, CursorSnapshot, PointerTracker
from .program import Program, ProgramHooks, resolve_program
from .runner import STATE_KEY, FrameState, Runner, RunnerState, RunnerStatus, run
from .storage import JsonFileStore, MemoryStore, StateStore

__all__ = [
    "AppConfig",
    "BudgetStatus",
    "Cursor",
    "CursorSnapshot",
    "DiagnosticsExporter",
    "FpsMeter",
    "FrameState",
    "JsonFileStore",
    "MemoryStore",
    "PerformanceController",
    "PerformanceTargets",
    "PointerTracker",
    "Program",
    "ProgramHooks",
    "Runner",
    "RunnerState",
    "RunnerStatus",
    "STATE_KEY",
    "StateStore",
    "build_doctor_payload",
    "configure_logging",
    "get_logger",
    "install_crash_hooks",
    "load_config",
    "log_dir",
    "redact",
    "resolve_program",
    "run",
    "save_config",
    "settings_from_config",
    "state_path",
]
