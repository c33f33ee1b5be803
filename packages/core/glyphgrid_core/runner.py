"""Frame scheduler: owns frame state, drives program hooks, and commits buffers to a renderer."""

from __future__ import annotations

import math
from collections.abc import Mapping
from concurrent.futures import Future
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from glyphgrid_renderer import (
    DEFAULT_SETTINGS,
    EMPTY_GLYPH,
    Cell,
    CellBuffer,
    Context,
    Coord,
    Metrics,
    Renderer,
    RuntimeInfo,
    Settings,
    calc_metrics,
    create_renderer,
    merge_cell,
    merge_settings,
)
from glyphgrid_surface import CancelToken, CanvasSurface, RealtimeHost, Surface, SurfaceKind, TextSurface

from .logging_setup import FrameLogAdapter, get_logger
from .performance import FpsMeter
from .pointer import Cursor, PointerTracker
from .program import ProgramHooks, resolve_program
from .storage import MemoryStore, StateStore

STATE_KEY = "currentState"
# Extra frames to wait after font readiness before measuring; some hosts
# report fonts ready before glyph metrics settle.
FONT_SETTLE_FRAMES = 2
# Timestamps this close to a frame boundary count as on it; 1000 / fps is
# rarely exact in binary, so exact comparison drops boundary frames.
_BOUNDARY_EPSILON_MS = 1e-6

ErrorCallback = Callable[[BaseException, "Context | None"], None]


class RunnerState(str, Enum):
    IDLE = "Idle"
    WAITING_FONTS = "WaitingFonts"
    RUNNING = "Running"
    COMPLETED = "Completed"
    STOPPED = "Stopped"
    FAILED = "Failed"


@dataclass
class FrameState:
    time: float = 0.0
    frame: int = 0
    cycle: int = 0


@dataclass
class RunnerStatus:
    state: RunnerState = RunnerState.IDLE
    frame: int = 0
    fps: float = 0.0
    rows_updated: int | None = None
    render_skipped: bool = False
    last_error: str | None = None
    errors: int = 0


class Runner:
    def __init__(
        self,
        program: Any,
        settings: Settings | Mapping[str, Any] | None = None,
        host: Any = None,
        store: StateStore | None = None,
        on_error: ErrorCallback | None = None,
        token: CancelToken | None = None,
        surface_size: tuple[float, float] = (800, 480),
        max_events: int = 1000,
    ) -> None:
        self.hooks: ProgramHooks = resolve_program(program)
        self.host = host if host is not None else RealtimeHost()
        self.store: StateStore = store if store is not None else MemoryStore()
        self.on_error = on_error
        self.surface_size = surface_size
        self.ready: Future = Future()

        if isinstance(settings, Settings):
            self.settings = merge_settings(settings, self.hooks.settings)
        else:
            self.settings = merge_settings(DEFAULT_SETTINGS, settings, self.hooks.settings)

        self.frame_state = FrameState()
        self.buffer = CellBuffer()
        self.metrics: Metrics | None = None
        self.renderer: Renderer | None = None
        self.pointer = PointerTracker()
        self.fps = FpsMeter()

        self._status = RunnerStatus()
        self._events: list[dict[str, Any]] = []
        self._max_events = max_events
        self._logger = FrameLogAdapter(get_logger("runner"), self._log_fields)
        self._interval = 1000.0 / self.settings.fps
        self._time_sample = 0.0
        self._time_offset = 0.0
        self._cols = -1
        self._rows = -1
        self._pending: int | None = None
        self._started = False
        self._halted = False
        self._token = token
        if token is not None:
            token.on_cancel(self.stop)

    @property
    def status(self) -> RunnerStatus:
        return self._status

    @property
    def surface(self) -> Surface | None:
        return self.settings.element

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def _log_fields(self) -> dict[str, Any]:
        return {
            "frame": self.frame_state.frame,
            "cycle": self.frame_state.cycle,
            "state": self._status.state.value,
            "renderer": self.settings.renderer_type,
        }

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "state": self._status.state.value,
            "frame": self.frame_state.frame,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > self._max_events:
            self._events = self._events[-self._max_events :]

    # -- startup -----------------------------------------------------------

    def start(self) -> Future:
        """Resolve the surface/renderer pair, restore state, and wait for fonts before booting."""
        if self._started:
            raise RuntimeError("runner already started")
        self._started = True
        if self._halted:
            return self.ready

        self._resolve_renderer()
        surface = self.settings.element
        surface.apply_style(**self.settings.style_fields())
        surface.selectable = self.settings.allow_select

        if self.settings.restore_state:
            self._restore_state()
        self._time_offset = self.frame_state.time

        self.pointer.attach(surface)
        self._status.state = RunnerState.WAITING_FONTS
        self._log_event("start", renderer=self.settings.renderer_type, surface=surface.kind.value)
        self.host.when_fonts_ready(lambda: self._settle_fonts(FONT_SETTLE_FRAMES))
        return self.ready

    def _resolve_renderer(self) -> None:
        renderer = create_renderer(self.settings.renderer_type)
        surface = self.settings.element
        if surface is None:
            width, height = self.surface_size
            if renderer.preferred_surface_kind == SurfaceKind.CANVAS:
                surface = CanvasSurface(width=width, height=height)
            else:
                surface = TextSurface(width=width, height=height)
            self.settings = replace(self.settings, element=surface)
        elif surface.kind != renderer.preferred_surface_kind:
            self._logger.warning(
                "renderer '%s' expects a %s surface, got %s; rendering is skipped",
                self.settings.renderer_type,
                SurfaceKind(renderer.preferred_surface_kind).value,
                surface.kind.value,
                extra={"event": "renderer_mismatch"},
            )
            self._status.render_skipped = True
            self._log_event("renderer_mismatch", renderer=self.settings.renderer_type)
            return
        self.renderer = renderer

    def _restore_state(self) -> None:
        data = self.store.restore(STATE_KEY, {})
        try:
            self.frame_state = FrameState(
                time=float(data.get("time", 0.0)),
                frame=int(data.get("frame", 0)),
                cycle=int(data.get("cycle", 0)),
            )
        except (TypeError, ValueError):
            self.frame_state = FrameState()
        self.frame_state.cycle += 1
        self._log_event("state_restored", cycle=self.frame_state.cycle)

    def _settle_fonts(self, remaining: int) -> None:
        if self._halted:
            return
        if remaining > 0:
            self._pending = self.host.request_frame(lambda _t: self._settle_fonts(remaining - 1))
            return
        self._boot()

    def _boot(self) -> None:
        self._pending = None
        context = None
        try:
            self.metrics = calc_metrics(self.settings.element)
            context = self._build_context()
            self.hooks.boot(context, self.buffer, self.hooks.user_vars)
        except Exception as exc:
            self._fail(exc, "boot", context)
            return
        self._status.state = RunnerState.RUNNING
        self._log_event("boot", cols=context.cols, rows=context.rows, cell_width=self.metrics.cell_width)
        self._schedule()

    def refresh_metrics(self) -> Metrics:
        """Re-measure cell metrics, e.g. after a font or surface style change."""
        self.metrics = calc_metrics(self.settings.element)
        return self.metrics

    # -- frame loop ----------------------------------------------------------

    def _schedule(self) -> None:
        if not self._halted:
            self._pending = self.host.request_frame(self._loop)

    def _loop(self, timestamp: float) -> None:
        self._pending = None
        if self._halted:
            return

        delta = timestamp - self._time_sample
        if delta + _BOUNDARY_EPSILON_MS < self._interval:
            self._schedule()
            return

        try:
            context = self._build_context()
        except Exception as exc:
            self._fail(exc, "context", None)
            return
        self.fps.update(timestamp)

        # Carry the remainder so the average rate holds over time.
        remainder = delta % self._interval
        if self._interval - remainder <= _BOUNDARY_EPSILON_MS:
            remainder = 0.0
        self._time_sample = timestamp - remainder
        self.frame_state.time = timestamp + self._time_offset
        self.frame_state.frame += 1
        if self.settings.restore_state:
            self.store.store(STATE_KEY, asdict(self.frame_state))

        hook = "pre"
        try:
            cursor = self.pointer.snapshot(self.metrics, context.cols, context.rows)
            if context.cols != self._cols or context.rows != self._rows:
                self._cols, self._rows = context.cols, context.rows
                self.buffer.resize(context.cols, context.rows, self._default_cell())

            self.hooks.pre(context, cursor, self.buffer, self.hooks.user_vars)
            hook = "main"
            self._run_main(context, cursor)
            hook = "post"
            self.hooks.post(context, cursor, self.buffer, self.hooks.user_vars)
            hook = "render"
            if self.renderer is not None:
                self.renderer.render(context, self.buffer, self.settings)
        except Exception as exc:
            self._fail(exc, hook, context)
            return

        self._status.frame = self.frame_state.frame
        self._status.fps = self.fps.fps
        self._status.rows_updated = getattr(self.renderer, "rows_updated", None)

        if self.settings.once:
            self._halted = True
            self._status.state = RunnerState.COMPLETED
            self._log_event("completed")
        else:
            self._schedule()

        if not self.ready.done():
            self.ready.set_result(context)

    def _run_main(self, context: Context, cursor: Cursor) -> None:
        main = self.hooks.main
        if main is None:
            return
        buffer = self.buffer
        user_vars = self.hooks.user_vars
        cols = context.cols
        for j in range(context.rows):
            offs = j * cols
            for i in range(cols):
                idx = i + offs
                out = main(Coord(x=i, y=j, index=idx), context, cursor, buffer, user_vars)
                if isinstance(out, (Cell, Mapping)):
                    cell = merge_cell(buffer[idx], out)
                else:
                    cell = replace(buffer[idx], char=out)
                if cell.char is None or cell.char is False or cell.char == "":
                    cell = replace(cell, char=EMPTY_GLYPH)
                buffer[idx] = cell

    def _default_cell(self) -> Cell:
        return Cell(
            char=EMPTY_GLYPH,
            color=self.settings.color,
            background_color=self.settings.background_color,
            font_weight=self.settings.font_weight,
        )

    def _build_context(self) -> Context:
        rect = self.settings.element.bounding_rect()
        metrics = self.metrics
        cols = self.settings.cols or math.floor(rect.width / metrics.cell_width)
        rows = self.settings.rows or math.floor(rect.height / metrics.line_height)
        return Context(
            frame=self.frame_state.frame,
            time=self.frame_state.time,
            cols=cols,
            rows=rows,
            metrics=metrics,
            width=rect.width,
            height=rect.height,
            settings=self.settings,
            runtime=RuntimeInfo(cycle=self.frame_state.cycle, fps=self.fps.fps),
            user_vars=self.hooks.user_vars,
        )

    # -- errors and cancellation ---------------------------------------------

    def _fail(self, exc: Exception, hook: str, context: Context | None) -> None:
        self._halted = True
        self._cancel_pending()
        self._status.state = RunnerState.FAILED
        self._status.last_error = f"{type(exc).__name__}: {exc}"
        self._status.errors += 1
        self._logger.exception(
            "program hook '%s' failed on frame %s",
            hook,
            self.frame_state.frame,
            extra={"event": "hook_error", "hook": hook},
        )
        self._log_event("hook_error", hook=hook, error=str(exc))
        if not self.ready.done():
            self.ready.set_exception(exc)
        if self.on_error is not None:
            self.on_error(exc, context)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self.host.cancel_frame(self._pending)
            self._pending = None

    def stop(self) -> None:
        """Cancel the pending frame and detach input; safe to call more than once."""
        self.pointer.detach()
        if self._halted:
            return
        self._halted = True
        self._cancel_pending()
        if self._status.state not in (RunnerState.FAILED, RunnerState.COMPLETED):
            self._status.state = RunnerState.STOPPED
        self._log_event("stopped")
        if not self.ready.done():
            self.ready.cancel()


def run(program: Any, settings: Settings | Mapping[str, Any] | None = None, **kwargs: Any) -> Runner:
    """Create and start a runner; drive it by running its host."""
    runner = Runner(program, settings=settings, **kwargs)
    runner.start()
    return runner
