"""Frame hosts: the per-frame callback primitive the runner schedules against.

Hosts are single-threaded. A callback requested while a batch is being
dispatched runs in the next batch, never in the current one.
"""

from __future__ import annotations

import itertools
import time
from typing import Callable

FrameCallback = Callable[[float], None]


class CancelToken:
    """Cooperative cancellation flag with optional callbacks."""

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def on_cancel(self, callback: Callable[[], None]) -> None:
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()


class _FrameQueue:
    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._pending: dict[int, FrameCallback] = {}
        self._font_waiters: list[Callable[[], None]] = []
        self.fonts_loaded = True
        self.frames_dispatched = 0

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def when_fonts_ready(self, callback: Callable[[], None]) -> None:
        if self.fonts_loaded:
            callback()
            return
        self._font_waiters.append(callback)

    def load_fonts(self) -> None:
        self.fonts_loaded = True
        waiters, self._font_waiters = self._font_waiters, []
        for callback in waiters:
            callback()

    def _dispatch(self, timestamp: float) -> int:
        batch = list(self._pending.values())
        self._pending.clear()
        for callback in batch:
            callback(timestamp)
        self.frames_dispatched += 1
        return len(batch)


class ManualHost(_FrameQueue):
    """Deterministic host driven by an explicit virtual clock (milliseconds)."""

    def __init__(self, start_ms: float = 0.0, fonts_loaded: bool = True) -> None:
        super().__init__()
        self.now = float(start_ms)
        self.fonts_loaded = fonts_loaded

    def tick(self, dt_ms: float = 1000.0 / 60.0) -> int:
        self.now += dt_ms
        return self._dispatch(self.now)

    def advance(self, total_ms: float, step_ms: float = 1000.0 / 60.0) -> int:
        ticks = 0
        elapsed = 0.0
        while elapsed + step_ms <= total_ms + 1e-9:
            self.tick(step_ms)
            elapsed += step_ms
            ticks += 1
        return ticks


class RealtimeHost(_FrameQueue):
    """Wall-clock host that dispatches frame callbacks at a fixed refresh rate."""

    def __init__(
        self,
        refresh_hz: float = 60.0,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__()
        if refresh_hz <= 0:
            raise ValueError("refresh_hz must be positive")
        self.refresh_hz = refresh_hz
        self._clock = clock
        self._sleep = sleep
        self._origin = clock()

    def now(self) -> float:
        return (self._clock() - self._origin) * 1000.0

    def run(self, max_seconds: float | None = None, token: CancelToken | None = None) -> int:
        """Dispatch frames until nothing is pending, the deadline passes, or the token is cancelled."""
        slot = 1.0 / self.refresh_hz
        deadline = None if max_seconds is None else self._clock() + max_seconds
        next_slot = self._clock() + slot
        dispatched = 0

        while self.pending:
            if token is not None and token.cancelled:
                break
            if deadline is not None and self._clock() >= deadline:
                break
            wait_for = next_slot - self._clock()
            if wait_for > 0:
                self._sleep(wait_for)
            next_slot = max(next_slot + slot, self._clock())
            self._dispatch(self.now())
            dispatched += 1
        return dispatched
