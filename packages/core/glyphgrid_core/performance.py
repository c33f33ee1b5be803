"""Frame rate measurement and runtime performance budgeting."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass

import psutil


class FpsMeter:
    """Rolling frame rate over the most recent accepted frame timestamps (ms)."""

    def __init__(self, window: int = 30) -> None:
        if window < 2:
            raise ValueError("window must be >= 2")
        self._stamps: deque[float] = deque(maxlen=window)
        self.fps = 0.0

    def update(self, timestamp_ms: float) -> float:
        self._stamps.append(float(timestamp_ms))
        if len(self._stamps) >= 2:
            span = self._stamps[-1] - self._stamps[0]
            if span > 0:
                self.fps = (len(self._stamps) - 1) * 1000.0 / span
        return self.fps

    def reset(self) -> None:
        self._stamps.clear()
        self.fps = 0.0


@dataclass(frozen=True)
class PerformanceTargets:
    cpu_percent_max: float = 50.0
    rss_mb_max: float = 300.0
    fps_min: float = 10.0


@dataclass(frozen=True)
class BudgetStatus:
    cpu_percent: float
    rss_mb: float
    fps: float
    overloaded: bool
    warning: str | None
    recommended_fps: float


class PerformanceController:
    def __init__(self, targets: PerformanceTargets | None = None) -> None:
        self.targets = targets or PerformanceTargets()
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def sample(self, fps: float, target_fps: float) -> BudgetStatus:
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)
        overloaded = cpu > self.targets.cpu_percent_max or rss_mb > self.targets.rss_mb_max

        warning = None
        recommended = float(target_fps)

        if overloaded:
            warning = "resource_overload"
            recommended = max(1.0, target_fps * 0.75)
        elif 0 < fps < self.targets.fps_min:
            warning = "below_fps_target"
            recommended = max(1.0, min(target_fps, fps))
        elif fps > target_fps * 1.1:
            warning = "above_fps_target"

        return BudgetStatus(
            cpu_percent=cpu,
            rss_mb=rss_mb,
            fps=float(fps),
            overloaded=overloaded,
            warning=warning,
            recommended_fps=recommended,
        )
