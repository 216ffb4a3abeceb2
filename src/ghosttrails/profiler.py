from __future__ import annotations
import time
from collections import deque
from contextlib import contextmanager

from .logging import get_logger

_profiler = None


def get_profiler():
    global _profiler
    if _profiler is None:
        _profiler = Profiler()
    return _profiler


class Profiler:
    """Per-stage frame timings: a rolling window plus an EMA for display."""

    def __init__(self, ema_alpha=0.1, maxlen=100):
        self._window = {}
        self._ema = {}
        self.ema_alpha = ema_alpha
        self.maxlen = maxlen
        self.logger = get_logger("Profiler")

    @contextmanager
    def record(self, stage: str):
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.add(stage, time.perf_counter() - t0)

    def add(self, stage: str, seconds: float):
        self._window.setdefault(stage, deque(maxlen=self.maxlen)).append(seconds)
        prev = self._ema.get(stage)
        if prev is None:
            self._ema[stage] = seconds
        else:
            self._ema[stage] = self.ema_alpha * seconds + (1.0 - self.ema_alpha) * prev

    def get_timings(self):
        return self._ema.copy()

    def peak(self, stage: str) -> float:
        """Slowest sample still in the rolling window for `stage` (0.0 if unseen)."""
        samples = self._window.get(stage)
        return max(samples) if samples else 0.0

    def lines(self) -> list[str]:
        return [f"{k}: {v*1000:.2f}ms" for k, v in sorted(self._ema.items())]

    def log_stats(self):
        if self._ema:
            self.logger.info(" | ".join(self.lines()))
