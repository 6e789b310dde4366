"""
Lightweight helpers for measuring per-stage timings in the pipeline.

Stage timers accumulate elapsed wall-clock seconds per named stage so the
orchestrator can log one duration field per stage and report total time.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Dict


class StageTimers:
    """
    Accumulate elapsed time per logical stage name.

    Use `timer(name)` as a context manager around stage blocks;
    each exit adds the elapsed seconds to `totals[name]`.
    """

    def __init__(self) -> None:
        self.totals: Dict[str, float] = {}
        self._started = time.perf_counter()

    @contextmanager
    def timer(self, name: str):
        """
        Measure and accumulate elapsed time for the given stage name.

        Args:
          name: Logical stage identifier (e.g. "normalize" or "ocr").
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            elapsed_time = time.perf_counter() - start_time
            self.totals[name] = self.totals.get(name, 0.0) + elapsed_time

    def elapsed_ms(self) -> int:
        """Milliseconds since the timers were created."""
        return int((time.perf_counter() - self._started) * 1000)

    def as_ms(self) -> Dict[str, int]:
        return {name: int(seconds * 1000) for name, seconds in self.totals.items()}
