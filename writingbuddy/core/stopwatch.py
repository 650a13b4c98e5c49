from __future__ import annotations

import time
from typing import Callable


class Stopwatch:
    """Accumulates writing time across start/stop cycles."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._accumulated = 0.0
        self._started_at: float | None = None

    @property
    def is_running(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed(self) -> float:
        if self._started_at is None:
            return self._accumulated
        return self._accumulated + max(0.0, self._clock() - self._started_at)

    def start(self) -> None:
        if self._started_at is None:
            self._started_at = self._clock()

    def stop(self) -> None:
        if self._started_at is None:
            return
        self._accumulated = self.elapsed
        self._started_at = None

    def reset(self) -> None:
        self._accumulated = 0.0
        self._started_at = None
