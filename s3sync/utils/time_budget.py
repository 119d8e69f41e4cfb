"""
Wall-clock budget for batch sweeps.

Sweeps check the budget before each unit of work, so a run overshoots its
budget by at most the duration of one item.
"""

import time
from typing import Callable


class TimeBudget:
    """Tracks elapsed time against a maximum runtime in seconds."""

    def __init__(self, max_runtime: float, clock: Callable[[], float] = time.monotonic):
        self.max_runtime = float(max_runtime)
        self._clock = clock
        self._start = clock()

    @property
    def elapsed(self) -> float:
        return self._clock() - self._start

    def time_left(self) -> bool:
        """Is there time left to start another unit of work."""
        return self.elapsed < self.max_runtime
