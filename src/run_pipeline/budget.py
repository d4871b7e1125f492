"""Wall-clock budget for a single run."""

from __future__ import annotations

import time
from typing import Callable, Optional

DEFAULT_BUDGET_MS = 25_000
DEFAULT_RESERVE_MS = 2_000


class RunBudget:
    """Tracks elapsed time against a fixed ceiling in milliseconds.

    `clock` returns seconds (time.monotonic by default) and can be replaced
    in tests.
    """

    def __init__(
        self,
        max_ms: int = DEFAULT_BUDGET_MS,
        start: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_ms = max_ms
        self._clock = clock
        self._start = clock() if start is None else start

    def elapsed_ms(self) -> int:
        return int((self._clock() - self._start) * 1000)

    def remaining_ms(self) -> int:
        return max(0, self.max_ms - self.elapsed_ms())

    def has_time(self, reserve_ms: int = DEFAULT_RESERVE_MS) -> bool:
        """True iff strictly more than `reserve_ms` remain."""
        return self.remaining_ms() > reserve_ms

    @property
    def deadline(self) -> float:
        """Clock value at which the budget runs out."""
        return self._start + self.max_ms / 1000

    @property
    def expired(self) -> bool:
        return self.remaining_ms() == 0

    def timeout_sec(self, cap_sec: float) -> float:
        """Timeout for one blocking call: `cap_sec`, shortened to the time left."""
        return max(0.0, min(cap_sec, self.remaining_ms() / 1000))
