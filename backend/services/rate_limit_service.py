"""Failed-login throttling over a sliding window. State is lost on restart."""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class LoginThrottle:
    """Count failed attempts per key and block once a limit is reached.

    Safe under asyncio's single-threaded model: no check-and-act sequence
    awaits between reading and mutating the failure lists.
    """

    def __init__(
        self,
        max_failures: int,
        window_seconds: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_failures = max_failures
        self.window_seconds = window_seconds
        self._clock = clock
        self._failures: dict[str, list[float]] = {}

    def _recent(self, key: str) -> list[float]:
        cutoff = self._clock() - self.window_seconds
        recent = [t for t in self._failures.get(key, []) if t >= cutoff]
        if recent:
            self._failures[key] = recent
        else:
            self._failures.pop(key, None)
        return recent

    def retry_after(self, key: str) -> int:
        """Seconds until ``key`` may try again; 0 when not blocked."""
        recent = self._recent(key)
        if len(recent) < self.max_failures:
            return 0
        remaining = recent[0] + self.window_seconds - self._clock()
        return max(math.ceil(remaining), 1)

    def record_failure(self, key: str) -> None:
        self._recent(key)
        self._failures.setdefault(key, []).append(self._clock())

    def reset(self, key: str) -> None:
        self._failures.pop(key, None)
