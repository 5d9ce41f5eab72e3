"""Per-key publish throttling."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable


def rate_limit_key(header_value: str | None) -> str:
    """Derive the rate-limit key from a forwarded-address header.

    Takes the first comma-separated address and strips whitespace. Clients
    without the header all share the ``""`` key.
    """
    return (header_value or "").split(",")[0].strip()


class RateLimiter:
    """Admit at most one publish per key per ``min_interval`` seconds.

    Keys are never evicted, so the map grows with every distinct key seen
    over the process lifetime.
    """

    def __init__(
        self,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._last: dict[str, float] = {}
        self._lock = threading.Lock()

    def try_admit(
        self,
        key: str,
        now: float | None = None,
        min_interval: float | None = None,
    ) -> bool:
        """Check and record a publish attempt for ``key`` as one atomic step."""
        if min_interval is None:
            min_interval = self.min_interval
        with self._lock:
            if now is None:
                now = self._clock()
            last = self._last.get(key)
            if last is not None and now - last < min_interval:
                return False
            self._last[key] = now
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._last)
