"""In-memory rolling-start rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit,
  and every cold start begins with an empty store.
- Thread-safe: uses a lock around the read-modify-write in ``check``.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import replace
from typing import Callable

from formrelay.adapters.rate_limit.base import (
    UNKNOWN_CALLER,
    AbstractRateLimiter,
    CallerRecord,
    Decision,
)


class InMemoryRateLimiter(AbstractRateLimiter):
    """Rate limiter keeping one window per caller, opened by its first request.

    Unlike a wall-clock aligned fixed window, each caller's window starts at
    the first request seen from it and lasts ``window_seconds``. A request
    arriving after the window has elapsed opens a fresh one.

    Denied requests still increment the caller's count, so a caller that
    keeps retrying stays blocked until its window expires.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            max_requests: Maximum number of admitted requests per window.
            window_seconds: Window length in seconds.
            clock: Time source returning seconds; must not go backwards.

        Raises:
            ValueError: If max_requests or window_seconds are invalid.
        """
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.RLock()
        self._records: dict[str, CallerRecord] = {}

    @property
    def max_requests(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _is_expired(self, record: CallerRecord, now: float) -> bool:
        return now - record.window_start > self._window_seconds

    def check(self, identifier: str, now: float | None = None) -> Decision:
        if not identifier or identifier == UNKNOWN_CALLER:
            return Decision.ALLOW

        if now is None:
            now = self._clock()

        with self._lock:
            record = self._records.get(identifier)

            if record is None:
                self._records[identifier] = CallerRecord(
                    identifier=identifier, window_start=now, count=1
                )
                return Decision.ALLOW

            if self._is_expired(record, now):
                record.window_start = now
                record.count = 1
                return Decision.ALLOW

            record.count += 1
            if record.count > self._max_requests:
                return Decision.DENY
            return Decision.ALLOW

    def sweep(self, now: float | None = None) -> int:
        if now is None:
            now = self._clock()

        with self._lock:
            expired = [
                identifier
                for identifier, record in self._records.items()
                if self._is_expired(record, now)
            ]
            for identifier in expired:
                del self._records[identifier]
        return len(expired)

    def get_record(self, identifier: str) -> CallerRecord | None:
        """Return a copy of the caller's record, or None when untracked."""
        with self._lock:
            record = self._records.get(identifier)
            return replace(record) if record is not None else None

    def retry_after_seconds(self, identifier: str, now: float | None = None) -> int:
        """Whole seconds until the caller's current window expires (0 if untracked)."""
        if now is None:
            now = self._clock()

        with self._lock:
            record = self._records.get(identifier)
            if record is None:
                return 0
            remaining = record.window_start + self._window_seconds - now
        return max(0, int(math.ceil(remaining)))
