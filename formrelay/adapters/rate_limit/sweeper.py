"""Periodic sweep of expired rate limit records.

``check`` already resets expired windows lazily, so the sweep only bounds
memory for callers that never come back. The sweeper owns its asyncio task
and must be stopped by whoever started it (the app lifespan).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Iterable

from formrelay.adapters.rate_limit.base import AbstractRateLimiter

logger = logging.getLogger(__name__)


class RateLimitSweeper:
    """Runs ``sweep`` on a set of limiters every ``interval_seconds``."""

    def __init__(
        self,
        limiters: Iterable[AbstractRateLimiter],
        *,
        interval_seconds: float,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")

        self._limiters = list(limiters)
        self._interval_seconds = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        """Sweep every limiter now and return the total number of records removed."""
        removed = sum(limiter.sweep() for limiter in self._limiters)
        logger.debug(
            "rate_limit.sweep",
            extra={"removed": removed, "limiters": len(self._limiters)},
        )
        return removed

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval_seconds)
            try:
                self.sweep_once()
            except Exception:
                # Keep sweeping on later ticks.
                logger.exception("rate_limit.sweep_failed")

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop (idempotent)."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name="rate-limit-sweeper"
        )
        logger.info(
            "rate_limit.sweeper_started",
            extra={"interval_s": self._interval_seconds},
        )

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("rate_limit.sweeper_stopped")
