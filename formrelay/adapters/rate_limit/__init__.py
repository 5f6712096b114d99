"""Rate limiting adapters.

This package provides a small abstraction layer so the service can start with
an in-memory, per-process limiter and later migrate to a shared store without
changing the API layer.
"""

from formrelay.adapters.rate_limit.base import (
    UNKNOWN_CALLER,
    AbstractRateLimiter,
    CallerRecord,
    Decision,
)
from formrelay.adapters.rate_limit.in_memory import InMemoryRateLimiter
from formrelay.adapters.rate_limit.sweeper import RateLimitSweeper

__all__ = [
    "UNKNOWN_CALLER",
    "AbstractRateLimiter",
    "CallerRecord",
    "Decision",
    "InMemoryRateLimiter",
    "RateLimitSweeper",
]
