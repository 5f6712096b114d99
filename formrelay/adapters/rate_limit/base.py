"""Rate limiter interfaces.

The HTTP layer depends on this abstraction (not the concrete implementation)
so the per-process store can be swapped for a shared one later with minimal
changes.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass

# Callers whose origin cannot be resolved share this identifier and are never
# limited.
UNKNOWN_CALLER = "unknown"


class Decision(str, enum.Enum):
    """Admission decision for a single request."""

    ALLOW = "allow"
    DENY = "deny"

    @property
    def allowed(self) -> bool:
        return self is Decision.ALLOW


@dataclass
class CallerRecord:
    """Request count of one caller inside its current window.

    Attributes:
        identifier: Caller identifier (e.g., client IP).
        window_start: Clock reading when the current window opened.
        count: Requests seen in the current window, denied ones included.
    """

    identifier: str
    window_start: float
    count: int


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @abstractmethod
    def check(self, identifier: str, now: float | None = None) -> Decision:
        """Record a request from ``identifier`` and decide whether to admit it.

        Args:
            identifier: Caller identifier. The unknown-caller sentinel is
                always admitted.
            now: Current clock reading; defaults to the limiter's clock.

        Returns:
            Decision.ALLOW or Decision.DENY.
        """
        raise NotImplementedError

    @abstractmethod
    def sweep(self, now: float | None = None) -> int:
        """Drop records whose window has expired.

        Returns:
            Number of records removed.
        """
        raise NotImplementedError
