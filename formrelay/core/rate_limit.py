"""Rate limiting dependency for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: API routes depend on a dependency function only.
- Explicit lifecycle: limiters are created by the app factory, live on
  ``app.state`` and are discarded with the app; nothing is module-global.
- One limiter per form, so a caller's newsletter signups do not count
  against its reminder requests.

Rate limiting strategy:
- Per-caller window keyed by the client IP: proxy headers when trusted,
  else the socket peer address.
- Requests without a resolvable IP bypass limiting.
- The limit is enforced before the request body is read, so malformed
  submissions are counted too.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import HTTPException, Request, status

from formrelay.adapters.rate_limit.base import UNKNOWN_CALLER
from formrelay.adapters.rate_limit.in_memory import InMemoryRateLimiter
from formrelay.core.config import settings
from formrelay.core.logging import hash_for_log

logger = logging.getLogger(__name__)

NEWSLETTER_SCOPE = "newsletter"
REMINDER_SCOPE = "reminder"


def build_rate_limiters(
    scopes: tuple[str, ...] = (NEWSLETTER_SCOPE, REMINDER_SCOPE),
) -> dict[str, InMemoryRateLimiter]:
    """Create one empty limiter per scope from the current settings."""
    return {
        scope: InMemoryRateLimiter(
            max_requests=settings.app.rate_limit_requests,
            window_seconds=settings.app.rate_limit_window_seconds,
        )
        for scope in scopes
    }


def get_caller_identifier(request: Request) -> str:
    """Resolve the caller identifier for rate limiting.

    With ``APP_TRUST_PROXY_HEADERS`` on, ``client-ip`` (set by the hosting
    edge) wins over ``x-forwarded-for``, of which only the first (client)
    hop is used. Otherwise, or when neither header is present, the socket
    peer address is used. The unknown-caller sentinel is returned only when
    no address is available at all.
    """
    if settings.app.trust_proxy_headers:
        client_ip = request.headers.get("client-ip", "").strip()
        if client_ip:
            return client_ip

        forwarded_for = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CALLER


def get_rate_limiter(request: Request, scope: str) -> InMemoryRateLimiter:
    """Return the limiter owned by the running app for ``scope``."""
    return request.app.state.rate_limiters[scope]


def rate_limit(scope: str, message: str) -> Callable[[Request], Awaitable[None]]:
    """Build a FastAPI dependency enforcing the ``scope`` limiter.

    Args:
        scope: Limiter name on ``app.state.rate_limiters``.
        message: Detail returned to throttled callers.

    Returns:
        Async dependency raising HTTP 429 when the caller is over its limit.
    """

    async def enforce_rate_limit(request: Request) -> None:
        if not settings.app.rate_limit_enabled:
            return

        limiter = get_rate_limiter(request, scope)
        identifier = get_caller_identifier(request)

        decision = limiter.check(identifier)
        if decision.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "scope": scope,
                    "identifier_hash": hash_for_log(identifier),
                },
            )
            return

        retry_after = limiter.retry_after_seconds(identifier)
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "scope": scope,
                "identifier_hash": hash_for_log(identifier),
                "limit": limiter.max_requests,
                "window_s": limiter.window_seconds,
                "retry_after_s": retry_after,
            },
        )

        headers: dict[str, str] = {}
        if settings.app.rate_limit_include_headers:
            headers["Retry-After"] = str(retry_after)
            headers["X-RateLimit-Limit"] = str(limiter.max_requests)

        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=message,
            headers=headers or None,
        )

    enforce_rate_limit.__name__ = f"enforce_{scope}_rate_limit"
    return enforce_rate_limit
