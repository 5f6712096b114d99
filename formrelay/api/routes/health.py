from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint.

    Used by the hosting platform to verify the process is serving requests.
    Also reports whether the rate limit sweeper is running.

    Returns:
        dict: ``{"status": "ok", "sweeper_running": bool}``.
    """
    sweeper = getattr(request.app.state, "rate_limit_sweeper", None)
    return {"status": "ok", "sweeper_running": bool(sweeper and sweeper.running)}
