"""HTTP middleware for request correlation and access logging.

For every request the middleware:
- Reuses the incoming request id header (``LOG_REQUEST_ID_HEADER``) or
  generates a UUID, and stores it in contextvars for log correlation
- Echoes the id and the handling duration in response headers
- Emits one ``http.request_completed`` log line (caller IP hashed)

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from formrelay.core.config import settings
from formrelay.core.logging import clear_request_id, hash_for_log, set_request_id
from formrelay.core.rate_limit import get_caller_identifier

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Assign a request id, time the request and log its outcome.

    Args:
        request: The incoming HTTP request object.
        call_next: The next middleware/route handler in the stack.

    Returns:
        Response: The downstream response with ``X-Request-ID`` (or the
            configured header) and ``X-Request-Duration-ms`` added.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.request_completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "caller_hash": hash_for_log(get_caller_identifier(request)),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
