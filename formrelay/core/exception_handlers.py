"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (400, 500)
- Malformed request bodies → 400 (instead of FastAPI's default 422)
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing
"""

import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from formrelay.core.errors import AppError, EmailDeliveryAppError
from formrelay.core.logging import get_request_id

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Routes domain errors to appropriate HTTP status codes:
    - ValidationAppError → 400 Bad Request (client fault)
    - EmailDeliveryAppError → 500 Internal Server Error (server fault)

    All responses include:
    - error.code: Machine-readable error code
    - error.message: Human-readable message
    - error.request_id: For distributed tracing
    - error.details: Optional structured context

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    # Determine HTTP status code based on error type
    status_code = 400  # Default: client error
    if isinstance(exc, EmailDeliveryAppError):
        status_code = 500

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        }
    )

    # Build response with consistent structure
    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }

    # Include details only if present (optional structured context)
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map body parsing/validation failures to a 400 in the common error format."""
    fields = sorted(
        {
            ".".join(part for part in err.get("loc", ())[1:] if isinstance(part, str))
            for err in exc.errors()
        }
        - {""}
    )
    logger.warning(
        "request_body_invalid",
        extra={
            "request_path": request.url.path,
            "error_count": len(exc.errors()),
            "request_id": get_request_id(),
        },
    )

    error_content = {
        "code": "invalid_request_body",
        "message": "Request body must be a JSON object with string fields",
        "request_id": get_request_id(),
    }
    if fields:
        error_content["details"] = {"fields": fields}

    return JSONResponse(status_code=400, content={"error": error_content})


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Catches any exception not handled by specific handlers.
    Logs detailed information for debugging while returning generic message.
    Prevents information leakage (no stack traces to client).

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "Internal server error. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with FastAPI app.

    Must be called during app initialization, before route registration.
    Order matters: specific handlers registered before general fallback.

    Args:
        app: FastAPI application instance.
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)


async def unhandled_exception_middleware(request: Request, call_next) -> Response:
    """Render unexpected errors inside the middleware stack.

    Starlette hands ``Exception`` handlers to its outermost error middleware,
    above ``CORSMiddleware``, so those 500s would reach browsers without CORS
    headers. Installed innermost, this turns them into the standard JSON
    error before CORS headers are applied.

    Usage:
        app.middleware("http")(unhandled_exception_middleware)  # before CORS
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await general_exception_handler(request, exc)
