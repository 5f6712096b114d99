from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (state, middleware, handlers, routers) and owns
the lifecycle of everything with state: the per-form rate limiters, their
sweeper task and the provider HTTP clients.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from formrelay.adapters.email.factory import create_email_client
from formrelay.adapters.rate_limit.sweeper import RateLimitSweeper
from formrelay.adapters.subscribers.factory import create_subscriber_client
from formrelay.api.routes import forms_router, health_router
from formrelay.core.config import settings
from formrelay.core.exception_handlers import (
    setup_exception_handlers,
    unhandled_exception_middleware,
)
from formrelay.core.logging import configure_logging
from formrelay.core.middleware import request_id_middleware
from formrelay.core.rate_limit import build_rate_limiters
from formrelay.services.newsletter_service import NewsletterService
from formrelay.services.reminder_service import ReminderService

logger = logging.getLogger(__name__)


def parse_origins(origins: str | None) -> list[str]:
    """Parse comma-separated origins into a list.

    Examples:
        >>> parse_origins("https://a.example, https://b.example")
        ['https://a.example', 'https://b.example']
        >>> parse_origins(None)
        []
    """
    if not origins:
        return []
    return [origin.strip() for origin in origins.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the rate limit sweeper and release provider clients at shutdown."""
    interval = (
        settings.app.rate_limit_sweep_interval_seconds
        or settings.app.rate_limit_window_seconds
    )
    sweeper = RateLimitSweeper(
        app.state.rate_limiters.values(),
        interval_seconds=interval,
    )
    app.state.rate_limit_sweeper = sweeper
    sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()
        for client in app.state.subscriber_clients:
            await client.aclose()
        logger.info("app.shutdown_complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with state, middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="formrelay",
        description=(
            "Form submission handlers: newsletter signups and page reminders. "
            "Validates submissions, adds contacts to an email-marketing list "
            "(Mailchimp or Sender.net) and sends notification emails via Resend. "
            "Each form is rate limited per client IP."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    # State: limiters start empty and live as long as the app
    app.state.rate_limiters = build_rate_limiters()

    email_client = create_email_client()
    newsletter_subscriber = create_subscriber_client(settings.app.newsletter_provider)
    reminder_subscriber = create_subscriber_client(settings.app.reminder_provider)
    app.state.subscriber_clients = [
        client for client in (newsletter_subscriber, reminder_subscriber) if client is not None
    ]
    app.state.newsletter_service = NewsletterService(
        email_client=email_client,
        subscriber_client=newsletter_subscriber,
        provider=settings.app.newsletter_provider,
    )
    app.state.reminder_service = ReminderService(
        email_client=email_client,
        subscriber_client=reminder_subscriber,
        provider=settings.app.reminder_provider,
    )

    # Middleware (last added runs first)
    app.middleware("http")(unhandled_exception_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_origins(settings.app.cors_allowed_origins),
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=86400,
    )
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(forms_router)
    app.include_router(health_router)

    return app
