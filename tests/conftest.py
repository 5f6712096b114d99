"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It sets the environment before any module builds the global settings, so
no .env file is read and no real provider credentials are used.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# Set default env vars that all tests might need
os.environ.setdefault("RESEND_API_KEY", "re_test_key_123")
os.environ.setdefault("RECIPIENT_EMAIL", "owner@example.com")
os.environ.setdefault("REMINDER_ADMIN_EMAIL", "admin@example.com")
os.environ.setdefault("LOG_LEVEL", "WARNING")
# Provider credentials stay unset: subscriber clients are injected per test.
for _name in ("MAILCHIMP_API_KEY", "MAILCHIMP_SERVER_PREFIX", "MAILCHIMP_LIST_ID", "SENDER_API_TOKEN"):
    os.environ.pop(_name, None)

from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402

from formrelay.adapters.email.base import AbstractEmailClient  # noqa: E402
from formrelay.adapters.subscribers.base import (  # noqa: E402
    AbstractSubscriberClient,
    SubscriptionResult,
    SubscriptionStatus,
)


@pytest.fixture
def email_client() -> AsyncMock:
    """Email client double returning a fixed message id."""
    client = AsyncMock(spec=AbstractEmailClient)
    client.send.return_value = "msg_123"
    return client


@pytest.fixture
def subscriber_client() -> AsyncMock:
    """Subscriber client double reporting success."""
    client = AsyncMock(spec=AbstractSubscriberClient)
    client.subscribe.return_value = SubscriptionResult(
        status=SubscriptionStatus.SUCCESS,
        provider="sender",
    )
    return client
