"""Plain-text email bodies for form notifications.

Every builder returns a ``(subject, text)`` tuple and has no side effects,
which keeps the copy easy to test and to tweak.
"""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from formrelay.adapters.subscribers.base import SubscriptionResult, SubscriptionStatus

PROVIDER_DISPLAY_NAMES = {
    "mailchimp": "Mailchimp",
    "sender": "Sender.net",
}

PAGE_TITLE_FALLBACK = "Page title not available"
PAGE_URL_FALLBACK = "Page URL not available"


def format_timestamp(tz_name: str, now: datetime | None = None) -> str:
    """Format ``now`` (default: current time) like ``October 19, 2026 at 03:04:05 PM``."""
    now = now or datetime.now(timezone.utc)
    local = now.astimezone(ZoneInfo(tz_name))
    return local.strftime("%B %d, %Y at %I:%M:%S %p")


def clean_page_title(page_title: str | None, site_name: str) -> str:
    """Drop the ``| Site`` suffix browsers include in document titles."""
    return (page_title or PAGE_TITLE_FALLBACK).replace(f"| {site_name}", "", 1).strip()


def provider_display_name(provider: str) -> str:
    return PROVIDER_DISPLAY_NAMES.get(provider, provider.title() or "Subscriber list")


def build_newsletter_notification(
    first_name: str,
    last_name: str,
    email: str,
    *,
    timestamp: str,
) -> tuple[str, str]:
    subject = f"New Newsletter Signup from {first_name} {last_name}"
    text = f"""New Newsletter Signup:

First Name: {first_name}
Last Name: {last_name}
Email: {email}

Date: {timestamp}"""
    return subject, text


def build_reminder_confirmation(
    first_name: str,
    last_name: str,
    email: str,
    *,
    page_title: str | None,
    page_url: str | None,
    site_name: str,
) -> tuple[str, str]:
    subject = f"Your {site_name} reminder is set!"
    text = f"""Hi {first_name},

Your reminder is set! Here are the details:

Your name: {first_name} {last_name}
Your email: {email}

The page you requested a reminder for:

{clean_page_title(page_title, site_name)}
{page_url or PAGE_URL_FALLBACK}

Learn more at {site_name}"""
    return subject, text


def build_reminder_admin_notification(
    first_name: str,
    last_name: str,
    email: str,
    *,
    page_title: str | None,
    page_url: str | None,
    site_name: str,
    timestamp: str,
    subscription: SubscriptionResult,
) -> tuple[str, str]:
    """Admin copy of a reminder request, including the subscriber-list outcome.

    A failed subscription flags the email for manual follow-up in both the
    subject and the body.
    """
    provider = provider_display_name(subscription.provider)
    failed = subscription.status is SubscriptionStatus.FAILED

    if failed:
        subject = f"⚠️ Podcast Reminder - MANUAL ADD REQUIRED - {first_name} {last_name}"
    else:
        subject = f"New Podcast Reminder from {first_name} {last_name}"

    text = f"""New Podcast Reminder Request:

First Name: {first_name}
Last Name: {last_name}
Email: {email}

Podcast Page:
{clean_page_title(page_title, site_name)}
{page_url or PAGE_URL_FALLBACK}

Date: {timestamp}

{provider} Status: {subscription.status.value}"""

    if failed:
        text += f"""

⚠️ ACTION REQUIRED: Failed to add subscriber to {provider}
Please manually add this subscriber to your {provider} list.

Error Details: {subscription.error_details}"""
    elif subscription.status is SubscriptionStatus.ALREADY_EXISTS:
        text += f"""

Note: This email already exists in {provider}."""

    return subject, text
