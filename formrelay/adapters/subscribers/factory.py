"""Factory for subscriber provider clients."""

from formrelay.adapters.subscribers.base import AbstractSubscriberClient
from formrelay.adapters.subscribers.mailchimp_client import MailchimpClient
from formrelay.adapters.subscribers.sender_client import SenderClient
from formrelay.core.config import settings
from formrelay.core.errors import ValidationAppError

SUPPORTED_PROVIDERS = ("mailchimp", "sender")


def create_subscriber_client(provider: str) -> AbstractSubscriberClient | None:
    """Instantiate the subscriber client for ``provider``.

    Reads credentials from formrelay.core.config.settings. A provider whose
    credentials are not configured yields None; callers treat that as
    "integration skipped" rather than an error, so a site can run with
    notification emails only.

    Args:
        provider: Provider name (case-insensitive).

    Returns:
        Configured client, or None when credentials are missing.

    Raises:
        ValidationAppError: If the provider name is unknown.
    """
    provider = provider.lower()

    if provider == "mailchimp":
        cfg = settings.mailchimp
        if not (cfg.api_key and cfg.server_prefix and cfg.list_id):
            return None
        return MailchimpClient(
            api_key=cfg.api_key,
            server_prefix=cfg.server_prefix,
            list_id=cfg.list_id,
            timeout_seconds=cfg.timeout_seconds,
        )

    if provider == "sender":
        cfg = settings.sender
        if not cfg.api_token:
            return None
        return SenderClient(
            api_token=cfg.api_token,
            base_url=cfg.base_url,
            timeout_seconds=cfg.timeout_seconds,
        )

    raise ValidationAppError(
        code="subscriber_unknown_provider",
        message=(
            f"Unknown subscriber provider: '{provider}'. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        ),
    )
