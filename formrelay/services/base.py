"""Shared plumbing for the form services."""

import logging

from formrelay.adapters.email.base import AbstractEmailClient
from formrelay.adapters.subscribers.base import (
    AbstractSubscriberClient,
    SubscriptionResult,
    SubscriptionStatus,
)

logger = logging.getLogger(__name__)


class FormService:
    """Base for services that email and subscribe a form contact.

    Attributes:
        email_client: Transactional email client.
        subscriber_client: List provider, or None when not configured.
        provider: Configured provider name (reported when skipped).
    """

    def __init__(
        self,
        email_client: AbstractEmailClient,
        subscriber_client: AbstractSubscriberClient | None,
        provider: str,
    ) -> None:
        self.email_client = email_client
        self.subscriber_client = subscriber_client
        self.provider = provider

    async def _subscribe(self, first_name: str, last_name: str, email: str) -> SubscriptionResult:
        """Add the contact to the list; a missing provider yields ``skipped``."""
        if self.subscriber_client is None:
            logger.warning(
                "subscriber.skipped",
                extra={"provider": self.provider, "reason": "not_configured"},
            )
            return SubscriptionResult(status=SubscriptionStatus.SKIPPED, provider=self.provider)

        return await self.subscriber_client.subscribe(
            email, first_name=first_name, last_name=last_name
        )
