from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass


class SubscriptionStatus(str, enum.Enum):
    """Outcome of adding a contact to an email-marketing list."""

    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class SubscriptionResult:
    """Result of a subscribe call.

    Attributes:
        status: What happened to the contact.
        provider: Provider name (e.g., "mailchimp").
        error_details: Human-readable failure description when status is FAILED.
    """

    status: SubscriptionStatus
    provider: str
    error_details: str = ""


class AbstractSubscriberClient(ABC):
    """Interface for email-marketing providers that keep a subscriber list.

    Implementations are best effort: provider or transport failures are
    reported through ``SubscriptionResult`` and never raised.
    """

    provider_name: str = ""

    @abstractmethod
    async def subscribe(
        self,
        email: str,
        *,
        first_name: str,
        last_name: str,
    ) -> SubscriptionResult:
        """Add a contact to the configured list.

        Args:
            email: Subscriber email address.
            first_name: Subscriber first name.
            last_name: Subscriber last name.

        Returns:
            SubscriptionResult describing the outcome.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the client."""


def parse_json_body(response) -> dict:
    """Decode a provider response body, tolerating empty or non-JSON bodies."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
