"""Subscriber adapter layer - abstracts over email-marketing list providers."""

from formrelay.adapters.subscribers.base import (
    AbstractSubscriberClient,
    SubscriptionResult,
    SubscriptionStatus,
)
from formrelay.adapters.subscribers.factory import create_subscriber_client
from formrelay.adapters.subscribers.mailchimp_client import MailchimpClient
from formrelay.adapters.subscribers.sender_client import SenderClient

__all__ = [
    "AbstractSubscriberClient",
    "MailchimpClient",
    "SenderClient",
    "SubscriptionResult",
    "SubscriptionStatus",
    "create_subscriber_client",
]
