"""Email adapter layer - abstracts over transactional email providers."""

from formrelay.adapters.email.base import AbstractEmailClient, EmailMessage
from formrelay.adapters.email.factory import create_email_client
from formrelay.adapters.email.resend_client import ResendEmailClient

__all__ = [
    "AbstractEmailClient",
    "EmailMessage",
    "ResendEmailClient",
    "create_email_client",
]
