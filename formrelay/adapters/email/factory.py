"""Factory for the transactional email client."""

from formrelay.adapters.email.base import AbstractEmailClient
from formrelay.adapters.email.resend_client import ResendEmailClient
from formrelay.core.config import settings
from formrelay.core.errors import ValidationAppError


def create_email_client() -> AbstractEmailClient:
    """Instantiate the email client from settings.

    Returns:
        AbstractEmailClient: Configured Resend client.

    Raises:
        ValidationAppError: If RESEND_API_KEY is not configured.
    """
    if not settings.resend.api_key:
        raise ValidationAppError(
            code="email_missing_api_key",
            message="Resend provider requires RESEND_API_KEY environment variable",
        )
    return ResendEmailClient(api_key=settings.resend.api_key)
