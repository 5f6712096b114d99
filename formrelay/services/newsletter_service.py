"""Newsletter signup flow.

Validates the submission, notifies the site owner by email and adds the
contact to the newsletter list. The notification is the part the owner
relies on, so its failure fails the request; the list subscription is best
effort and only logged.
"""

import logging

from formrelay.adapters.email.base import EmailMessage
from formrelay.core.config import settings
from formrelay.core.errors import EmailDeliveryAppError
from formrelay.core.form_validation import validate_contact_fields
from formrelay.core.logging import hash_for_log
from formrelay.schemas.forms import NewsletterSignupRequest, SubmissionResponse
from formrelay.services.base import FormService
from formrelay.services.email_templates import (
    build_newsletter_notification,
    format_timestamp,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Successfully subscribed"


class NewsletterService(FormService):
    """Service handling newsletter signups."""

    async def _notify_owner(self, first_name: str, last_name: str, email: str) -> None:
        recipient = settings.notification.recipient_email
        if not recipient:
            logger.error("newsletter.recipient_not_configured")
            raise EmailDeliveryAppError(
                code="notification_recipient_not_configured",
                message="Internal server error. Please try again later.",
                details={"hint": "Set RECIPIENT_EMAIL"},
            )

        subject, text = build_newsletter_notification(
            first_name,
            last_name,
            email,
            timestamp=format_timestamp(settings.app.display_timezone),
        )
        await self.email_client.send(
            EmailMessage(
                from_address=settings.resend.from_address,
                to=[recipient],
                subject=subject,
                text=text,
            )
        )

    async def signup(self, request: NewsletterSignupRequest) -> SubmissionResponse:
        """Process one newsletter signup.

        Args:
            request: Parsed form payload.

        Returns:
            SubmissionResponse confirming the signup.

        Raises:
            ValidationAppError: If required fields are missing or the email is invalid.
            EmailDeliveryAppError: If the owner notification cannot be sent.
        """
        # Step 1: Validate
        validate_contact_fields(request.first_name, request.last_name, request.email)
        first_name, last_name, email = request.first_name, request.last_name, request.email

        # Step 2: Notify the site owner
        await self._notify_owner(first_name, last_name, email)

        # Step 3: Add to the newsletter list (best effort)
        result = await self._subscribe(first_name, last_name, email)

        logger.info(
            "newsletter.signup_completed",
            extra={
                "email_hash": hash_for_log(email),
                "provider": result.provider,
                "subscription_status": result.status.value,
            },
        )
        return SubmissionResponse(success=True, message=SUCCESS_MESSAGE)
