"""Reminder request flow.

A visitor asks to be reminded about a page (typically an upcoming podcast
episode). The service:
- Validates the contact fields
- Adds the contact to the reminder list and keeps the outcome
- Emails the visitor a confirmation (failure fails the request)
- Emails the admin a copy including the list outcome, so failed list adds
  can be fixed by hand (failure is only logged)
"""

import logging

from formrelay.adapters.email.base import EmailMessage
from formrelay.adapters.subscribers.base import SubscriptionResult
from formrelay.core.config import settings
from formrelay.core.errors import EmailDeliveryAppError
from formrelay.core.form_validation import validate_contact_fields
from formrelay.core.logging import hash_for_log
from formrelay.schemas.forms import ReminderRequest, SubmissionResponse
from formrelay.services.base import FormService
from formrelay.services.email_templates import (
    build_reminder_admin_notification,
    build_reminder_confirmation,
    format_timestamp,
)

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Your reminder has been set successfully!"
PAGE_URL_LOG_CHARS = 100


def _truncate_for_log(value: str | None, max_chars: int) -> str:
    if not value:
        return "not provided"
    if len(value) <= max_chars:
        return value
    return value[:max_chars] + "..."


class ReminderService(FormService):
    """Service handling reminder requests."""

    async def _send_confirmation(self, request: ReminderRequest) -> None:
        subject, text = build_reminder_confirmation(
            request.first_name,
            request.last_name,
            request.email,
            page_title=request.page_title,
            page_url=request.page_url,
            site_name=settings.app.site_name,
        )
        await self.email_client.send(
            EmailMessage(
                from_address=settings.resend.from_address,
                to=[request.email],
                subject=subject,
                text=text,
            )
        )

    async def _notify_admin(self, request: ReminderRequest, subscription: SubscriptionResult) -> None:
        admin_email = settings.notification.reminder_admin_email
        if not admin_email:
            logger.warning(
                "reminder.admin_notification_skipped",
                extra={"reason": "admin_email_not_configured"},
            )
            return

        subject, text = build_reminder_admin_notification(
            request.first_name,
            request.last_name,
            request.email,
            page_title=request.page_title,
            page_url=request.page_url,
            site_name=settings.app.site_name,
            timestamp=format_timestamp(settings.app.display_timezone),
            subscription=subscription,
        )
        try:
            await self.email_client.send(
                EmailMessage(
                    from_address=settings.resend.from_address,
                    to=[admin_email],
                    subject=subject,
                    text=text,
                )
            )
        except EmailDeliveryAppError as exc:
            # The visitor already has their confirmation.
            logger.error(
                "reminder.admin_notification_failed",
                extra={"error_code": exc.code},
            )

    async def create_reminder(self, request: ReminderRequest) -> SubmissionResponse:
        """Process one reminder request.

        Args:
            request: Parsed form payload.

        Returns:
            SubmissionResponse confirming the reminder.

        Raises:
            ValidationAppError: If required fields are missing or the email is invalid.
            EmailDeliveryAppError: If the visitor confirmation cannot be sent.
        """
        logger.info(
            "reminder.received",
            extra={
                "email_hash": hash_for_log(request.email),
                "page_url": _truncate_for_log(request.page_url, PAGE_URL_LOG_CHARS),
                "page_title": request.page_title or "not provided",
            },
        )

        # Step 1: Validate
        validate_contact_fields(request.first_name, request.last_name, request.email)

        # Step 2: Add to the reminder list, keeping the outcome for the admin
        subscription = await self._subscribe(request.first_name, request.last_name, request.email)

        # Step 3: Confirm to the visitor
        await self._send_confirmation(request)

        # Step 4: Notify the admin (best effort)
        await self._notify_admin(request, subscription)

        logger.info(
            "reminder.completed",
            extra={
                "email_hash": hash_for_log(request.email),
                "provider": subscription.provider,
                "subscription_status": subscription.status.value,
                "page_title": request.page_title or "not provided",
            },
        )
        return SubmissionResponse(success=True, message=SUCCESS_MESSAGE)
