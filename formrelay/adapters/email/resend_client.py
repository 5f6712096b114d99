"""Resend transactional email adapter."""

import asyncio
import logging
from typing import Any

import resend

from formrelay.adapters.email.base import AbstractEmailClient, EmailMessage
from formrelay.core.errors import EmailDeliveryAppError
from formrelay.core.logging import hash_for_log

logger = logging.getLogger(__name__)


def _extract_message_id(response: Any) -> str | None:
    if isinstance(response, dict):
        value = response.get("id")
    else:
        value = getattr(response, "id", None)
    return str(value).strip() if value else None


class ResendEmailClient(AbstractEmailClient):
    """Client for sending email through the official Resend SDK.

    The SDK is synchronous and configured through a module-level API key, so
    sends run in a worker thread to keep the event loop free.
    """

    def __init__(self, api_key: str) -> None:
        """Configure the Resend SDK.

        Args:
            api_key: Resend API key.
        """
        resend.api_key = api_key

    async def send(self, message: EmailMessage) -> str:
        params: dict[str, Any] = {
            "from": message.from_address,
            "to": list(message.to),
            "subject": message.subject,
            "text": message.text,
        }
        recipient_hashes = [hash_for_log(address) for address in message.to]

        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as exc:
            logger.error(
                "email.send_failed",
                extra={
                    "provider": "resend",
                    "recipient_hashes": recipient_hashes,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            raise EmailDeliveryAppError(
                code="email_send_failed",
                message="Failed to send email. Please try again later.",
                details={"provider": "resend"},
            ) from exc

        message_id = _extract_message_id(response)
        if not message_id:
            logger.error(
                "email.send_failed",
                extra={
                    "provider": "resend",
                    "recipient_hashes": recipient_hashes,
                    "reason": "missing_message_id",
                },
            )
            raise EmailDeliveryAppError(
                code="email_send_failed",
                message="Failed to send email. Please try again later.",
                details={"provider": "resend"},
            )

        logger.info(
            "email.sent",
            extra={
                "provider": "resend",
                "message_id": message_id,
                "recipient_hashes": recipient_hashes,
            },
        )
        return message_id
