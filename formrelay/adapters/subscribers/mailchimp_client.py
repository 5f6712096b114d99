"""Mailchimp Marketing API adapter."""

import logging

import httpx

from formrelay.adapters.subscribers.base import (
    AbstractSubscriberClient,
    SubscriptionResult,
    SubscriptionStatus,
    parse_json_body,
)
from formrelay.core.logging import hash_for_log

logger = logging.getLogger(__name__)

MEMBER_EXISTS_TITLE = "Member Exists"


class MailchimpClient(AbstractSubscriberClient):
    """Adds members to a Mailchimp audience via the Marketing API v3.

    Mailchimp accepts HTTP basic auth with any username and the API key as
    password. The data center prefix (e.g., ``us21``) selects the host.
    """

    provider_name = "mailchimp"

    def __init__(
        self,
        api_key: str,
        server_prefix: str,
        list_id: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.list_id = list_id
        self.client = httpx.AsyncClient(
            base_url=f"https://{server_prefix}.api.mailchimp.com/3.0",
            auth=("formrelay", api_key),
            timeout=timeout_seconds,
            transport=transport,
        )

    async def subscribe(
        self,
        email: str,
        *,
        first_name: str,
        last_name: str,
    ) -> SubscriptionResult:
        payload = {
            "email_address": email,
            "status": "subscribed",
            "merge_fields": {"FNAME": first_name, "LNAME": last_name},
        }
        email_hash = hash_for_log(email)

        try:
            response = await self.client.post(f"/lists/{self.list_id}/members", json=payload)
        except httpx.HTTPError as exc:
            logger.error(
                "subscriber.failed",
                extra={
                    "provider": self.provider_name,
                    "email_hash": email_hash,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return SubscriptionResult(
                status=SubscriptionStatus.FAILED,
                provider=self.provider_name,
                error_details=str(exc) or type(exc).__name__,
            )

        if response.is_success:
            logger.info(
                "subscriber.added",
                extra={"provider": self.provider_name, "email_hash": email_hash},
            )
            return SubscriptionResult(status=SubscriptionStatus.SUCCESS, provider=self.provider_name)

        body = parse_json_body(response)
        title = body.get("title", "")
        if response.status_code == 400 and title == MEMBER_EXISTS_TITLE:
            logger.info(
                "subscriber.already_exists",
                extra={"provider": self.provider_name, "email_hash": email_hash},
            )
            return SubscriptionResult(
                status=SubscriptionStatus.ALREADY_EXISTS,
                provider=self.provider_name,
            )

        detail = body.get("detail") or title or response.reason_phrase
        logger.error(
            "subscriber.failed",
            extra={
                "provider": self.provider_name,
                "email_hash": email_hash,
                "http_status": response.status_code,
                "error_msg": detail,
            },
        )
        return SubscriptionResult(
            status=SubscriptionStatus.FAILED,
            provider=self.provider_name,
            error_details=f"Status: {response.status_code}, Message: {detail}",
        )

    async def aclose(self) -> None:
        await self.client.aclose()

