"""Sender.net subscribers API adapter."""

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


class SenderClient(AbstractSubscriberClient):
    """Creates subscribers through the Sender.net v2 API.

    Sender.net answers 422 (or a message mentioning "already exists") when the
    address is already on the account; that case is reported separately so
    notifications can say so.
    """

    provider_name = "sender"

    def __init__(
        self,
        api_token: str,
        base_url: str = "https://api.sender.net/v2",
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.client = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {api_token}",
                "Accept": "application/json",
            },
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
        payload = {"email": email, "firstname": first_name, "lastname": last_name}
        email_hash = hash_for_log(email)

        try:
            response = await self.client.post("/subscribers", json=payload)
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

        body = parse_json_body(response)
        message = str(body.get("message") or "")

        if response.is_success:
            logger.info(
                "subscriber.added",
                extra={"provider": self.provider_name, "email_hash": email_hash},
            )
            return SubscriptionResult(status=SubscriptionStatus.SUCCESS, provider=self.provider_name)

        if response.status_code == 422 or "already exists" in message:
            logger.info(
                "subscriber.already_exists",
                extra={"provider": self.provider_name, "email_hash": email_hash},
            )
            return SubscriptionResult(
                status=SubscriptionStatus.ALREADY_EXISTS,
                provider=self.provider_name,
            )

        detail = message or response.reason_phrase
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
