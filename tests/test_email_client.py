"""Tests for the Resend email adapter and its factory."""

from unittest.mock import patch

import pytest

from formrelay.adapters.email import EmailMessage, ResendEmailClient, create_email_client
from formrelay.core.config import ResendSettings
from formrelay.core.errors import EmailDeliveryAppError, ValidationAppError


@pytest.fixture
def message() -> EmailMessage:
    return EmailMessage(
        from_address="contact@send.example.com",
        to=["ada@example.com"],
        subject="Hello",
        text="Body",
    )


class TestResendEmailClient:
    """Sending through the Resend SDK."""

    @pytest.mark.asyncio
    async def test_send_passes_params_and_returns_id(self, message: EmailMessage) -> None:
        client = ResendEmailClient(api_key="re_test")

        with patch("formrelay.adapters.email.resend_client.resend.Emails.send") as mock_send:
            mock_send.return_value = {"id": "email_123"}
            message_id = await client.send(message)

        assert message_id == "email_123"
        mock_send.assert_called_once_with(
            {
                "from": "contact@send.example.com",
                "to": ["ada@example.com"],
                "subject": "Hello",
                "text": "Body",
            }
        )

    @pytest.mark.asyncio
    async def test_sdk_error_raises_delivery_error(self, message: EmailMessage) -> None:
        client = ResendEmailClient(api_key="re_test")

        with patch(
            "formrelay.adapters.email.resend_client.resend.Emails.send",
            side_effect=RuntimeError("domain not verified"),
        ):
            with pytest.raises(EmailDeliveryAppError) as exc:
                await client.send(message)

        assert exc.value.code == "email_send_failed"
        assert isinstance(exc.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_missing_message_id_raises_delivery_error(self, message: EmailMessage) -> None:
        client = ResendEmailClient(api_key="re_test")

        with patch(
            "formrelay.adapters.email.resend_client.resend.Emails.send",
            return_value={},
        ):
            with pytest.raises(EmailDeliveryAppError):
                await client.send(message)

    def test_constructor_configures_sdk_key(self) -> None:
        with patch("formrelay.adapters.email.resend_client.resend") as mock_resend:
            ResendEmailClient(api_key="re_configured")

        assert mock_resend.api_key == "re_configured"


class TestEmailFactory:
    """Email client creation from settings."""

    @patch("formrelay.adapters.email.factory.settings")
    def test_creates_resend_client(self, mock_settings) -> None:
        mock_settings.resend = ResendSettings(api_key="re_key")

        assert isinstance(create_email_client(), ResendEmailClient)

    @patch("formrelay.adapters.email.factory.settings")
    def test_missing_api_key_raises(self, mock_settings) -> None:
        mock_settings.resend = ResendSettings(api_key=None)

        with pytest.raises(ValidationAppError, match="requires RESEND_API_KEY") as exc:
            create_email_client()
        assert exc.value.code == "email_missing_api_key"
