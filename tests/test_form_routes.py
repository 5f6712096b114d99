"""End-to-end tests for the form endpoints.

The app is built by the real factory; only the email and subscriber clients
are replaced by mocks through the services' dependency providers.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from formrelay.api.routes.forms import get_newsletter_service, get_reminder_service
from formrelay.core.app_factory import create_app
from formrelay.core.config import settings
from formrelay.core.errors import EmailDeliveryAppError
from formrelay.core.rate_limit import REMINDER_SCOPE
from formrelay.services.newsletter_service import NewsletterService
from formrelay.services.reminder_service import ReminderService

SIGNUP = {"firstName": "Ada", "lastName": "Lovelace", "email": "ada@example.com"}
REMINDER = {
    **SIGNUP,
    "pageUrl": "https://ibuildwith.ai/podcast/12",
    "pageTitle": "Episode 12 | iBuildWith.ai",
}


@pytest.fixture
def app(email_client, subscriber_client, monkeypatch) -> FastAPI:
    # Deployed behind the edge proxy, which sets client-ip.
    monkeypatch.setattr(settings.app, "trust_proxy_headers", True)
    application = create_app()
    application.dependency_overrides[get_newsletter_service] = lambda: NewsletterService(
        email_client, subscriber_client, provider="mailchimp"
    )
    application.dependency_overrides[get_reminder_service] = lambda: ReminderService(
        email_client, subscriber_client, provider="sender"
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestNewsletterSignup:
    def test_success(self, client: TestClient, email_client, subscriber_client) -> None:
        resp = client.post("/newsletter-signup", json=SIGNUP)

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "message": "Successfully subscribed"}
        email_client.send.assert_awaited_once()
        subscriber_client.subscribe.assert_awaited_once()

    def test_missing_fields_return_400(self, client: TestClient, email_client) -> None:
        resp = client.post("/newsletter-signup", json={"firstName": "Ada"})

        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "missing_required_fields"
        assert error["message"] == "Missing required fields: firstName, lastName, email"
        assert error["details"] == {"missing": ["lastName", "email"]}
        email_client.send.assert_not_awaited()

    def test_invalid_email_returns_400(self, client: TestClient) -> None:
        resp = client.post("/newsletter-signup", json={**SIGNUP, "email": "ada@example"})

        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_email"

    def test_malformed_json_returns_400(self, client: TestClient) -> None:
        resp = client.post(
            "/newsletter-signup",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "invalid_request_body"

    def test_non_string_field_returns_400(self, client: TestClient) -> None:
        resp = client.post("/newsletter-signup", json={**SIGNUP, "firstName": ["Ada"]})

        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "invalid_request_body"
        assert error["details"] == {"fields": ["firstName"]}

    def test_get_is_not_allowed(self, client: TestClient) -> None:
        assert client.get("/newsletter-signup").status_code == 405

    def test_notification_failure_returns_500(self, client: TestClient, email_client) -> None:
        email_client.send.side_effect = EmailDeliveryAppError(
            code="email_send_failed",
            message="Failed to send email. Please try again later.",
        )

        resp = client.post("/newsletter-signup", json=SIGNUP)

        assert resp.status_code == 500
        assert resp.json()["error"]["message"] == "Failed to send email. Please try again later."


class TestReminderForm:
    def test_success(self, client: TestClient, email_client) -> None:
        resp = client.post("/reminder-form", json=REMINDER)

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "message": "Your reminder has been set successfully!",
        }
        assert email_client.send.await_count == 2

    def test_page_fields_are_optional(self, client: TestClient) -> None:
        resp = client.post("/reminder-form", json=SIGNUP)

        assert resp.status_code == 200


class TestRateLimiting:
    def test_fourth_request_from_same_ip_is_throttled(self, client: TestClient) -> None:
        headers = {"client-ip": "198.51.100.7"}
        for _ in range(3):
            assert client.post("/newsletter-signup", json=SIGNUP, headers=headers).status_code == 200

        resp = client.post("/newsletter-signup", json=SIGNUP, headers=headers)

        assert resp.status_code == 429
        assert resp.json() == {"detail": "Too many requests. Please try again later."}
        assert resp.headers["X-RateLimit-Limit"] == "3"
        assert int(resp.headers["Retry-After"]) > 0

    def test_denied_attempt_does_not_reach_the_service(
        self, client: TestClient, email_client
    ) -> None:
        headers = {"x-forwarded-for": "203.0.113.5, 10.0.0.1"}
        for _ in range(4):
            client.post("/newsletter-signup", json=SIGNUP, headers=headers)

        assert email_client.send.await_count == 3

    def test_forms_are_limited_independently(self, client: TestClient) -> None:
        headers = {"client-ip": "198.51.100.8"}
        for _ in range(4):
            client.post("/newsletter-signup", json=SIGNUP, headers=headers)

        resp = client.post("/reminder-form", json=REMINDER, headers=headers)

        assert resp.status_code == 200

    def test_reminder_throttle_message(self, client: TestClient) -> None:
        headers = {"client-ip": "198.51.100.9"}
        for _ in range(3):
            client.post("/reminder-form", json=REMINDER, headers=headers)

        resp = client.post("/reminder-form", json=REMINDER, headers=headers)

        assert resp.status_code == 429
        assert resp.json()["detail"] == "Too many requests. Please wait before submitting again."

    def test_malformed_json_counts_toward_the_limit(self, client: TestClient) -> None:
        headers = {"client-ip": "198.51.100.77", "Content-Type": "application/json"}
        codes = [
            client.post("/newsletter-signup", content=b"{bad", headers=headers).status_code
            for _ in range(4)
        ]

        assert codes == [400, 400, 400, 429]

    def test_over_limit_caller_gets_429_before_body_is_read(
        self, app: FastAPI, client: TestClient
    ) -> None:
        headers = {"client-ip": "198.51.100.78"}
        for _ in range(3):
            client.post("/reminder-form", json=REMINDER, headers=headers)

        resp = client.post(
            "/reminder-form",
            content=b"not json",
            headers={**headers, "Content-Type": "application/json"},
        )

        assert resp.status_code == 429
        assert app.state.rate_limiters[REMINDER_SCOPE].get_record("198.51.100.78").count == 4

    def test_direct_callers_are_limited_by_peer_address(
        self, client: TestClient, monkeypatch
    ) -> None:
        monkeypatch.setattr(settings.app, "trust_proxy_headers", False)

        codes = [
            client.post(
                "/newsletter-signup",
                json=SIGNUP,
                headers={"client-ip": f"198.51.100.{i}"},
            ).status_code
            for i in range(4)
        ]

        assert codes == [200, 200, 200, 429]

    def test_invalid_submissions_count_toward_the_limit(self, client: TestClient) -> None:
        headers = {"client-ip": "198.51.100.10"}
        for _ in range(3):
            assert client.post("/newsletter-signup", json={}, headers=headers).status_code == 400

        resp = client.post("/newsletter-signup", json=SIGNUP, headers=headers)

        assert resp.status_code == 429


def test_cors_preflight_allows_configured_origin(monkeypatch) -> None:
    monkeypatch.setattr(settings.app, "cors_allowed_origins", "https://ibuildwith.ai")
    client = TestClient(create_app())

    resp = client.options(
        "/newsletter-signup",
        headers={
            "Origin": "https://ibuildwith.ai",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "https://ibuildwith.ai"
    assert "POST" in resp.headers["access-control-allow-methods"]


def test_lifespan_starts_and_stops_sweeper(app: FastAPI) -> None:
    with TestClient(app) as client:
        resp = client.get("/health")
        assert resp.json() == {"status": "ok", "sweeper_running": True}
        sweeper = app.state.rate_limit_sweeper

    assert sweeper.running is False


def test_unexpected_error_keeps_cors_headers(
    monkeypatch, email_client, subscriber_client
) -> None:
    monkeypatch.setattr(settings.app, "cors_allowed_origins", "https://ibuildwith.ai")
    email_client.send.side_effect = RuntimeError("socket closed")
    application = create_app()
    application.dependency_overrides[get_newsletter_service] = lambda: NewsletterService(
        email_client, subscriber_client, provider="mailchimp"
    )
    client = TestClient(application, raise_server_exceptions=False)

    resp = client.post(
        "/newsletter-signup",
        json=SIGNUP,
        headers={"Origin": "https://ibuildwith.ai"},
    )

    assert resp.status_code == 500
    assert resp.json()["error"]["code"] == "internal_server_error"
    assert resp.headers["access-control-allow-origin"] == "https://ibuildwith.ai"
    assert "X-Request-ID" in resp.headers
