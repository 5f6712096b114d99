"""Tests for contact field validation."""

import pytest

from formrelay.core.errors import ValidationAppError
from formrelay.core.form_validation import is_valid_email, validate_contact_fields


@pytest.mark.parametrize(
    "email",
    ["ada@example.com", "first.last+tag@sub.example.co", "x@y.io"],
)
def test_valid_emails(email: str) -> None:
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    [
        "plainaddress",
        "ada@example",
        "ada@example.c",
        "ada@example.c0m",
        "ada @example.com",
        "ada@@example.com",
        "@example.com",
    ],
)
def test_invalid_emails(email: str) -> None:
    assert not is_valid_email(email)


def test_complete_fields_pass() -> None:
    validate_contact_fields("Ada", "Lovelace", "ada@example.com")


def test_missing_fields_are_listed() -> None:
    with pytest.raises(ValidationAppError) as exc:
        validate_contact_fields("Ada", None, "  ")

    assert exc.value.code == "missing_required_fields"
    assert exc.value.message == "Missing required fields: firstName, lastName, email"
    assert exc.value.details == {"missing": ["lastName", "email"]}


def test_missing_fields_take_precedence_over_email_format() -> None:
    with pytest.raises(ValidationAppError) as exc:
        validate_contact_fields("", "Lovelace", "not-an-email")

    assert exc.value.code == "missing_required_fields"


def test_invalid_email_format() -> None:
    with pytest.raises(ValidationAppError) as exc:
        validate_contact_fields("Ada", "Lovelace", "ada@example")

    assert exc.value.code == "invalid_email"
    assert exc.value.message == "Invalid email format"
