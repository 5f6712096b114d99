"""Validation of contact fields shared by every form."""
from __future__ import annotations

import logging
import re

from formrelay.core.errors import ValidationAppError
from formrelay.core.logging import hash_for_log

logger = logging.getLogger(__name__)

# Requires a dot-separated alphabetic TLD of at least two characters.
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[a-zA-Z]{2,}$")

REQUIRED_FIELDS = ("firstName", "lastName", "email")


def is_valid_email(email: str) -> bool:
    """Return True when ``email`` looks like a deliverable address.

    Examples:
        >>> is_valid_email("ada@example.com")
        True
        >>> is_valid_email("ada@example.c")
        False
    """
    return EMAIL_PATTERN.match(email) is not None


def validate_contact_fields(
    first_name: str | None,
    last_name: str | None,
    email: str | None,
) -> None:
    """Check the name and email fields of a submission.

    Raises:
        ValidationAppError: ``missing_required_fields`` when any field is
            absent or blank, ``invalid_email`` when the address is malformed.
    """
    values = dict(zip(REQUIRED_FIELDS, (first_name, last_name, email)))
    missing = [name for name, value in values.items() if not value or not value.strip()]

    if missing:
        logger.info("form_validation.missing_fields", extra={"missing": missing})
        raise ValidationAppError(
            code="missing_required_fields",
            message="Missing required fields: firstName, lastName, email",
            details={"missing": missing},
        )

    if not is_valid_email(email):
        logger.info(
            "form_validation.invalid_email",
            extra={"email_hash": hash_for_log(email)},
        )
        raise ValidationAppError(
            code="invalid_email",
            message="Invalid email format",
        )
