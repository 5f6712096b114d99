"""Pydantic schemas for form submissions and their responses."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ContactFields(BaseModel):
    """Name and email fields shared by every form.

    Fields are optional at the schema level so missing values are reported
    with the same error as blank ones by the form services.
    """

    model_config = ConfigDict(populate_by_name=True)

    first_name: str | None = Field(
        default=None,
        alias="firstName",
        description="Subscriber first name.",
    )
    last_name: str | None = Field(
        default=None,
        alias="lastName",
        description="Subscriber last name.",
    )
    email: str | None = Field(
        default=None,
        description="Subscriber email address.",
    )


class NewsletterSignupRequest(ContactFields):
    """Newsletter signup form payload."""


class ReminderRequest(ContactFields):
    """Reminder form payload, sent from a podcast/episode page."""

    page_url: str | None = Field(
        default=None,
        alias="pageUrl",
        description="URL of the page the reminder is for.",
    )
    page_title: str | None = Field(
        default=None,
        alias="pageTitle",
        description="Document title of the page the reminder is for.",
    )


class SubmissionResponse(BaseModel):
    """Successful form submission."""

    success: bool = Field(default=True)
    message: str = Field(..., description="Human-readable confirmation.")
