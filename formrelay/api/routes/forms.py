import json
from typing import TypeVar

from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from formrelay.core.rate_limit import NEWSLETTER_SCOPE, REMINDER_SCOPE, rate_limit
from formrelay.schemas.forms import (
    NewsletterSignupRequest,
    ReminderRequest,
    SubmissionResponse,
)
from formrelay.services.newsletter_service import NewsletterService
from formrelay.services.reminder_service import ReminderService

router = APIRouter(tags=["Forms"])

FormModel = TypeVar("FormModel", bound=BaseModel)


def _json_request_body(model: type[BaseModel]) -> dict:
    """OpenAPI request body for routes that parse their own JSON."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


async def read_form_body(request: Request, model: type[FormModel]) -> FormModel:
    """Decode and validate the JSON body of a form submission.

    Form routes read the body themselves so the rate limit dependency runs
    first; otherwise FastAPI would reject malformed JSON before the caller
    is counted. Errors are raised as ``RequestValidationError`` with
    ``body``-prefixed locations, matching what FastAPI itself produces.

    Raises:
        RequestValidationError: If the body is not valid JSON or does not
            match ``model``.
    """
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body", getattr(exc, "pos", 0)),
                    "msg": "JSON decode error",
                    "input": {},
                }
            ]
        ) from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [
                {**err, "loc": ("body", *err["loc"])}
                for err in exc.errors(include_url=False)
            ]
        ) from exc


def get_newsletter_service(request: Request) -> NewsletterService:
    """Return the newsletter service built by the app factory."""
    return request.app.state.newsletter_service


def get_reminder_service(request: Request) -> ReminderService:
    """Return the reminder service built by the app factory."""
    return request.app.state.reminder_service


@router.post(
    "/newsletter-signup",
    response_model=SubmissionResponse,
    dependencies=[
        Depends(rate_limit(NEWSLETTER_SCOPE, "Too many requests. Please try again later.")),
    ],
    openapi_extra=_json_request_body(NewsletterSignupRequest),
)
async def newsletter_signup(
    request: Request,
    service: NewsletterService = Depends(get_newsletter_service),
) -> SubmissionResponse:
    """Newsletter signup endpoint.

    Notifies the site owner and adds the contact to the newsletter list.

    Args:
        request: Request carrying a JSON body with firstName, lastName and email.
        service: Injected newsletter service.

    Returns:
        SubmissionResponse: ``{"success": true, "message": ...}``.

    Raises:
        RequestValidationError: 400 for a malformed body.
        ValidationAppError: 400 for missing fields or invalid email.
        EmailDeliveryAppError: 500 when the notification cannot be sent.
    """
    payload = await read_form_body(request, NewsletterSignupRequest)
    return await service.signup(payload)


@router.post(
    "/reminder-form",
    response_model=SubmissionResponse,
    dependencies=[
        Depends(rate_limit(REMINDER_SCOPE, "Too many requests. Please wait before submitting again.")),
    ],
    openapi_extra=_json_request_body(ReminderRequest),
)
async def reminder_form(
    request: Request,
    service: ReminderService = Depends(get_reminder_service),
) -> SubmissionResponse:
    """Reminder request endpoint.

    Adds the contact to the reminder list, emails a confirmation to the
    visitor and a copy to the admin.

    Args:
        request: Request carrying a JSON body with firstName, lastName,
            email, pageUrl and pageTitle.
        service: Injected reminder service.

    Returns:
        SubmissionResponse: ``{"success": true, "message": ...}``.
    """
    payload = await read_form_body(request, ReminderRequest)
    return await service.create_reminder(payload)
