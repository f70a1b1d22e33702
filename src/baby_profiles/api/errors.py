"""Mapping of service errors to HTTP responses."""

import logging

from fastapi import status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from baby_profiles.config import Settings
from baby_profiles.domain.errors import (
    ActionInProgress,
    ConfirmationRequired,
    DuplicateIdentity,
    Forbidden,
    RecordNotFound,
    RecordsError,
    RemoteFailure,
    TransientAllocationConflict,
    Unauthenticated,
    ValidationFailed,
)
from baby_profiles.services.access import LANDING_ROUTE, LOGIN_ROUTE

logger = logging.getLogger(__name__)

GENERIC_REMOTE_MESSAGE = "Something went wrong. Please try again."

_STATUS_BY_ERROR: dict[type[RecordsError], int] = {
    DuplicateIdentity: status.HTTP_409_CONFLICT,
    ActionInProgress: status.HTTP_409_CONFLICT,
    TransientAllocationConflict: status.HTTP_503_SERVICE_UNAVAILABLE,
    RemoteFailure: status.HTTP_502_BAD_GATEWAY,
    ValidationFailed: 422,
    RecordNotFound: status.HTTP_404_NOT_FOUND,
    ConfirmationRequired: status.HTTP_428_PRECONDITION_REQUIRED,
}


class RouteRedirect(Exception):
    """Raised by route guards to send the caller elsewhere."""

    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def redirect(location: str) -> RedirectResponse:
    """Return a see-other redirect."""
    return RedirectResponse(location, status_code=status.HTTP_303_SEE_OTHER)


def error_response(
    exc: RecordsError,
    settings: Settings,
    form: dict[str, object] | None = None,
    status_code: int | None = None,
) -> Response:
    """Return the response for a service error, echoing the submitted form."""
    if isinstance(exc, Unauthenticated):
        return redirect(LOGIN_ROUTE)
    if isinstance(exc, Forbidden):
        return redirect(LANDING_ROUTE)
    resolved_status = status_code or _STATUS_BY_ERROR.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    return JSONResponse(
        status_code=resolved_status,
        content={
            "error": {
                "kind": exc.kind,
                "message": _user_message(exc, settings),
                "retryable": exc.retryable,
            },
            "form": form,
        },
    )


def _user_message(exc: RecordsError, settings: Settings) -> str:
    """Hide raw store messages outside the local environment."""
    if not isinstance(exc, RemoteFailure):
        return exc.message
    if settings.environment == "local":
        return f"{GENERIC_REMOTE_MESSAGE} (debug: {exc.message})"
    return GENERIC_REMOTE_MESSAGE
