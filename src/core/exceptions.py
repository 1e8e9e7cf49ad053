"""Custom exception handling to enforce the API error envelope."""

import logging
from typing import Any

from django.conf import settings
from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotAuthenticated,
    PermissionDenied,
    ValidationError,
)
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from access_control.exceptions import AccessError, StoreError
from authentication.services import BlocklistUnavailable
from core.response import error_envelope

logger = logging.getLogger(__name__)

GENERIC_AUTH_ERROR = "Authentication credentials were not provided or are invalid, or the token was revoked."
GENERIC_FORBIDDEN_ERROR = "You do not have permission to perform this action on this resource."


def _normalize_errors(payload: Any) -> list[Any]:
    """Convert DRF's response.data into a list for the envelope."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and "detail" in payload:
        # Common DRF pattern: {"detail": "..."}
        return [payload["detail"]]
    return [payload]


def _error_code(exc: Exception, status_code: int) -> str:
    if status_code == status.HTTP_401_UNAUTHORIZED and not isinstance(exc, AccessError):
        return "unauthenticated"
    if isinstance(exc, ValidationError):
        return "invalid"
    if isinstance(exc, APIException):
        return exc.default_code
    return "not_found" if status_code == status.HTTP_404_NOT_FOUND else "error"


def _envelope(errors: list[Any], code: str, status_code: int) -> Response:
    return Response(error_envelope(errors, code), status=status_code)


def custom_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Wrap DRF errors in `{ "data": null, "errors": [...], "code": ... }` shape.

    - Uses DRF's default handler to produce the base response.
    - Pipeline errors keep their own message and code; generic auth and
      permission failures get a fixed message.
    - Optionally exposes more detailed auth errors when DEBUG_AUTH_ERRORS is enabled.
    """

    # Blocklist connectivity errors are security-critical and fail closed.
    if isinstance(exc, BlocklistUnavailable):
        return _envelope(
            ["Authentication service unavailable (blocklist)."],
            "blocklist_unavailable",
            status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    # Treat database errors as a temporary outage without leaking store details.
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception("Database error in %s", type(view).__name__ if view is not None else "request")
        return _envelope([StoreError.default_detail], StoreError.default_code, status.HTTP_503_SERVICE_UNAVAILABLE)

    response = drf_exception_handler(exc, context)

    if response is None:
        return response

    # DRF answers 403 for NotAuthenticated when no authenticator supplies a
    # WWW-Authenticate header; authentication failures are always 401 here.
    if isinstance(exc, (AuthenticationFailed, NotAuthenticated)):
        response.status_code = status.HTTP_401_UNAUTHORIZED

    # Successful responses are untouched here; BaseAPIView/BaseViewSet handle them.
    if response.status_code < 400:
        return response

    if response.status_code == status.HTTP_401_UNAUTHORIZED and not getattr(settings, "DEBUG_AUTH_ERRORS", False):
        errors = [GENERIC_AUTH_ERROR]
    elif isinstance(exc, PermissionDenied):
        errors = [GENERIC_FORBIDDEN_ERROR]
    else:
        errors = _normalize_errors(response.data)

    response.data = error_envelope(errors, _error_code(exc, response.status_code))
    return response
