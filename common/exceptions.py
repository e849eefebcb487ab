"""Domain errors shared by all apps and their API rendering.

Services raise these plain exceptions; views never translate them by hand.
The DRF exception handler below renders every failure as
``{"detail": <message>, "code": <machine code>}`` so clients can tell an
input problem (4xx with a specific code) from an infrastructure problem
(503 with code ``transient``).
"""

import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger("uretix.api")


class MarketplaceError(Exception):
    """Base class for errors raised by domain services."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Unable to complete the request."
    default_code = "error"

    def __init__(self, detail: str | None = None, *, code: str | None = None):
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)


class NotFoundError(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class PermissionDeniedError(MarketplaceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action."
    default_code = "forbidden"


class ConflictError(MarketplaceError):
    """Business rule violation the caller may correct and retry."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code = "conflict"


class BusinessValidationError(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class TransientError(MarketplaceError):
    """Infrastructure failure; the caller should retry later."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Service temporarily unavailable."
    default_code = "transient"


_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "invalid",
    status.HTTP_401_UNAUTHORIZED: "not_authenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
    status.HTTP_429_TOO_MANY_REQUESTS: "throttled",
}


def api_exception_handler(exc, context):
    """DRF exception handler adding a machine-checkable ``code`` to errors."""

    if isinstance(exc, MarketplaceError):
        if isinstance(exc, TransientError):
            logger.error("api.transient_failure", extra={"event": "api.transient_failure", "detail": exc.detail})
        return Response({"detail": exc.detail, "code": exc.code}, status=exc.status_code)

    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(
            "api.database_error",
            extra={"event": "api.database_error", "view": type(view).__name__ if view else None},
        )
        return Response(
            {"detail": TransientError.default_detail, "code": TransientError.default_code},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None
    if isinstance(exc, ValidationError):
        response.data = {"detail": "Invalid input.", "code": "invalid", "errors": response.data}
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data.setdefault("code", _STATUS_CODES.get(response.status_code, "error"))
    return response
