"""Map domain errors to HTTP responses.

Installed as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Domain errors keep their
code and message; storage failures are logged and answered generically.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from ticketing.domain.errors import (
    DomainError,
    InsufficientTicketsError,
    InvalidStateTransitionError,
    NotAuthorizedError,
    NotFoundError,
    QuantityExceededError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: tuple[tuple[type[DomainError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (InvalidStateTransitionError, status.HTTP_400_BAD_REQUEST),
    (InsufficientTicketsError, status.HTTP_400_BAD_REQUEST),
    (QuantityExceededError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
)


def error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}


def domain_exception_handler(exc: Exception, context: dict) -> Response | None:
    if isinstance(exc, StorageError):
        view = context.get("view")
        logger.error(
            "Storage failure while handling request",
            exc_info=exc,
            extra={"view": type(view).__name__ if view is not None else None},
        )
        return Response(
            error_body(exc.code.value, "Internal server error"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    if isinstance(exc, DomainError):
        for error_type, http_status in STATUS_BY_ERROR:
            if isinstance(exc, error_type):
                return Response(error_body(exc.code.value, exc.message), status=http_status)
        return Response(
            error_body(exc.code.value, exc.message), status=status.HTTP_400_BAD_REQUEST
        )

    response = exception_handler(exc, context)
    if response is None:
        return None
    if isinstance(response.data, dict) and "detail" in response.data:
        code = str(getattr(exc, "default_code", "error")).upper()
        response.data = error_body(code, str(response.data["detail"]))
    else:
        body = error_body("INVALID_INPUT", "Invalid input")
        body["error"]["fields"] = response.data
        response.data = body
    return response
