"""Translation of domain errors into HTTP responses."""

import logging
import uuid

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from motel_booking.domain.errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.ROOM_UNAVAILABLE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.BOOKING_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.BUSINESS_RULE: status.HTTP_409_CONFLICT,
    ErrorKind.STALE_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.GATEWAY_FAILURE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.PAYMENT_AMOUNT_MISMATCH: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Kinds that signal an internal inconsistency; details stay in the logs.
OPAQUE_KINDS = frozenset({ErrorKind.PAYMENT_AMOUNT_MISMATCH})


def status_for(error: DomainError) -> int:
    return STATUS_BY_KIND.get(error.kind, status.HTTP_400_BAD_REQUEST)


def internal_error_response(error_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "message": "An unexpected error occurred. Please contact support with the error_id if the issue persists.",
        },
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    if exc.kind in OPAQUE_KINDS:
        error_id = str(uuid.uuid4())
        logger.error(
            "Internal consistency error",
            exc_info=exc,
            extra={
                "error_id": error_id,
                "code": exc.code,
                "context": exc.context,
                "path": request.url.path,
            },
        )
        return internal_error_response(error_id)

    status_code = status_for(exc)
    logger.info(
        "Request rejected",
        extra={"code": exc.code, "kind": exc.kind.value, "path": request.url.path},
    )
    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "code": exc.code,
            "kind": exc.kind.value,
            "context": exc.context,
        },
    )


def register_domain_error_handler(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
