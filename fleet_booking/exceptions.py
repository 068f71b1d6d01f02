import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fleet_booking.services.exceptions import (
    BookingConflictError,
    BookingDomainError,
    BookingValidationError,
    InvalidReservationStateError,
    NotFoundError,
    StorageError,
)

logger = logging.getLogger(__name__)

# Most specific first, isinstance() picks the first match
ERROR_STATUS_CODES = [
    (BookingValidationError, 400, "validation_error"),
    (NotFoundError, 404, "not_found"),
    (BookingConflictError, 409, "conflict"),
    (InvalidReservationStateError, 400, "invalid_state"),
    (StorageError, 500, "storage_error"),
]


def error_response(status_code: int, error: str, message: str, field: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "field": field,
        },
    )


async def booking_exception_handler(request: Request, exc: BookingDomainError):
    for exc_type, status_code, error in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            break
    else:
        status_code, error = 500, "internal_error"

    if status_code >= 500:
        logger.error(f"Unhandled booking failure on {request.url.path}: {exc}")
        # driver messages are not returned to clients
        return error_response(status_code, error, "Internal server error")

    return error_response(status_code, error, str(exc), getattr(exc, "field", None))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(BookingDomainError, booking_exception_handler)
