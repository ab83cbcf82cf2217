"""Global exception handlers that map domain and store exceptions to HTTP responses."""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from premium_service.domain.transfer_eligibility import RejectionReason
from premium_service.errors import (
    DUPLICATE_RESOURCE,
    MALFORMED_IDENTIFIER,
    NOT_FOUND,
    STORE_FAILURE,
    DuplicateResourceError,
    MalformedIdentifierError,
    NotFoundError,
    TransferRejectedError,
)
from premium_service.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def malformed_identifier_error_handler(
    _request: Request, exc: MalformedIdentifierError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        MALFORMED_IDENTIFIER,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def transfer_rejected_error_handler(
    _request: Request, exc: TransferRejectedError
) -> JSONResponse:
    if exc.reason is RejectionReason.MISSING_RECORD:
        status_code = status.HTTP_404_NOT_FOUND
    else:
        status_code = status.HTTP_409_CONFLICT
    return _error_response(status_code, str(exc), exc.reason.value)


def store_failure_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Not retried: a transfer may already be committed when the error surfaces.
    logger.error("Account store failure: %s", exc)
    return _error_response(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "Account store is unavailable",
        STORE_FAILURE,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(MalformedIdentifierError, malformed_identifier_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(TransferRejectedError, transfer_rejected_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_failure_handler)
