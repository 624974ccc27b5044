"""
Exception handlers for FastAPI application.

Domain exceptions are mapped to HTTP status codes by their class; every error
response shares the same JSON envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.domain import (
    AuthenticationException,
    AuthorizationException,
    DoctorNotAvailableException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InternalException,
    InvalidStateException,
    SlotConflictException,
    ValidationException,
)

logger = logging.getLogger(__name__)

# Checked in order; first isinstance match wins
DOMAIN_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (SlotConflictException, status.HTTP_409_CONFLICT),
    (DoctorNotAvailableException, status.HTTP_400_BAD_REQUEST),
    (AuthorizationException, status.HTTP_403_FORBIDDEN),
    (InvalidStateException, status.HTTP_409_CONFLICT),
    (InternalException, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (AuthenticationException, status.HTTP_401_UNAUTHORIZED),
    (DuplicateEntityException, status.HTTP_409_CONFLICT),
)


def status_code_for(exc: DomainException) -> int:
    """Get the HTTP status code for a domain exception."""
    for exc_type, code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def _error_body(status_code: int, code: str, message: str, details=None) -> dict:
    return {
        "error": True,
        "code": code,
        "message": message,
        "details": details or {},
        "status_code": status_code,
    }


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle DomainException subclasses raised by use cases."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = status_code_for(exc)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None

    # Internal details stay in the logs
    details = {} if isinstance(exc, InternalException) else exc.details
    message = "Internal server error" if isinstance(exc, InternalException) else exc.message

    if status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content=_error_body(status_code, exc.code, message, details),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with consistent response format."""
    http_exc = exc if isinstance(exc, HTTPException) else HTTPException(status_code=500, detail=str(exc))
    return JSONResponse(
        status_code=http_exc.status_code,
        content=_error_body(http_exc.status_code, "HTTP_ERROR", str(http_exc.detail)),
        headers=http_exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with detailed error messages."""
    errors = []
    if isinstance(exc, RequestValidationError):
        for error in exc.errors():
            errors.append(
                {
                    "field": ".".join(str(loc) for loc in error["loc"]),
                    "message": error["msg"],
                    "type": error["type"],
                }
            )

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "VALIDATION_ERROR",
            "Validation error",
            {"errors": errors},
        ),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
