"""Global exception handlers for consistent error responses.

AppError subclasses map to HTTP statuses the IaC engine can act on:
- ValidationAppError / IdentifierFormatError -> 400
- AuthenticationAppError -> 403
- ResourceNotFoundAppError -> 404
- RemoteAppError -> 502
- InvariantAppError and anything else -> 500
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from cis_provider.core.errors import (
    AppError,
    AuthenticationAppError,
    InvariantAppError,
    RemoteAppError,
    ResourceNotFoundAppError,
    ValidationAppError,
)
from cis_provider.core.logging import get_request_id

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[AppError], int]] = [
    (ValidationAppError, 400),
    (AuthenticationAppError, 403),
    (ResourceNotFoundAppError, 404),
    (RemoteAppError, 502),
    (InvariantAppError, 500),
]


def status_for_error(exc: AppError) -> int:
    """Return the HTTP status code for an AppError instance."""
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render an AppError as ``{"error": {code, message, request_id, details}}``."""
    status_code = status_for_error(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for unexpected errors; never leaks internals to the client."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(Exception)(general_exception_handler)
