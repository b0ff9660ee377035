"""Exception handlers mapping validation and infrastructure failures to responses.

Error body format: ``{"error": "<message>", "details": "<optional detail>"}``.
Infrastructure failures never expose their detail to the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import AuthServiceError

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal Server Error"


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into 'field: message, field: message'."""
    parts = []
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return ", ".join(parts)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = format_validation_errors(exc)
    logger.warning(
        "Validation failed: %s %s: %s", request.method, request.url.path, details
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation Failed", "details": details},
    )


async def auth_service_exception_handler(
    request: Request, exc: AuthServiceError
) -> JSONResponse:
    logger.error(
        "%s on %s %s: %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.message,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": INTERNAL_ERROR},
    )


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AuthServiceError, auth_service_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
