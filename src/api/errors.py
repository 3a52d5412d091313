"""Translate exceptions into the ``{"success": false, "message": ...}`` envelope."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.validation import format_validation_error
from schemas.common import ErrorResponse
from services.exceptions import ServiceError, StorageUploadError, UnauthorizedError

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route does not exist."
INTERNAL_ERROR = "Internal server error."


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an error envelope response."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
        headers=headers,
    )


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Map service exceptions to their status code and message."""
    if isinstance(exc, StorageUploadError):
        logger.error("Image upload failed on %s %s: %s", request.method, request.url.path, exc.reason)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, UnauthorizedError) else None
    return error_response(exc.status_code, exc.message, headers)


async def request_validation_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed path/query parameters as 400."""
    return error_response(400, format_validation_error(exc.errors()))


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    """Wrap framework HTTP errors; unknown routes get a fixed message."""
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = ROUTE_NOT_FOUND
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and hide their details from the client."""
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc,
    )
    return error_response(500, INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install all envelope exception handlers on an app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
