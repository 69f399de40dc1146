"""Application error kinds and their HTTP translation"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings


logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base error carrying the HTTP status and the message shown to callers.

    ``detail`` is internal context; it is only returned to the client in
    development.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.message = message or self.public_message
        self.detail = detail
        super().__init__(self.message)


class InvalidInputError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    public_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    public_message = "Admin access required"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    public_message = "Not found"


class FileUnavailableError(AppError):
    """Entitlement is valid but the asset is missing on disk."""

    status_code = status.HTTP_404_NOT_FOUND
    public_message = "The requested file is currently unavailable. Please contact support."


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message = "Internal server error"


def error_payload(message: str, detail: Optional[str] = None) -> dict:
    payload = {"error": message}
    if detail and settings.is_development:
        payload["details"] = detail
    return payload


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc.message, exc.detail),
        headers=headers,
    )


def format_validation_errors(errors) -> str:
    """``loc: msg`` pairs for each failed field, request section prefix dropped"""
    parts = []
    for error in errors:
        loc = [str(part) for part in tuple(error.get("loc", ()))[1:]]
        field = ".".join(loc) or "request"
        parts.append(f"{field}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    detail = format_validation_errors(exc.errors())
    logger.info("%s %s rejected: %s", request.method, request.url.path, detail)
    return JSONResponse(
        status_code=InvalidInputError.status_code,
        content=error_payload(InvalidInputError.public_message, detail),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
