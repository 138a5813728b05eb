"""Application error types and their JSON rendering."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class MarketplaceError(Exception):
    """Base error rendered as ``{"message": ...}`` with ``status_code``."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """A required field is missing or invalid."""


class ConflictError(MarketplaceError):
    """The record already exists (duplicate email)."""


class InvalidCredentialsError(MarketplaceError):
    """Email/password pair does not match a user."""


class UnauthorizedError(MarketplaceError):
    """Missing or unknown bearer token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class UploadError(MarketplaceError):
    """The image host rejected the upload or could not be reached."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class StorageError(MarketplaceError):
    """The database failed while writing a record."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PublishError(MarketplaceError):
    """An offer could not be published, whatever the cause."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


async def marketplace_error_handler(request: Request, exc: MarketplaceError) -> JSONResponse:
    return error_response(exc.status_code, exc.message)


def format_validation_error(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query"))
    message = error.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = format_validation_error(errors[0]) if errors else "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(status.HTTP_400_BAD_REQUEST, message)


def register_error_handlers(app: FastAPI) -> None:
    """Render domain and request validation errors with a message body."""
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
