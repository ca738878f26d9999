"""
Error hierarchy and global FastAPI handlers.

Every failure a handler can produce maps to exactly one class below, and every
class renders as ``{"error": <message>}``. Internal errors never echo their
cause to the caller; it is logged server-side instead.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class MoodRecipeError(Exception):
    """Base class for all errors rendered to API callers."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def public_message(self) -> str:
        return self.message


class ValidationError(MoodRecipeError):
    http_status = status.HTTP_400_BAD_REQUEST


class AuthenticationError(MoodRecipeError):
    http_status = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AuthenticationError):
    http_status = status.HTTP_403_FORBIDDEN


class NotFoundError(MoodRecipeError):
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(MoodRecipeError):
    http_status = status.HTTP_409_CONFLICT


class InternalError(MoodRecipeError):
    """500-level failure. ``message`` is for logs; callers see a generic one."""

    generic_message = INTERNAL_ERROR_MESSAGE

    def public_message(self) -> str:
        return self.generic_message


class StorageError(InternalError):
    """A database failure. ``pgcode`` is the PostgreSQL SQLSTATE, if any."""

    def __init__(self, message: str, pgcode: str | None = None):
        super().__init__(message)
        self.pgcode = pgcode


class UpstreamError(InternalError):
    generic_message = "Failed to fetch external recipes"


def _error_body(message: str) -> dict[str, str]:
    return {"error": message}


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers that turn exceptions into ``{"error": ...}`` bodies."""

    @app.exception_handler(MoodRecipeError)
    async def mood_recipe_error_handler(request: Request, exc: MoodRecipeError):
        if isinstance(exc, InternalError):
            logger.error(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc.message,
                exc_info=exc,
            )
        else:
            logger.info(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc.message,
            )
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_body(exc.public_message()),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s: %s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("Invalid request body"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        # Unknown routes (404) and unsupported methods (405) land here.
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s", request.url.path, exc_info=exc)
        # Sent from outside CORSMiddleware, so the header is added here.
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_error_body(INTERNAL_ERROR_MESSAGE),
            headers={"Access-Control-Allow-Origin": "*"},
        )
