"""Typed error kinds shared by services and routes.

Services raise ``AppError`` subclasses instead of bare ``HTTPException`` so
callers can branch on ``kind`` rather than on message text. The integrity
classifier at the bottom is the only place that inspects database messages.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_CODE = "23505"
GENERIC_ERROR_MESSAGE = "Something went wrong. Please try again."


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID_CREDENTIALS = "invalid_credentials"
    REMOTE = "remote"


class AppError(HTTPException):
    kind = ErrorKind.REMOTE
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None, extra: Optional[Dict[str, Any]] = None):
        super().__init__(status_code=status_code or self.default_status, detail=message)
        self.message = message
        self.extra = extra or {}


class ValidationFailed(AppError):
    kind = ErrorKind.VALIDATION
    default_status = status.HTTP_400_BAD_REQUEST


class ConflictError(AppError):
    kind = ErrorKind.CONFLICT
    default_status = status.HTTP_409_CONFLICT


class NotFoundError(AppError):
    kind = ErrorKind.NOT_FOUND
    default_status = status.HTTP_404_NOT_FOUND


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN
    default_status = status.HTTP_403_FORBIDDEN


class InvalidCredentialsError(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_status = status.HTTP_400_BAD_REQUEST


class RemoteError(AppError):
    kind = ErrorKind.REMOTE
    default_status = status.HTTP_502_BAD_GATEWAY


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION_CODE:
        return True
    # SQLite reports uniqueness failures only through the message
    return "UNIQUE constraint failed" in str(orig or exc)


def classify_integrity_error(exc: IntegrityError) -> ErrorKind:
    if is_unique_violation(exc):
        return ErrorKind.CONFLICT
    return ErrorKind.VALIDATION


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    body = {"detail": exc.message, "kind": exc.kind.value}
    body.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": GENERIC_ERROR_MESSAGE, "kind": ErrorKind.REMOTE.value},
    )
