# shared/errors.py
"""
Domain error taxonomy and the FastAPI handlers that turn it into responses.

Core modules raise these instead of HTTPException so they stay usable (and
testable) without a request in flight.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shared.config import DEBUG

logger = logging.getLogger(__name__)


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, errors=None, **extra):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}
        self.extra = extra


class ValidationError(DomainError):
    """Missing or malformed input; `errors` maps field name to reason."""


class InvalidTransitionError(DomainError):
    """The target record is in a state that does not allow the request."""


class AuthenticationError(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(DomainError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(DomainError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(DomainError):
    status_code = status.HTTP_409_CONFLICT


class DataIntegrityError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: DomainError) -> dict:
    message = exc.message
    if exc.status_code >= 500 and not DEBUG:
        message = "Server error"
    body = {"detail": message}
    if exc.errors:
        body["errors"] = exc.errors
    body.update(exc.extra)
    return body


def register_exception_handlers(app: FastAPI):
    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=error_body(exc))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        detail = str(exc) if DEBUG else "Server error"
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": detail},
        )
