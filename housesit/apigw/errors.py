"""Gestion standardisée des erreurs API.

Ce module fournit une gestion centralisée des erreurs: toutes les réponses d'erreur ont la forme
`{"error": message}` attendue par les clients web, avec un code interne journalisé pour le
diagnostic et un en-tête `Retry-After` sur les réponses 429.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from housesit.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_NOT_FOUND,
    HTTP_TOO_MANY_REQUESTS,
    HTTP_UNAUTHORIZED,
)

log = logging.getLogger(__name__)


# Common error codes
class ErrorCodes:
    """Standard error codes for the API."""

    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class APIError(HTTPException):
    """Custom API error rendered as `{"error": message}`."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize an API error with its public message and internal code."""
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code
        self.message = message
        self.details = details


def create_error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _request_id(request: Request) -> str | None:
    return request.headers.get("X-Request-ID")


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    level = logging.ERROR if exc.status_code >= HTTP_INTERNAL_SERVER_ERROR else logging.INFO
    log.log(
        level,
        "API error occurred",
        extra={
            "code": exc.code,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "path": request.url.path,
            "request_id": _request_id(request),
            "details": exc.details,
        },
    )
    return create_error_response(exc.status_code, exc.message, headers=exc.headers)


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle plain HTTPException (404 on unknown routes, 405, ...)."""
    log.info(
        "HTTP exception occurred",
        extra={
            "error_message": str(exc.detail),
            "status_code": exc.status_code,
            "path": request.url.path,
            "request_id": _request_id(request),
        },
    )
    return create_error_response(exc.status_code, str(exc.detail), headers=exc.headers)


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as 400 instead of FastAPI's 422."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    if first.get("type") == "json_invalid":
        message = "Invalid JSON body"
    else:
        # Integer loc parts are parser offsets or list indexes, not field names
        location = ".".join(
            p for p in first.get("loc", ()) if isinstance(p, str) and p != "body"
        )
        message = first.get("msg", "Invalid request")
        if location:
            message = f"{location}: {message}"
    log.info(
        "Validation error",
        extra={"path": request.url.path, "errors": errors, "request_id": _request_id(request)},
    )
    return create_error_response(HTTP_BAD_REQUEST, message)


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (including malformed upstream payloads)."""
    log.error(
        "Unexpected error occurred",
        extra={
            "code": ErrorCodes.INTERNAL_ERROR,
            "path": request.url.path,
            "request_id": _request_id(request),
            "exception_type": type(exc).__name__,
            "exception_message": str(exc),
        },
        exc_info=True,
    )
    return create_error_response(HTTP_INTERNAL_SERVER_ERROR, "Internal server error")


def register_error_handlers(app: FastAPI) -> None:
    """Branche les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_generic_exception)


# Convenience functions for common errors
def bad_request(message: str, details: dict[str, Any] | None = None) -> APIError:
    """Create a 400 Bad Request error."""
    return APIError(HTTP_BAD_REQUEST, ErrorCodes.INVALID_INPUT, message, details)


def unauthorized(message: str = "Unauthorized") -> APIError:
    """Create a 401 Unauthorized error."""
    return APIError(HTTP_UNAUTHORIZED, ErrorCodes.UNAUTHORIZED, message)


def forbidden(message: str) -> APIError:
    """Create a 403 Forbidden error."""
    return APIError(HTTP_FORBIDDEN, ErrorCodes.FORBIDDEN, message)


def not_found(message: str) -> APIError:
    """Create a 404 Not Found error."""
    return APIError(HTTP_NOT_FOUND, ErrorCodes.NOT_FOUND, message)


def rate_limited(message: str, retry_after: int | None = None) -> APIError:
    """Create a 429 Rate Limited error."""
    headers = {"Retry-After": str(retry_after)} if retry_after else None
    details = {"retry_after": retry_after} if retry_after else None
    return APIError(
        HTTP_TOO_MANY_REQUESTS, ErrorCodes.RATE_LIMITED, message, details, headers=headers
    )


def upstream_failure(message: str) -> APIError:
    """Create a 500 error for a failing upstream provider."""
    return APIError(HTTP_INTERNAL_SERVER_ERROR, ErrorCodes.UPSTREAM_FAILURE, message)
