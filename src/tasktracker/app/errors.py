"""Domain errors and their translation into HTTP responses."""

from __future__ import annotations

import logging
from enum import Enum
from http import HTTPStatus
from typing import Any, Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Categories of failure the service reports to clients."""

    VALIDATION = "validation_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "server_error"


_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    kind: ErrorKind = ErrorKind.VALIDATION
    default_message: str = "Request could not be processed."

    def __init__(
        self,
        message: str | None = None,
        *,
        code: str | None = None,
        details: Any | None = None,
    ) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.kind.value
        self.details = details


class ValidationError(ApplicationError):
    """A request payload failed business validation."""

    kind = ErrorKind.VALIDATION
    default_message = "Validation failed."


class InvalidIdentifierError(ValidationError):
    """An externally supplied identifier is not well formed."""

    default_message = "Invalid id."

    def __init__(self, message: str | None = None, *, details: Any | None = None) -> None:
        super().__init__(message, code="invalid_identifier", details=details)


class UnauthorizedError(ApplicationError):
    """Authentication is missing or could not be verified."""

    kind = ErrorKind.UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    """Unknown email or wrong password; deliberately indistinguishable."""

    default_message = "Invalid credentials"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message, code="invalid_credentials")


class NotFoundError(ApplicationError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found."


class ConflictError(ApplicationError):
    kind = ErrorKind.CONFLICT
    default_message = "Resource already exists."


class ServerError(ApplicationError):
    kind = ErrorKind.INTERNAL
    default_message = "Internal server error."


def status_code_for(kind: ErrorKind) -> int:
    """Return the HTTP status used to report ``kind``."""

    return _STATUS_BY_KIND[kind]


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthorized",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def _merge_details_with_request(request: Request, details: Any | None) -> Any | None:
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        return details
    if details is None:
        return {"request_id": request_id}
    if isinstance(details, dict):
        return {"request_id": request_id, **details}
    return {"request_id": request_id, "detail": details}


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Any | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        code=code,
        message=message,
        details=_merge_details_with_request(request, details),
    )
    response = JSONResponse(status_code=status_code, content=payload.model_dump(mode="json"))
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _http_exception_message(status_code: int, detail: Any) -> str:
    if isinstance(detail, str) and detail:
        return detail
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def _summarise_validation_errors(errors: list[dict[str, Any]]) -> str:
    if not errors:
        return "Request validation failed."
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg", "Invalid value"))
    return f"{location}: {message}" if location else message


def unhandled_error_response(request: Request, exc: BaseException) -> JSONResponse:
    """Log ``exc`` with its traceback and return a 500 envelope that hides it."""

    logger.error(
        "Unhandled application error.",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"path": request.url.path},
    )
    return _error_response(
        request,
        status_code=status_code_for(ErrorKind.INTERNAL),
        code=ErrorKind.INTERNAL.value,
        message=ServerError.default_message,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain and framework errors into the JSON error envelope."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(request: Request, exc: ApplicationError) -> JSONResponse:
        status_code = status_code_for(exc.kind)
        log = logger.error if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
        log(
            "Application error encountered",
            extra={"code": exc.code, "status_code": status_code, "path": request.url.path},
        )
        headers = _BEARER_CHALLENGE if exc.kind is ErrorKind.UNAUTHORIZED else None
        return _error_response(
            request,
            status_code=status_code,
            code=exc.code,
            message=exc.message,
            details=exc.details,
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        logger.warning("Request validation failed", extra={"errors": errors})
        return _error_response(
            request,
            status_code=status_code_for(ErrorKind.VALIDATION),
            code=ErrorKind.VALIDATION.value,
            message=_summarise_validation_errors(errors),
            details={"errors": errors},
        )

    @app.exception_handler(DuplicateKeyError)
    async def _handle_duplicate_key(request: Request, exc: DuplicateKeyError) -> JSONResponse:
        logger.error("Duplicate key violation", exc_info=exc)
        return _error_response(
            request,
            status_code=status_code_for(ErrorKind.CONFLICT),
            code=ErrorKind.CONFLICT.value,
            message=ConflictError.default_message,
        )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
        log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
        log(
            "HTTP exception raised",
            extra={"code": code, "status_code": exc.status_code, "path": request.url.path},
        )
        return _error_response(
            request,
            status_code=exc.status_code,
            code=code,
            message=_http_exception_message(exc.status_code, exc.detail),
            headers=exc.headers or None,
        )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        return unhandled_error_response(request, exc)


__all__ = [
    "ApplicationError",
    "ConflictError",
    "ErrorKind",
    "InvalidCredentialsError",
    "InvalidIdentifierError",
    "NotFoundError",
    "ServerError",
    "UnauthorizedError",
    "ValidationError",
    "register_exception_handlers",
    "status_code_for",
    "unhandled_error_response",
]
