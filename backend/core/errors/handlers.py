"""FastAPI Exception Handlers

Integrates the Result/AppError system and the validation system with
FastAPI's exception handling. Converts AppErrors, ValidationErrors and
standard exceptions to the JSON error envelope.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext

log = get_logger("errors.handlers")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when an AppError has to leave code that doesn't use the
    Result type (e.g., FastAPI dependencies).
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def _request_context(request: Request) -> dict:
    return {
        "correlation_id": request.headers.get("X-Correlation-ID", ""),
        "request_id": request.headers.get("X-Request-ID"),
    }


def result_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to FastAPI JSONResponse."""
    status_code = error.code.http_status

    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        status=status_code,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
    )

    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    """Handle AppErrorException raised in routes and dependencies."""
    return result_to_response(exc.error.with_context(**_request_context(request)))


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle standard HTTP exceptions with the structured envelope."""
    status_code = exc.status_code
    code_map = {
        400: ErrorCode.E2000_VALIDATION_GENERIC,
        401: ErrorCode.E3004_TOKEN_MISSING,
        403: ErrorCode.E3011_RESOURCE_FORBIDDEN,
        404: ErrorCode.E4010_NOT_FOUND,
        409: ErrorCode.E5002_STATE_CONFLICT,
        413: ErrorCode.E2020_PAYLOAD_TOO_LARGE,
        422: ErrorCode.E2000_VALIDATION_GENERIC,
        429: ErrorCode.E5011_LIMIT_REACHED,
    }
    code = code_map.get(
        status_code,
        ErrorCode.E9001_UNEXPECTED_ERROR if status_code >= 500 else ErrorCode.E2000_VALIDATION_GENERIC,
    )

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(correlation_id=request.headers.get("X-Correlation-ID", ""), origin="http"),
    )
    response = result_to_response(error)
    response.status_code = status_code
    return response


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI/Pydantic request validation errors (path and query params)."""
    from core.validation.errors import ValidationError, ValidationErrorDetail

    validation_error = ValidationError(
        message="Request validation failed",
        details=[ValidationErrorDetail.from_pydantic_error(e) for e in exc.errors()],
    )
    error = validation_error.to_app_error().with_context(
        origin="request_validation", **_request_context(request)
    )
    return result_to_response(error)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle ValidationError raised by the rule engine boundary."""
    from core.validation.errors import ValidationError

    if not isinstance(exc, ValidationError):
        raise exc

    error = exc.to_app_error().with_context(origin="validation", **_request_context(request))
    return result_to_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler: converts to an internal error and logs the traceback."""
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID", ""),
            origin="unhandled",
        ),
        cause=exc,
    )

    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )

    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on the FastAPI app."""
    from core.validation.errors import ValidationError

    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_error(error: AppError) -> None:
    """Raise AppError as exception.

    Usage:
        if result.is_err():
            raise_error(result.unwrap_err())
    """
    raise AppErrorException(error)


def raise_result(result) -> None:
    """Raise if Result is Err, otherwise return.

    Upload outcomes carry an AppError; schema outcomes carry a
    ValidationError, which is raised as-is for its own handler.
    """
    if result.is_ok():
        return
    error = result.unwrap_err()
    if isinstance(error, AppError):
        raise AppErrorException(error)
    raise error
