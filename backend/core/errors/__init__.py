"""Monadic Error Handling System

Type-safe error handling modelled on Rust's Result type.

Key components:
- Result[T, E]: Container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction

Usage:
    from core.errors import Ok, Err, Result, AppError, too_many_files

    def gate(files: list) -> Result[list, AppError]:
        if len(files) > 10:
            return too_many_files(10, origin="uploads")
        return Ok(files)

    match gate(files):
        case Ok(accepted):
            ...
        case Err(error):
            log.warning(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
)

from .builders import (
    # Validation (E2xxx)
    validation_error,
    invalid_format,
    invalid_json,
    # Uploads (E202x)
    invalid_file_type,
    file_too_large,
    too_many_files,
    payload_too_large,
    # Resource (E4xxx)
    not_found,
    # Business (E5xxx)
    business_error,
    quota_exceeded,
    limit_reached,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_error,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "validation_error",
    "invalid_format",
    "invalid_json",
    "invalid_file_type",
    "file_too_large",
    "too_many_files",
    "payload_too_large",
    "not_found",
    "business_error",
    "quota_exceeded",
    "limit_reached",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_error",
    "raise_result",
]
