"""Domain-Specific Error Builders

Ergonomic constructors for typed errors. Each builder creates an
AppError with the appropriate code and context, wrapped in Err.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


def _format_bytes(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):g} MiB"
    if size >= 1024:
        return f"{size / 1024:g} KiB"
    return f"{size} bytes"


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    value: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, "value": value, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def invalid_format(
    field: str, expected: str, got: str | None = None, origin: str = ""
) -> Err[AppError]:
    msg = f"Invalid format for '{field}': expected {expected}"
    if got:
        msg += f", got '{got}'"
    return validation_error(
        msg,
        code=ErrorCode.E2002_INVALID_FORMAT,
        field=field,
        expected=expected,
        origin=origin,
    )


def invalid_json(reason: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid JSON in request body: {reason}",
        code=ErrorCode.E2021_INVALID_JSON,
        origin=origin,
    )


# =============================================================================
# Upload Errors (E202x)
# =============================================================================

def invalid_file_type(
    field: str,
    filename: str,
    mime_type: str,
    allowed: frozenset[str],
    origin: str = "",
) -> Err[AppError]:
    return validation_error(
        "Invalid file type. Only images are allowed.",
        code=ErrorCode.E2022_INVALID_FILE_TYPE,
        field=field,
        filename=filename,
        mime_type=mime_type,
        allowed=sorted(allowed),
        origin=origin,
    )


def file_too_large(
    field: str, filename: str, limit: int, origin: str = ""
) -> Err[AppError]:
    return validation_error(
        f"File '{filename}' exceeds the {_format_bytes(limit)} limit",
        code=ErrorCode.E2020_PAYLOAD_TOO_LARGE,
        field=field,
        filename=filename,
        limit=limit,
        origin=origin,
    )


def too_many_files(limit: int, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Too many files: at most {limit} allowed per request",
        code=ErrorCode.E2023_TOO_MANY_FILES,
        limit=limit,
        origin=origin,
    )


def payload_too_large(
    what: str, limit: int, field: str | None = None, origin: str = ""
) -> Err[AppError]:
    return validation_error(
        f"{what} exceeds the limit of {limit}",
        code=ErrorCode.E2020_PAYLOAD_TOO_LARGE,
        field=field,
        limit=limit,
        origin=origin,
    )


# =============================================================================
# Resource Errors (E4xxx)
# =============================================================================

def not_found(resource: str, identifier: str, origin: str = "") -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E4010_NOT_FOUND,
        message=f"{resource} '{identifier}' not found",
        context=ErrorContext(origin=origin),
        metadata={"resource": resource, "id": identifier},
    ))


# =============================================================================
# Business Logic Errors (E5xxx)
# =============================================================================

def business_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E5000_BUSINESS_GENERIC,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create business logic error."""
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata=metadata,
    ))


def quota_exceeded(
    resource: str,
    limit: int,
    current: int,
    *,
    message: str | None = None,
    origin: str = "",
) -> Err[AppError]:
    return business_error(
        message or f"Quota exceeded for '{resource}': {current}/{limit}",
        code=ErrorCode.E5010_QUOTA_EXCEEDED,
        resource=resource,
        limit=limit,
        current=current,
        origin=origin,
    )


def limit_reached(
    resource: str, limit: int, *, message: str | None = None, origin: str = ""
) -> Err[AppError]:
    return business_error(
        message or f"Limit of {limit} reached for '{resource}'",
        code=ErrorCode.E5011_LIMIT_REACHED,
        resource=resource,
        limit=limit,
        origin=origin,
    )
