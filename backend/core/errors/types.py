"""Monadic Error Handling Types

Result/Either types for deterministic, composable error propagation.
Validation and upload gating return these instead of raising; only the
HTTP boundary turns an Err into an exception.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Generic, Iterator, NoReturn, TypeVar, Union, final
from uuid import uuid4

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


class ErrorCode(Enum):
    """Hierarchical error code taxonomy.

    E2xxx: Validation and upload errors
    E3xxx: Authentication/Authorization errors
    E4xxx: Resource lookup errors
    E5xxx: Business logic errors
    E9xxx: Internal/Unknown errors
    """
    # Validation (E2xxx)
    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2006_FIELD_MISMATCH = 2006
    E2007_TOO_SHORT = 2007
    E2008_TOO_LONG = 2008
    E2010_INVALID_EMAIL = 2010
    E2020_PAYLOAD_TOO_LARGE = 2020
    E2021_INVALID_JSON = 2021
    E2022_INVALID_FILE_TYPE = 2022
    E2023_TOO_MANY_FILES = 2023

    # Authentication/Authorization (E3xxx)
    E3000_AUTH_GENERIC = 3000
    E3004_TOKEN_MISSING = 3004
    E3011_RESOURCE_FORBIDDEN = 3011

    # Resource lookup (E4xxx)
    E4010_NOT_FOUND = 4010

    # Business Logic (E5xxx)
    E5000_BUSINESS_GENERIC = 5000
    E5002_STATE_CONFLICT = 5002
    E5010_QUOTA_EXCEEDED = 5010
    E5011_LIMIT_REACHED = 5011

    # Internal (E9xxx)
    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def http_status(self) -> int:
        """Map error code to appropriate HTTP status."""
        code = self.value
        if code in (2020, 2023):
            return 413
        if code == 2022:
            return 415
        if 2000 <= code < 2100:
            return 400
        if 3000 <= code < 3010:
            return 401
        if 3010 <= code < 3100:
            return 403
        if code == 4010:
            return 404
        if 5000 <= code < 5010:
            return 409
        if 5010 <= code < 5100:
            return 429
        return 500

    @property
    def category(self) -> str:
        """Human-readable error category."""
        code = self.value
        if 2000 <= code < 3000:
            return "validation"
        if 3000 <= code < 4000:
            return "auth"
        if 4000 <= code < 5000:
            return "resource"
        if 5000 <= code < 6000:
            return "business"
        return "internal"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Immutable context for error tracing and debugging."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""
    request_id: str | None = None


@dataclass(frozen=True, slots=True)
class AppError:
    """Base application error with full context.

    All errors carry:
    - Typed error code from taxonomy
    - Human-readable message
    - Structured metadata for debugging
    - Tracing context
    - Optional cause for error chaining
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    @property
    def error_id(self) -> str:
        """Unique identifier for this error instance."""
        return f"{self.code.name}:{self.context.correlation_id}"

    def with_context(self, **kwargs) -> AppError:
        """Create new error with updated context."""
        new_ctx = ErrorContext(
            correlation_id=kwargs.get("correlation_id") or self.context.correlation_id,
            timestamp=self.context.timestamp,
            origin=kwargs.get("origin", self.context.origin),
            request_id=kwargs.get("request_id", self.context.request_id),
        )
        return AppError(
            code=self.code,
            message=self.message,
            context=new_ctx,
            metadata=self.metadata,
            cause=self.cause,
        )

    def with_metadata(self, **kwargs) -> AppError:
        """Create new error with additional metadata."""
        return AppError(
            code=self.code,
            message=self.message,
            context=self.context,
            metadata={**self.metadata, **kwargs},
            cause=self.cause,
        )

    def to_dict(self) -> dict:
        """Serialize error for API responses."""
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success variant of Result."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the success value."""
        return Ok(f(self.value))

    def map_err(self, f: Callable) -> Ok[T]:
        return self

    def and_then(self, f: Callable[[T], Result]) -> Result:
        """Chain operations that may fail."""
        return f(self.value)

    def match(self, ok: Callable[[T], U], err: Callable) -> U:
        return ok(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Failure variant of Result.

    Wraps an AppError, or a ValidationError for schema failures.
    """
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map(self, f: Callable) -> Err[E]:
        return self

    def map_err(self, f: Callable[[E], F]) -> Err[F]:
        """Transform the error."""
        return Err(f(self.error))

    def and_then(self, f: Callable) -> Err[E]:
        return self

    def match(self, ok: Callable, err: Callable[[E], U]) -> U:
        return err(self.error)

    def __iter__(self) -> Iterator:
        return iter([])


Result = Union[Ok[T], Err[E]]
