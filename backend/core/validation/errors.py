"""Validation Error System

Structured, field-attributed errors produced by the rule engine, collected
across fields in declaration order.

Error Format (inside the AppError envelope):
{
    "error": {
        "code": "E2000_VALIDATION_GENERIC",
        "message": "Validation failed: 2 errors",
        "metadata": {
            "error_count": 2,
            "errors": [
                {"field": "email", "message": "Invalid email", "constraint": "email"},
                {"field": "password", "message": "Password is required", "constraint": "required"}
            ]
        }
    }
}
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from core.errors import AppError, ErrorCode


@dataclass(frozen=True, slots=True)
class ValidationErrorDetail:
    """Validation error for a single field.

    - field_path: field the failure is attributed to (e.g. "confirmPassword")
    - constraint: constraint violated (e.g. "email", "min_length[8]")
    - message: human-readable message, rendered inline by the client
    - code: ErrorCode of the failing constraint
    """
    field_path: str
    constraint: str
    message: str = ""
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC
    actual_value: Any = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses.

        Values are never echoed back; form fields include passwords and OTPs.
        """
        return {"field": self.field_path, "message": self.message, "constraint": self.constraint}

    @classmethod
    def from_pydantic_error(cls, error: dict[str, Any]) -> ValidationErrorDetail:
        """Create from a Pydantic/FastAPI error dict (path and query params)."""
        return cls(field_path=cls._format_path(error.get("loc", ())), constraint=error.get("type", "validation_error"),
            message=error.get("msg", "Validation failed"), code=ErrorCode.E2000_VALIDATION_GENERIC)

    @staticmethod
    def _format_path(loc: Sequence[str | int]) -> str:
        """Format a location tuple as a JSON path."""
        if not loc: return "$"
        parts = []
        for segment in loc:
            if isinstance(segment, int): parts.append(f"[{segment}]")
            elif parts: parts.append(f".{segment}")
            else: parts.append(str(segment))
        return "".join(parts)


@dataclass
class ValidationError(Exception):
    """Validation error with structured details, in declaration order."""
    message: str
    details: list[ValidationErrorDetail]
    schema: str | None = None

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.details: return self.message
        if len(self.details) == 1: return f"{(d := self.details[0]).field_path}: {d.message}"
        return f"{self.message} ({len(self.details)} errors)"

    @property
    def fields(self) -> list[str]:
        return [d.field_path for d in self.details]

    def as_pairs(self) -> list[dict[str, str]]:
        """The {field, message} list a form renders inline."""
        return [{"field": d.field_path, "message": d.message} for d in self.details]

    def to_app_error(self) -> AppError:
        """Convert to AppError for the error handling system.

        A single failure keeps its own code; several failures report the
        generic validation code. Both list every failure under ``errors``.
        """
        code = self.details[0].code if len(self.details) == 1 else ErrorCode.E2000_VALIDATION_GENERIC
        message = str(self) if len(self.details) == 1 else f"Validation failed: {len(self.details)} errors"
        metadata: dict[str, Any] = {"error_count": len(self.details), "errors": [d.to_dict() for d in self.details]}
        if self.schema: metadata["schema"] = self.schema
        return AppError(code=code, message=message, metadata=metadata)


@dataclass
class CollectAllAccumulator:
    """Gathers field errors in order, up to max_errors."""
    _errors: list[ValidationErrorDetail] = field(default_factory=list)
    max_errors: int = 50

    def add_error(self, detail: ValidationErrorDetail) -> bool:
        """Add error detail. Returns False once the cap is reached."""
        if len(self._errors) < self.max_errors: self._errors.append(detail)
        return len(self._errors) < self.max_errors

    def get_errors(self) -> list[ValidationErrorDetail]: return self._errors.copy()

    def has_errors(self) -> bool: return len(self._errors) > 0

    def to_validation_error(self, message: str = "Validation failed", schema: str | None = None) -> ValidationError | None:
        """Convert to ValidationError if errors exist."""
        if not self.has_errors(): return None
        return ValidationError(message=message, details=self.get_errors(), schema=schema)
