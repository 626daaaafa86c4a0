"""Compositional Validator System

Atomic validators are the constraints of a FieldSpec. They combine via
AND combinators and carry their own error codes, so a schema only has to
declare them in order.

Features:
- Frozen dataclass validators for immutability
- Rich validation metadata for error context
- Short-circuit evaluation for AND combinators
- Message overrides via with_message()
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

import email_validator
from email_validator import EmailNotValidError, validate_email

from core.errors import ErrorCode

# Reserved names (.test, .local, .invalid) are well-formed domains; only syntax is checked here
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


class _Missing:
    """Sentinel for a field absent from the input."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a single constraint check."""
    is_valid: bool
    error_message: str | None = None
    error_code: ErrorCode | None = None
    constraint: str | None = None
    expected: Any = None
    actual: Any = None

    @classmethod
    def valid(cls) -> ValidationResult: return cls(is_valid=True)

    @classmethod
    def invalid(cls, message: str, code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC, *,
                constraint: str | None = None, expected: Any = None, actual: Any = None) -> ValidationResult:
        return cls(is_valid=False, error_message=message, error_code=code, constraint=constraint,
            expected=expected, actual=actual)


def _type_error(value: Any, expected: str) -> ValidationResult:
    return ValidationResult.invalid(
        f"Expected {expected}, got {type(value).__name__}",
        ErrorCode.E2004_INVALID_TYPE,
        constraint=expected,
        expected=expected,
        actual=type(value).__name__,
    )


class AtomicValidator(ABC):
    """Base class for atomic validators.

    Validators are immutable and composable:
    - & (AND): both must pass, right side only runs if left passed
    - .with_message(): replace the error message, keep the code
    """

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Short constraint name used in error details."""

    @property
    def checks_presence(self) -> bool:
        """True if this validator decides what a missing value means."""
        return False

    def __call__(self, value: Any) -> ValidationResult: return self.validate(value)

    def __and__(self, other: AtomicValidator) -> And: return And(self, other)

    def with_message(self, message: str) -> WithMessage: return WithMessage(self, message)


# ============================================================================
# Presence
# ============================================================================

@dataclass(frozen=True, slots=True)
class Required(AtomicValidator):
    """Value must be present, non-null and, for strings and lists, non-empty."""
    message: str = "Required"

    @property
    def constraint_name(self) -> str:
        return "required"

    @property
    def checks_presence(self) -> bool:
        return True

    def validate(self, value: Any) -> ValidationResult:
        if value is MISSING or value is None or (isinstance(value, (str, list, tuple)) and len(value) == 0):
            return ValidationResult.invalid(
                self.message,
                ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                constraint=self.constraint_name,
                expected="a value",
                actual=None if value is MISSING else value,
            )
        return ValidationResult.valid()


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(AtomicValidator):
    """Validate string length constraints."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        if self.min_length is not None and self.min_length == self.max_length:
            return f"length[{self.min_length}]"
        if self.min_length is not None and self.max_length is not None:
            return f"length[{self.min_length},{self.max_length}]"
        if self.min_length is not None:
            return f"min_length[{self.min_length}]"
        if self.max_length is not None:
            return f"max_length[{self.max_length}]"
        return "string_length"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"String must contain at least {self.min_length} character(s)",
                ErrorCode.E2007_TOO_SHORT,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} characters",
                actual=f"{length} characters",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"String must contain at most {self.max_length} character(s)",
                ErrorCode.E2008_TOO_LONG,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} characters",
                actual=f"{length} characters",
            )

        return ValidationResult.valid()


def ExactLength(length: int) -> StringLength:
    """String of exactly ``length`` characters."""
    return StringLength(min_length=length, max_length=length)


@dataclass(frozen=True, slots=True)
class NonEmpty(AtomicValidator):
    """Validate that string is not empty or whitespace-only."""
    strip_whitespace: bool = True

    @property
    def constraint_name(self) -> str:
        return "non_empty"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        check_value = value.strip() if self.strip_whitespace else value
        if not check_value:
            return ValidationResult.invalid(
                "String cannot be empty",
                ErrorCode.E2001_REQUIRED_FIELD_MISSING,
                constraint=self.constraint_name,
                expected="non-empty string",
                actual="empty string",
            )
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """Validate string against regex pattern.

    ``search=True`` looks for the pattern anywhere in the value, which is
    how character-class requirements (one uppercase letter, one digit...)
    are expressed.
    """
    pattern: str
    flags: int = 0
    description: str | None = None
    search: bool = False

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.pattern}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        compiled = re.compile(self.pattern, self.flags)
        matched = compiled.search(value) if self.search else compiled.match(value)
        if not matched:
            return ValidationResult.invalid(
                f"Value does not match pattern: {self.description or self.pattern}",
                ErrorCode.E2002_INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '{self.pattern}'",
                actual=value[:50] + ("..." if len(value) > 50 else ""),
            )
        return ValidationResult.valid()


@dataclass(frozen=True, slots=True)
class EmailValidator(AtomicValidator):
    """Validate email address syntax (no DNS lookups).

    Domain names need a dotted top-level domain; bracketed IP literals are
    accepted.
    """

    @property
    def constraint_name(self) -> str:
        return "email"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        try:
            validate_email(value, check_deliverability=False, allow_domain_literal=True)
        except EmailNotValidError as e:
            return ValidationResult.invalid(
                f"Invalid email format: {e}",
                ErrorCode.E2010_INVALID_EMAIL,
                constraint=self.constraint_name,
                expected="valid email address",
                actual=value,
            )
        return ValidationResult.valid()


# ============================================================================
# Numeric string validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericString(AtomicValidator):
    """Validate a decimal string and its range without converting the value.

    Range bounds are inclusive unless ``exclusive_min`` is set.
    """
    min_value: Decimal | int | float | None = None
    max_value: Decimal | int | float | None = None
    integer_only: bool = False
    exclusive_min: bool = False

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_value is not None:
            parts.append(f"{'>' if self.exclusive_min else '>='}{self.min_value}")
        if self.max_value is not None:
            parts.append(f"<={self.max_value}")
        kind = "integer" if self.integer_only else "number"
        return f"{kind}[{', '.join(parts)}]" if parts else kind

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return _type_error(value, "string")

        try:
            number = Decimal(value.strip())
        except InvalidOperation:
            number = None
        if number is None or not number.is_finite() or (
            self.integer_only and number != number.to_integral_value()
        ):
            expected = "integer" if self.integer_only else "number"
            return ValidationResult.invalid(
                f"Expected a {expected}, got '{value}'",
                ErrorCode.E2002_INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=expected,
                actual=value,
            )

        if self.min_value is not None:
            low = Decimal(str(self.min_value))
            if number < low or (self.exclusive_min and number == low):
                return ValidationResult.invalid(
                    f"Value {value} is below the minimum {self.min_value}",
                    ErrorCode.E2003_OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"{'>' if self.exclusive_min else '>='} {self.min_value}",
                    actual=value,
                )
        if self.max_value is not None and number > Decimal(str(self.max_value)):
            return ValidationResult.invalid(
                f"Value {value} is above the maximum {self.max_value}",
                ErrorCode.E2003_OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_value}",
                actual=value,
            )
        return ValidationResult.valid()


# ============================================================================
# Collection Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class EachItem(AtomicValidator):
    """Apply a validator to every list item, failing on the first bad item."""
    validator: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"each[{self.validator.constraint_name}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, (list, tuple)):
            return _type_error(value, "list")

        for index, item in enumerate(value):
            if not (result := self.validator.validate(item)).is_valid:
                return ValidationResult.invalid(
                    f"Item {index}: {result.error_message}",
                    result.error_code or ErrorCode.E2000_VALIDATION_GENERIC,
                    constraint=self.constraint_name,
                    expected=result.expected,
                    actual=result.actual,
                )
        return ValidationResult.valid()


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class And(AtomicValidator):
    """AND combinator: all validators must pass (short-circuit on first failure)."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"({self.left.constraint_name} AND {self.right.constraint_name})"

    @property
    def checks_presence(self) -> bool:
        return self.left.checks_presence

    def validate(self, value: Any) -> ValidationResult:
        if not (left_result := self.left.validate(value)).is_valid: return left_result
        return self.right.validate(value)


@dataclass(frozen=True, slots=True)
class WithMessage(AtomicValidator):
    """Wrapper to override error message."""
    validator: AtomicValidator
    message: str

    @property
    def constraint_name(self) -> str:
        return self.validator.constraint_name

    @property
    def checks_presence(self) -> bool:
        return self.validator.checks_presence

    def validate(self, value: Any) -> ValidationResult:
        if (result := self.validator.validate(value)).is_valid: return result
        return ValidationResult.invalid(self.message, result.error_code or ErrorCode.E2000_VALIDATION_GENERIC,
            constraint=result.constraint, expected=result.expected, actual=result.actual)
