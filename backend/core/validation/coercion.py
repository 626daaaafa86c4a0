"""Explicit Opt-in Coercion System

Coercion rules are explicit and opt-in, NEVER implicit. A FieldSpec names
the rule it accepts; anything else reaches the type check unchanged.

Multipart bodies only carry strings, so boolean form fields opt into
StringToBool. JSON bodies may send numbers where a decimal string is
expected, so numeric string fields opt into NumberToString.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Generic, TypeVar

from core.errors import AppError, Err, ErrorCode, Ok, Result

T = TypeVar("T")
S = TypeVar("S")


class CoercionRule(ABC, Generic[S, T]):
    """Base class for coercion rules.

    Each rule defines:
    - Source type(s) it can coerce from
    - Target type it coerces to
    - Validation of coercion feasibility
    - The actual coercion logic
    """

    @property
    @abstractmethod
    def source_types(self) -> tuple[type, ...]:
        """Types this rule can coerce from."""

    @property
    @abstractmethod
    def target_type(self) -> type[T]:
        """Type this rule coerces to."""

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value can be coerced to target type."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Result[T, AppError]:
        return self.coerce(value)


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule[str, bool]):
    """Coerce string to boolean.

    Truthy: "true", "1", "yes", "on"
    Falsy: "false", "0", "no", "off"
    """
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off"})

    @property
    def source_types(self) -> tuple[type, ...]:
        return (str,)

    @property
    def target_type(self) -> type[bool]:
        return bool

    def can_coerce(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        lower = value.strip().lower()
        return lower in self.true_values or lower in self.false_values

    def coerce(self, value: Any) -> Result[bool, AppError]:
        if not isinstance(value, str):
            return Err(AppError(
                code=ErrorCode.E2004_INVALID_TYPE,
                message=f"Cannot coerce {type(value).__name__} to bool",
            ))

        lower = value.strip().lower()
        if lower in self.true_values:
            return Ok(True)
        if lower in self.false_values:
            return Ok(False)

        return Err(AppError(
            code=ErrorCode.E2002_INVALID_FORMAT,
            message=f"Cannot coerce '{value}' to bool. Valid values: {sorted(self.true_values | self.false_values)}",
        ))


@dataclass(frozen=True, slots=True)
class NumberToString(CoercionRule[int | float, str]):
    """Coerce a native number to its plain decimal string (19.5 -> "19.5").

    Booleans are not numbers here, and non-finite floats have no decimal form.
    """

    @property
    def source_types(self) -> tuple[type, ...]:
        return (int, float)

    @property
    def target_type(self) -> type[str]:
        return str

    def can_coerce(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return Decimal(str(value)).is_finite()

    def coerce(self, value: Any) -> Result[str, AppError]:
        if not self.can_coerce(value):
            return Err(AppError(
                code=ErrorCode.E2004_INVALID_TYPE,
                message=f"Cannot coerce {value!r} to a decimal string",
            ))
        if isinstance(value, int):
            return Ok(str(value))
        return Ok(format(Decimal(repr(value)).normalize(), "f"))


# ============================================================================
# Transforms
# ============================================================================

def trim(value: Any) -> Any:
    """Strip surrounding whitespace from strings, leave other values alone."""
    return value.strip() if isinstance(value, str) else value


def lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value
