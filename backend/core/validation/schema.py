"""Declarative Schema System

A Schema is data: a named, ordered tuple of FieldSpecs plus cross-field
refinements. One generic evaluator interprets every schema, so entities are
declared once and validated uniformly.

Evaluation order per field:
    value (or MISSING) -> default -> explicit coercion -> transforms
    -> type check -> constraints (first failure ends the field)

Field errors are collected across fields in declaration order. Refinements
only run once every field has passed. Undeclared input keys are dropped.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

from core.errors import Err, ErrorCode, Ok, Result
from core.logging import validation_logger

from .coercion import CoercionRule
from .errors import CollectAllAccumulator, ValidationError, ValidationErrorDetail
from .validators import MISSING, AtomicValidator, Required

log = validation_logger()


class FieldType(str, Enum):
    """Primitive type of a normalized field value."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
    FILE = "file"


@runtime_checkable
class FileHandle(Protocol):
    """Anything the upload layer hands over as an accepted file."""
    field_name: str
    original_filename: str
    mime_type: str
    size: int


def _type_name(value: Any) -> str:
    if value is None: return "null"
    if isinstance(value, bool): return "boolean"
    if isinstance(value, (int, float)): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, (list, tuple)): return "array"
    if isinstance(value, dict): return "object"
    return type(value).__name__


def _matches(value: Any, expected: FieldType) -> bool:
    match expected:
        case FieldType.STRING: return isinstance(value, str)
        case FieldType.NUMBER: return isinstance(value, (int, float)) and not isinstance(value, bool)
        case FieldType.BOOLEAN: return isinstance(value, bool)
        case FieldType.ARRAY: return isinstance(value, (list, tuple))
        case FieldType.FILE: return isinstance(value, FileHandle)
    return False


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Declaration of one input field.

    ``default`` and ``default_factory`` apply only when the key is absent
    (or null). A field with neither is required unless ``optional`` is set;
    an optional field that is absent is omitted from the output.

    For ARRAY and FILE fields the value is a list; ``item_type`` (ARRAY) is
    checked per item, FILE fields hold file handles. ``type_message``
    replaces the generic message when the value or an item has the wrong type.
    """
    name: str
    type: FieldType = FieldType.STRING
    constraints: tuple[AtomicValidator, ...] = ()
    default: Any = MISSING
    default_factory: Callable[[], Any] | None = None
    coercion: CoercionRule | None = None
    transforms: tuple[Callable[[Any], Any], ...] = ()
    item_type: FieldType | None = None
    optional: bool = False
    type_message: str = ""
    description: str = ""

    @property
    def is_list(self) -> bool:
        return self.type in (FieldType.ARRAY, FieldType.FILE)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING or self.default_factory is not None

    @property
    def is_required(self) -> bool:
        return not (self.optional or self.has_default)

    def make_default(self) -> Any:
        if self.default_factory is not None: return self.default_factory()
        return copy.copy(self.default)

    def _presence_error(self) -> ValidationErrorDetail:
        validator = next((c for c in self.constraints if c.checks_presence), Required())
        result = validator.validate(MISSING)
        return ValidationErrorDetail(field_path=self.name, constraint=result.constraint or "required",
            message=result.error_message or "Required", code=result.error_code or ErrorCode.E2001_REQUIRED_FIELD_MISSING)

    def _type_error(self, value: Any, expected: FieldType) -> ValidationErrorDetail:
        return ValidationErrorDetail(field_path=self.name, constraint=f"type[{expected.value}]",
            message=self.type_message or f"Expected {expected.value}, received {_type_name(value)}",
            code=ErrorCode.E2004_INVALID_TYPE)

    def evaluate(self, raw: Mapping[str, Any]) -> Result[Any, ValidationErrorDetail]:
        """Run the field pipeline. Ok(MISSING) means "omit from output"."""
        value = raw.get(self.name, MISSING)
        if value is None: value = MISSING

        if value is MISSING:
            if self.has_default: value = self.make_default()
            elif self.optional: return Ok(MISSING)
            else: return Err(self._presence_error())

        if self.coercion is not None and self.coercion.can_coerce(value):
            if (coerced := self.coercion.coerce(value)).is_ok(): value = coerced.unwrap()

        for transform in self.transforms: value = transform(value)

        if not _matches(value, FieldType.ARRAY if self.is_list else self.type):
            return Err(self._type_error(value, self.type))
        if self.is_list:
            value = list(value)
            item_type = FieldType.FILE if self.type is FieldType.FILE else self.item_type
            if item_type is not None:
                for index, item in enumerate(value):
                    if not _matches(item, item_type):
                        detail = self._type_error(item, item_type)
                        return Err(ValidationErrorDetail(field_path=f"{self.name}[{index}]",
                            constraint=detail.constraint, message=detail.message, code=detail.code))

        for constraint in self.constraints:
            if not (result := constraint.validate(value)).is_valid:
                return Err(ValidationErrorDetail(field_path=self.name, constraint=result.constraint or constraint.constraint_name,
                    message=result.error_message or "Invalid value", code=result.error_code or ErrorCode.E2000_VALIDATION_GENERIC,
                    actual_value=result.actual))
        return Ok(value)

    def describe(self) -> dict[str, Any]:
        info: dict[str, Any] = {"name": self.name, "type": self.type.value, "required": self.is_required,
            "constraints": [c.constraint_name for c in self.constraints]}
        if self.item_type is not None: info["items"] = self.item_type.value
        if self.has_default: info["default"] = self.make_default()
        if self.description: info["description"] = self.description
        return info


@dataclass(frozen=True, slots=True)
class Refinement:
    """Cross-field check over already-normalized data.

    ``field`` is the field the failure is attributed to, ``reads`` the
    fields the check depends on.
    """
    field: str
    check: Callable[[dict[str, Any]], bool]
    message: str
    reads: tuple[str, ...] = ()
    constraint: str = "refinement"
    code: ErrorCode = ErrorCode.E2006_FIELD_MISMATCH

    def evaluate(self, data: dict[str, Any]) -> ValidationErrorDetail | None:
        if self.check(data): return None
        return ValidationErrorDetail(field_path=self.field, constraint=self.constraint, message=self.message, code=self.code)


def fields_match(source: str, target: str, message: str) -> Refinement:
    """``target`` must equal ``source`` exactly; failure is reported on ``target``."""
    return Refinement(field=target, check=lambda data: data.get(target) == data.get(source), message=message,
        reads=(source, target), constraint=f"equals[{source}]")


@dataclass(frozen=True, slots=True)
class Schema:
    """Named, ordered set of field declarations plus refinements."""
    name: str
    fields: tuple[FieldSpec, ...]
    refinements: tuple[Refinement, ...] = ()
    description: str = ""
    max_errors: int = 50

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def validate(self, raw: Any) -> Result[dict[str, Any], ValidationError]:
        """Validate and normalize ``raw``. Never raises for bad input."""
        if not isinstance(raw, Mapping):
            return Err(ValidationError(message="Validation failed", schema=self.name, details=[ValidationErrorDetail(
                field_path="$", constraint="type[object]", message=f"Expected object, received {_type_name(raw)}",
                code=ErrorCode.E2004_INVALID_TYPE)]))

        accumulator = CollectAllAccumulator(max_errors=self.max_errors)
        data: dict[str, Any] = {}
        for spec in self.fields:
            match spec.evaluate(raw):
                case Ok(value):
                    if value is not MISSING: data[spec.name] = value
                case Err(detail):
                    if not accumulator.add_error(detail): break

        if not accumulator.has_errors():
            for refinement in self.refinements:
                if (detail := refinement.evaluate(data)) is not None: accumulator.add_error(detail)

        if (error := accumulator.to_validation_error(schema=self.name)) is not None:
            log.debug("schema_rejected", schema=self.name, fields=error.fields, error_count=len(error.details))
            return Err(error)

        log.debug("schema_accepted", schema=self.name, fields=list(data))
        return Ok(data)

    def describe(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "fields": [f.describe() for f in self.fields],
            "refinements": [{"field": r.field, "reads": list(r.reads), "message": r.message} for r in self.refinements]}
