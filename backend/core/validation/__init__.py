"""Declarative Validation System

Schemas are data interpreted by one generic evaluator. Validation occurs
at system boundaries with parse-don't-validate semantics.

Key Features:
- FieldSpec/Schema/Refinement declarations
- Compositional validators (AND combinator, message overrides)
- Explicit opt-in coercion
- Structured error accumulation across fields
- Boundary helpers for JSON and multipart request bodies

Usage:
    from core.validation import FieldSpec, Schema, Required, EmailValidator

    SIGN_UP = Schema("sign-up", (
        FieldSpec("email", constraints=(Required("Email is required"), EmailValidator())),
    ))

    match SIGN_UP.validate(payload):
        case Ok(data):
            ...
        case Err(error):
            return error.as_pairs()
"""

from .schema import (
    FieldType,
    FieldSpec,
    FileHandle,
    Refinement,
    Schema,
    fields_match,
)

from .validators import (
    MISSING,
    ValidationResult,
    AtomicValidator,
    Required,
    # String validators
    StringLength,
    ExactLength,
    NonEmpty,
    RegexPattern,
    EmailValidator,
    NumericString,
    # Collection validators
    EachItem,
    # Combinators
    And,
    WithMessage,
)

from .coercion import (
    CoercionRule,
    StringToBool,
    NumberToString,
    trim,
    lower,
)

from .errors import (
    ValidationErrorDetail,
    ValidationError,
    CollectAllAccumulator,
)

from .boundaries import (
    parse_ingress,
    form_payload,
    ValidatedBody,
    validated_body,
)

__all__ = [
    "FieldType",
    "FieldSpec",
    "FileHandle",
    "Refinement",
    "Schema",
    "fields_match",
    "MISSING",
    "ValidationResult",
    "AtomicValidator",
    "Required",
    "StringLength",
    "ExactLength",
    "NonEmpty",
    "RegexPattern",
    "EmailValidator",
    "NumericString",
    "EachItem",
    "And",
    "WithMessage",
    "CoercionRule",
    "StringToBool",
    "NumberToString",
    "trim",
    "lower",
    "ValidationErrorDetail",
    "ValidationError",
    "CollectAllAccumulator",
    "parse_ingress",
    "form_payload",
    "ValidatedBody",
    "validated_body",
]
