"""Schema registry - every form the API accepts, looked up by name."""
from typing import Any

from core.errors import AppError, Ok, Result, not_found
from core.validation import Schema, ValidationError

_SCHEMAS: dict[str, Schema] = {}


def register(schema: Schema) -> None:
    """Register a schema under its name."""
    if schema.name in _SCHEMAS and _SCHEMAS[schema.name] is not schema:
        raise ValueError(f"Schema '{schema.name}' is already registered")
    _SCHEMAS[schema.name] = schema


def get_schema(name: str) -> Schema:
    """Get a schema by name."""
    if name not in _SCHEMAS:
        available = ", ".join(_SCHEMAS.keys()) or "none"
        raise ValueError(f"Schema '{name}' not registered. Available: {available}")
    return _SCHEMAS[name]


def find_schema(name: str) -> Result[Schema, AppError]:
    """Like get_schema, for names that come from a request."""
    if name not in _SCHEMAS:
        return not_found("Schema", name, origin="schemas")
    return Ok(_SCHEMAS[name])


def validate(schema_name: str, raw: Any) -> Result[dict[str, Any], ValidationError]:
    """Validate ``raw`` against the named schema.

    Returns Ok(normalized data) or Err(ValidationError) listing every failing
    field in declaration order. Unknown schema names are a programming error.
    """
    return get_schema(schema_name).validate(raw)


def list_schemas() -> list[dict]:
    """List all registered schemas with their fields."""
    return [schema.describe() for schema in _SCHEMAS.values()]


def _auto_register() -> None:
    """Auto-register schema modules on import."""
    from . import products, users

    for schema in (*users.SCHEMAS, *products.SCHEMAS):
        register(schema)


_auto_register()
