"""Validation at System Boundaries

Parse-don't-validate at the API edge: request bodies (JSON or multipart)
are turned into a schema's normalized dict before a route sees them.
Inside the engine failures are values; only this module turns them into
exceptions for the FastAPI error handlers.
"""
from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

from fastapi import Depends, Request
from starlette.datastructures import ImmutableMultiDict

from core.errors import Result, invalid_json, raise_error, raise_result

from .errors import ValidationError
from .schema import FieldType, FileHandle, Schema


def parse_ingress(schema: Schema, data: Any) -> Result[dict[str, Any], ValidationError]:
    """Parse and validate data entering the system.

    Usage:
        result = parse_ingress(schema, await request.json())
        if result.is_err():
            raise_result(result)
        data = result.unwrap()
    """
    return schema.validate(data)


def form_payload(schema: Schema, fields: Mapping[str, Any], files: Sequence[FileHandle] = ()) -> dict[str, Any]:
    """Build the raw input for ``schema`` from a multipart body.

    Text fields map one-to-one; ARRAY fields collect every repeated value
    (``sizes`` or ``sizes[]``); FILE fields collect the accepted files sent
    under that field name. Absent fields stay absent so defaults apply.
    """
    multi = fields if isinstance(fields, ImmutableMultiDict) else ImmutableMultiDict(fields)
    payload: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.type is FieldType.FILE:
            matched = [f for f in files if f.field_name == spec.name]
            if matched: payload[spec.name] = matched
        elif spec.type is FieldType.ARRAY:
            values = multi.getlist(spec.name) + multi.getlist(f"{spec.name}[]")
            if values: payload[spec.name] = values
        elif spec.name in multi:
            payload[spec.name] = multi[spec.name]
    return payload


# ============================================================================
# FastAPI Integration
# ============================================================================

class ValidatedBody:
    """FastAPI dependency for a validated JSON request body.

    Usage:
        @router.post("/register")
        async def register(body: dict = Depends(ValidatedBody(REGISTRATION))):
            ...
    """

    def __init__(self, schema: Schema):
        self.schema = schema

    async def __call__(self, request: Request) -> dict[str, Any]:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise_error(invalid_json(str(e), origin=f"schemas.{self.schema.name}").unwrap_err())

        result = parse_ingress(self.schema, body)
        raise_result(result)
        return result.unwrap()


def validated_body(schema: Schema) -> Any:
    """FastAPI dependency factory for a validated JSON request body.

    Usage:
        @router.post("/updateName")
        async def update_name(body: dict = validated_body(NAME_UPDATE)):
            ...
    """
    return Depends(ValidatedBody(schema))
