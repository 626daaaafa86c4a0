"""Form Discovery & Validation API Routes

Lets the client-side form layer list the schemas, read their rules and
validate a draft against any of them without submitting it.
"""
from fastapi import APIRouter, Request

from core.errors import raise_result
from core.logging import validation_logger
from core.uploads import RULES
from core.validation import ValidatedBody
from schemas import find_schema, list_schemas

from .responses import accepted

log = validation_logger()

router = APIRouter()


@router.get("/schemas")
async def get_schemas():
    """List registered schemas with their fields and constraints."""
    return {"data": list_schemas()}


@router.get("/schemas/{schema_name}")
async def get_schema_info(schema_name: str):
    result = find_schema(schema_name)
    raise_result(result)
    return {"data": result.unwrap().describe()}


@router.get("/upload-rules")
async def get_upload_rules():
    return {"data": [rule.describe() for rule in RULES.values()]}


@router.post("/validate/{schema_name}")
async def validate_draft(schema_name: str, request: Request):
    """Validate a JSON body against a named schema."""
    lookup = find_schema(schema_name)
    raise_result(lookup)
    data = await ValidatedBody(lookup.unwrap())(request)
    log.debug("draft_validated", schema=schema_name)
    return accepted(data)
