"""Product API Routes

Product create/update forms arrive as multipart bodies: images are gated by
the MULTIPLE upload rule, then text fields and accepted files are validated
together against the product schema.
"""
from fastapi import APIRouter, Depends, Path

from core.errors import raise_result
from core.logging import api_logger
from core.uploads import MULTIPLE, ParsedForm, UploadedForm
from core.validation import Schema, form_payload, parse_ingress
from schemas import PRODUCT_FORM, PRODUCT_UPDATE

from .responses import accepted

log = api_logger()

router = APIRouter()

PRODUCT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"


def _validated(schema: Schema, form: ParsedForm) -> dict:
    result = parse_ingress(schema, form_payload(schema, form.fields, form.files))
    raise_result(result)
    return result.unwrap()


@router.post("/product/create", status_code=201)
async def create_product(form: ParsedForm = Depends(UploadedForm(MULTIPLE))):
    data = _validated(PRODUCT_FORM, form)
    log.info("product_form_accepted", image_count=len(form.files), fields=sorted(data))
    return accepted(data, form.files)


@router.put("/product/update/{product_id}")
async def update_product(
    product_id: str = Path(..., pattern=PRODUCT_ID_PATTERN),
    form: ParsedForm = Depends(UploadedForm(MULTIPLE)),
):
    data = _validated(PRODUCT_UPDATE, form)
    log.info("product_update_accepted", product_id=product_id, image_count=len(form.files), fields=sorted(data))
    return accepted({"id": product_id, **data}, form.files)
