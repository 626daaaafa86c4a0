"""FastAPI integration for the upload policy."""
from fastapi import Request

from core.config import get_settings
from core.errors import raise_error

from .multipart import MemoryMultipartReader, ParsedForm
from .policy import UploadGate, UploadRejected, UploadRule


class UploadedForm:
    """FastAPI dependency: gate a multipart body and return its fields and files.

    Usage:
        @router.post("/profileUpload")
        async def upload(form: ParsedForm = Depends(UploadedForm(SINGLE))):
            ...
    """

    def __init__(self, rule: UploadRule, field_name: str | None = None):
        self.rule = rule
        self.field_name = field_name

    async def __call__(self, request: Request) -> ParsedForm:
        config = get_settings()
        reader = MemoryMultipartReader(
            request.headers,
            request.stream(),
            UploadGate(self.rule, self.field_name),
            max_fields=config.FORM_MAX_FIELDS,
            max_field_size=config.FORM_MAX_FIELD_SIZE,
        )
        try:
            return await reader.parse()
        except UploadRejected as e:
            raise_error(e.error)
