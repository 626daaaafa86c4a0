"""Upload rules built from settings.

SINGLE gates profile images. MULTIPLE gates product image sets and has no
MIME allow-list unless UPLOAD_MULTIPLE_MIME_TYPES is configured.
"""
from core.config import Settings, settings

from .policy import UploadRule, normalize_mime


def _mime_set(values: list[str] | None) -> frozenset[str] | None:
    if values is None:
        return None
    return frozenset(normalize_mime(v) for v in values)


def build_rules(config: Settings) -> tuple[UploadRule, UploadRule]:
    single = UploadRule(
        name="single",
        max_file_size=config.UPLOAD_MAX_FILE_SIZE,
        max_files=1,
        allowed_mime_types=_mime_set(config.UPLOAD_IMAGE_MIME_TYPES),
    )
    multiple = UploadRule(
        name="multiple",
        max_file_size=config.UPLOAD_MAX_FILE_SIZE,
        max_files=config.UPLOAD_MAX_FILES,
        allowed_mime_types=_mime_set(config.UPLOAD_MULTIPLE_MIME_TYPES),
    )
    return single, multiple


SINGLE, MULTIPLE = build_rules(settings)
RULES = {rule.name: rule for rule in (SINGLE, MULTIPLE)}
