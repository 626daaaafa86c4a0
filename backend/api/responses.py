"""Response helpers shared by the API routers."""
from typing import Any

from core.logging import SENSITIVE_KEYS
from core.uploads import BufferedFile


def public_view(data: dict[str, Any]) -> dict[str, Any]:
    """Normalized data minus credentials, OTPs and tokens, with files as metadata."""
    view: dict[str, Any] = {}
    for key, value in data.items():
        if key.lower() in SENSITIVE_KEYS:
            continue
        if isinstance(value, list) and value and all(isinstance(v, BufferedFile) for v in value):
            view[key] = [f.to_dict() for f in value]
        else:
            view[key] = value
    return view


def accepted(data: dict[str, Any], files: list[BufferedFile] | None = None, **extra) -> dict[str, Any]:
    body: dict[str, Any] = {"data": public_view(data), **extra}
    if files is not None:
        body["images"] = [f.to_dict() for f in files]
    return body
