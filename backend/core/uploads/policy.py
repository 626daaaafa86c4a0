"""Upload Acceptance Policy

Gates multipart file parts by MIME allow-list, per-file byte ceiling and
file-count ceiling. Accepted files are buffered in memory only.

Per part the checks run in order: count, MIME type, size (while bytes
arrive). The first violation rejects the whole request; no partial list
of accepted files is ever returned.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, NoReturn

from core.errors import (
    AppError,
    Err,
    Ok,
    Result,
    file_too_large,
    invalid_file_type,
    invalid_format,
    too_many_files,
)
from core.logging import upload_logger

log = upload_logger()


def normalize_mime(mime_type: str | None) -> str:
    """Lower-case media type without parameters ("Image/PNG; q=1" -> "image/png")."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


@dataclass(frozen=True, slots=True)
class UploadRule:
    """Limits for one kind of upload.

    ``allowed_mime_types=None`` means no MIME restriction.
    """
    name: str
    max_file_size: int
    max_files: int
    allowed_mime_types: frozenset[str] | None = None
    storage: str = "memory"

    @property
    def unrestricted(self) -> bool:
        return self.allowed_mime_types is None

    def allows(self, mime_type: str | None) -> bool:
        if self.allowed_mime_types is None:
            return True
        return normalize_mime(mime_type) in self.allowed_mime_types

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "maxFileSize": self.max_file_size,
            "maxFiles": self.max_files,
            "allowedMimeTypes": sorted(self.allowed_mime_types) if self.allowed_mime_types is not None else None,
            "storage": self.storage,
        }


@dataclass(frozen=True, slots=True)
class IncomingFile:
    """One file part as it arrives in a multipart body."""
    field_name: str
    filename: str
    mime_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True, slots=True)
class BufferedFile:
    """An accepted file, held in memory for the downstream handler."""
    field_name: str
    original_filename: str
    mime_type: str
    size: int
    content: bytes = field(repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fieldName": self.field_name,
            "originalFilename": self.original_filename,
            "mimeType": self.mime_type,
            "byteSize": self.size,
        }


class UploadRejected(Exception):
    """Raised by UploadGate to abort a streaming parse."""

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(error.message)


class UploadGate:
    """Incremental form of the upload policy.

    Drive it with begin_file / feed / end_file per part, then finish().
    Each step raises UploadRejected on the first violation.
    """

    def __init__(self, rule: UploadRule, field_name: str | None = None):
        self.rule = rule
        self.field_name = field_name
        self._accepted: list[BufferedFile] = []
        self._seen = 0
        self._current: tuple[str, str, str] | None = None
        self._buffer = bytearray()

    @property
    def origin(self) -> str:
        return f"uploads.{self.rule.name}"

    @property
    def in_file(self) -> bool:
        return self._current is not None

    def _reject(self, error: AppError) -> NoReturn:
        log.warning(
            "upload_rejected",
            rule=self.rule.name,
            error_code=error.code.name,
            files_seen=self._seen,
            **{k: v for k, v in error.metadata.items() if k in ("field", "filename", "mime_type", "limit")},
        )
        self._accepted.clear()
        self._buffer = bytearray()
        self._current = None
        raise UploadRejected(error)

    def begin_file(self, field_name: str, filename: str, mime_type: str) -> None:
        if self._current is not None:
            raise RuntimeError("begin_file called before end_file")
        if self.field_name is not None and field_name != self.field_name:
            self._reject(invalid_format(
                field_name, f"files under '{self.field_name}' only", origin=self.origin,
            ).unwrap_err())
        self._seen += 1
        if self._seen > self.rule.max_files:
            self._reject(too_many_files(self.rule.max_files, origin=self.origin).unwrap_err())
        if not self.rule.allows(mime_type):
            self._reject(invalid_file_type(
                field_name, filename, mime_type, self.rule.allowed_mime_types or frozenset(), origin=self.origin,
            ).unwrap_err())
        self._current = (field_name, filename, mime_type)
        self._buffer = bytearray()

    def feed(self, chunk: bytes) -> None:
        if self._current is None:
            raise RuntimeError("feed called outside a file part")
        if len(self._buffer) + len(chunk) > self.rule.max_file_size:
            field_name, filename, _ = self._current
            self._reject(file_too_large(field_name, filename, self.rule.max_file_size, origin=self.origin).unwrap_err())
        self._buffer.extend(chunk)

    def end_file(self) -> BufferedFile:
        if self._current is None:
            raise RuntimeError("end_file called outside a file part")
        field_name, filename, mime_type = self._current
        accepted = BufferedFile(field_name, filename, mime_type, len(self._buffer), bytes(self._buffer))
        self._accepted.append(accepted)
        self._current = None
        self._buffer = bytearray()
        return accepted

    def finish(self) -> list[BufferedFile]:
        if self._current is not None:
            raise RuntimeError("finish called with an open file part")
        files = list(self._accepted)
        if files:
            log.info(
                "upload_accepted",
                rule=self.rule.name,
                file_count=len(files),
                total_bytes=sum(f.size for f in files),
            )
        return files


def accept_upload(rule: UploadRule, parts: Iterable[IncomingFile]) -> Result[list[BufferedFile], AppError]:
    """Apply ``rule`` to every part in order.

    Usage:
        match accept_upload(SINGLE, [IncomingFile("image", "a.png", "image/png", data)]):
            case Ok(files):
                ...
            case Err(error):
                return result_to_response(error)
    """
    gate = UploadGate(rule)
    try:
        for part in parts:
            gate.begin_file(part.field_name, part.filename, part.mime_type)
            gate.feed(part.content)
            gate.end_file()
    except UploadRejected as e:
        return Err(e.error)
    return Ok(gate.finish())
