"""Streaming multipart reader that never touches disk.

Starlette's form parser spools large files to temporary files. This reader
drives python-multipart directly and hands every file part to an UploadGate
chunk by chunk, so a violation stops parsing before the rest of the body is
read. Text fields are collected into an ImmutableMultiDict.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import AsyncIterator, Mapping, NoReturn

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header
from starlette.datastructures import ImmutableMultiDict

from core.errors import AppError, invalid_format, payload_too_large

from .policy import BufferedFile, UploadGate, UploadRejected


@dataclass
class ParsedForm:
    """Text fields and accepted files of one multipart body."""
    fields: ImmutableMultiDict = field(default_factory=ImmutableMultiDict)
    files: list[BufferedFile] = field(default_factory=list)

    def files_for(self, field_name: str) -> list[BufferedFile]:
        return [f for f in self.files if f.field_name == field_name]


class MemoryMultipartReader:
    """Parse a multipart/form-data body through an UploadGate.

    Usage:
        reader = MemoryMultipartReader(request.headers, request.stream(), UploadGate(SINGLE))
        form = await reader.parse()   # raises UploadRejected
    """

    def __init__(
        self,
        headers: Mapping[str, str],
        stream: AsyncIterator[bytes],
        gate: UploadGate,
        *,
        max_fields: int = 1000,
        max_field_size: int = 1024 * 1024,
    ):
        self.headers = headers
        self.stream = stream
        self.gate = gate
        self.max_fields = max_fields
        self.max_field_size = max_field_size

        self._fields: list[tuple[str, str]] = []
        self._part_headers: list[tuple[bytes, bytes]] = []
        self._header_field = b""
        self._header_value = b""
        self._part_name = ""
        self._part_kind = "field"  # field | file | skip
        self._field_data = bytearray()

    @property
    def origin(self) -> str:
        return self.gate.origin

    def _reject(self, error: AppError) -> NoReturn:
        raise UploadRejected(error.with_context(origin=self.origin))

    # -- python-multipart callbacks ------------------------------------------

    def on_part_begin(self) -> None:
        self._part_headers = []
        self._field_data = bytearray()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def on_header_end(self) -> None:
        self._part_headers.append((self._header_field.lower(), self._header_value))
        self._header_field = b""
        self._header_value = b""

    def on_headers_finished(self) -> None:
        headers = dict(self._part_headers)
        _, options = parse_options_header(headers.get(b"content-disposition", b""))
        if b"name" not in options:
            self._reject(invalid_format("content-disposition", "a form-data part with a name").unwrap_err())
        self._part_name = options[b"name"].decode("latin-1")

        if b"filename" not in options:
            self._part_kind = "field"
            if len(self._fields) >= self.max_fields:
                self._reject(payload_too_large("Form fields", self.max_fields).unwrap_err())
            return

        filename = options[b"filename"].decode("latin-1")
        if not filename:
            # Empty file input: the browser sends the part with no file chosen
            self._part_kind = "skip"
            return
        self._part_kind = "file"
        mime_type = headers.get(b"content-type", b"").decode("latin-1")
        self.gate.begin_file(self._part_name, filename, mime_type)

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        chunk = data[start:end]
        if self._part_kind == "file":
            self.gate.feed(chunk)
        elif self._part_kind == "field":
            if len(self._field_data) + len(chunk) > self.max_field_size:
                self._reject(payload_too_large(f"Form field '{self._part_name}'", self.max_field_size,
                    field=self._part_name).unwrap_err())
            self._field_data.extend(chunk)

    def on_part_end(self) -> None:
        if self._part_kind == "file":
            self.gate.end_file()
        elif self._part_kind == "field":
            self._fields.append((self._part_name, self._field_data.decode("utf-8", errors="replace")))
        self._part_kind = "field"

    # ------------------------------------------------------------------------

    async def parse(self) -> ParsedForm:
        content_type, params = parse_options_header(self.headers.get("Content-Type", ""))
        if content_type != b"multipart/form-data":
            self._reject(invalid_format("Content-Type", "multipart/form-data",
                content_type.decode("latin-1") or None).unwrap_err())
        boundary = params.get(b"boundary")
        if not boundary:
            self._reject(invalid_format("Content-Type", "a multipart boundary").unwrap_err())

        callbacks = {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
        }
        parser = MultipartParser(boundary, callbacks)
        try:
            async for chunk in self.stream:
                if chunk:
                    parser.write(chunk)
            parser.finalize()
        except MultipartParseError as e:
            self._reject(invalid_format("body", "a well-formed multipart body", str(e)).unwrap_err())
        if self.gate.in_file:
            self._reject(invalid_format("body", "a complete multipart body").unwrap_err())

        return ParsedForm(fields=ImmutableMultiDict(self._fields), files=self.gate.finish())
