"""Shared fixtures and multipart helpers."""
import pytest
from fastapi.testclient import TestClient

from core.uploads import IncomingFile

KIB = 1024
MIB = 1024 * 1024

BOUNDARY = "nite-test-boundary"


def incoming(mime_type: str = "image/png", size: int = KIB, field_name: str = "images", filename: str = "photo.png"):
    return IncomingFile(field_name=field_name, filename=filename, mime_type=mime_type, content=b"\x00" * size)


def multipart_body(parts, boundary: str = BOUNDARY) -> tuple[bytes, str]:
    """Encode parts as multipart/form-data.

    A part is ``(name, value)`` for a text field or
    ``(name, filename, content_type, content)`` for a file.
    """
    body = bytearray()
    for part in parts:
        body += f"--{boundary}\r\n".encode()
        if len(part) == 2:
            name, value = part
            body += f'Content-Disposition: form-data; name="{name}"\r\n\r\n'.encode()
            body += value.encode() if isinstance(value, str) else value
        else:
            name, filename, content_type, content = part
            body += f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'.encode()
            body += f"Content-Type: {content_type}\r\n\r\n".encode()
            body += content
        body += b"\r\n"
    body += f"--{boundary}--\r\n".encode()
    return bytes(body), f"multipart/form-data; boundary={boundary}"


@pytest.fixture(scope="session")
def app():
    from main import app as fastapi_app
    return fastapi_app


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def png_bytes() -> bytes:
    return b"\x89PNG\r\n\x1a\n" + b"\x00" * 256
