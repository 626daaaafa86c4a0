"""Upload acceptance for multipart requests.

Files are gated by an UploadRule (MIME allow-list, byte ceiling, count
ceiling) and buffered in memory for the downstream handler.
"""
from .policy import (
    BufferedFile,
    IncomingFile,
    UploadGate,
    UploadRejected,
    UploadRule,
    accept_upload,
    normalize_mime,
)
from .multipart import MemoryMultipartReader, ParsedForm
from .dependencies import UploadedForm
from .rules import MULTIPLE, RULES, SINGLE, build_rules

__all__ = [
    "BufferedFile",
    "IncomingFile",
    "UploadGate",
    "UploadRejected",
    "UploadRule",
    "accept_upload",
    "normalize_mime",
    "MemoryMultipartReader",
    "ParsedForm",
    "UploadedForm",
    "MULTIPLE",
    "RULES",
    "SINGLE",
    "build_rules",
]
