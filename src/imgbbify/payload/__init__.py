"""Payload pipeline: detecting, normalising and building uploads.

Exports
-------
detect_payload_source
    Classify a loosely-typed source as file path, byte buffer or base64 text.
normalize_payload
    Turn a :class:`~imgbbify.models.PayloadSource` into canonical base64.
encode_bytes / read_file_payload / validate_base64
    The per-source normalisation steps.
UploadBuilder / AsyncUploadBuilder
    Fluent, single-use upload builders.
validate_expiration
    Check an expiration value before it is stored on a builder.
"""

from .builder import AsyncUploadBuilder, UploadBuilder, validate_expiration
from .detect import detect_payload_source
from .normalize import encode_bytes, normalize_payload, read_file_payload, validate_base64

__all__ = [
    "AsyncUploadBuilder",
    "UploadBuilder",
    "detect_payload_source",
    "encode_bytes",
    "normalize_payload",
    "read_file_payload",
    "validate_base64",
    "validate_expiration",
]
