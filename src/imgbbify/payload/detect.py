"""Payload source detection.

Classifies a loosely-typed ``source`` argument (as accepted by
``client.upload``) into a :class:`PayloadSource` so the normaliser knows
how to handle it.
"""

from __future__ import annotations

import base64
import binascii
import os
from pathlib import Path
from typing import Union

from imgbbify.models import PayloadSource

SourceLike = Union[PayloadSource, bytes, bytearray, memoryview, str, "os.PathLike[str]"]

# Common image file extensions for local-file heuristics.
_IMAGE_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg",
    ".bmp", ".tiff", ".tif", ".ico", ".avif",
})


def _is_existing_file(text: str) -> bool:
    # Long base64 strings are never paths; skip the filesystem probe.
    if not text or len(text) > 4096 or "\x00" in text:
        return False
    try:
        return Path(text).expanduser().is_file()
    except OSError:
        return False


def _is_base64(text: str) -> bool:
    try:
        base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def _looks_like_path(text: str) -> bool:
    """Heuristic for a path string that simply does not exist (yet)."""
    if not text or len(text) > 4096 or "\x00" in text or _is_base64(text):
        return False
    if "\\" in text or "/" in text or text.startswith("~"):
        return True
    return Path(text).suffix.lower() in _IMAGE_EXTENSIONS


def detect_payload_source(source: SourceLike) -> PayloadSource:
    """Classify *source* as a file path, byte buffer, or encoded text.

    Rules, in order:

    1. A :class:`PayloadSource` is returned as-is.
    2. ``bytes`` / ``bytearray`` / ``memoryview`` are a byte buffer.
    3. Any ``os.PathLike`` (e.g. :class:`pathlib.Path`) is a file path.
    4. A ``str`` starting with ``data:`` is encoded text.
    5. A ``str`` naming an existing regular file is a file path.
    6. A ``str`` that is not valid base64 but looks like a path (has a
       separator, starts with ``~``, or ends in an image extension) is a
       file path, so a mistyped path reports a missing file rather than
       bad base64.
    7. Any other ``str`` is encoded text (validated later).

    Raises
    ------
    TypeError
        If *source* is none of the supported types.
    """
    if isinstance(source, PayloadSource):
        return source
    if isinstance(source, (bytes, bytearray, memoryview)):
        return PayloadSource.from_bytes(source)
    if isinstance(source, os.PathLike):
        return PayloadSource.from_path(source)
    if isinstance(source, str):
        if source[:5].lower() == "data:":
            return PayloadSource.from_base64(source)
        if _is_existing_file(source) or _looks_like_path(source):
            return PayloadSource.from_path(Path(source).expanduser())
        return PayloadSource.from_base64(source)
    raise TypeError(
        f"Unsupported image source type {type(source).__name__}; expected "
        "bytes, a path, or base64 text"
    )
