"""Input normalisation: every payload source becomes canonical base64 text.

* File paths are read fully into memory (the handle is closed before any
  request is made) and encoded.
* Byte buffers are encoded directly.  Empty input is allowed here; the
  service decides what the minimum image size is.
* Pre-encoded text is validated and passed through unchanged.  A
  ``data:<mime>;base64,`` URI is accepted and reduced to its base64 body.

No size limit is enforced client-side.
"""

from __future__ import annotations

import base64
import os
import re
from pathlib import Path

from imgbbify.errors import ImgbbifyInvalidEncodingError, ImgbbifyIOError
from imgbbify.models import NormalizedPayload, PayloadSource, PayloadSourceType

# data:[<mediatype>][;base64],<data>
_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[^;,]+)?(?:;(?P<encoding>base64))?,(?P<data>.*)$",
    re.IGNORECASE | re.DOTALL,
)


def encode_bytes(data: bytes | bytearray | memoryview) -> str:
    """Encode raw bytes as standard, padded base64 text."""
    return base64.b64encode(bytes(data)).decode("ascii")


def read_file_payload(path: str | os.PathLike[str]) -> NormalizedPayload:
    """Read an image file and return its normalised payload.

    Raises
    ------
    ImgbbifyIOError
        If the path does not exist, is a directory, or cannot be read.
    """
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except FileNotFoundError as exc:
        raise ImgbbifyIOError(
            message=f"Image file not found: {file_path}",
            context={"path": str(file_path), "reason": "not_found"},
            cause=exc,
        ) from exc
    except IsADirectoryError as exc:
        raise ImgbbifyIOError(
            message=f"Image path is a directory: {file_path}",
            context={"path": str(file_path), "reason": "is_directory"},
            cause=exc,
        ) from exc
    except PermissionError as exc:
        raise ImgbbifyIOError(
            message=f"Permission denied reading image file: {file_path}",
            context={"path": str(file_path), "reason": "permission_denied"},
            cause=exc,
        ) from exc
    except OSError as exc:
        raise ImgbbifyIOError(
            message=f"Failed to read image file {file_path}: {exc.strerror or exc}",
            context={"path": str(file_path), "reason": "os_error"},
            cause=exc,
        ) from exc

    return NormalizedPayload(encode_bytes(data), PayloadSourceType.FILE_PATH)


def validate_base64(text: str) -> str:
    """Check that *text* is well-formed base64 and return the base64 body.

    Plain base64 is returned unchanged.  For a base64 data URI only the
    part after the comma is returned.

    Raises
    ------
    ImgbbifyInvalidEncodingError
        If *text* is not a string, is a non-base64 data URI, or does not
        decode under the standard alphabet with correct padding.
    """
    if not isinstance(text, str):
        raise ImgbbifyInvalidEncodingError(
            message=f"Encoded image data must be str, got {type(text).__name__}",
            context={"reason": "not_text"},
        )

    body = text
    if text[:5].lower() == "data:":
        match = _DATA_URI_RE.match(text)
        if not match:
            raise ImgbbifyInvalidEncodingError(
                message="Invalid data URI format",
                context={"reason": "data_uri_no_match", "length": len(text)},
            )
        encoding = match.group("encoding")
        if not encoding or encoding.lower() != "base64":
            raise ImgbbifyInvalidEncodingError(
                message="Data URI is not base64-encoded",
                context={"reason": "data_uri_not_base64", "length": len(text)},
            )
        body = match.group("data")

    try:
        base64.b64decode(body, validate=True)
    except ValueError as exc:
        raise ImgbbifyInvalidEncodingError(
            message=f"Image data is not valid base64: {exc}",
            context={"reason": "base64_decode_error", "length": len(body)},
            cause=exc,
        ) from exc

    return body


def normalize_payload(source: PayloadSource) -> NormalizedPayload:
    """Convert *source* into its canonical :class:`NormalizedPayload`.

    Raises
    ------
    ImgbbifyIOError
        For a file source that cannot be read.
    ImgbbifyInvalidEncodingError
        For encoded text that is not valid base64.
    """
    if source.kind == PayloadSourceType.FILE_PATH:
        return read_file_payload(source.value)  # type: ignore[arg-type]
    if source.kind == PayloadSourceType.BYTE_BUFFER:
        return NormalizedPayload(encode_bytes(source.value), source.kind)  # type: ignore[arg-type]
    if source.kind == PayloadSourceType.ENCODED_TEXT:
        return NormalizedPayload(validate_base64(source.value), source.kind)  # type: ignore[arg-type]
    raise ValueError(f"Unknown payload source kind: {source.kind!r}")
