"""Public data models for the imgbbify client.

This module contains the payload source union, the normalised payload,
the immutable upload request, and the typed mirror of the service's
JSON envelope.  All types are plain dataclasses; the only behaviour is
construction from raw JSON and serialisation to the request form.

Every service-provided field is optional.  Absence is represented as
``None`` and is never replaced with an empty string, because both appear
in real responses and must stay distinguishable.
"""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PayloadSourceType(str, Enum):
    """Classification of the caller-supplied image source."""

    FILE_PATH = "file_path"
    """A path to an image file on the local filesystem."""

    BYTE_BUFFER = "byte_buffer"
    """Raw image bytes held in memory."""

    ENCODED_TEXT = "encoded_text"
    """Image data already base64-encoded (optionally as a ``data:`` URI)."""


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PayloadSource:
    """Exactly one representation of an image, consumed once by normalisation.

    Use the ``from_*`` constructors rather than building instances directly.
    """

    kind: PayloadSourceType
    value: str | bytes | Path

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> PayloadSource:
        return cls(PayloadSourceType.FILE_PATH, Path(path))

    @classmethod
    def from_bytes(cls, data: bytes | bytearray | memoryview) -> PayloadSource:
        return cls(PayloadSourceType.BYTE_BUFFER, bytes(data))

    @classmethod
    def from_base64(cls, text: str) -> PayloadSource:
        return cls(PayloadSourceType.ENCODED_TEXT, text)


@dataclass(frozen=True)
class NormalizedPayload:
    """Canonical base64 text of an image, ready for transmission.

    Normalisation only changes representation, so :meth:`decode` always
    returns the original bytes.

    Attributes
    ----------
    data:
        Standard-alphabet, padded base64 text.
    source_type:
        Which :class:`PayloadSourceType` produced this payload.
    """

    data: str
    source_type: PayloadSourceType

    def decode(self) -> bytes:
        """Return the raw image bytes this payload encodes."""
        return base64.b64decode(self.data, validate=True)

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"NormalizedPayload(source_type={self.source_type.value!r}, "
            f"encoded_length={len(self.data)})"
        )


# ---------------------------------------------------------------------------
# Upload request
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UploadRequest:
    """Immutable description of one upload, produced by the upload builder.

    Attributes
    ----------
    payload:
        The normalised image data.
    name:
        Display file name for the uploaded image.
    title:
        Image title.
    album:
        Identifier of the album the image is added to.
    expiration:
        Auto-delete delay in seconds.  The service enforces its own range.
    """

    payload: NormalizedPayload
    name: str | None = None
    title: str | None = None
    album: str | None = None
    expiration: int | None = None

    def to_form(self, api_key: str) -> dict[str, str]:
        """Serialise into the form fields of the upload request body.

        Optional fields are only present when set.
        """
        form: dict[str, str] = {"key": api_key, "image": self.payload.data}
        if self.name is not None:
            form["name"] = self.name
        if self.title is not None:
            form["title"] = self.title
        if self.album is not None:
            form["album"] = self.album
        if self.expiration is not None:
            form["expiration"] = str(self.expiration)
        return form


# ---------------------------------------------------------------------------
# Response envelope
# ---------------------------------------------------------------------------

def _opt_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def _opt_int(raw: dict[str, Any], key: str) -> int | None:
    """Read an optional integer the service may send as a numeric string.

    Raises
    ------
    ValueError
        If the value is present but not an integer.
    """
    value = raw.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"field {key!r} is a boolean, expected an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError(f"field {key!r} has non-integer value {value!r}")


def _opt_dict(raw: dict[str, Any], key: str) -> dict[str, Any] | None:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"field {key!r} is {type(value).__name__}, expected an object")
    return value


@dataclass
class ImageVariant:
    """One rendition of the uploaded image (original, thumbnail, medium)."""

    filename: str | None = None
    name: str | None = None
    mime: str | None = None
    extension: str | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ImageVariant:
        return cls(
            filename=_opt_str(raw, "filename"),
            name=_opt_str(raw, "name"),
            mime=_opt_str(raw, "mime"),
            extension=_opt_str(raw, "extension"),
            url=_opt_str(raw, "url"),
        )


@dataclass
class ImageData:
    """The ``data`` record of a successful upload.

    Attributes
    ----------
    id:
        Service identifier of the image.
    url:
        Direct link to the image file.
    url_viewer:
        Link to the viewer page.
    display_url:
        Link suitable for embedding.
    delete_url:
        Delete locator; pass to ``client.delete`` to remove the image.
    width, height:
        Pixel dimensions.
    size:
        Size in bytes.
    time:
        Upload time as a Unix timestamp.
    expiration:
        Expiration in seconds (``0`` when the image never expires).
    image, thumb, medium:
        Rendition records, each optional.
    """

    id: str | None = None
    title: str | None = None
    url_viewer: str | None = None
    url: str | None = None
    display_url: str | None = None
    width: int | None = None
    height: int | None = None
    size: int | None = None
    time: int | None = None
    expiration: int | None = None
    image: ImageVariant | None = None
    thumb: ImageVariant | None = None
    medium: ImageVariant | None = None
    delete_url: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ImageData:
        """Build from the raw ``data`` object.

        Raises
        ------
        ValueError
            If a field has a type the envelope does not allow.
        """
        variants: dict[str, ImageVariant | None] = {}
        for key in ("image", "thumb", "medium"):
            nested = _opt_dict(raw, key)
            variants[key] = ImageVariant.from_dict(nested) if nested is not None else None
        return cls(
            id=_opt_str(raw, "id"),
            title=_opt_str(raw, "title"),
            url_viewer=_opt_str(raw, "url_viewer"),
            url=_opt_str(raw, "url"),
            display_url=_opt_str(raw, "display_url"),
            width=_opt_int(raw, "width"),
            height=_opt_int(raw, "height"),
            size=_opt_int(raw, "size"),
            time=_opt_int(raw, "time"),
            expiration=_opt_int(raw, "expiration"),
            image=variants["image"],
            thumb=variants["thumb"],
            medium=variants["medium"],
            delete_url=_opt_str(raw, "delete_url"),
        )


@dataclass
class ApiErrorInfo:
    """The ``error`` object of a failed request."""

    code: int | None = None
    message: str | None = None
    context: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ApiErrorInfo:
        return cls(
            code=_opt_int(raw, "code"),
            message=_opt_str(raw, "message"),
            context=_opt_str(raw, "context"),
        )


@dataclass
class UploadResponse:
    """Typed mirror of the service's JSON envelope.

    Attributes
    ----------
    status:
        Status code reported inside the envelope (``status`` or
        ``status_code``).
    success:
        Explicit success flag; ``None`` when the service omitted it.
    data:
        Upload record, present on success.
    error:
        Structured error, present on failure.
    status_txt:
        Human-readable status text, when provided.
    raw:
        The decoded JSON object as received.
    """

    status: int | None = None
    success: bool | None = None
    data: ImageData | None = None
    error: ApiErrorInfo | None = None
    status_txt: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> UploadResponse:
        """Build from a decoded JSON envelope.

        Raises
        ------
        ValueError
            If the envelope does not have the expected shape.
        """
        status = _opt_int(raw, "status")
        if status is None:
            status = _opt_int(raw, "status_code")

        success = raw.get("success")
        if success is not None and not isinstance(success, bool):
            raise ValueError(f"field 'success' has non-boolean value {success!r}")

        data_raw = _opt_dict(raw, "data")
        error_raw = raw.get("error")
        error: ApiErrorInfo | None
        if error_raw is None:
            error = None
        elif isinstance(error_raw, dict):
            error = ApiErrorInfo.from_dict(error_raw)
        elif isinstance(error_raw, str):
            error = ApiErrorInfo(message=error_raw)
        else:
            raise ValueError(f"field 'error' is {type(error_raw).__name__}, expected an object")

        return cls(
            status=status,
            success=success,
            data=ImageData.from_dict(data_raw) if data_raw is not None else None,
            error=error,
            status_txt=_opt_str(raw, "status_txt"),
            raw=raw,
        )
