"""Fluent upload builders.

An upload builder accumulates a normalised payload plus optional
metadata, then dispatches exactly once through the transport it was
created with::

    response = (
        client.read_file("cat.png")
        .name("cat")
        .title("My cat")
        .expiration(600)
        .upload()
    )

Every setter overwrites the previous value of its field.  Local errors
(unreadable file, bad base64, bad expiration, missing data) are raised
immediately and never reach the network.  A builder is single-use: a
second dispatch raises :class:`ValueError`.

:class:`UploadBuilder` dispatches through an
:class:`~imgbbify.imgbb_api.transport.ImgbbTransport`;
:class:`AsyncUploadBuilder` through an
:class:`~imgbbify.imgbb_api.transport.AsyncImgbbTransport`.
"""

from __future__ import annotations

import builtins
import os
from typing import TYPE_CHECKING, TypeVar

from imgbbify.errors import ImgbbifyInvalidExpirationError, ImgbbifyMissingFieldError
from imgbbify.models import (
    NormalizedPayload,
    PayloadSource,
    UploadRequest,
    UploadResponse,
)

from .normalize import normalize_payload

if TYPE_CHECKING:
    from imgbbify.imgbb_api.transport import AsyncImgbbTransport, ImgbbTransport

_B = TypeVar("_B", bound="_UploadBuilderBase")


def validate_expiration(value: object) -> int:
    """Return *value* if it is a non-negative ``int`` number of seconds.

    Raises
    ------
    ImgbbifyInvalidExpirationError
        If *value* is negative, a ``bool``, or not an ``int``.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ImgbbifyInvalidExpirationError(
            message=(
                f"Expiration must be an integer number of seconds, "
                f"got {type(value).__name__}"
            ),
            context={"value": value},
        )
    if value < 0:
        raise ImgbbifyInvalidExpirationError(
            message=f"Expiration must be >= 0 seconds, got {value}",
            context={"value": value},
        )
    return value


class _UploadBuilderBase:
    """Builder state and setters shared by the sync and async builders."""

    def __init__(self, payload: NormalizedPayload | None = None) -> None:
        self._payload: NormalizedPayload | None = payload
        self._name: str | None = None
        self._title: str | None = None
        self._album: str | None = None
        self._expiration: int | None = None
        self._dispatched = False

    # -- data ---------------------------------------------------------------

    def source(self: _B, source: PayloadSource) -> _B:
        """Set the image data from a :class:`PayloadSource`."""
        self._payload = normalize_payload(source)
        return self

    def file(self: _B, path: str | os.PathLike[str]) -> _B:
        """Set the image data from a file, read immediately."""
        return self.source(PayloadSource.from_path(path))

    def bytes(self: _B, data: builtins.bytes | bytearray | memoryview) -> _B:
        """Set the image data from raw bytes."""
        return self.source(PayloadSource.from_bytes(data))

    def base64(self: _B, text: str) -> _B:
        """Set the image data from base64 text or a base64 data URI."""
        return self.source(PayloadSource.from_base64(text))

    # -- metadata -----------------------------------------------------------

    def name(self: _B, name: str) -> _B:
        self._name = name
        return self

    def title(self: _B, title: str) -> _B:
        self._title = title
        return self

    def album(self: _B, album: str) -> _B:
        self._album = album
        return self

    def expiration(self: _B, seconds: int) -> _B:
        """Set the auto-delete delay.

        The previous value is kept if *seconds* is rejected.
        """
        self._expiration = validate_expiration(seconds)
        return self

    # -- terminal -----------------------------------------------------------

    def build(self) -> UploadRequest:
        """Snapshot the accumulated state as an immutable request.

        Does not dispatch and does not consume the builder.

        Raises
        ------
        ImgbbifyMissingFieldError
            If no image data has been set.
        """
        if self._payload is None:
            raise ImgbbifyMissingFieldError(
                message="No image data set on the upload builder",
                context={"field": "image"},
            )
        return UploadRequest(
            payload=self._payload,
            name=self._name,
            title=self._title,
            album=self._album,
            expiration=self._expiration,
        )

    def _consume(self) -> UploadRequest:
        if self._dispatched:
            raise ValueError(
                "This upload builder has already been dispatched; "
                "create a new one for another upload"
            )
        request = self.build()
        self._dispatched = True
        return request

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(payload={self._payload!r}, name={self._name!r}, "
            f"title={self._title!r}, album={self._album!r}, "
            f"expiration={self._expiration!r}, dispatched={self._dispatched})"
        )


def apply_options(
    builder: _B,
    *,
    expiration: int | None = None,
    name: str | None = None,
    title: str | None = None,
    album: str | None = None,
) -> _B:
    """Apply the keyword options of the one-shot upload methods to *builder*.

    ``None`` leaves a field unset.
    """
    if expiration is not None:
        builder.expiration(expiration)
    if name is not None:
        builder.name(name)
    if title is not None:
        builder.title(title)
    if album is not None:
        builder.album(album)
    return builder


class UploadBuilder(_UploadBuilderBase):
    """Synchronous upload builder.

    Parameters
    ----------
    transport:
        The shared transport used by :meth:`upload`.
    payload:
        Optional initial payload (set by ``client.read_*``).
    """

    def __init__(
        self,
        transport: ImgbbTransport,
        payload: NormalizedPayload | None = None,
    ) -> None:
        super().__init__(payload)
        self._transport = transport

    def upload(self) -> UploadResponse:
        """Send the upload and return the service's response.

        Raises
        ------
        ImgbbifyMissingFieldError
            If no image data has been set.
        ValueError
            If this builder was already dispatched.
        ImgbbifyError
            Any transport or service error from
            :meth:`ImgbbTransport.execute_upload`.
        """
        return self._transport.execute_upload(self._consume())

    dispatch = upload


class AsyncUploadBuilder(_UploadBuilderBase):
    """Asynchronous upload builder; :meth:`upload` is a coroutine."""

    def __init__(
        self,
        transport: AsyncImgbbTransport,
        payload: NormalizedPayload | None = None,
    ) -> None:
        super().__init__(payload)
        self._transport = transport

    async def upload(self) -> UploadResponse:
        """Send the upload (async).

        See :meth:`UploadBuilder.upload` for the error contract.
        """
        return await self._transport.execute_upload(self._consume())

    dispatch = upload
