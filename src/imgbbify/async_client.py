"""Asynchronous ImgBB client.

:class:`AsyncImgbbifyClient` mirrors :class:`ImgbbifyClient` but every
network operation is an ``async def`` coroutine.  File reads run in the
default executor so they do not block the event loop.

Usage::

    import asyncio
    from imgbbify import AsyncImgbbifyClient

    async def main():
        async with AsyncImgbbifyClient("your_api_key") as client:
            builder = await client.read_file("cat.png")
            response = await builder.title("My cat").expiration(600).upload()
            print(response.data.url)

    asyncio.run(main())
"""

from __future__ import annotations

import asyncio
import os
from typing import Any

import httpx

from imgbbify.client import ImgbbifyClientBuilder
from imgbbify.config import ImgbbifyConfig
from imgbbify.imgbb_api.transport import AsyncImgbbTransport
from imgbbify.models import PayloadSource, PayloadSourceType, UploadResponse
from imgbbify.payload import AsyncUploadBuilder, detect_payload_source, read_file_payload
from imgbbify.payload.builder import apply_options
from imgbbify.payload.detect import SourceLike


class AsyncImgbbifyClient:
    """Asynchronous ImgBB client.

    Parameters
    ----------
    api_key:
        ImgBB API key.  **Required.**
    http_client:
        Optional caller-owned :class:`httpx.AsyncClient`.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`ImgbbifyConfig`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = ImgbbifyConfig(api_key=api_key, **kwargs)
        self._transport = AsyncImgbbTransport(self._config, http_client=http_client)

    @classmethod
    def builder(cls, api_key: str) -> ImgbbifyClientBuilder:
        """Start building an async client; see :class:`ImgbbifyClientBuilder`."""
        return ImgbbifyClientBuilder(api_key, client_cls=cls)

    @property
    def config(self) -> ImgbbifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Incremental builder path
    # ------------------------------------------------------------------

    def upload_builder(self) -> AsyncUploadBuilder:
        """Return an empty builder."""
        return AsyncUploadBuilder(self._transport)

    async def read(self, source: SourceLike) -> AsyncUploadBuilder:
        """Normalise any supported *source* into a new builder."""
        detected = detect_payload_source(source)
        if detected.kind == PayloadSourceType.FILE_PATH:
            return await self.read_file(detected.value)  # type: ignore[arg-type]
        return self.upload_builder().source(detected)

    async def read_file(self, path: str | os.PathLike[str]) -> AsyncUploadBuilder:
        """Read an image file (off the event loop) into a new builder.

        Raises
        ------
        ImgbbifyIOError
            If the file cannot be read.
        """
        loop = asyncio.get_running_loop()
        payload = await loop.run_in_executor(None, read_file_payload, path)
        return AsyncUploadBuilder(self._transport, payload)

    def read_bytes(self, data: bytes | bytearray | memoryview) -> AsyncUploadBuilder:
        """Encode raw image bytes into a new builder."""
        return self.upload_builder().bytes(data)

    def read_base64(self, text: str) -> AsyncUploadBuilder:
        """Validate base64 text (or a base64 data URI) into a new builder."""
        return self.upload_builder().source(PayloadSource.from_base64(text))

    # ------------------------------------------------------------------
    # One-shot uploads
    # ------------------------------------------------------------------

    async def upload(
        self,
        source: SourceLike,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        """Upload *source* in one call.

        See :meth:`ImgbbifyClient.upload` for parameters and errors.
        """
        builder = await self.read(source)
        return await apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    async def upload_file(
        self,
        path: str | os.PathLike[str],
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        builder = await self.read_file(path)
        return await apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    async def upload_bytes(
        self,
        data: bytes | bytearray | memoryview,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        builder = self.read_bytes(data)
        return await apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    async def upload_base64(
        self,
        text: str,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        builder = self.read_base64(text)
        return await apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, locator: str) -> None:
        """Delete an image by its ``delete_url`` (async)."""
        await self._transport.execute_delete(locator)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Release the HTTP connection pool (unless caller-owned)."""
        await self._transport.close()

    async def __aenter__(self) -> AsyncImgbbifyClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"AsyncImgbbifyClient(config={self._config!r})"
