"""Synchronous ImgBB client.

:class:`ImgbbifyClient` offers two calling conventions over the same
builder and transport:

* one-shot methods (``upload``, ``upload_file``, ``upload_bytes``,
  ``upload_base64``) that normalise, build and dispatch in one call;
* the incremental path (``read_file`` / ``read_bytes`` / ``read_base64`` /
  ``upload_builder``) returning an :class:`UploadBuilder` the caller
  configures and dispatches.

Usage::

    from imgbbify import ImgbbifyClient

    with ImgbbifyClient("your_api_key") as client:
        response = client.upload_file("cat.png", expiration=600)
        print(response.data.url)
        client.delete(response.data.delete_url)

    client = (
        ImgbbifyClient.builder("your_api_key")
        .timeout(10)
        .user_agent("MyApp/1.0")
        .build()
    )
"""

from __future__ import annotations

import os
from datetime import timedelta
from typing import Any

import httpx

from imgbbify.config import ImgbbifyConfig
from imgbbify.imgbb_api.transport import ImgbbTransport
from imgbbify.models import UploadResponse
from imgbbify.payload import UploadBuilder, detect_payload_source
from imgbbify.payload.builder import apply_options
from imgbbify.payload.detect import SourceLike


class ImgbbifyClientBuilder:
    """Fluent construction of a client with non-default settings.

    Each option is independently optional; unset options keep the
    documented defaults of :class:`ImgbbifyConfig`.

    Parameters
    ----------
    api_key:
        ImgBB API key.
    client_cls:
        The client class :meth:`build` instantiates.
    """

    def __init__(self, api_key: str, client_cls: type | None = None) -> None:
        self._api_key = api_key
        self._client_cls = client_cls if client_cls is not None else ImgbbifyClient
        self._options: dict[str, Any] = {}
        self._http_client: Any | None = None

    def timeout(self, timeout: float | timedelta) -> ImgbbifyClientBuilder:
        """Set the per-request timeout, in seconds or as a ``timedelta``."""
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        self._options["timeout_seconds"] = float(timeout)
        return self

    def user_agent(self, user_agent: str) -> ImgbbifyClientBuilder:
        self._options["user_agent"] = user_agent
        return self

    def base_url(self, base_url: str) -> ImgbbifyClientBuilder:
        self._options["base_url"] = base_url
        return self

    def proxy(self, proxy_url: str) -> ImgbbifyClientBuilder:
        self._options["http_proxy"] = proxy_url
        return self

    def metrics(self, hook: Any) -> ImgbbifyClientBuilder:
        self._options["metrics"] = hook
        return self

    def http_client(self, client: httpx.Client | httpx.AsyncClient) -> ImgbbifyClientBuilder:
        """Use a caller-owned ``httpx`` client for every request.

        The configured timeout and user agent are still sent with each
        request.  The client is not closed by the imgbbify client.
        """
        self._http_client = client
        return self

    def build(self) -> Any:
        """Create the client.

        Raises
        ------
        ValueError
            If an option fails :class:`ImgbbifyConfig` validation.
        """
        return self._client_cls(
            self._api_key, http_client=self._http_client, **self._options,
        )


class ImgbbifyClient:
    """Synchronous ImgBB client.

    The client is read-only after construction and may be shared by any
    number of threads; each upload builder belongs to its caller.

    Parameters
    ----------
    api_key:
        ImgBB API key.  **Required.**
    http_client:
        Optional caller-owned :class:`httpx.Client`.
    **kwargs:
        All remaining keyword arguments are forwarded to
        :class:`ImgbbifyConfig`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        http_client: httpx.Client | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = ImgbbifyConfig(api_key=api_key, **kwargs)
        self._transport = ImgbbTransport(self._config, http_client=http_client)

    @classmethod
    def builder(cls, api_key: str) -> ImgbbifyClientBuilder:
        """Start building a client with custom timeout, user agent or URL."""
        return ImgbbifyClientBuilder(api_key, client_cls=cls)

    @property
    def config(self) -> ImgbbifyConfig:
        return self._config

    # ------------------------------------------------------------------
    # Incremental builder path
    # ------------------------------------------------------------------

    def upload_builder(self) -> UploadBuilder:
        """Return an empty builder; set data with ``.file()``/``.bytes()``/``.base64()``."""
        return UploadBuilder(self._transport)

    def read(self, source: SourceLike) -> UploadBuilder:
        """Normalise any supported *source* and return a builder for it.

        See :func:`~imgbbify.payload.detect_payload_source` for how
        *source* is classified.
        """
        return self.upload_builder().source(detect_payload_source(source))

    def read_file(self, path: str | os.PathLike[str]) -> UploadBuilder:
        """Read an image file into a new builder.

        Raises
        ------
        ImgbbifyIOError
            If the file cannot be read.
        """
        return self.upload_builder().file(path)

    def read_bytes(self, data: bytes | bytearray | memoryview) -> UploadBuilder:
        """Encode raw image bytes into a new builder."""
        return self.upload_builder().bytes(data)

    def read_base64(self, text: str) -> UploadBuilder:
        """Validate base64 text (or a base64 data URI) into a new builder.

        Raises
        ------
        ImgbbifyInvalidEncodingError
            If *text* is not valid base64.
        """
        return self.upload_builder().base64(text)

    # ------------------------------------------------------------------
    # One-shot uploads
    # ------------------------------------------------------------------

    def upload(
        self,
        source: SourceLike,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        """Upload *source* (bytes, path or base64 text) in one call.

        Parameters
        ----------
        source:
            The image; see :meth:`read`.
        expiration:
            Auto-delete delay in seconds.
        name, title, album:
            Optional metadata.

        Returns
        -------
        UploadResponse

        Raises
        ------
        ImgbbifyError
            Local input errors before any request, or transport/service
            errors from the upload itself.
        """
        builder = self.read(source)
        return apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    def upload_file(
        self,
        path: str | os.PathLike[str],
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        """Upload an image file.  See :meth:`upload`."""
        builder = self.read_file(path)
        return apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    def upload_bytes(
        self,
        data: bytes | bytearray | memoryview,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        """Upload raw image bytes.  See :meth:`upload`."""
        builder = self.read_bytes(data)
        return apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    def upload_base64(
        self,
        text: str,
        *,
        expiration: int | None = None,
        name: str | None = None,
        title: str | None = None,
        album: str | None = None,
    ) -> UploadResponse:
        """Upload base64 text or a base64 data URI.  See :meth:`upload`."""
        builder = self.read_base64(text)
        return apply_options(
            builder, expiration=expiration, name=name, title=title, album=album,
        ).upload()

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete(self, locator: str) -> None:
        """Delete an image using the ``delete_url`` from its upload response.

        Raises
        ------
        ImgbbifyDeleteFailedError
            If *locator* is empty or malformed, or the service refused.
        ImgbbifyTimeoutError, ImgbbifyNetworkError
            On transport failure.
        """
        self._transport.execute_delete(locator)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the HTTP connection pool (unless caller-owned)."""
        self._transport.close()

    def __enter__(self) -> ImgbbifyClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ImgbbifyClient(config={self._config!r})"
