"""Sync and async HTTP transports for the ImgBB API.

Each transport owns the shared, read-only configuration and performs one
outbound request per operation:

1. Send the request with the configured timeout and ``User-Agent``.
2. On timeout -- raise :class:`ImgbbifyTimeoutError`.
3. On any other transport failure -- raise :class:`ImgbbifyNetworkError`.
4. Otherwise hand status and body to :mod:`imgbbify.imgbb_api.response`.

Nothing is retried.  The API key travels only in the request (form field
``key`` for uploads, query parameter ``key`` for deletes); it is never
logged and is scrubbed from every error message.
"""

from __future__ import annotations

import json as _json
import sys
import time
from typing import Any

import httpx

from imgbbify.config import ImgbbifyConfig
from imgbbify.errors import (
    ImgbbifyDeleteFailedError,
    ImgbbifyError,
    ImgbbifyNetworkError,
    ImgbbifyTimeoutError,
)
from imgbbify.models import UploadRequest, UploadResponse
from imgbbify.observability import NoopMetricsHook, get_logger
from imgbbify.utils.redact import redact, scrub

from .response import interpret_delete_response, interpret_upload_response

log = get_logger("imgbbify.transport")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _dump_payload(
    method: str,
    url: str,
    form: dict | None,
    response_status: int | None,
    response_body: Any | None,
    api_key: str | None = None,
) -> None:
    """Write a redacted debug dump of the request/response to stderr."""
    dump: dict[str, Any] = {
        "method": method,
        "url": url,
    }
    if form is not None:
        dump["request_form"] = form
    if response_status is not None:
        dump["response_status"] = response_status
    if response_body is not None:
        dump["response_body"] = response_body
    safe_dump = redact(dump, api_key)
    print(
        _json.dumps(safe_dump, indent=2, default=str),
        file=sys.stderr,
    )


def _emit_debug_dump(
    config: ImgbbifyConfig,
    method: str,
    url: str,
    form: dict | None,
    response: httpx.Response,
) -> None:
    """Emit a redacted debug dump of request/response if enabled."""
    if not config.debug_dump_payload:
        return
    try:
        resp_body = response.json()
    except ValueError:
        resp_body = response.text[:1000]
    _dump_payload(
        method, url, form,
        response.status_code, resp_body,
        api_key=config.api_key,
    )


def _request_kwargs(config: ImgbbifyConfig) -> dict[str, Any]:
    # Applied per request so a caller-supplied client still honours them.
    return {
        "timeout": httpx.Timeout(config.timeout_seconds),
        "headers": {"User-Agent": config.user_agent},
    }


def _transport_failure(
    config: ImgbbifyConfig,
    metrics: Any,
    op: str,
    method: str,
    url: str,
    exc: httpx.TransportError,
) -> ImgbbifyError:
    """Map an ``httpx`` transport exception to the matching typed error."""
    detail = scrub(str(exc) or type(exc).__name__, config.api_key)
    is_timeout = isinstance(exc, httpx.TimeoutException)
    metrics.increment(
        "imgbbify.requests_total",
        tags={"op": op, "status": "timeout" if is_timeout else "error"},
    )
    log.warning(
        "Request timed out" if is_timeout else "Request network error",
        extra={
            "extra_fields": {
                "op": op,
                "method": method,
                "url": url,
                "error": detail,
            }
        },
    )
    if is_timeout:
        return ImgbbifyTimeoutError(
            message=(
                f"{method} {url} timed out after {config.timeout_seconds}s: {detail}"
            ),
            context={
                "url": url,
                "method": method,
                "timeout_seconds": config.timeout_seconds,
            },
            cause=exc,
        )
    return ImgbbifyNetworkError(
        message=f"Network error on {method} {url}: {detail}",
        context={"url": url, "method": method},
        cause=exc,
    )


def _record_response(
    metrics: Any,
    op: str,
    response: httpx.Response,
    elapsed_ms: float,
) -> None:
    tags = {"op": op, "status": str(response.status_code)}
    metrics.increment("imgbbify.requests_total", tags=tags)
    metrics.timing("imgbbify.request_duration_ms", elapsed_ms, tags=tags)


def _check_locator(locator: str, api_key: str) -> str:
    """Return the stripped delete locator or raise before any request."""
    if not isinstance(locator, str) or not locator.strip():
        raise ImgbbifyDeleteFailedError(
            message="Delete locator must be a non-empty string",
            context={"locator": locator, "reason": "empty_locator"},
        )
    url = locator.strip()
    try:
        scheme = httpx.URL(url).scheme
    except httpx.InvalidURL as exc:
        raise ImgbbifyDeleteFailedError(
            message=f"Delete locator is not a valid URL: {exc}",
            context={"locator": scrub(url, api_key), "reason": "invalid_locator"},
            cause=exc,
        ) from exc
    if scheme not in ("http", "https"):
        raise ImgbbifyDeleteFailedError(
            message="Delete locator must be an http(s) URL",
            context={"locator": scrub(url, api_key), "reason": "invalid_locator"},
        )
    return url


def _log_upload_result(metrics: Any, result: UploadResponse) -> None:
    metrics.increment("imgbbify.upload_success_total")
    log.info(
        "Upload succeeded",
        extra={
            "extra_fields": {
                "op": "upload",
                "status": result.status,
                "image_id": result.data.id if result.data is not None else None,
            }
        },
    )


def _log_failure(metrics: Any, op: str, exc: ImgbbifyError) -> None:
    metrics.increment(f"imgbbify.{op}_failure_total", tags={"error": exc.code})
    log.warning(
        f"{op.capitalize()} failed",
        extra={
            "extra_fields": {
                "op": op,
                "error_code": exc.code,
                "status_code": exc.context.get("status_code"),
            }
        },
    )


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class ImgbbTransport:
    """Synchronous HTTP transport for uploads and deletes.

    Safe to share between threads: it holds no per-request state.

    Parameters
    ----------
    config:
        A :class:`ImgbbifyConfig` instance controlling transport behaviour.
    http_client:
        Optional caller-owned :class:`httpx.Client`.  It is used as-is and
        is not closed by :meth:`close`.
    """

    def __init__(
        self,
        config: ImgbbifyConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.Client(
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=config.http_proxy,
            )
        self._client = http_client

    @property
    def config(self) -> ImgbbifyConfig:
        return self._config

    def _send(self, op: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        t0 = time.monotonic()
        try:
            response = self._client.request(
                method, url, **_request_kwargs(self._config), **kwargs,
            )
        except httpx.TransportError as exc:
            raise _transport_failure(
                self._config, self._metrics, op, method, url, exc,
            ) from exc
        _record_response(self._metrics, op, response, (time.monotonic() - t0) * 1000)
        return response

    # -- public API --------------------------------------------------------

    def execute_upload(self, request: UploadRequest) -> UploadResponse:
        """POST *request* to the upload endpoint.

        Returns
        -------
        UploadResponse
            The parsed success envelope.

        Raises
        ------
        ImgbbifyTimeoutError
            If the configured timeout elapsed.
        ImgbbifyNetworkError
            On any other transport failure.
        ImgbbifyApiError, ImgbbifyParseError
            See :func:`~imgbbify.imgbb_api.response.interpret_upload_response`.
        """
        url = self._config.base_url
        form = request.to_form(self._config.api_key)
        log.debug(
            "Dispatching upload",
            extra={
                "extra_fields": {
                    "op": "upload",
                    "source_type": request.payload.source_type.value,
                    "encoded_length": len(request.payload),
                    "expiration": request.expiration,
                }
            },
        )
        try:
            response = self._send("upload", "POST", url, data=form)
            _emit_debug_dump(self._config, "POST", url, form, response)
            result = interpret_upload_response(
                response.status_code, response.text, api_key=self._config.api_key,
            )
        except ImgbbifyError as exc:
            _log_failure(self._metrics, "upload", exc)
            raise
        _log_upload_result(self._metrics, result)
        return result

    def execute_delete(self, locator: str) -> None:
        """Delete the image behind *locator* (a ``delete_url``).

        Raises
        ------
        ImgbbifyDeleteFailedError
            If *locator* is empty or malformed (no request is sent), or
            the service answered with a non-``2xx`` status.
        ImgbbifyTimeoutError, ImgbbifyNetworkError
            On transport failure.
        """
        try:
            url = _check_locator(locator, self._config.api_key)
            log.debug("Dispatching delete", extra={"extra_fields": {"op": "delete"}})
            response = self._send(
                "delete", "DELETE", url, params={"key": self._config.api_key},
            )
            _emit_debug_dump(self._config, "DELETE", url, None, response)
            interpret_delete_response(
                response.status_code, response.text,
                locator=url, api_key=self._config.api_key,
            )
        except ImgbbifyError as exc:
            _log_failure(self._metrics, "delete", exc)
            raise
        self._metrics.increment("imgbbify.delete_success_total")
        log.info("Delete succeeded", extra={"extra_fields": {"op": "delete"}})

    def close(self) -> None:
        """Close the underlying HTTP client if this transport created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ImgbbTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncImgbbTransport:
    """Asynchronous HTTP transport for uploads and deletes.

    Mirrors :class:`ImgbbTransport` but uses ``httpx.AsyncClient``.  Any
    number of operations may run concurrently on one instance.

    Parameters
    ----------
    config:
        A :class:`ImgbbifyConfig` instance controlling transport behaviour.
    http_client:
        Optional caller-owned :class:`httpx.AsyncClient`; never closed here.
    """

    def __init__(
        self,
        config: ImgbbifyConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._owns_client = http_client is None
        if http_client is None:
            http_client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=httpx.Timeout(config.timeout_seconds),
                proxy=config.http_proxy,
            )
        self._client = http_client

    @property
    def config(self) -> ImgbbifyConfig:
        return self._config

    async def _send(self, op: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        t0 = time.monotonic()
        try:
            response = await self._client.request(
                method, url, **_request_kwargs(self._config), **kwargs,
            )
        except httpx.TransportError as exc:
            raise _transport_failure(
                self._config, self._metrics, op, method, url, exc,
            ) from exc
        _record_response(self._metrics, op, response, (time.monotonic() - t0) * 1000)
        return response

    # -- public API --------------------------------------------------------

    async def execute_upload(self, request: UploadRequest) -> UploadResponse:
        """POST *request* to the upload endpoint (async).

        See :meth:`ImgbbTransport.execute_upload` for the error contract.
        """
        url = self._config.base_url
        form = request.to_form(self._config.api_key)
        log.debug(
            "Dispatching upload",
            extra={
                "extra_fields": {
                    "op": "upload",
                    "source_type": request.payload.source_type.value,
                    "encoded_length": len(request.payload),
                    "expiration": request.expiration,
                }
            },
        )
        try:
            response = await self._send("upload", "POST", url, data=form)
            _emit_debug_dump(self._config, "POST", url, form, response)
            result = interpret_upload_response(
                response.status_code, response.text, api_key=self._config.api_key,
            )
        except ImgbbifyError as exc:
            _log_failure(self._metrics, "upload", exc)
            raise
        _log_upload_result(self._metrics, result)
        return result

    async def execute_delete(self, locator: str) -> None:
        """Delete the image behind *locator* (async).

        See :meth:`ImgbbTransport.execute_delete` for the error contract.
        """
        try:
            url = _check_locator(locator, self._config.api_key)
            log.debug("Dispatching delete", extra={"extra_fields": {"op": "delete"}})
            response = await self._send(
                "delete", "DELETE", url, params={"key": self._config.api_key},
            )
            _emit_debug_dump(self._config, "DELETE", url, None, response)
            interpret_delete_response(
                response.status_code, response.text,
                locator=url, api_key=self._config.api_key,
            )
        except ImgbbifyError as exc:
            _log_failure(self._metrics, "delete", exc)
            raise
        self._metrics.increment("imgbbify.delete_success_total")
        log.info("Delete succeeded", extra={"extra_fields": {"op": "delete"}})

    async def close(self) -> None:
        """Close the underlying async HTTP client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncImgbbTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
