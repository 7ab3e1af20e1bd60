"""imgbbify: typed Python client for the ImgBB image-hosting API.

Public re-exports
-----------------

* **Clients:** :class:`ImgbbifyClient`, :class:`AsyncImgbbifyClient`,
  :class:`ImgbbifyClientBuilder`
* **Builders:** :class:`UploadBuilder`, :class:`AsyncUploadBuilder`
* **Configuration:** :class:`ImgbbifyConfig`
* **Errors:** Every :class:`ImgbbifyError` subclass and :class:`ErrorCode`
* **Models:** Payload, request and response dataclasses

Usage::

    from imgbbify import ImgbbifyClient

    with ImgbbifyClient("your_api_key") as client:
        response = client.upload_file("cat.png", title="My cat", expiration=600)
        print(response.data.url)
"""

from __future__ import annotations

from imgbbify.async_client import AsyncImgbbifyClient

# ── Clients ────────────────────────────────────────────────────────────
from imgbbify.client import ImgbbifyClient, ImgbbifyClientBuilder

# ── Configuration ───────────────────────────────────────────────────────
from imgbbify.config import (
    CLIENT_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ImgbbifyConfig,
)

# ── Errors ──────────────────────────────────────────────────────────────
from imgbbify.errors import (
    ErrorCode,
    ImgbbifyApiError,
    ImgbbifyDeleteFailedError,
    ImgbbifyError,
    ImgbbifyImageTooLargeError,
    ImgbbifyInvalidApiKeyError,
    ImgbbifyInvalidEncodingError,
    ImgbbifyInvalidExpirationError,
    ImgbbifyInvalidImageError,
    ImgbbifyInvalidParametersError,
    ImgbbifyIOError,
    ImgbbifyMissingFieldError,
    ImgbbifyNetworkError,
    ImgbbifyParseError,
    ImgbbifyRateLimitError,
    ImgbbifyTimeoutError,
)

# ── Models ──────────────────────────────────────────────────────────────
from imgbbify.models import (
    ApiErrorInfo,
    ImageData,
    ImageVariant,
    NormalizedPayload,
    PayloadSource,
    PayloadSourceType,
    UploadRequest,
    UploadResponse,
)

# ── Builders ────────────────────────────────────────────────────────────
from imgbbify.payload import AsyncUploadBuilder, UploadBuilder

__version__ = CLIENT_VERSION

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    "__version__",
    # Clients
    "ImgbbifyClient",
    "AsyncImgbbifyClient",
    "ImgbbifyClientBuilder",
    # Builders
    "UploadBuilder",
    "AsyncUploadBuilder",
    # Configuration
    "ImgbbifyConfig",
    "CLIENT_VERSION",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    # Error base + code enum
    "ImgbbifyError",
    "ErrorCode",
    # Local input errors
    "ImgbbifyIOError",
    "ImgbbifyInvalidEncodingError",
    "ImgbbifyInvalidExpirationError",
    "ImgbbifyMissingFieldError",
    # Transport errors
    "ImgbbifyNetworkError",
    "ImgbbifyTimeoutError",
    # Service errors
    "ImgbbifyApiError",
    "ImgbbifyInvalidApiKeyError",
    "ImgbbifyImageTooLargeError",
    "ImgbbifyInvalidImageError",
    "ImgbbifyInvalidParametersError",
    "ImgbbifyRateLimitError",
    "ImgbbifyParseError",
    "ImgbbifyDeleteFailedError",
    # Models: payload
    "PayloadSource",
    "PayloadSourceType",
    "NormalizedPayload",
    "UploadRequest",
    # Models: response
    "UploadResponse",
    "ImageData",
    "ImageVariant",
    "ApiErrorInfo",
]
