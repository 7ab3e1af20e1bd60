"""Full error hierarchy for the imgbbify client.

Every public error class inherits from ImgbbifyError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Local errors (:class:`ImgbbifyIOError`, :class:`ImgbbifyInvalidEncodingError`,
:class:`ImgbbifyInvalidExpirationError`, :class:`ImgbbifyMissingFieldError`)
are raised before any request is sent.  The API key never appears in any
message or context value.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the client can raise."""

    IO_ERROR = "IO_ERROR"
    INVALID_ENCODING = "INVALID_ENCODING"
    INVALID_EXPIRATION = "INVALID_EXPIRATION"
    MISSING_FIELD = "MISSING_FIELD"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT = "TIMEOUT"
    INVALID_API_KEY = "INVALID_API_KEY"
    IMAGE_TOO_LARGE = "IMAGE_TOO_LARGE"
    INVALID_IMAGE = "INVALID_IMAGE"
    PARSE_ERROR = "PARSE_ERROR"
    API_ERROR = "API_ERROR"
    INVALID_PARAMETERS = "INVALID_PARAMETERS"
    RATE_LIMITED = "RATE_LIMITED"
    DELETE_FAILED = "DELETE_FAILED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class ImgbbifyError(Exception):
    """Base exception for all imgbbify errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Local input errors
# ---------------------------------------------------------------------------

class ImgbbifyIOError(ImgbbifyError):
    """A local image file could not be read (missing, unreadable, a directory).

    Context keys: ``path``, ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.IO_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImgbbifyInvalidEncodingError(ImgbbifyError):
    """Pre-encoded input is not valid base64 (or a malformed data URI).

    Context keys: ``reason``, ``length``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_ENCODING,
            message=message,
            context=context,
            cause=cause,
        )


class ImgbbifyInvalidExpirationError(ImgbbifyError):
    """The expiration is negative or not an integer number of seconds.

    Context keys: ``value``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EXPIRATION,
            message=message,
            context=context,
            cause=cause,
        )


class ImgbbifyMissingFieldError(ImgbbifyError):
    """An upload was dispatched before a required field was set.

    Context keys: ``field``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.MISSING_FIELD,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------

class ImgbbifyNetworkError(ImgbbifyError):
    """A transport-level failure occurred (DNS, connection refused, TLS).

    Context keys: ``url``, ``method``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.NETWORK_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImgbbifyTimeoutError(ImgbbifyError):
    """The configured request timeout elapsed before the call completed.

    Context keys: ``url``, ``method``, ``timeout_seconds``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.TIMEOUT,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# Service errors
# ---------------------------------------------------------------------------

class ImgbbifyApiError(ImgbbifyError):
    """The service returned a structured error not covered by a more
    specific class.  Also the base class of every service-reported error.

    Context keys: ``status_code``, ``api_code``.

    Attributes
    ----------
    status_code:
        HTTP status of the response (``None`` if unknown).
    api_code:
        The service's numeric error code (``None`` if absent).
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        code: str = ErrorCode.API_ERROR,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            context=context,
            cause=cause,
        )

    @property
    def status_code(self) -> int | None:
        return self.context.get("status_code")

    @property
    def api_code(self) -> int | None:
        return self.context.get("api_code")


class ImgbbifyInvalidApiKeyError(ImgbbifyApiError):
    """The service rejected the API key (missing, malformed or revoked)."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_API_KEY,
        )


class ImgbbifyImageTooLargeError(ImgbbifyApiError):
    """The service rejected the payload for exceeding its size limit."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.IMAGE_TOO_LARGE,
        )


class ImgbbifyInvalidImageError(ImgbbifyApiError):
    """The service rejected the payload as empty, malformed or unsupported."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_IMAGE,
        )


class ImgbbifyInvalidParametersError(ImgbbifyApiError):
    """The service rejected one of the request parameters (error code 400)."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.INVALID_PARAMETERS,
        )


class ImgbbifyRateLimitError(ImgbbifyApiError):
    """The service reported that the request rate limit was exceeded."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message=message,
            context=context,
            cause=cause,
            code=ErrorCode.RATE_LIMITED,
        )


class ImgbbifyParseError(ImgbbifyError):
    """A 2xx response body could not be parsed into the expected envelope.

    Context keys: ``status_code``, ``body`` (truncated), ``reason``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.PARSE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class ImgbbifyDeleteFailedError(ImgbbifyError):
    """An image deletion did not succeed.

    The delete endpoint does not answer with a consistent structured body,
    so this single class carries whatever diagnostic text was available.

    Context keys: ``locator``, ``reason``, ``status_code``, ``body``.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DELETE_FAILED,
            message=message,
            context=context,
            cause=cause,
        )
