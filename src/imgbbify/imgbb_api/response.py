"""Interpretation of ImgBB responses into typed results or typed errors.

Upload responses are checked in this order:

1. Non-``2xx`` status -- the JSON error envelope (if any) is classified
   by the service's numeric error code; a non-JSON body becomes a
   generic :class:`ImgbbifyApiError` carrying the (truncated) body text.
2. ``2xx`` status with a body that is not the expected JSON envelope --
   :class:`ImgbbifyParseError` carrying the truncated body.
3. ``2xx`` status with ``success: false`` (or an ``error`` object and no
   success flag) -- classified exactly like case 1.
4. Anything else is a success and the parsed :class:`UploadResponse` is
   returned unchanged.

Transport failures (timeouts, refused connections) never reach this
module; the transport maps them before a response exists.

Delete responses are judged by HTTP status only, because the delete
endpoint does not answer with a consistent structured body.
"""

from __future__ import annotations

import json
from typing import Any, NoReturn

from imgbbify.errors import (
    ImgbbifyApiError,
    ImgbbifyDeleteFailedError,
    ImgbbifyImageTooLargeError,
    ImgbbifyInvalidApiKeyError,
    ImgbbifyInvalidImageError,
    ImgbbifyInvalidParametersError,
    ImgbbifyParseError,
    ImgbbifyRateLimitError,
)
from imgbbify.models import ApiErrorInfo, UploadResponse
from imgbbify.utils.redact import scrub

BODY_PREVIEW_LIMIT = 500

# Service error codes.
INVALID_API_KEY_CODES: frozenset[int] = frozenset({100})
IMAGE_TOO_LARGE_CODES: frozenset[int] = frozenset({313})
INVALID_IMAGE_CODES: frozenset[int] = frozenset({130, 310, 311, 312})
INVALID_PARAMETERS_CODE = 400
RATE_LIMIT_CODE = 429

_TOO_LARGE_HINTS = ("too big", "too large")


def _truncate(text: str, limit: int = BODY_PREVIEW_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _decode_json_object(body: str) -> dict[str, Any] | None:
    """Return the decoded body if it is a JSON object, else ``None``."""
    try:
        decoded = json.loads(body)
    except ValueError:
        return None
    return decoded if isinstance(decoded, dict) else None


def _is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def raise_for_service_error(
    status_code: int,
    error: ApiErrorInfo | None,
    *,
    fallback_message: str,
    envelope_status: int | None = None,
    api_key: str | None = None,
) -> NoReturn:
    """Raise the :class:`ImgbbifyApiError` subclass matching *error*.

    The service's error code is checked first; HTTP (or envelope) status
    is only used when the code does not decide.

    Parameters
    ----------
    status_code:
        HTTP status of the response.
    error:
        The parsed ``error`` object, if the envelope had one.
    fallback_message:
        Used when the service sent no message.
    envelope_status:
        The status reported inside the envelope, if any.
    api_key:
        Scrubbed from the message should the service echo it back.
    """
    api_code = error.code if error is not None else None
    raw_message = error.message if error is not None and error.message else fallback_message
    message = scrub(raw_message, api_key)
    statuses = {status_code, envelope_status}
    context: dict[str, Any] = {"status_code": status_code, "api_code": api_code}

    if api_code is not None:
        if api_code in INVALID_API_KEY_CODES:
            raise ImgbbifyInvalidApiKeyError(message=message, context=context)
        if api_code in IMAGE_TOO_LARGE_CODES:
            raise ImgbbifyImageTooLargeError(message=message, context=context)
        if api_code in INVALID_IMAGE_CODES:
            raise ImgbbifyInvalidImageError(message=message, context=context)
        if api_code == INVALID_PARAMETERS_CODE:
            raise ImgbbifyInvalidParametersError(message=message, context=context)
        if api_code == RATE_LIMIT_CODE:
            raise ImgbbifyRateLimitError(message=message, context=context)
        raise ImgbbifyApiError(message=message, context=context)

    # No service code: fall back to status, then message wording.
    if 401 in statuses:
        raise ImgbbifyInvalidApiKeyError(message=message, context=context)
    if 413 in statuses or any(hint in message.lower() for hint in _TOO_LARGE_HINTS):
        raise ImgbbifyImageTooLargeError(message=message, context=context)
    if 429 in statuses:
        raise ImgbbifyRateLimitError(message=message, context=context)

    raise ImgbbifyApiError(message=message, context=context)


def interpret_upload_response(
    status_code: int,
    body: str,
    *,
    api_key: str | None = None,
) -> UploadResponse:
    """Turn an upload response into an :class:`UploadResponse` or raise.

    Parameters
    ----------
    status_code:
        HTTP status of the response.
    body:
        Response body text.
    api_key:
        The client's API key, scrubbed from any text carried by an error.

    Returns
    -------
    UploadResponse
        The parsed envelope; data fields the service omitted are ``None``.

    Raises
    ------
    ImgbbifyInvalidApiKeyError, ImgbbifyImageTooLargeError,
    ImgbbifyInvalidImageError, ImgbbifyInvalidParametersError,
    ImgbbifyRateLimitError, ImgbbifyApiError
        When the service reports an error.
    ImgbbifyParseError
        When a ``2xx`` body is not the expected JSON envelope.
    """
    raw = _decode_json_object(body)
    preview = _truncate(scrub(body, api_key))

    if not _is_success_status(status_code):
        if raw is None:
            raise ImgbbifyApiError(
                message=preview or f"HTTP {status_code} with empty body",
                context={"status_code": status_code, "api_code": None, "body": preview},
            )
        try:
            envelope: UploadResponse | None = UploadResponse.from_dict(raw)
        except ValueError:
            envelope = None
        raise_for_service_error(
            status_code,
            envelope.error if envelope is not None else None,
            fallback_message=(
                (envelope.status_txt if envelope is not None else None)
                or preview
                or f"HTTP {status_code}"
            ),
            envelope_status=envelope.status if envelope is not None else None,
            api_key=api_key,
        )

    if raw is None:
        raise ImgbbifyParseError(
            message=f"Response body is not a JSON object (HTTP {status_code})",
            context={"status_code": status_code, "body": preview, "reason": "not_json_object"},
        )

    try:
        envelope = UploadResponse.from_dict(raw)
    except ValueError as exc:
        raise ImgbbifyParseError(
            message=f"Unexpected response envelope: {exc}",
            context={"status_code": status_code, "body": preview, "reason": "bad_envelope"},
            cause=exc,
        ) from exc

    if envelope.success is False or (envelope.success is None and envelope.error is not None):
        raise_for_service_error(
            status_code,
            envelope.error,
            fallback_message=envelope.status_txt or "Upload reported unsuccessful",
            envelope_status=envelope.status,
            api_key=api_key,
        )

    return envelope


def interpret_delete_response(
    status_code: int,
    body: str,
    *,
    locator: str,
    api_key: str | None = None,
) -> None:
    """Judge a delete response.

    Any ``2xx`` status is success, whatever the body says.  Anything else
    raises :class:`ImgbbifyDeleteFailedError` with the service's error
    message when the body carries one, otherwise the truncated body.
    """
    if _is_success_status(status_code):
        return

    preview = _truncate(scrub(body, api_key))
    raw = _decode_json_object(body)
    detail = preview
    api_code: int | None = None
    if raw is not None and isinstance(raw.get("error"), dict):
        try:
            info = ApiErrorInfo.from_dict(raw["error"])
        except ValueError:
            info = None
        if info is not None:
            api_code = info.code
            if info.message:
                detail = scrub(info.message, api_key)

    raise ImgbbifyDeleteFailedError(
        message=f"Delete failed with HTTP {status_code}: {detail or 'no response body'}",
        context={
            "status_code": status_code,
            "api_code": api_code,
            "locator": scrub(locator, api_key),
            "reason": "http_error",
            "body": preview,
        },
    )
