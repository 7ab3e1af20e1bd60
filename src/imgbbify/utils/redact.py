"""API-key and payload redaction for safe logging and error text.

Before a request form or response body is written to logs, debug dumps
or error context, :func:`redact` (for dicts) or :func:`scrub` (for plain
strings) must be applied:

* The **API key** is replaced with ``<redacted:...XXXX>`` wherever it
  appears, and any field whose name looks sensitive (``key``, ``token``,
  ``api_key``, ...) is masked.
* The **image payload** (the ``image`` form field and any base64 data
  URI) is replaced with ``<base64:N_bytes>`` so logs stay small.
"""

from __future__ import annotations

import copy
import re
from typing import Any

# Matches RFC 2397 data URIs with base64 encoding.
_DATA_URI_RE = re.compile(
    r"data:[a-zA-Z0-9_.+-]+/[a-zA-Z0-9_.+-]+;base64,[A-Za-z0-9+/=]+"
)

# Field names matched exactly (case-insensitive).
_SENSITIVE_EXACT_KEYS: frozenset[str] = frozenset({"key"})

# Substrings: if any appear in a field name (case-insensitive) the value
# is masked.
_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "api_key",
    "api-key",
    "apikey",
})

# Field names that hold base64 image data.
_PAYLOAD_KEYS: frozenset[str] = frozenset({"image", "source"})


def _base64_size(text: str) -> int:
    """Approximate decoded byte length of base64 *text*."""
    stripped = text.rstrip("=")
    return len(stripped) * 3 // 4


def scrub(text: str, secret: str | None) -> str:
    """Replace every occurrence of *secret* in *text* with a placeholder.

    The placeholder keeps the last four characters of the secret for
    diagnostics (or none for secrets of four characters or fewer).
    """
    if not secret or secret not in text:
        return text
    placeholder = f"<redacted:...{secret[-4:]}>" if len(secret) > 4 else "<redacted>"
    return text.replace(secret, placeholder)


def _redact_value(value: Any, secret: str | None) -> Any:
    if isinstance(value, dict):
        return _redact_dict(value, secret)
    if isinstance(value, list):
        return [_redact_value(item, secret) for item in value]
    if isinstance(value, str):
        if _DATA_URI_RE.search(value):
            value = _DATA_URI_RE.sub(
                lambda m: f"<base64:{_base64_size(m.group(0).split(',', 1)[1])}_bytes>",
                value,
            )
        return scrub(value, secret)
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    return value


def _redact_dict(d: dict, secret: str | None) -> dict:
    result: dict = {}
    for key, value in d.items():
        key_lower = key.lower() if isinstance(key, str) else ""
        if key_lower in _SENSITIVE_EXACT_KEYS or any(
            pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS
        ):
            result[key] = "<redacted>"
        elif key_lower in _PAYLOAD_KEYS and isinstance(value, str):
            result[key] = f"<base64:{_base64_size(value)}_bytes>"
        else:
            result[key] = _redact_value(value, secret)
    return result


def redact(payload: dict, secret: str | None = None) -> dict:
    """Return a deep copy of *payload* with sensitive data redacted.

    Parameters
    ----------
    payload:
        The dictionary to sanitise (a request form or decoded response).
    secret:
        The API key.  If supplied, every occurrence is scrubbed from every
        string in the tree.

    Returns
    -------
    dict
        A new dictionary; the original *payload* is never mutated.

    Examples
    --------
    >>> redact({"key": "abcdef123456", "name": "cat"}, "abcdef123456")
    {'key': '<redacted>', 'name': 'cat'}
    """
    safe = copy.deepcopy(payload)
    return _redact_dict(safe, secret)
