"""Client configuration for imgbbify.

:class:`ImgbbifyConfig` is a frozen dataclass that captures every tuneable
knob exposed by the client.  A single instance is shared, read-only, by
the transport and every upload/delete operation it serves.

Module-level constants document the defaults applied when a value is not
supplied:

* :data:`DEFAULT_BASE_URL`: the ImgBB upload endpoint.
* :data:`DEFAULT_TIMEOUT_SECONDS`: per-request timeout.
* :data:`DEFAULT_USER_AGENT`: identifying ``User-Agent`` string.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

CLIENT_VERSION = "0.1.0"

DEFAULT_BASE_URL = "https://api.imgbb.com/1/upload"
"""Upload endpoint of the ImgBB v1 API."""

DEFAULT_TIMEOUT_SECONDS = 30.0

DEFAULT_USER_AGENT = f"imgbbify/{CLIENT_VERSION}"


@dataclass(frozen=True)
class ImgbbifyConfig:
    """Complete configuration for an imgbbify client.

    Every parameter has a sensible default so that the only *required*
    value is ``api_key``.

    Parameters
    ----------
    api_key:
        ImgBB API key.  **Required.**  Never logged and never included in
        error messages.
    base_url:
        Upload endpoint URL.  Override for proxy or testing environments.
    timeout_seconds:
        Timeout applied to every HTTP request, in seconds.
    user_agent:
        Value of the ``User-Agent`` header sent with every request.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~imgbbify.observability.MetricsHook` backend.
    debug_dump_payload:
        Write the (redacted) request form and response body to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    api_key: str = ""

    base_url: str = DEFAULT_BASE_URL

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    user_agent: str = DEFAULT_USER_AGENT

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    # ── Debug ───────────────────────────────────────────────────────────
    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        if not self.api_key or not self.api_key.strip():
            raise ValueError("api_key must be a non-empty string")

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https"):
            raise ValueError(
                f"base_url must be an http(s) URL, got scheme {parsed.scheme!r}"
            )
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API key, or target localhost for testing."
            )

        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if not self.user_agent:
            raise ValueError("user_agent must be a non-empty string")

    def __repr__(self) -> str:
        """Mask the API key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_key":
                masked = f"...{val[-4:]}" if len(val) > 4 else "****"
                parts.append(f"api_key='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"ImgbbifyConfig({', '.join(parts)})"
