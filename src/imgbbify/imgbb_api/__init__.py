"""imgbbify.imgbb_api -- ImgBB HTTP transport and response interpretation.

This sub-package provides:

* :mod:`.transport` -- Sync and async HTTP transports (upload, delete).
* :mod:`.response` -- Mapping of response envelopes to typed results/errors.
"""

from __future__ import annotations

from .response import interpret_delete_response, interpret_upload_response
from .transport import AsyncImgbbTransport, ImgbbTransport

__all__ = [
    "AsyncImgbbTransport",
    "ImgbbTransport",
    "interpret_delete_response",
    "interpret_upload_response",
]
