"""Shared test fixtures for the imgbbify test suite."""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

import httpx
import pytest

from imgbbify.config import ImgbbifyConfig

TEST_API_KEY = "test_api_key_abcd1234"

# 1x1 transparent PNG.
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000100e221bc330000"
    "000049454e44ae426082"
)


def success_body(**data: Any) -> dict[str, Any]:
    """A successful upload envelope; keyword args override ``data`` fields."""
    record: dict[str, Any] = {
        "id": "2ndCYJK",
        "title": "c1f64245afb2",
        "url_viewer": "https://ibb.co/2ndCYJK",
        "url": "https://i.ibb.co/w04Prt6/c1f64245afb2.gif",
        "display_url": "https://i.ibb.co/98W13PY/c1f64245afb2.gif",
        "width": "1",
        "height": "1",
        "size": "42",
        "time": "1552042565",
        "expiration": "0",
        "image": {
            "filename": "c1f64245afb2.gif",
            "name": "c1f64245afb2",
            "mime": "image/gif",
            "extension": "gif",
            "url": "https://i.ibb.co/w04Prt6/c1f64245afb2.gif",
        },
        "delete_url": "https://ibb.co/2ndCYJK/670a7e48ddcb85ac340c717a41047e5c",
    }
    record.update(data)
    return {"data": record, "success": True, "status": 200}


def error_body(code: int | None, message: str, status: int = 400) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message}
    if code is not None:
        error["code"] = code
    return {"status_code": status, "error": error, "status_txt": "Bad Request"}


def json_response(status_code: int, body: dict[str, Any]) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )


class RecordingHandler:
    """``httpx.MockTransport`` handler that records every request.

    *respond* maps a request to a response; by default every request
    gets a successful upload envelope.
    """

    def __init__(
        self,
        respond: Callable[[httpx.Request], httpx.Response] | None = None,
    ) -> None:
        self.requests: list[httpx.Request] = []
        self._respond = respond or (lambda request: json_response(200, success_body()))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def form(self, index: int = -1) -> dict[str, str]:
        """Decode the urlencoded form of a recorded request."""
        params = httpx.QueryParams(self.requests[index].content.decode())
        return dict(params.items())


class RecordingMetrics:
    """In-memory :class:`~imgbbify.observability.MetricsHook`."""

    def __init__(self) -> None:
        self.counters: list[tuple[str, int, dict[str, str] | None]] = []
        self.timings: list[tuple[str, float, dict[str, str] | None]] = []

    def increment(self, name: str, value: int = 1, tags: dict[str, str] | None = None) -> None:
        self.counters.append((name, value, tags))

    def timing(self, name: str, ms: float, tags: dict[str, str] | None = None) -> None:
        self.timings.append((name, ms, tags))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.counters]


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def config() -> ImgbbifyConfig:
    """Default test configuration with a dummy API key."""
    return ImgbbifyConfig(api_key=TEST_API_KEY)


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_BYTES


@pytest.fixture
def png_file(tmp_path) -> Any:
    path = tmp_path / "pixel.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def http_client(handler: RecordingHandler):
    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        yield client


# ---------------------------------------------------------------------------
# Delayed local endpoint
# ---------------------------------------------------------------------------

SLOW_SERVER_DELAY_SECONDS = 1.5


class _SlowHandler(BaseHTTPRequestHandler):
    """Sleeps before answering every request with an empty success envelope."""

    def _respond_late(self) -> None:
        length = int(self.headers.get("Content-Length") or 0)
        if length:
            self.rfile.read(length)
        time.sleep(SLOW_SERVER_DELAY_SECONDS)
        body = json.dumps({"success": True, "status": 200, "data": {}}).encode()
        try:
            self.send_response(200)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            # Client already gave up.
            pass

    do_POST = _respond_late
    do_DELETE = _respond_late

    def log_message(self, format: str, *args: Any) -> None:
        pass


@pytest.fixture
def slow_server_url():
    """Base URL of a local HTTP server that answers after a delay."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), _SlowHandler)
    server.daemon_threads = True
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    try:
        yield f"http://{host}:{port}/1/upload"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
