"""Performance benchmarks for the imgbbify client.

Run with: pytest tests/perf/ -v -s
"""
import os
import subprocess
import sys
import time

import httpx

from imgbbify import ImgbbifyClient
from imgbbify.models import PayloadSource
from imgbbify.payload.normalize import normalize_payload, validate_base64

_EIGHT_MB = 8 * 1024 * 1024


class TestImportPerformance:
    """Benchmark package import time (< 500ms)."""

    def test_import_time_under_500ms(self):
        """Import 'imgbbify' in a fresh subprocess and check it takes < 500ms.

        Takes the best of 3 runs to reduce flakiness from system load spikes.
        """
        code = (
            "import time; "
            "t0 = time.perf_counter(); "
            "import imgbbify; "
            "elapsed = (time.perf_counter() - t0) * 1000; "
            "print(f'{elapsed:.2f}')"
        )
        times = []
        for _ in range(3):
            result = subprocess.run(
                [sys.executable, "-c", code],
                capture_output=True,
                text=True,
                timeout=10,
            )
            assert result.returncode == 0, f"Import failed: {result.stderr}"
            times.append(float(result.stdout.strip()))
        best_ms = min(times)
        print(f"\n  Package import times: {times} best={best_ms:.2f}ms")
        assert best_ms < 500, f"Import too slow: best {best_ms:.2f}ms of {times} (limit: 500ms)"


class TestNormalizationPerformance:
    """Benchmark payload normalisation on large images."""

    def test_encode_8mb_under_1s(self):
        data = os.urandom(_EIGHT_MB)
        t0 = time.perf_counter()
        payload = normalize_payload(PayloadSource.from_bytes(data))
        elapsed = time.perf_counter() - t0
        print(f"\n  8MB encode: {elapsed * 1000:.1f}ms")
        assert len(payload) > _EIGHT_MB
        assert elapsed < 1.0

    def test_validate_8mb_under_1s(self):
        import base64

        text = base64.b64encode(os.urandom(_EIGHT_MB)).decode()
        t0 = time.perf_counter()
        validate_base64(f"data:image/png;base64,{text}")
        elapsed = time.perf_counter() - t0
        print(f"\n  8MB validate: {elapsed * 1000:.1f}ms")
        assert elapsed < 1.0


class TestUploadOverhead:
    """Client-side overhead per upload, with the network mocked out."""

    def test_200_uploads_under_2s(self):
        transport = httpx.MockTransport(
            lambda r: httpx.Response(200, json={"success": True, "data": {"id": "x"}}),
        )
        client = ImgbbifyClient("perf_test_key_1234", http_client=httpx.Client(transport=transport))
        image = os.urandom(16 * 1024)
        t0 = time.perf_counter()
        for i in range(200):
            client.upload_bytes(image, name=f"img{i}")
        elapsed = time.perf_counter() - t0
        print(f"\n  200 uploads: {elapsed * 1000:.1f}ms")
        assert elapsed < 2.0
