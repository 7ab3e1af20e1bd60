"""Tests for utils/redact.py -- scrub() and redact()."""

from __future__ import annotations

import copy

import pytest

from imgbbify.utils import redact, scrub
from imgbbify.utils.redact import _SENSITIVE_KEY_PATTERNS

_KEY = "abcdef0123456789"


class TestScrub:
    def test_replaces_every_occurrence(self):
        text = f"{_KEY} and again {_KEY}"
        assert scrub(text, _KEY) == "<redacted:...6789> and again <redacted:...6789>"

    def test_short_secret_fully_hidden(self):
        assert scrub("key=abc", "abc") == "key=<redacted>"

    @pytest.mark.parametrize("secret", [None, ""])
    def test_no_secret(self, secret):
        assert scrub("unchanged", secret) == "unchanged"

    def test_secret_absent(self):
        assert scrub("nothing here", _KEY) == "nothing here"


class TestRedact:
    def test_key_field_masked(self):
        assert redact({"key": _KEY, "name": "cat"})["key"] == "<redacted>"

    @pytest.mark.parametrize(
        "field",
        ["api_key", "API-KEY", "apikey", "token", "client_secret", "password", "Authorization"],
    )
    def test_sensitive_names_masked(self, field):
        assert redact({field: "value"})[field] == "<redacted>"

    def test_near_miss_names_not_masked(self):
        # Only the exact name "key" is treated as sensitive, not substrings.
        result = redact({"monkey": "banana", "keyword": "k"})
        assert result == {"monkey": "banana", "keyword": "k"}

    def test_image_field_replaced_with_size(self):
        assert redact({"image": "QUFBQUFBQUE="})["image"] == "<base64:8_bytes>"

    def test_data_uri_in_nested_string(self):
        payload = {"note": {"body": ["see data:image/png;base64,QUFBQQ== here"]}}
        assert redact(payload)["note"]["body"][0] == "see <base64:4_bytes> here"

    def test_bytes_replaced(self):
        assert redact({"blob": b"\x00\x01\x02"})["blob"] == "<binary:3_bytes>"

    def test_secret_scrubbed_from_any_string(self):
        result = redact({"url": f"https://ibb.co/x?key={_KEY}"}, _KEY)
        assert result["url"] == "https://ibb.co/x?key=<redacted:...6789>"

    def test_non_string_values_kept(self):
        assert redact({"status": 200, "success": True, "data": None}) == {
            "status": 200, "success": True, "data": None,
        }

    def test_original_not_mutated(self):
        payload = {"key": _KEY, "nested": {"image": "QUFB"}}
        snapshot = copy.deepcopy(payload)
        redact(payload, _KEY)
        assert payload == snapshot

    def test_patterns_cover_common_names(self):
        assert {"token", "secret", "api_key"} <= _SENSITIVE_KEY_PATTERNS
