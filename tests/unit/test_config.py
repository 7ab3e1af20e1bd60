"""Tests for config.py -- defaults, validation and immutability."""

from __future__ import annotations

import dataclasses

import pytest

from imgbbify.config import (
    CLIENT_VERSION,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    ImgbbifyConfig,
)


class TestDefaults:
    def test_documented_defaults(self):
        config = ImgbbifyConfig(api_key="k" * 32)
        assert config.base_url == "https://api.imgbb.com/1/upload"
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_seconds == DEFAULT_TIMEOUT_SECONDS == 30.0
        assert config.user_agent == DEFAULT_USER_AGENT == f"imgbbify/{CLIENT_VERSION}"
        assert config.http_proxy is None
        assert config.metrics is None
        assert config.debug_dump_payload is False

    def test_frozen(self):
        config = ImgbbifyConfig(api_key="k" * 32)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.timeout_seconds = 1.0  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize("key", ["", "   "])
    def test_empty_api_key(self, key):
        with pytest.raises(ValueError, match="api_key"):
            ImgbbifyConfig(api_key=key)

    def test_missing_api_key(self):
        with pytest.raises(ValueError, match="api_key"):
            ImgbbifyConfig()

    @pytest.mark.parametrize("timeout", [0, -1, -0.5])
    def test_non_positive_timeout(self, timeout):
        with pytest.raises(ValueError, match="timeout_seconds"):
            ImgbbifyConfig(api_key="key", timeout_seconds=timeout)

    def test_empty_user_agent(self):
        with pytest.raises(ValueError, match="user_agent"):
            ImgbbifyConfig(api_key="key", user_agent="")

    @pytest.mark.parametrize("url", ["ftp://api.imgbb.com/1/upload", "api.imgbb.com/1/upload"])
    def test_non_http_base_url(self, url):
        with pytest.raises(ValueError, match="http"):
            ImgbbifyConfig(api_key="key", base_url=url)

    def test_plain_http_to_remote_host_rejected(self):
        with pytest.raises(ValueError, match="insecure HTTP"):
            ImgbbifyConfig(api_key="key", base_url="http://api.imgbb.com/1/upload")

    @pytest.mark.parametrize(
        "url",
        [
            "http://localhost:8080/1/upload",
            "http://127.0.0.1/upload",
            "http://[::1]:9000/upload",
        ],
    )
    def test_plain_http_to_local_host_allowed(self, url):
        assert ImgbbifyConfig(api_key="key", base_url=url).base_url == url

    def test_fractional_timeout(self):
        assert ImgbbifyConfig(api_key="key", timeout_seconds=0.25).timeout_seconds == 0.25
