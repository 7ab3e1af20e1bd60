"""Tests for payload/builder.py.

Covers:
- setters overwrite (last write wins)
- expiration validation keeps the previous value on rejection
- build() snapshots without dispatching
- single-use dispatch
- apply_options for the one-shot entry points
"""

from __future__ import annotations

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from imgbbify.errors import (
    ErrorCode,
    ImgbbifyInvalidEncodingError,
    ImgbbifyInvalidExpirationError,
    ImgbbifyIOError,
    ImgbbifyMissingFieldError,
)
from imgbbify.imgbb_api.transport import AsyncImgbbTransport, ImgbbTransport
from imgbbify.models import PayloadSourceType, UploadRequest, UploadResponse
from imgbbify.payload.builder import (
    AsyncUploadBuilder,
    UploadBuilder,
    apply_options,
    validate_expiration,
)


def _sync_builder() -> tuple[UploadBuilder, MagicMock]:
    transport = MagicMock(spec=ImgbbTransport)
    transport.execute_upload.return_value = UploadResponse(success=True, status=200)
    return UploadBuilder(transport), transport


# ---------------------------------------------------------------------------
# validate_expiration
# ---------------------------------------------------------------------------

class TestValidateExpiration:
    @pytest.mark.parametrize("value", [0, 60, 15_552_000, 10**9])
    def test_accepts_non_negative_ints(self, value):
        assert validate_expiration(value) == value

    @pytest.mark.parametrize("value", [-1, -600])
    def test_rejects_negative(self, value):
        with pytest.raises(ImgbbifyInvalidExpirationError) as exc_info:
            validate_expiration(value)
        assert exc_info.value.code == ErrorCode.INVALID_EXPIRATION
        assert exc_info.value.context["value"] == value

    @pytest.mark.parametrize("value", [True, 1.5, "60", None])
    def test_rejects_non_int(self, value):
        with pytest.raises(ImgbbifyInvalidExpirationError):
            validate_expiration(value)


# ---------------------------------------------------------------------------
# Setters
# ---------------------------------------------------------------------------

class TestBuilderSetters:
    def test_metadata_last_write_wins(self):
        builder, _ = _sync_builder()
        request = (
            builder.bytes(b"img")
            .name("first").name("second")
            .title("a").title("b")
            .album("x").album("y")
            .expiration(60).expiration(120)
            .build()
        )
        assert request.name == "second"
        assert request.title == "b"
        assert request.album == "y"
        assert request.expiration == 120

    def test_data_last_write_wins(self):
        builder, _ = _sync_builder()
        request = builder.bytes(b"one").base64("dHdv").build()
        assert request.payload.data == "dHdv"
        assert request.payload.source_type == PayloadSourceType.ENCODED_TEXT

    def test_rejected_expiration_keeps_previous_value(self):
        builder, _ = _sync_builder()
        builder.bytes(b"img").expiration(60)
        with pytest.raises(ImgbbifyInvalidExpirationError):
            builder.expiration(-1)
        assert builder.build().expiration == 60

    def test_rejected_data_keeps_previous_payload(self):
        builder, _ = _sync_builder()
        builder.bytes(b"img")
        with pytest.raises(ImgbbifyInvalidEncodingError):
            builder.base64("%%%")
        assert base64.b64decode(builder.build().payload.data) == b"img"

    def test_file_is_read_immediately(self, tmp_path):
        builder, transport = _sync_builder()
        with pytest.raises(ImgbbifyIOError):
            builder.file(tmp_path / "missing.png")
        transport.execute_upload.assert_not_called()

    def test_file_setter(self, png_file, png_bytes):
        builder, _ = _sync_builder()
        request = builder.file(png_file).build()
        assert request.payload.decode() == png_bytes
        assert request.payload.source_type == PayloadSourceType.FILE_PATH

    def test_zero_expiration_is_sent(self):
        builder, _ = _sync_builder()
        request = builder.bytes(b"img").expiration(0).build()
        assert request.to_form("k")["expiration"] == "0"


# ---------------------------------------------------------------------------
# build / dispatch
# ---------------------------------------------------------------------------

class TestBuilderDispatch:
    def test_build_without_data(self):
        builder, transport = _sync_builder()
        with pytest.raises(ImgbbifyMissingFieldError) as exc_info:
            builder.name("x").build()
        assert exc_info.value.code == ErrorCode.MISSING_FIELD
        assert exc_info.value.context["field"] == "image"
        transport.execute_upload.assert_not_called()

    def test_upload_without_data_sends_nothing(self):
        builder, transport = _sync_builder()
        with pytest.raises(ImgbbifyMissingFieldError):
            builder.upload()
        transport.execute_upload.assert_not_called()

    def test_build_does_not_consume(self):
        builder, transport = _sync_builder()
        builder.bytes(b"img")
        first = builder.build()
        second = builder.build()
        assert first == second
        builder.upload()
        transport.execute_upload.assert_called_once_with(first)

    def test_build_returns_immutable_request(self):
        builder, _ = _sync_builder()
        request = builder.bytes(b"img").build()
        assert isinstance(request, UploadRequest)
        with pytest.raises(AttributeError):
            request.name = "x"  # type: ignore[misc]

    def test_later_setters_do_not_change_built_request(self):
        builder, _ = _sync_builder()
        request = builder.bytes(b"img").title("before").build()
        builder.title("after")
        assert request.title == "before"

    def test_upload_passes_request_to_transport(self):
        builder, transport = _sync_builder()
        response = builder.bytes(b"img").name("cat").upload()
        assert response.success is True
        sent = transport.execute_upload.call_args.args[0]
        assert sent.name == "cat"
        assert sent.payload.decode() == b"img"

    def test_second_dispatch_raises(self):
        builder, transport = _sync_builder()
        builder.bytes(b"img").upload()
        with pytest.raises(ValueError, match="already been dispatched"):
            builder.upload()
        assert transport.execute_upload.call_count == 1

    def test_dispatch_alias(self):
        builder, transport = _sync_builder()
        builder.bytes(b"img").dispatch()
        with pytest.raises(ValueError):
            builder.upload()
        transport.execute_upload.assert_called_once()

    def test_missing_field_does_not_consume(self):
        builder, transport = _sync_builder()
        with pytest.raises(ImgbbifyMissingFieldError):
            builder.upload()
        builder.bytes(b"img").upload()
        transport.execute_upload.assert_called_once()

    def test_transport_error_still_consumes(self):
        builder, transport = _sync_builder()
        transport.execute_upload.side_effect = RuntimeError("boom")
        with pytest.raises(RuntimeError):
            builder.bytes(b"img").upload()
        with pytest.raises(ValueError):
            builder.upload()

    def test_repr_hides_payload(self):
        builder, _ = _sync_builder()
        builder.base64("aGVsbG8gd29ybGQ=").name("cat")
        text = repr(builder)
        assert "aGVsbG8gd29ybGQ=" not in text
        assert "encoded_length=16" in text
        assert "name='cat'" in text


class TestAsyncUploadBuilder:
    @pytest.mark.asyncio
    async def test_upload_awaits_transport(self):
        transport = MagicMock(spec=AsyncImgbbTransport)
        transport.execute_upload = AsyncMock(
            return_value=UploadResponse(success=True, status=200),
        )
        builder = AsyncUploadBuilder(transport)
        response = await builder.bytes(b"img").expiration(600).upload()
        assert response.status == 200
        assert transport.execute_upload.await_args.args[0].expiration == 600

    @pytest.mark.asyncio
    async def test_second_dispatch_raises(self):
        transport = MagicMock(spec=AsyncImgbbTransport)
        transport.execute_upload = AsyncMock(return_value=UploadResponse())
        builder = AsyncUploadBuilder(transport).bytes(b"img")
        await builder.dispatch()
        with pytest.raises(ValueError):
            await builder.upload()


class TestApplyOptions:
    def test_none_leaves_fields_unset(self):
        builder, _ = _sync_builder()
        request = apply_options(builder.bytes(b"img")).build()
        assert (request.name, request.title, request.album, request.expiration) == (
            None, None, None, None,
        )

    def test_sets_given_fields(self):
        builder, _ = _sync_builder()
        request = apply_options(
            builder.bytes(b"img"), expiration=0, name="n", title="t", album="a",
        ).build()
        assert request.expiration == 0
        assert (request.name, request.title, request.album) == ("n", "t", "a")

    def test_invalid_expiration_raises(self):
        builder, _ = _sync_builder()
        with pytest.raises(ImgbbifyInvalidExpirationError):
            apply_options(builder.bytes(b"img"), expiration=-5)
