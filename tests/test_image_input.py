"""Tests for data-URL encoding of uploaded images."""

import base64
from types import SimpleNamespace

import pytest

from cloudlab.errors import EmptyInput
from cloudlab.image_input import DEFAULT_MIME_TYPE, decode_data_url, encode_data_url, image_from_upload

PNG_BYTES = b"\x89PNG\r\n\x1a\n"


class TestDecodeDataUrl:
    def test_media_type_from_header(self):
        value = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        image = decode_data_url(value)
        assert image.mime_type == "image/png"
        assert image.data == PNG_BYTES

    def test_bare_payload_uses_default_type(self):
        image = decode_data_url(base64.b64encode(b"jpeg-bytes").decode())
        assert image.mime_type == DEFAULT_MIME_TYPE
        assert image.data == b"jpeg-bytes"

    def test_header_without_media_type(self):
        image = decode_data_url("data:;base64," + base64.b64encode(b"x").decode())
        assert image.mime_type == DEFAULT_MIME_TYPE

    @pytest.mark.parametrize("value", ["", "   ", None, "data:image/png;base64,", "data:image/png;base64,***"])
    def test_unusable_values(self, value):
        with pytest.raises(EmptyInput):
            decode_data_url(value)


class TestEncode:
    def test_encode_then_decode_keeps_media_type(self):
        image = decode_data_url(encode_data_url(PNG_BYTES, "image/webp"))
        assert (image.data, image.mime_type) == (PNG_BYTES, "image/webp")

    def test_upload_uses_reported_type(self):
        upload = SimpleNamespace(getvalue=lambda: PNG_BYTES, type="image/png")
        assert image_from_upload(upload).startswith("data:image/png;base64,")

    def test_upload_without_type(self):
        upload = SimpleNamespace(getvalue=lambda: PNG_BYTES, type="")
        assert image_from_upload(upload).startswith(f"data:{DEFAULT_MIME_TYPE};base64,")

    def test_no_upload(self):
        assert image_from_upload(None) == ""
