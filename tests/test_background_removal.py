"""
Tests for the remote background removal client.

The HTTP layer is replaced with httpx.MockTransport; no network access.
"""
from io import BytesIO

import httpx
import pytest
from PIL import Image

from possessao.services.background_removal import BackgroundRemovalClient


def _png_bytes(size=(20, 30)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, (10, 20, 30, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


def _client(handler, api_key="test-key") -> BackgroundRemovalClient:
    return BackgroundRemovalClient(
        api_key=api_key,
        url="https://removebg.test/v1.0/removebg",
        enabled=True,
        transport=httpx.MockTransport(handler),
    )


class TestBackgroundRemovalClient:

    def test_success_returns_rgba_image(self, photo_file):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers.get("X-Api-Key")
            seen["body"] = request.read()
            return httpx.Response(200, content=_png_bytes())

        result = _client(handler).remove_background(photo_file)

        assert result is not None
        assert result.mode == "RGBA"
        assert result.size == (20, 30)
        assert seen["key"] == "test-key"
        assert b'name="image_file"' in seen["body"]
        assert b'name="size"' in seen["body"]
        assert b"auto" in seen["body"]

    @pytest.mark.parametrize("status", [400, 402, 403, 429, 500, 503])
    def test_error_status_returns_none(self, photo_file, status):
        client = _client(lambda request: httpx.Response(status, json={"errors": [{"title": "nope"}]}))
        assert client.remove_background(photo_file) is None

    def test_empty_body_returns_none(self, photo_file):
        client = _client(lambda request: httpx.Response(200, content=b""))
        assert client.remove_background(photo_file) is None

    def test_undecodable_body_returns_none(self, photo_file):
        client = _client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        assert client.remove_background(photo_file) is None

    def test_transport_error_returns_none(self, photo_file):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        assert _client(handler).remove_background(photo_file) is None

    def test_timeout_returns_none(self, photo_file):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        assert _client(handler).remove_background(photo_file) is None

    def test_missing_file_returns_none(self, tmp_path):
        client = _client(lambda request: httpx.Response(200, content=_png_bytes()))
        assert client.remove_background(tmp_path / "missing.jpg") is None

    def test_no_api_key_skips_the_call(self, photo_file):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, content=_png_bytes())

        client = _client(handler, api_key="")
        assert not client.is_available
        assert client.remove_background(photo_file) is None
        assert calls == []

    def test_default_timeouts(self):
        client = BackgroundRemovalClient(api_key="k")
        assert client.timeout.connect == 30.0
        assert client.timeout.read == 60.0
        assert client.timeout.write == 60.0
