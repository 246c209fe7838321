"""Tests for image input preparation."""

import base64

import pytest
import requests

from gemini_bridge.core.errors import ToolExecutionError
from gemini_bridge.tools import media
from gemini_bridge.tools.media import fetch_image_part, inline_part_from_base64

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image-data"
PNG_B64 = base64.b64encode(PNG_BYTES).decode("ascii")


class FakeStreamResponse:
    def __init__(self, status_code=200, headers=None, chunks=()):
        self.status_code = status_code
        self.headers = headers or {}
        self._chunks = list(chunks)
        self.closed = False

    def iter_content(self, chunk_size=1):
        yield from self._chunks

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, timeout=None, stream=False):
        self.requests.append((url, timeout, stream))
        if self.error is not None:
            raise self.error
        return self.response


def test_data_uri_keeps_declared_mime_type():
    part = inline_part_from_base64(f"data:image/png;base64,{PNG_B64}")
    assert part == {"inlineData": {"mimeType": "image/png", "data": PNG_B64}}


def test_bare_base64_defaults_to_jpeg():
    assert inline_part_from_base64(PNG_B64)["inlineData"]["mimeType"] == "image/jpeg"


def test_wrapped_base64_is_unwrapped():
    wrapped = "\n".join(PNG_B64[i:i + 8] for i in range(0, len(PNG_B64), 8))
    assert inline_part_from_base64(wrapped)["inlineData"]["data"] == PNG_B64


def test_invalid_base64_is_rejected():
    with pytest.raises(ToolExecutionError, match="not valid base64"):
        inline_part_from_base64("data:image/png;base64,@@not-base64@@")


def test_fetch_inlines_image():
    response = FakeStreamResponse(headers={"Content-Type": "image/png; charset=binary"}, chunks=[PNG_BYTES[:5], PNG_BYTES[5:]])
    session = FakeSession(response)

    part = fetch_image_part("https://img.test/cat.png", timeout=3, session=session)

    assert part == {"inlineData": {"mimeType": "image/png", "data": PNG_B64}}
    assert session.requests == [("https://img.test/cat.png", 3, True)]
    assert response.closed


def test_fetch_guesses_mime_from_extension():
    session = FakeSession(FakeStreamResponse(chunks=[PNG_BYTES]))
    assert fetch_image_part("https://img.test/cat.png", session=session)["inlineData"]["mimeType"] == "image/png"


@pytest.mark.parametrize("url", ["file:///etc/passwd", "ftp://img.test/a.png", "not a url"])
def test_non_http_urls_are_rejected(url):
    session = FakeSession(FakeStreamResponse(chunks=[PNG_BYTES]))

    with pytest.raises(ToolExecutionError, match="http"):
        fetch_image_part(url, session=session)

    assert session.requests == []


def test_http_error_status():
    session = FakeSession(FakeStreamResponse(status_code=404))
    with pytest.raises(ToolExecutionError, match="HTTP 404"):
        fetch_image_part("https://img.test/missing.png", session=session)


def test_non_image_content_is_rejected():
    session = FakeSession(FakeStreamResponse(headers={"Content-Type": "text/html"}, chunks=[b"<html>"]))
    with pytest.raises(ToolExecutionError, match="did not return an image"):
        fetch_image_part("https://img.test/page", session=session)


def test_oversized_download_is_rejected(monkeypatch):
    monkeypatch.setattr(media, "MAX_IMAGE_BYTES", 10)
    session = FakeSession(FakeStreamResponse(headers={"Content-Type": "image/png"}, chunks=[b"x" * 8, b"x" * 8]))

    with pytest.raises(ToolExecutionError, match="exceeds"):
        fetch_image_part("https://img.test/big.png", session=session)


def test_network_failure_is_tool_error():
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(ToolExecutionError, match="Could not fetch imageUrl: ConnectionError"):
        fetch_image_part("https://img.test/cat.png", session=session)
