"""Image input preparation for `analyze_image`.

Processing flow:
    - Inline input: `data:<mime>;base64,<data>` URIs are split into MIME type
      and payload; bare base64 is assumed to be `image/jpeg`. The payload is
      base64-validated before it is forwarded.
    - URL input: http(s) only. The image is downloaded with `requests`, capped
      at `MAX_IMAGE_BYTES`, and inlined. MIME type comes from the
      `Content-Type` header, else from the URL extension.

Output:
    One Gemini `inlineData` part.

Error handling strategy:
    Every rejection raises `ToolExecutionError` with a message the calling
    agent can act on (bad base64, unsupported scheme, non-image content,
    oversized download, fetch failure).
"""

import base64
import binascii
import logging
import mimetypes
import re
from urllib.parse import urlparse

import requests

from gemini_bridge.core.errors import ToolExecutionError


logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 20 * 1024 * 1024
DEFAULT_IMAGE_MIME = "image/jpeg"
FETCH_TIMEOUT = 30
DATA_URI_PATTERN = re.compile(r"^data:([^;,]+);base64,(.*)$", re.DOTALL)


def inline_part_from_base64(value: str) -> dict:
    value = value.strip()
    match = DATA_URI_PATTERN.match(value)
    if match:
        mime_type, data = match.group(1).strip(), match.group(2)
    else:
        mime_type, data = DEFAULT_IMAGE_MIME, value

    data = "".join(data.split())
    try:
        decoded = base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as err:
        raise ToolExecutionError("imageBase64 is not valid base64 data") from err

    if not decoded:
        raise ToolExecutionError("imageBase64 decodes to an empty payload")

    logger.debug("Inline image: %s, %d bytes", mime_type, len(decoded))
    return {"inlineData": {"mimeType": mime_type, "data": data}}


def _mime_from_response(url: str, response) -> str:
    header = (response.headers.get("Content-Type") or "").split(";")[0].strip().lower()
    if header:
        return header
    guessed, _ = mimetypes.guess_type(urlparse(url).path)
    return guessed or DEFAULT_IMAGE_MIME


def fetch_image_part(url: str, timeout: float = FETCH_TIMEOUT, session=None) -> dict:
    """Download an image URL and return it as an inline part.

    Blocking; the dispatcher runs it through `asyncio.to_thread`.
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ToolExecutionError(f"imageUrl must be an http(s) URL: {url}")

    http = session or requests
    try:
        with http.get(url.strip(), timeout=timeout, stream=True) as response:
            if response.status_code >= 400:
                raise ToolExecutionError(
                    f"Could not fetch imageUrl (HTTP {response.status_code}): {url}"
                )

            mime_type = _mime_from_response(url, response)
            if not mime_type.startswith("image/"):
                raise ToolExecutionError(f"imageUrl did not return an image (got {mime_type})")

            payload = bytearray()
            for chunk in response.iter_content(chunk_size=64 * 1024):
                payload.extend(chunk)
                if len(payload) > MAX_IMAGE_BYTES:
                    raise ToolExecutionError(
                        f"Image at imageUrl exceeds {MAX_IMAGE_BYTES // (1024 * 1024)} MB"
                    )
    except requests.exceptions.RequestException as err:
        raise ToolExecutionError(f"Could not fetch imageUrl: {type(err).__name__}") from err

    if not payload:
        raise ToolExecutionError(f"imageUrl returned an empty body: {url}")

    logger.debug("Fetched image %s: %s, %d bytes", url, mime_type, len(payload))
    return {
        "inlineData": {
            "mimeType": mime_type,
            "data": base64.b64encode(bytes(payload)).decode("ascii"),
        }
    }
