"""Outbound response encoding.

Integrity guarantee:
    The output stream carries nothing but complete encoded responses, one per
    line. A single stray byte would desynchronize the client for every
    following message, so:
    - encoding is compact JSON; `json.dumps` escapes `\\n`/`\\r` inside
      strings, so a response never spans more than one line;
    - lone surrogates (reachable through echoed ids or names sent as `\\ud800`)
      are emitted as `\\uXXXX` escapes, and non-finite floats are refused, so
      every line is valid UTF-8 JSON;
    - each response is written as one `write()` of the full line followed by
      a flush;
    - `ResponseWriter` is the only writer of the stream it wraps.
"""

import json
import logging
import threading
from typing import BinaryIO

from gemini_bridge.core.protocol_types import JsonRpcResponse


logger = logging.getLogger(__name__)


def encode_response(response: JsonRpcResponse) -> bytes:
    """Encode a response as one UTF-8 line terminated by a single `\\n`.

    Raises:
        ValueError: when the payload holds `NaN` or an infinity, which have
            no JSON representation.
    """
    text = json.dumps(
        response.to_dict(),
        ensure_ascii=False,
        allow_nan=False,
        separators=(",", ":"),
    )
    # Lone surrogates only occur inside JSON strings; backslashreplace
    # writes them as their `\uXXXX` escape.
    return (text + "\n").encode("utf-8", errors="backslashreplace")


def decode_response(line: bytes | str) -> dict:
    """Decode an encoded response line back into its envelope dict."""
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    return json.loads(line)


class ResponseWriter:
    """Serialized writer of encoded responses onto a binary stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self._lock = threading.Lock()
        self.responses_written = 0

    def write(self, response: JsonRpcResponse) -> None:
        data = encode_response(response)

        with self._lock:
            self._stream.write(data)
            self._stream.flush()
            self.responses_written += 1

        logger.debug("Sent response id=%r (%d bytes)", response.id, len(data))
