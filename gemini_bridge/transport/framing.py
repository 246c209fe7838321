"""Inbound line framing for newline-delimited JSON-RPC.

Processing flow:
    binary stream -> `iter_lines` (one decoded text line per iteration) ->
    `decode_message` (JSON object) -> router.

Line boundaries:
    `\\n`, `\\r\\n` and a bare trailing `\\r` are all accepted. Lines have no
    length cap: `readline()` on a binary stream grows its buffer as needed, so
    a single 10+ MB line carrying an inline image arrives intact.

Blocking behavior:
    Each `readline()` runs in a worker thread via `asyncio.to_thread`, so the
    event loop keeps finishing in-flight requests and writing their responses
    while the next line is awaited.

Failure handling:
    Whitespace-only lines are skipped silently. Undecodable lines (bad
    syntax, `NaN`/`Infinity`, pathological nesting) raise `FramingError`;
    the caller logs them and sends nothing back, since no request id can be
    recovered from them.
"""

import asyncio
import json
import logging
from typing import AsyncIterator, BinaryIO

from gemini_bridge.core.errors import FramingError


logger = logging.getLogger(__name__)

# Log previews of bad lines are capped; payloads may be megabytes of base64.
PREVIEW_CHARS = 200


def _strip_line_ending(raw: bytes) -> bytes:
    if raw.endswith(b"\r\n"):
        return raw[:-2]
    if raw.endswith(b"\n") or raw.endswith(b"\r"):
        return raw[:-1]
    return raw


async def iter_lines(stream: BinaryIO) -> AsyncIterator[str]:
    """Yield non-blank text lines from a binary stream until EOF.

    Args:
        stream: Binary file object exposing `readline()` (stdin buffer,
            `io.BytesIO`, pipe).

    Yields:
        Line text without its terminator. Invalid UTF-8 sequences are
        replaced rather than aborting the stream.
    """
    while True:
        raw = await asyncio.to_thread(stream.readline)
        if not raw:
            return

        line = _strip_line_ending(raw).decode("utf-8", errors="replace")
        if not line.strip():
            continue

        yield line


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


def decode_message(line: str) -> dict:
    """Parse one framed line into a JSON-RPC message object.

    Raises:
        FramingError: when the line is not JSON (including `NaN`/`Infinity`
            literals and nesting deeper than the interpreter can decode) or
            not a JSON object.
    """
    try:
        message = json.loads(line, parse_constant=_reject_constant)
    except RecursionError as err:
        raise FramingError("Invalid JSON: nesting too deep") from err
    except ValueError as err:
        raise FramingError(f"Invalid JSON: {err}") from err

    if not isinstance(message, dict):
        raise FramingError(
            f"Expected a JSON object, got {type(message).__name__}"
        )

    return message


def preview(line: str) -> str:
    if len(line) <= PREVIEW_CHARS:
        return line
    return f"{line[:PREVIEW_CHARS]}... ({len(line)} chars)"
