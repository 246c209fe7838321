"""Stdio serve loop.

Request lifecycle (per input line):
1. `transport.framing.iter_lines` yields the next non-blank line.
2. `decode_message` parses it; undecodable lines are logged and dropped.
3. The message is routed in its own task, so the loop goes straight back to
   reading while provider calls are outstanding.
4. The task writes the router's response (if any) through the
   `ResponseWriter`.

Ordering:
    Responses to different requests are written in completion order, not
    arrival order. Clients correlate by id.

Shutdown:
    On EOF the loop waits for every in-flight task so no accepted request
    loses its response.
"""

import asyncio
import logging
from typing import BinaryIO

from gemini_bridge.core.errors import FramingError
from gemini_bridge.core.protocol_types import INTERNAL_ERROR, JsonRpcResponse
from gemini_bridge.core.router import Router
from gemini_bridge.transport.encoder import ResponseWriter
from gemini_bridge.transport.framing import decode_message, iter_lines, preview


logger = logging.getLogger(__name__)


class StdioServer:
    def __init__(self, router: Router, input_stream: BinaryIO, writer: ResponseWriter):
        self.router = router
        self.input_stream = input_stream
        self.writer = writer
        self.parse_failures = 0
        self._tasks: set[asyncio.Task] = set()

    async def serve(self) -> None:
        async for line in iter_lines(self.input_stream):
            try:
                message = decode_message(line)
            except FramingError as err:
                self.parse_failures += 1
                logger.error("Failed to parse message: %s | line=%s", err, preview(line))
                continue
            except Exception:
                self.parse_failures += 1
                logger.exception("Unexpected failure decoding line=%s", preview(line))
                continue

            task = asyncio.create_task(self._process(message))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        logger.info("Input closed; waiting for %d in-flight request(s)", len(self._tasks))
        while self._tasks:
            await asyncio.wait(list(self._tasks))

    async def _process(self, message: dict) -> None:
        try:
            response = await self.router.handle_message(message)
        except Exception:
            # Router already contains handler failures; this covers bugs in
            # the routing layer itself.
            logger.exception("Router failed on message")
            if "id" not in message:
                return
            response = JsonRpcResponse.failure(message.get("id"), INTERNAL_ERROR, "Internal error")

        if response is None:
            return

        self._write(response)

    def _write(self, response: JsonRpcResponse) -> None:
        try:
            self.writer.write(response)
            return
        except OSError:
            logger.exception("Failed to write response id=%r", response.id)
            return
        except (TypeError, ValueError):
            logger.exception("Failed to encode response id=%r", response.id)

        # Encoding failed before anything reached the stream; answer the
        # request with an error envelope instead.
        fallback = JsonRpcResponse.failure(
            response.id,
            INTERNAL_ERROR,
            "Internal error",
            {"detail": "response could not be encoded"},
        )
        try:
            self.writer.write(fallback)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to write fallback error for id=%r", response.id)
