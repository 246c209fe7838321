"""
Process entrypoint for the stdio bridge.

Architectural role:
- Loads settings, configures logging, and wires registry, conversation store,
  provider, dispatcher and router together.
- Runs the stdio serve loop until stdin closes.

Output channel protection:
- stdout is reserved for encoded responses. The real stdout buffer is handed
  to the `ResponseWriter`, and `sys.stdout` is rebound to stderr, so a stray
  `print` anywhere in the process lands in the diagnostic channel instead of
  corrupting the protocol stream.
- Logging goes to stderr only.

Startup failure:
- Without an API key the process logs an error and exits with status 1.
"""

import asyncio
import logging
import os
import sys
from typing import BinaryIO

from gemini_bridge import SERVER_NAME, __version__
from gemini_bridge.api.stdio_server import StdioServer
from gemini_bridge.catalog.registry import CapabilityRegistry
from gemini_bridge.core.router import Router
from gemini_bridge.llm.client import GeminiClient
from gemini_bridge.llm.provider_config import Settings, load_settings
from gemini_bridge.llm.service import GeminiProvider
from gemini_bridge.memory.conversation_store import ConversationStore
from gemini_bridge.tools.dispatcher import ToolDispatcher
from gemini_bridge.transport.encoder import ResponseWriter


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level_name: str | None = None) -> None:
    level = getattr(logging, (level_name or "INFO").upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, format=LOG_FORMAT, force=True)


def build_router(settings: Settings, provider=None, store: ConversationStore | None = None) -> Router:
    """Wire the request-handling object graph.

    `provider` and `store` can be injected (tests); by default a
    `GeminiProvider` over a `requests`-backed client and a fresh store are used.
    """
    registry = CapabilityRegistry(settings.default_model)
    if provider is None:
        client = GeminiClient(
            settings.api_key,
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )
        provider = GeminiProvider(client)

    dispatcher = ToolDispatcher(registry, provider, store or ConversationStore())
    return Router(registry, dispatcher)


async def run(router: Router, input_stream: BinaryIO, output_stream: BinaryIO) -> None:
    server = StdioServer(router, input_stream, ResponseWriter(output_stream))
    await server.serve()


def _claim_stdout() -> BinaryIO:
    protocol_stream = sys.stdout.buffer
    sys.stdout = sys.stderr
    return protocol_stream


def main():
    configure_logging(os.getenv("LOG_LEVEL"))
    settings = load_settings()

    if not settings.api_key:
        logger.error("GEMINI_API_KEY environment variable is required")
        sys.exit(1)

    output_stream = _claim_stdout()
    router = build_router(settings)
    logger.info(
        "%s %s ready on stdio (default model %s)",
        SERVER_NAME,
        __version__,
        settings.default_model,
    )

    try:
        asyncio.run(run(router, sys.stdin.buffer, output_stream))
    except KeyboardInterrupt:
        logger.info("Interrupted.")


if __name__ == "__main__":
    main()
