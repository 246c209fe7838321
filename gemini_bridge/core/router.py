"""JSON-RPC request routing.

Architectural role:
    Maps one decoded message to one protocol method handler and guarantees
    that every identified request gets exactly one response, whatever the
    handler does.

Session state:
    `uninitialized` -> `ready` on `initialize` (or the
    `notifications/initialized` notification). The router is permissive:
    other methods are still served before `ready`, with a warning logged once.

Dispatch rules:
    - No `id` key: notification. Handled if known, never answered.
    - Missing/non-string `method`: -32600 invalid request.
    - Method not in the table: -32601 method not found.
    - Non-object `params`: -32602 invalid params.
    - `ProtocolError` from a handler: RPC error with its code.
    - Any other exception: logged with traceback, -32603 internal error. The
      process keeps serving.
"""

import logging
from enum import Enum

from gemini_bridge import SERVER_NAME, __version__
from gemini_bridge.catalog.prompts import render_prompt
from gemini_bridge.catalog.registry import CapabilityRegistry
from gemini_bridge.catalog.resources import read_resource
from gemini_bridge.core.errors import InvalidParamsError, ProtocolError
from gemini_bridge.core.protocol_types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    JsonRpcResponse,
)
from gemini_bridge.tools.dispatcher import ToolDispatcher


logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class Router:
    def __init__(self, registry: CapabilityRegistry, dispatcher: ToolDispatcher):
        self.registry = registry
        self.dispatcher = dispatcher
        self.state = SessionState.UNINITIALIZED
        self.client_info = None
        self._warned_uninitialized = False

        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
            "prompts/list": self._list_prompts,
            "prompts/get": self._get_prompt,
        }
        self._notifications = {
            "notifications/initialized": self._on_initialized,
            "notifications/cancelled": self._on_cancelled,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def handle_message(self, message: dict) -> JsonRpcResponse | None:
        """Route one decoded message.

        Returns:
            The response to write, or `None` for notifications.
        """
        request = JsonRpcRequest.from_message(message)

        if request.is_notification:
            await self._handle_notification(request)
            return None

        if request.method is None:
            return JsonRpcResponse.failure(request.id, INVALID_REQUEST, "Invalid Request: missing method")

        handler = self._methods.get(request.method)
        if handler is None:
            logger.warning("Method not found: %s", request.method)
            return JsonRpcResponse.failure(request.id, METHOD_NOT_FOUND, "Method not found")

        if not isinstance(request.params, dict):
            return JsonRpcResponse.failure(request.id, INVALID_PARAMS, "params must be an object")

        if self.state is SessionState.UNINITIALIZED and request.method not in ("initialize", "ping"):
            if not self._warned_uninitialized:
                logger.warning("Received %s before initialize; serving anyway", request.method)
                self._warned_uninitialized = True

        logger.debug("Handling request id=%r method=%s", request.id, request.method)

        try:
            result = await handler(request.params)
        except ProtocolError as err:
            logger.info("Protocol error for %s: %s", request.method, err.message)
            return JsonRpcResponse.failure(request.id, err.code, err.message, err.data)
        except Exception as err:
            logger.exception("Unhandled error while handling %s", request.method)
            detail = str(err)
            return JsonRpcResponse.failure(
                request.id,
                INTERNAL_ERROR,
                "Internal error",
                {"detail": detail} if detail else None,
            )

        return JsonRpcResponse.success(request.id, result)

    async def _handle_notification(self, request: JsonRpcRequest) -> None:
        handler = self._notifications.get(request.method)
        if handler is None:
            logger.info("Notification received: %s", request.method)
            return

        try:
            await handler(request.params if isinstance(request.params, dict) else {})
        except Exception:
            logger.exception("Notification handler failed: %s", request.method)

    # =========================================================
    # Session
    # =========================================================

    async def _initialize(self, params: dict) -> dict:
        self.client_info = params.get("clientInfo")
        requested = params.get("protocolVersion")
        if requested and requested != PROTOCOL_VERSION:
            logger.info("Client requested protocol %s; answering with %s", requested, PROTOCOL_VERSION)

        self.state = SessionState.READY
        logger.info("Session initialized (client=%s)", (self.client_info or {}).get("name", "unknown"))

        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": SERVER_NAME, "version": __version__},
            "capabilities": {"tools": {}, "resources": {}, "prompts": {}},
        }

    async def _on_initialized(self, params: dict) -> None:
        self.state = SessionState.READY

    async def _on_cancelled(self, params: dict) -> None:
        # In-flight provider calls run to completion; the late response is
        # still written and the client discards it.
        logger.info("Cancellation requested for %r (not supported)", params.get("requestId"))

    async def _ping(self, params: dict) -> dict:
        return {}

    # =========================================================
    # Capability listing / invocation
    # =========================================================

    async def _list_tools(self, params: dict) -> dict:
        return {"tools": self.registry.list_tools()}

    async def _call_tool(self, params: dict) -> dict:
        return await self.dispatcher.call_tool(params.get("name"), params.get("arguments"))

    async def _list_resources(self, params: dict) -> dict:
        return {"resources": self.registry.list_resources()}

    async def _read_resource(self, params: dict) -> dict:
        uri = params.get("uri")
        if not uri:
            raise InvalidParamsError("Missing required parameter: uri")

        document = read_resource(uri, self.registry.default_model) if isinstance(uri, str) else None
        if document is None:
            raise InvalidParamsError(f"Unknown resource: {uri}")

        mime_type, text = document
        return {"contents": [{"uri": uri, "mimeType": mime_type, "text": text}]}

    async def _list_prompts(self, params: dict) -> dict:
        return {"prompts": self.registry.list_prompts()}

    async def _get_prompt(self, params: dict) -> dict:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise InvalidParamsError("Missing required parameter: name")

        prompt = self.registry.get_prompt(name)
        if prompt is None:
            raise InvalidParamsError(f"Unknown prompt: {name}")

        arguments = params.get("arguments") or {}
        if not isinstance(arguments, dict):
            raise InvalidParamsError("Prompt arguments must be an object")

        for argument in prompt.arguments:
            if argument.required and arguments.get(argument.name) in (None, ""):
                raise InvalidParamsError(f"Missing required argument for prompt {name}: {argument.name}")

        return {
            "description": prompt.description,
            "messages": render_prompt(name, arguments),
        }
