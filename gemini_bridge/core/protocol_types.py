"""JSON-RPC 2.0 data contracts for `gemini_bridge.core.router`.

Architectural role:
    Defines the minimal request/response schema exchanged between the line
    framer, the router, and the response encoder.

Identifier handling:
    A request whose object has no `id` key is a notification. An explicit
    `"id": null` is NOT a notification; it is echoed back as `null`. The id is
    never coerced or re-typed, so callers can correlate on exact equality.

Determinism:
    The data classes are purely structural and state-free.
"""

from dataclasses import dataclass, field
from typing import Any


JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_MISSING = object()


@dataclass
class JsonRpcRequest:
    """Decoded inbound message.

    Attributes:
        method: Method name, or `None` when the message carried none.
        params: Parameter bag. Non-object params are kept raw so the router
            can reject them with an invalid-params error.
        id: Request identifier exactly as received.
        has_id: False for notifications (no `id` key at all).
    """

    method: str | None
    params: Any = field(default_factory=dict)
    id: Any = None
    has_id: bool = True
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_notification(self) -> bool:
        return not self.has_id

    @classmethod
    def from_message(cls, message: dict) -> "JsonRpcRequest":
        raw_id = message.get("id", _MISSING)
        method = message.get("method")
        params = message.get("params")
        return cls(
            method=method if isinstance(method, str) else None,
            params={} if params is None else params,
            id=None if raw_id is _MISSING else raw_id,
            has_id=raw_id is not _MISSING,
            jsonrpc=message.get("jsonrpc", JSONRPC_VERSION),
        )


@dataclass
class ErrorDescriptor:
    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass
class JsonRpcResponse:
    """Outbound envelope carrying exactly one of `result` or `error`."""

    id: Any
    result: Any = None
    error: ErrorDescriptor | None = None

    @classmethod
    def success(cls, request_id: Any, result: Any) -> "JsonRpcResponse":
        return cls(id=request_id, result=result if result is not None else {})

    @classmethod
    def failure(cls, request_id: Any, code: int, message: str, data: Any = None) -> "JsonRpcResponse":
        return cls(id=request_id, error=ErrorDescriptor(code, message, data))

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        payload = {"jsonrpc": JSONRPC_VERSION, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.to_dict()
        else:
            payload["result"] = self.result
        return payload
