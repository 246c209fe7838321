"""Exception hierarchy for the bridge.

Error taxonomy:
    - `FramingError`: an input line could not be decoded into a message. No
      request id can be recovered, so the line is logged and never answered.
    - `ProtocolError`: the request is addressable but wrong at the protocol
      level (unknown method/tool/resource, bad params). Becomes an RPC error.
    - `ToolExecutionError`: a registered tool was called correctly but its
      arguments failed validation. Becomes an `isError` tool result.
    - `ProviderError`: the Gemini API call failed (HTTP, network, quota,
      blocked content). Also becomes an `isError` tool result.

Anything outside this hierarchy that escapes a handler is an internal error
and is converted by `core.router` into a -32603 response.
"""

from gemini_bridge.core.protocol_types import INVALID_PARAMS


class BridgeError(Exception):
    """Base class for all expected bridge failures."""


class FramingError(BridgeError):
    """Raised when a transport line is not a decodable JSON-RPC object."""


class ProtocolError(BridgeError):
    """JSON-RPC level failure tied to a request id."""

    def __init__(self, code: int, message: str, data=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


class InvalidParamsError(ProtocolError):
    def __init__(self, message: str, data=None):
        super().__init__(INVALID_PARAMS, message, data)


class ToolExecutionError(BridgeError):
    """Tool arguments were rejected before reaching the provider."""


class ProviderError(BridgeError):
    """Gemini API failure.

    Attributes:
        status_code: HTTP status when the provider answered, else `None`.
        model: Model identifier the request targeted, when known.
    """

    def __init__(self, message: str, status_code: int | None = None, model: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.model = model
