"""Tool result payload shapes.

A tool call always answers with a normal JSON-RPC result. Failures of the
tool itself are flagged in-band with `isError: true` so the calling agent
sees the message and can correct its call; only protocol problems become
RPC error objects.
"""


def text_result(text: str, metadata: dict | None = None) -> dict:
    result = {"content": [{"type": "text", "text": text}]}
    if metadata:
        result["metadata"] = {key: value for key, value in metadata.items() if value is not None}
    return result


def tool_error_result(message: str) -> dict:
    return {
        "content": [{"type": "text", "text": message}],
        "isError": True,
    }
