"""Tests for response encoding and the response writer."""

import io

import pytest

from gemini_bridge.core.protocol_types import INVALID_PARAMS, JsonRpcResponse
from gemini_bridge.transport.encoder import ResponseWriter, decode_response, encode_response


def test_encoded_response_is_exactly_one_line():
    response = JsonRpcResponse.success(1, {"content": [{"type": "text", "text": "line one\nline two\r\n"}]})

    data = encode_response(response)

    assert data.endswith(b"\n")
    assert data.count(b"\n") == 1
    assert b"\r" not in data


def test_round_trip_preserves_structured_result():
    result = {
        "content": [{"type": "text", "text": "Grüße ✓"}],
        "metadata": {"tokensUsed": 1234, "finishReason": "STOP", "nested": [[1, 2], [3.5]]},
        "isError": False,
    }

    decoded = decode_response(encode_response(JsonRpcResponse.success("req-7", result)))

    assert decoded == {"jsonrpc": "2.0", "id": "req-7", "result": result}
    assert isinstance(decoded["result"]["metadata"]["tokensUsed"], int)


def test_error_envelope_has_no_result():
    decoded = decode_response(
        encode_response(JsonRpcResponse.failure(3, INVALID_PARAMS, "Unknown tool: nope"))
    )

    assert "result" not in decoded
    assert decoded["error"] == {"code": INVALID_PARAMS, "message": "Unknown tool: nope"}


def test_null_id_is_echoed_as_null():
    decoded = decode_response(encode_response(JsonRpcResponse.success(None, {})))
    assert decoded["id"] is None
    assert decoded["result"] == {}


def test_writer_writes_one_line_per_response():
    stream = io.BytesIO()
    writer = ResponseWriter(stream)

    writer.write(JsonRpcResponse.success(1, {}))
    writer.write(JsonRpcResponse.success(2, {"tools": []}))

    lines = stream.getvalue().splitlines()
    assert [decode_response(line)["id"] for line in lines] == [1, 2]
    assert writer.responses_written == 2


def test_lone_surrogates_are_escaped():
    data = encode_response(JsonRpcResponse.failure("\ud800", INVALID_PARAMS, "Unknown tool: x\udc00"))

    data.decode("utf-8")
    assert b"\\ud800" in data
    decoded = decode_response(data)
    assert decoded["id"] == "\ud800"
    assert decoded["error"]["message"] == "Unknown tool: x\udc00"


def test_non_finite_floats_are_refused():
    with pytest.raises(ValueError):
        encode_response(JsonRpcResponse.success(1, {"score": float("nan")}))


def test_writer_leaves_stream_untouched_when_encoding_fails():
    stream = io.BytesIO()
    writer = ResponseWriter(stream)

    with pytest.raises(ValueError):
        writer.write(JsonRpcResponse.success(1, {"score": float("inf")}))

    assert stream.getvalue() == b""
    assert writer.responses_written == 0
