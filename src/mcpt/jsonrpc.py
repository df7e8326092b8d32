"""JSON-RPC 2.0 envelope construction and response correlation checks."""

from __future__ import annotations

import json
from typing import Any

from mcpt._types import JSONRPC_VERSION, OPERATION_ID, JsonRpcRequest
from mcpt.errors import IDMismatchError, MalformedResultError, ProtocolMismatchError


def build_request(method: str, request_id: int | str, params: Any = None) -> JsonRpcRequest:
    return JsonRpcRequest(id=request_id, method=method, params=params)


def build_notification(method: str, params: Any = None) -> JsonRpcRequest:
    return JsonRpcRequest(method=method, params=params)


def encode(request: JsonRpcRequest) -> bytes:
    return json.dumps(request.to_payload()).encode()


def decode_request(raw: bytes | str) -> JsonRpcRequest:
    """Parse a serialized envelope back into a request."""
    return JsonRpcRequest.model_validate(json.loads(raw))


def _same_id(sent: int | str, echoed: Any) -> bool:
    # 1 and "1" (or 1 and True) are different ids.
    return type(echoed) is type(sent) and echoed == sent


def check_response(response: Any, request_id: int | str) -> dict[str, Any]:
    """Validate the envelope of a response to ``request_id`` and return it."""
    if not isinstance(response, dict):
        raise ProtocolMismatchError(
            f"Expected a JSON-RPC object, got {type(response).__name__}"
        )
    if response.get("jsonrpc") != JSONRPC_VERSION:
        raise ProtocolMismatchError(f"Unexpected jsonrpc value: {response.get('jsonrpc')!r}")
    if "id" not in response or not _same_id(request_id, response["id"]):
        raise IDMismatchError(request_id, response.get("id"))
    return response


def result_object(response: dict[str, Any]) -> dict[str, Any]:
    """Return ``result`` when it is an object."""
    if "result" not in response:
        error = response.get("error")
        if error is not None:
            raise MalformedResultError(f"Server returned an error: {json.dumps(error)}")
        raise MalformedResultError("result not found in response")
    result = response["result"]
    if not isinstance(result, dict):
        raise MalformedResultError(f"result has wrong type: {type(result).__name__}")
    return result


def check_ping(response: Any) -> None:
    """Accept only ``{"jsonrpc": "2.0", "id": "123", "result": {}}``."""
    result = check_response(response, OPERATION_ID).get("result")
    if not isinstance(result, dict) or result:
        raise MalformedResultError(f"Unexpected result value: {result!r}")
