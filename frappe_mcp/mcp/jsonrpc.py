"""JSON-RPC 2.0 envelope helpers shared by the stdio and HTTP transports.

See: https://www.jsonrpc.org/specification
"""

import json
from typing import Any

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class JSONRPCParseError(ValueError):
    """Raised when an inbound message is not valid JSON."""


def jsonrpc_response(id: Any, result: Any) -> dict:
    """Create a JSON-RPC 2.0 success response.

    Args:
        id: Request ID (must match the request)
        result: The result payload

    Returns:
        JSON-RPC 2.0 response dict
    """
    return {"jsonrpc": "2.0", "id": id, "result": result}


def jsonrpc_error(id: Any, code: int, message: str, data: Any = None) -> dict:
    """Create a JSON-RPC 2.0 error response.

    Args:
        id: Request ID (None when the request could not be read)
        code: One of the error code constants above
        message: Human-readable error message
        data: Optional structured detail

    Returns:
        JSON-RPC 2.0 error response dict
    """
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": "2.0", "id": id, "error": error}


def parse_message(raw: str | bytes) -> Any:
    """Decode one inbound message (a request object or a batch array)."""
    try:
        return json.loads(raw)
    except ValueError as e:
        raise JSONRPCParseError(str(e)) from e


def is_notification(message: dict) -> bool:
    """Requests without an ``id`` member expect no response."""
    return "id" not in message
