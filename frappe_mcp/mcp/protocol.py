"""MCP JSON-RPC method handling, independent of the transport.

Both the stdio loop and the FastAPI endpoint feed decoded messages into
:class:`MCPProtocol` and write back whatever it returns (``None`` means
"send nothing").
"""

import logging
from typing import TYPE_CHECKING, Any

from .. import __version__
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JSONRPCParseError,
    is_notification,
    jsonrpc_error,
    jsonrpc_response,
    parse_message,
)

if TYPE_CHECKING:
    from ..engine.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "frappe-mcp-server"


class MCPProtocol:
    """Routes ``initialize``, ``tools/list``, ``tools/call`` and ``ping``."""

    def __init__(
        self,
        dispatcher: "ToolDispatcher",
        server_name: str = SERVER_NAME,
        version: str = __version__,
    ):
        self.dispatcher = dispatcher
        self.server_name = server_name
        self.version = version

    async def handle_raw(self, raw: str | bytes) -> dict | list | None:
        """Decode and handle one transport frame."""
        try:
            message = parse_message(raw)
        except JSONRPCParseError as e:
            logger.warning(f"Parse error: {e}")
            return jsonrpc_error(None, PARSE_ERROR, "Parse error")
        return await self.handle_message(message)

    async def handle_message(self, message: Any) -> dict | list | None:
        """Handle a single request or a batch array."""
        if isinstance(message, list):
            if not message:
                return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request: empty batch")
            responses = []
            for item in message:
                response = await self.handle_request(item)
                if response is not None:  # Skip notifications
                    responses.append(response)
            return responses or None
        return await self.handle_request(message)

    async def handle_request(self, request: Any) -> dict | None:
        if not isinstance(request, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request")

        id = request.get("id")
        method = request.get("method")
        if request.get("jsonrpc") != "2.0" or not isinstance(method, str):
            return jsonrpc_error(id, INVALID_REQUEST, "Invalid Request")

        if is_notification(request):
            logger.debug(f"Notification received: {method}")
            return None

        params = request.get("params") or {}
        try:
            if method == "initialize":
                return jsonrpc_response(id, self._initialize_result(params))
            elif method == "tools/list":
                return jsonrpc_response(id, {"tools": self.dispatcher.registry.definitions()})
            elif method == "tools/call":
                return await self._call_tool(id, params)
            elif method == "ping":
                return jsonrpc_response(id, {})
            else:
                return jsonrpc_error(id, METHOD_NOT_FOUND, f"Method not found: {method}")
        except Exception as e:
            logger.error(f"Error handling {method}: {e}", exc_info=True)
            return jsonrpc_error(id, INTERNAL_ERROR, f"Internal error: {e}")

    def _initialize_result(self, params: Any) -> dict:
        if isinstance(params, dict):
            client = params.get("clientInfo") or {}
            logger.info(
                f"Client connected: {client.get('name', 'unknown')} "
                f"(protocol {params.get('protocolVersion', 'unspecified')})"
            )
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": self.server_name, "version": self.version},
            "capabilities": {"tools": {}},
        }

    async def _call_tool(self, id: Any, params: Any) -> dict:
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return jsonrpc_error(
                id, INVALID_PARAMS, "Invalid params: tools/call requires a tool name"
            )

        result = await self.dispatcher.dispatch(params["name"], params.get("arguments"))
        return jsonrpc_response(id, result.to_mcp())
