"""MCP (Model Context Protocol) layer.

This module contains the transport-independent MCP pieces:
- Tool definitions for tools/list
- JSON-RPC 2.0 helpers
- MCPProtocol, the method router used by the stdio and HTTP transports
"""

from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .protocol import PROTOCOL_VERSION, MCPProtocol
from .tool_defs import TOOL_DEFINITIONS, get_tool_definition

__all__ = [
    # Tool definitions
    "TOOL_DEFINITIONS",
    "get_tool_definition",
    # Protocol
    "MCPProtocol",
    "PROTOCOL_VERSION",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
]
