"""
Tests for the stdio transport and the command line
"""
import asyncio
import io
import json

import pytest

from frappe_mcp.cli import build_parser
from frappe_mcp.mcp import MCPProtocol
from frappe_mcp.stdio import process_line, serve_stream


def _reader(*lines: str) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data(line.encode("utf-8") + b"\n")
    reader.feed_eof()
    return reader


class TestServeStream:
    """Newline-delimited JSON-RPC over a stream"""

    @pytest.fixture
    def protocol(self, dispatcher):
        """Protocol wired to the test dispatcher"""
        return MCPProtocol(dispatcher)

    @pytest.mark.asyncio
    async def test_answers_requests_in_order(self, protocol):
        reader = _reader(
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "",
            json.dumps(
                {"jsonrpc": "2.0", "id": 2, "method": "tools/call", "params": {"name": "ping"}}
            ),
        )
        output = io.StringIO()

        await serve_stream(reader, protocol, output)

        frames = [json.loads(line) for line in output.getvalue().splitlines()]
        assert [f["id"] for f in frames] == [1, 2]
        assert frames[1]["result"]["content"][0]["text"] == "pong"

    @pytest.mark.asyncio
    async def test_malformed_line(self, protocol):
        output = io.StringIO()

        await serve_stream(_reader("{oops"), protocol, output)

        frame = json.loads(output.getvalue())
        assert frame["error"]["code"] == -32700

    @pytest.mark.asyncio
    async def test_shutdown_stops_loop(self, protocol):
        shutdown = asyncio.Event()
        shutdown.set()
        output = io.StringIO()

        reader = _reader('{"jsonrpc": "2.0", "id": 1, "method": "ping"}')

        await serve_stream(reader, protocol, output, shutdown)

        assert output.getvalue() == ""

    @pytest.mark.asyncio
    async def test_blank_line_ignored(self, protocol):
        assert await process_line("   \n", protocol) is None


class TestParser:
    """Command-line options"""

    def test_defaults_to_stdio(self):
        args = build_parser().parse_args([])
        assert args.transport == "stdio"

    def test_http_options(self):
        args = build_parser().parse_args(
            ["--transport", "http", "--host", "0.0.0.0", "--port", "9000", "--log-level", "DEBUG"]
        )

        assert args.transport == "http"
        assert args.host == "0.0.0.0"
        assert args.port == 9000
        assert args.log_level == "DEBUG"

    def test_rejects_unknown_transport(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--transport", "sse"])
