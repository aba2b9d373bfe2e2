"""stdio transport: newline-delimited JSON-RPC on stdin/stdout.

stdout carries protocol frames only; all logging goes to stderr.
"""

import asyncio
import json
import logging
import signal
import sys
from typing import Any, TextIO

from .config import Settings
from .mcp import MCPProtocol
from .runtime import Runtime

logger = logging.getLogger(__name__)


def write_message(message: Any, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    stream.write(json.dumps(message, default=str) + "\n")
    stream.flush()


async def process_line(line: str, protocol: MCPProtocol) -> dict | list | None:
    """Handle one stdin line; blank lines are ignored."""
    line = line.strip()
    if not line:
        return None
    return await protocol.handle_raw(line)


async def serve_stream(
    reader: asyncio.StreamReader,
    protocol: MCPProtocol,
    output: TextIO | None = None,
    shutdown: asyncio.Event | None = None,
) -> None:
    """Read requests until EOF or shutdown, answering each in order."""
    shutdown = shutdown or asyncio.Event()
    while not shutdown.is_set():
        line_bytes = await reader.readline()
        if not line_bytes:
            logger.info("Stdin closed - client disconnected")
            break

        response = await process_line(line_bytes.decode("utf-8", errors="replace"), protocol)
        if response is not None:
            write_message(response, output)


async def run_stdio(settings: Settings) -> None:
    """Main entry point for stdio mode."""
    logger.info("Starting Frappe MCP server on stdio")
    runtime = Runtime.create(settings)

    loop = asyncio.get_running_loop()
    shutdown = asyncio.Event()

    def signal_handler(signum: int) -> None:
        logger.info(f"Received signal {signum}, initiating shutdown...")
        shutdown.set()

    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, signal_handler, signum)
        except NotImplementedError:
            # Windows event loops
            pass

    reader = asyncio.StreamReader()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)

    serve_task = asyncio.create_task(serve_stream(reader, runtime.protocol, shutdown=shutdown))
    shutdown_task = asyncio.create_task(shutdown.wait())
    try:
        _, pending = await asyncio.wait(
            [serve_task, shutdown_task], return_when=asyncio.FIRST_COMPLETED
        )
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        if serve_task.done() and not serve_task.cancelled() and serve_task.exception():
            logger.error(f"stdio loop failed: {serve_task.exception()}")
    finally:
        await runtime.aclose()
        logger.info("Frappe MCP server shutdown complete")
