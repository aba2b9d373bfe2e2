"""Command-line entry point: ``frappe-mcp-server``."""

import argparse
import asyncio
import logging
import sys

from . import __version__
from .config import settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Send all logs to stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)
    # httpx logs every request URL at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frappe-mcp-server",
        description="MCP server for Frappe and ERPNext",
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default="stdio",
        help="Transport to serve (default: stdio)",
    )
    parser.add_argument(
        "--host", default=settings.host, help=f"HTTP bind host (default: {settings.host})"
    )
    parser.add_argument(
        "--port", type=int, default=settings.port, help=f"HTTP port (default: {settings.port})"
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.transport == "http":
        import uvicorn

        from .server import create_app

        logger.info(f"Serving MCP over HTTP on {args.host}:{args.port}")
        uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)
        return

    from .stdio import run_stdio

    try:
        asyncio.run(run_stdio(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
