"""FastAPI HTTP transport for the Frappe MCP server."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .config import Settings, settings as default_settings
from .mcp import PARSE_ERROR, jsonrpc_error
from .mcp.jsonrpc import JSONRPCParseError, parse_message
from .mcp.protocol import SERVER_NAME
from .models import HealthResponse, InfoResponse
from .runtime import Runtime

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None
) -> FastAPI:
    """Build the app. ``transport`` replaces the network for the Frappe client (tests)."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        # Startup
        logger.info(f"Starting Frappe MCP Server v{__version__}")

        if not settings.debug and settings.cors_allowed_origins == "*":
            logger.warning(
                "SECURITY WARNING: CORS is configured to allow all origins ('*'). "
                "Set CORS_ALLOWED_ORIGINS to specific domains in production."
            )

        runtime = Runtime.create(settings, transport=transport)
        app.state.runtime = runtime
        yield
        # Shutdown
        await runtime.aclose()
        logger.info("Frappe MCP Server stopped")

    app = FastAPI(
        title="Frappe MCP Server",
        description="MCP endpoint for Frappe and ERPNext document and schema operations",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Mcp-Session-Id"],
    )

    # ============ EXCEPTION HANDLERS ============

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with consistent response format."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.detail},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with sanitized error messages."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "An internal server error occurred. Please try again.",
            },
        )

    # ============ HEALTH ENDPOINTS ============

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Check both authentication channels; 503 when neither works."""
        status = await request.app.state.runtime.auth.check_health()
        response = HealthResponse(**status.model_dump(), version=__version__)
        return JSONResponse(
            content=response.model_dump(mode="json", by_alias=True),
            status_code=200 if status.healthy else 503,
        )

    @app.get("/info", response_model=InfoResponse, tags=["Health"])
    async def info(request: Request) -> InfoResponse:
        """Server name, version and registered tools."""
        runtime = request.app.state.runtime
        return InfoResponse(
            name=SERVER_NAME,
            version=__version__,
            frappe_url=settings.frappe_url,
            tools=runtime.dispatcher.registry.names(),
        )

    # ============ MCP ENDPOINT ============

    @app.post("/mcp", tags=["MCP"])
    async def mcp_endpoint(request: Request):
        """MCP Streamable HTTP endpoint (JSON-RPC request or batch in, JSON out)."""
        try:
            message = parse_message(await request.body())
        except JSONRPCParseError:
            return JSONResponse(jsonrpc_error(None, PARSE_ERROR, "Parse error"), status_code=400)

        response = await request.app.state.runtime.protocol.handle_message(message)
        return JSONResponse(response) if response is not None else Response(status_code=202)

    return app


# ============ MAIN ============


def main():
    """Run the HTTP server with uvicorn."""
    import uvicorn

    uvicorn.run(
        "frappe_mcp.server:create_app",
        factory=True,
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )


if __name__ == "__main__":
    main()
