"""Process-wide objects shared by the transports.

Built once at startup (FastAPI lifespan or the stdio entry point) and closed
on shutdown.
"""

import logging
from dataclasses import dataclass

import httpx

from .auth import AuthCoordinator
from .client import FrappeClient
from .config import Settings
from .engine import HandlerContext, ToolDispatcher, build_registry
from .engine.core.hints import StaticHints
from .mcp import MCPProtocol

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    settings: Settings
    client: FrappeClient
    auth: AuthCoordinator
    dispatcher: ToolDispatcher
    protocol: MCPProtocol

    @classmethod
    def create(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "Runtime":
        client = FrappeClient.from_settings(settings, transport=transport)
        auth = AuthCoordinator.from_settings(settings, client)

        check = auth.validate_api_credentials()
        if check.valid:
            logger.info("API credentials validation successful.")
        else:
            logger.error(check.message)
            logger.warning(
                "The server will start, but most operations will fail "
                "without valid API credentials."
            )

        hints = StaticHints.load(settings.static_hints_dir)
        ctx = HandlerContext(client=client, auth=auth, hints=hints, settings=settings)
        dispatcher = ToolDispatcher(build_registry(), ctx)
        protocol = MCPProtocol(dispatcher)
        logger.info(f"Registered {len(dispatcher.registry)} tools for {settings.frappe_url}")
        return cls(settings, client, auth, dispatcher, protocol)

    async def aclose(self) -> None:
        await self.client.aclose()
