"""Wire the OneNote relay together: session, tools, Graph client and auth."""

import logging
from dataclasses import dataclass

import httpx
import msal

from onenote_mcp.auth.cache import CredentialCache
from onenote_mcp.auth.provider import PromptNotifier, TokenProvider
from onenote_mcp.config import Settings
from onenote_mcp.onenote.client import OneNoteClient
from onenote_mcp.onenote.commands import CommandDispatcher
from onenote_mcp.onenote.tools import register_tools
from onenote_mcp.protocol.initialization import (
    Implementation,
    ServerCapabilities,
    ToolsCapability,
)
from onenote_mcp.server.session import ServerConfig, ServerSession
from onenote_mcp.transport.base import Transport
from onenote_mcp.transport.stdio import StdioTransport

logger = logging.getLogger(__name__)

SERVER_NAME = "OneNote MCP Server"
SERVER_VERSION = "1.0.0"


def server_config() -> ServerConfig:
    return ServerConfig(
        capabilities=ServerCapabilities(tools=ToolsCapability(), logging={}),
        info=Implementation(name=SERVER_NAME, version=SERVER_VERSION),
    )


@dataclass
class OneNoteServer:
    session: ServerSession
    client: OneNoteClient
    token_provider: TokenProvider

    async def serve(self) -> None:
        """Answer requests until stdin closes, then release the HTTP client."""
        try:
            await self.session.run()
        finally:
            await self.client.aclose()
            logger.info("Server stopped")


def build_server(
    settings: Settings,
    transport: Transport | None = None,
    http_client: httpx.AsyncClient | None = None,
    app: msal.PublicClientApplication | None = None,
    notify: PromptNotifier | None = None,
) -> OneNoteServer:
    """Build a server from settings.

    The credential cache is read here, once per process. Every collaborator
    can be swapped out, which is how the tests drive a full server.
    """
    token_provider = TokenProvider(
        settings, CredentialCache(settings.cache_path), app=app, notify=notify
    )
    client = OneNoteClient(
        token_provider, base_url=settings.graph_base_url, http_client=http_client
    )

    session = ServerSession(transport or StdioTransport(), server_config())
    register_tools(session.tools, CommandDispatcher(client))

    return OneNoteServer(session=session, client=client, token_provider=token_provider)
