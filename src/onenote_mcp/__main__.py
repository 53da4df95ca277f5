"""
MCP server for Microsoft OneNote over stdio.

You'll need to set the AZURE_CLIENT_ID environment variable to an app
registration that allows public client (device code) flows. On first use the
server logs a URL and code to stderr; sign in there to authorize it.

Run with `onenote-mcp` or `python -m onenote_mcp`.
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from onenote_mcp.app import build_server
from onenote_mcp.config import Settings, configure_logging

logger = logging.getLogger("onenote_mcp")


async def main(settings: Settings) -> None:
    server = build_server(settings)
    await server.serve()


def run() -> None:
    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    logger.info("Starting OneNote MCP Server")
    if not settings.client_id:
        logger.warning(
            "AZURE_CLIENT_ID not set. Please set it before using the server."
        )

    try:
        asyncio.run(main(settings))
    except KeyboardInterrupt:
        logger.info("Server shutting down")
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
