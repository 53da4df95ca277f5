import logging
from typing import Awaitable, Callable

from onenote_mcp.protocol.base import INTERNAL_ERROR, Error
from onenote_mcp.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    ListToolsRequest,
    ListToolsResult,
    Tool,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[CallToolRequest], Awaitable[CallToolResult]]


class ToolManager:
    """Tool descriptors and the coroutines that serve them, keyed by name."""

    def __init__(self):
        self.registered: dict[str, Tool] = {}
        self.handlers: dict[str, ToolHandler] = {}

    def register(self, tool: Tool, handler: ToolHandler) -> None:
        """Expose `tool` and route its calls to `handler`.

        Registering a name twice replaces the earlier entry.
        """
        self.registered[tool.name] = tool
        self.handlers[tool.name] = handler

    async def handle_list(self, request: ListToolsRequest) -> ListToolsResult:
        # Two tools, so the cursor is never needed.
        return ListToolsResult(tools=list(self.registered.values()))

    async def handle_call(self, request: CallToolRequest) -> CallToolResult | Error:
        """Run the handler for `request.name`.

        Anything the handler raises comes back as an INTERNAL_ERROR carrying
        the exception's message.

        Raises:
            KeyError: No tool has that name. The session maps this to
                INVALID_PARAMS.
        """
        handler = self.handlers[request.name]
        try:
            return await handler(request)
        except Exception as e:
            logger.error(f"Tool {request.name} failed: {e}")
            return Error(code=INTERNAL_ERROR, message=str(e))
