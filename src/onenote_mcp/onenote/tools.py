import json
import logging
from typing import Any

from onenote_mcp.onenote.commands import (
    CREATE_COMMANDS,
    READ_COMMANDS,
    CommandDispatcher,
)
from onenote_mcp.protocol.content import TextContent
from onenote_mcp.protocol.tools import CallToolRequest, CallToolResult, JSONSchema, Tool
from onenote_mcp.server.managers.tools import ToolManager

logger = logging.getLogger(__name__)

READ_TOOL = Tool(
    name="onenote-read",
    description="Read OneNote content (notebooks, sections, pages)",
    input_schema=JSONSchema(
        properties={
            "type": {
                "type": "string",
                "enum": list(READ_COMMANDS),
                "description": "Type of read operation",
            },
            "notebookId": {
                "type": "string",
                "description": "Notebook ID (required for list_sections)",
            },
            "sectionId": {
                "type": "string",
                "description": "Section ID (required for list_pages)",
            },
            "pageId": {
                "type": "string",
                "description": "Page ID (required for read_content)",
            },
        },
        required=["type"],
    ),
)

CREATE_TOOL = Tool(
    name="onenote-create",
    description="Create OneNote content (notebooks, sections, pages)",
    input_schema=JSONSchema(
        properties={
            "type": {
                "type": "string",
                "enum": list(CREATE_COMMANDS),
                "description": "Type of create operation",
            },
            "displayName": {
                "type": "string",
                "description": "Display name for notebook or section",
            },
            "notebookId": {
                "type": "string",
                "description": "Notebook ID (required for create_section)",
            },
            "sectionId": {
                "type": "string",
                "description": "Section ID (required for create_page)",
            },
            "title": {
                "type": "string",
                "description": "Page title (required for create_page)",
            },
            "content": {
                "type": "string",
                "description": "HTML content for the page",
            },
        },
        required=["type"],
    ),
)


def to_tool_result(result: Any) -> CallToolResult:
    """Wrap a command's result as a single pretty-printed JSON text item."""
    return CallToolResult(
        content=[TextContent(text=json.dumps(result, indent=2, ensure_ascii=False))]
    )


def register_tools(tools: ToolManager, dispatcher: CommandDispatcher) -> None:
    """Register both OneNote tools, backed by `dispatcher`."""

    async def read_handler(request: CallToolRequest) -> CallToolResult:
        logger.debug(f"onenote-read arguments: {request.arguments}")
        return to_tool_result(await dispatcher.dispatch_read(request.arguments))

    async def create_handler(request: CallToolRequest) -> CallToolResult:
        logger.debug(f"onenote-create arguments: {request.arguments}")
        return to_tool_result(await dispatcher.dispatch_create(request.arguments))

    tools.register(READ_TOOL, read_handler)
    tools.register(CREATE_TOOL, create_handler)
