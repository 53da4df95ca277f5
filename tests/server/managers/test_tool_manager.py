from unittest.mock import AsyncMock

import pytest

from onenote_mcp.protocol.base import INTERNAL_ERROR, Error
from onenote_mcp.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    JSONSchema,
    ListToolsRequest,
    TextContent,
    Tool,
)
from onenote_mcp.server.managers.tools import ToolManager


def make_tool(name: str = "test-tool") -> Tool:
    return Tool(name=name, description="A test tool", input_schema=JSONSchema())


class TestToolManager:
    def test_register_stores_tool_and_handler(self):
        # Arrange
        manager = ToolManager()
        tool = make_tool()
        handler = AsyncMock()

        # Act
        manager.register(tool, handler)

        # Assert
        assert manager.registered["test-tool"] is tool
        assert manager.handlers["test-tool"] is handler

    def test_register_replaces_existing_tool(self):
        # Arrange
        manager = ToolManager()
        first, second = make_tool(), make_tool()

        # Act
        manager.register(first, AsyncMock())
        manager.register(second, AsyncMock())

        # Assert
        assert manager.registered["test-tool"] is second
        assert len(manager.registered) == 1

    async def test_handle_list_returns_tools_in_registration_order(self):
        # Arrange
        manager = ToolManager()
        manager.register(make_tool("onenote-read"), AsyncMock())
        manager.register(make_tool("onenote-create"), AsyncMock())

        # Act
        result = await manager.handle_list(ListToolsRequest(cursor="ignored"))

        # Assert
        assert [tool.name for tool in result.tools] == ["onenote-read", "onenote-create"]

    async def test_handle_call_returns_handler_result(self):
        # Arrange
        manager = ToolManager()
        expected = CallToolResult(content=[TextContent(text="done")])
        handler = AsyncMock(return_value=expected)
        manager.register(make_tool(), handler)
        request = CallToolRequest(name="test-tool", arguments={"type": "x"})

        # Act
        result = await manager.handle_call(request)

        # Assert
        assert result is expected
        handler.assert_awaited_once_with(request)

    async def test_handle_call_raises_key_error_for_unknown_tool(self):
        # Arrange
        manager = ToolManager()

        # Act & Assert
        with pytest.raises(KeyError):
            await manager.handle_call(CallToolRequest(name="missing"))

    async def test_handle_call_turns_handler_exception_into_internal_error(self):
        # Arrange
        manager = ToolManager()
        manager.register(make_tool(), AsyncMock(side_effect=ValueError("pageId is required")))

        # Act
        result = await manager.handle_call(CallToolRequest(name="test-tool"))

        # Assert
        assert isinstance(result, Error)
        assert result.code == INTERNAL_ERROR
        assert result.message == "pageId is required"
