from typing import Any, Literal

from pydantic import Field

from onenote_mcp.protocol.base import ProtocolModel, Request, Result
from onenote_mcp.protocol.content import ContentList, TextContent


class JSONSchema(ProtocolModel):
    """
    JSON Schema describing a tool's arguments.
    """

    type: Literal["object"] = "object"
    properties: dict[str, Any] | None = None
    required: list[str] | None = None


class Tool(ProtocolModel):
    """
    Definition for a tool the client can call.
    """

    name: str
    description: str | None = None
    input_schema: JSONSchema = Field(alias="inputSchema")
    """
    A JSON Schema object defining the expected parameters for the tool.
    """


class ListToolsRequest(Request):
    """
    Sent from the client to request a list of tools the server has.
    """

    method: Literal["tools/list"] = "tools/list"
    cursor: str | None = None
    """
    Opaque pagination token. Accepted but ignored.
    """


class ListToolsResult(Result):
    """
    The server's response to a tools/list request from the client.
    """

    tools: list[Tool]


class CallToolRequest(Request):
    """
    Used by the client to invoke a tool provided by the server.
    """

    method: Literal["tools/call"] = "tools/call"
    name: str
    arguments: dict[str, Any] | None = None


class CallToolResult(Result):
    """
    The server's response to a tool call.
    """

    content: ContentList
    is_error: bool | None = Field(default=None, alias="isError")


__all__ = [
    "CallToolRequest",
    "CallToolResult",
    "JSONSchema",
    "ListToolsRequest",
    "ListToolsResult",
    "TextContent",
    "Tool",
]
