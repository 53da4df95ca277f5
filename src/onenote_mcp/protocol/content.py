from typing import Literal

from onenote_mcp.protocol.base import ProtocolModel


class TextContent(ProtocolModel):
    """
    Plain text content for tool results.

    The relay returns every OneNote payload as one text item holding
    pretty-printed JSON.
    """

    type: Literal["text"] = "text"
    text: str
    """The text content."""


ContentList = list[TextContent]
