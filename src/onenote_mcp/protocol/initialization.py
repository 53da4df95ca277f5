from typing import Any, Literal

from pydantic import Field, field_validator

from onenote_mcp.protocol.base import (
    PROTOCOL_VERSION,
    Notification,
    ProtocolModel,
    Request,
    Result,
)


class Implementation(ProtocolModel):
    """Who is on the other end: a name and a version string."""

    name: str
    version: str


class ToolsCapability(ProtocolModel):
    """Advertises the tools/* methods."""

    list_changed: bool | None = Field(default=None, alias="listChanged")
    """
    Never set here: the tool list is fixed for the life of the process.
    """


class ServerCapabilities(ProtocolModel):
    """What the server offers, as sent in the initialize result."""

    logging: dict[str, Any] | None = None
    """
    Present when the server accepts logging/setLevel.
    """
    tools: ToolsCapability | None = None


class InitializedNotification(Notification):
    """
    Sent by the client once it has read the initialize result. Older clients
    use the bare `initialized` method name.
    """

    method: Literal["notifications/initialized", "initialized"] = (
        "notifications/initialized"
    )


class InitializeRequest(Request):
    """
    The opening handshake.

    Every field is optional: the server answers `initialize` no matter what
    the client sends, so a sparse or odd handshake never fails.
    """

    method: Literal["initialize"] = "initialize"
    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    client_info: Implementation | None = Field(default=None, alias="clientInfo")

    capabilities: dict[str, Any] | None = None
    """
    Capabilities the client supports, kept as sent.
    """

    @field_validator("protocol_version", mode="before")
    @classmethod
    def ignore_non_string_version(cls, v: Any) -> str | None:
        return v if isinstance(v, str) else None

    @field_validator("client_info", mode="before")
    @classmethod
    def ignore_malformed_client_info(cls, v: Any) -> Any:
        if isinstance(v, dict) and isinstance(v.get("name"), str):
            return {"name": v["name"], "version": str(v.get("version", ""))}
        return None

    @field_validator("capabilities", mode="before")
    @classmethod
    def ignore_non_object_capabilities(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None


class InitializeResult(Result):
    """
    Answer to `initialize`. Its content depends only on server config.
    """

    protocol_version: str = Field(default=PROTOCOL_VERSION, alias="protocolVersion")
    capabilities: ServerCapabilities

    server_info: Implementation = Field(alias="serverInfo")

    instructions: str | None = None
    """
    Free-text hints for the client. Omitted when unset.
    """
