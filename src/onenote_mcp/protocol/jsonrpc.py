"""JSON-RPC 2.0 envelopes around results and errors."""

from typing import Any, Literal, Self

from onenote_mcp.protocol.base import (
    JSONRPC_VERSION,
    Error,
    ProtocolModel,
    RequestId,
    Result,
)


class JSONRPCResponse(ProtocolModel):
    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None
    result: dict[str, Any]

    @classmethod
    def from_result(cls, result: Result, id: RequestId | None) -> Self:
        return cls(id=id, result=result.to_protocol())

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "result": self.result}


class JSONRPCError(ProtocolModel):
    """Error envelope.

    `id` is null when the request id could not be recovered, e.g. for a line
    that failed to parse.
    """

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId | None
    error: Error

    @classmethod
    def from_error(cls, error: Error, id: RequestId | None) -> Self:
        return cls(id=id, error=error)

    def to_wire(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "error": self.error.to_protocol()}
