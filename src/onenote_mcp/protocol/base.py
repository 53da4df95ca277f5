"""Base protocol types shared by every MCP message.

Inbound requests and notifications are parsed from camelCase JSON-RPC payloads
into typed pydantic models. Results and errors serialize back to the wire.
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROTOCOL_VERSION = "2024-11-05"
JSONRPC_VERSION = "2.0"

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = int | float | str


class ProtocolModel(BaseModel):
    """Base model for all protocol types.

    Accepts both field names and wire aliases on input, ignores unknown
    fields, and serializes with aliases.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    def to_protocol(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _split_params(params: dict[str, Any] | None) -> tuple[dict[str, Any], dict]:
    """Separate `_meta` from the rest of a params object.

    Params that aren't an object are treated as empty.
    """
    params = dict(params) if isinstance(params, dict) else {}
    meta = params.pop("_meta", None)
    return params, dict(meta) if isinstance(meta, dict) else {}


class Request(ProtocolModel):
    """A JSON-RPC request, minus the envelope (`jsonrpc` and `id`)."""

    method: str
    progress_token: int | str | None = Field(default=None, exclude=True)
    """
    Token the sender uses to correlate progress notifications.
    """

    metadata: dict[str, Any] | None = Field(default=None, exclude=True)
    """
    Any other `_meta` entries sent with the request.
    """

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        """Build a request from a wire payload.

        Raises:
            KeyError: If the payload has no method.
            pydantic.ValidationError: If the params don't fit the model.
        """
        params, meta = _split_params(data.get("params"))
        progress_token = meta.pop("progressToken", None)
        return cls.model_validate(
            {
                **params,
                "method": data["method"],
                "progress_token": progress_token,
                "metadata": meta or None,
            }
        )


class Notification(ProtocolModel):
    """A JSON-RPC notification. Never answered."""

    method: str
    metadata: dict[str, Any] | None = Field(default=None, exclude=True)

    @classmethod
    def from_protocol(cls, data: dict[str, Any]) -> Self:
        params, meta = _split_params(data.get("params"))
        return cls.model_validate(
            {**params, "method": data["method"], "metadata": meta or None}
        )


class Result(ProtocolModel):
    """Payload of a successful response."""

    metadata: dict[str, Any] | None = Field(default=None, alias="_meta")

    @field_validator("metadata", mode="before")
    @classmethod
    def drop_empty_metadata(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        return v or None


class Error(ProtocolModel):
    """Payload of a failed response."""

    code: int
    message: str
    data: str | dict[str, Any] | list[Any] | None = None

