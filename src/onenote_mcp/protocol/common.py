from typing import Literal

from pydantic import Field

from onenote_mcp.protocol.base import Notification, Request, RequestId, Result


class PingRequest(Request):
    """Liveness check. Answered with an empty result."""

    method: Literal["ping"] = "ping"


class EmptyResult(Result):
    """A response that indicates success but carries no data."""


class CancelledNotification(Notification):
    """
    Sent by the client to indicate it is no longer interested in a request.

    The server only logs it; work already in flight runs to completion.
    """

    method: Literal["notifications/cancelled"] = "notifications/cancelled"
    request_id: RequestId | None = Field(default=None, alias="requestId")
    """
    The ID of the request to cancel.
    """

    reason: str | None = None
    """
    Optional reason for cancellation.
    """
