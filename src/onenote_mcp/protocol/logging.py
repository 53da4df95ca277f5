from typing import Literal

from onenote_mcp.protocol.base import Request

LoggingLevel = Literal[
    "debug",
    "info",
    "notice",
    "warning",
    "error",
    "critical",
    "alert",
    "emergency",
]


class SetLevelRequest(Request):
    """
    Request from the client to adjust how verbose the server's logging is.
    """

    method: Literal["logging/setLevel"] = "logging/setLevel"
    level: LoggingLevel
    """
    The minimum level the server should log.
    """
