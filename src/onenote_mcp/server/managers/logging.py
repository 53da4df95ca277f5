import logging

from onenote_mcp.protocol.common import EmptyResult
from onenote_mcp.protocol.logging import LoggingLevel, SetLevelRequest

# MCP levels mapped onto the stdlib's. The last three have no stdlib
# counterpart above CRITICAL.
LEVELS: dict[LoggingLevel, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "notice": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "alert": logging.CRITICAL,
    "emergency": logging.CRITICAL,
}


class LoggingManager:
    """Applies client `logging/setLevel` requests to the server's logger.

    Logs are only ever written to stderr; this changes verbosity, not where
    the messages go.
    """

    def __init__(self, logger_name: str = "onenote_mcp"):
        self.logger_name = logger_name
        self.current_level: LoggingLevel | None = None

    async def handle_set_level(self, request: SetLevelRequest) -> EmptyResult:
        self.current_level = request.level
        logging.getLogger(self.logger_name).setLevel(LEVELS[request.level])
        return EmptyResult()
