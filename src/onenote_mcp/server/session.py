"""Server side of an MCP session over a single transport.

Messages are processed strictly one at a time: each line is read, handled to
completion (including any remote call or device-code wait), and answered
before the next line is read.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from onenote_mcp.protocol.base import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    PROTOCOL_VERSION,
    Error,
    Notification,
    Request,
    RequestId,
    Result,
)
from onenote_mcp.protocol.common import CancelledNotification, EmptyResult, PingRequest
from onenote_mcp.protocol.initialization import (
    Implementation,
    InitializedNotification,
    InitializeRequest,
    InitializeResult,
    ServerCapabilities,
)
from onenote_mcp.protocol.jsonrpc import JSONRPCError, JSONRPCResponse
from onenote_mcp.protocol.logging import SetLevelRequest
from onenote_mcp.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    ListToolsRequest,
    ListToolsResult,
)
from onenote_mcp.protocol.unions import NOTIFICATION_CLASSES, REQUEST_CLASSES
from onenote_mcp.server.managers.logging import LoggingManager
from onenote_mcp.server.managers.tools import ToolManager
from onenote_mcp.transport.base import Transport, TransportMessage

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Any], Awaitable[Result | Error]]


@dataclass
class ServerConfig:
    capabilities: ServerCapabilities
    info: Implementation
    instructions: str | None = None
    protocol_version: str = PROTOCOL_VERSION


@dataclass
class ClientState:
    """What the client said about itself in its last `initialize`."""

    capabilities: dict[str, Any] | None = None
    info: Implementation | None = None
    protocol_version: str | None = None


def _is_request_id(value: Any) -> bool:
    # bool is an int subclass but never a valid id.
    if isinstance(value, bool):
        return False
    return value is None or isinstance(value, int | float | str)


def _error_envelope(
    request_id: RequestId | None, code: int, message: str
) -> dict[str, Any]:
    return JSONRPCError.from_error(Error(code=code, message=message), request_id).to_wire()


class ServerSession:
    def __init__(self, transport: Transport, config: ServerConfig):
        self.transport = transport
        self.server_config = config
        self.client_state = ClientState()
        self._initialized = False

        self.tools = ToolManager()
        self.logging = LoggingManager()

    @property
    def initialized(self) -> bool:
        """True once the client has sent `initialized`."""
        return self._initialized

    async def run(self) -> None:
        """Answer messages from the transport until it closes.

        Raises:
            ConnectionError: If the transport fails to read or write.
        """
        async for transport_message in self.transport.messages():
            response = await self.handle_message(transport_message)
            if response is not None:
                await self.transport.send(response)

    async def handle_message(
        self, transport_message: TransportMessage
    ) -> dict[str, Any] | None:
        """Turn one inbound message into the response to send, if any.

        Args:
            transport_message: A decoded line, or a line that failed to parse.

        Returns:
            A JSON-RPC response envelope, or None for notifications.
        """
        if transport_message.parse_error is not None:
            logger.error(f"Error processing message: {transport_message.parse_error}")
            return _error_envelope(None, PARSE_ERROR, "Parse error")

        payload = transport_message.payload
        if not isinstance(payload, dict) or not isinstance(payload.get("method"), str):
            logger.error(f"Invalid JSON-RPC message: {payload!r}")
            echoed = payload.get("id") if isinstance(payload, dict) else None
            return _error_envelope(
                echoed if _is_request_id(echoed) else None,
                INVALID_REQUEST,
                "Invalid Request",
            )

        method = payload["method"]
        logger.debug(f"Handling method: {method}")

        if (
            method in NOTIFICATION_CLASSES
            or method.startswith("notifications/")
            or "id" not in payload
        ):
            await self._dispatch_notification(payload)
            return None

        if not _is_request_id(payload["id"]):
            return _error_envelope(None, INVALID_REQUEST, "Invalid Request")

        return await self._answer(payload)

    # Requests

    async def _answer(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Build the one response every request gets, even if a handler crashes."""
        request_id = payload["id"]
        try:
            outcome = self._parse_request(payload)
            if isinstance(outcome, Request):
                outcome = await self._route(outcome)
        except Exception:
            logger.exception(f"Unhandled error processing request {request_id}")
            outcome = Error(
                code=INTERNAL_ERROR,
                message=f"Internal error processing request {request_id}",
            )

        if isinstance(outcome, Result):
            return JSONRPCResponse.from_result(outcome, request_id).to_wire()
        return JSONRPCError.from_error(outcome, request_id).to_wire()

    def _parse_request(self, payload: dict[str, Any]) -> Request | Error:
        """Validate a request payload against its method's model.

        Returns:
            The typed request, METHOD_NOT_FOUND for methods this server
            doesn't serve, or INVALID_PARAMS for params that don't validate.
        """
        method = payload["method"]
        request_class = REQUEST_CLASSES.get(method)
        if request_class is None:
            return Error(code=METHOD_NOT_FOUND, message=f"Method not found: {method}")

        try:
            return request_class.from_protocol(payload)
        except Exception as e:
            if request_class is InitializeRequest:
                # The handshake is answered whatever the client sent.
                return InitializeRequest()
            return Error(code=INVALID_PARAMS, message=f"Invalid params for {method}: {e}")

    async def _route(self, request: Request) -> Result | Error:
        handlers: dict[str, RequestHandler] = {
            "ping": self._handle_ping,
            "initialize": self._handle_initialize,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
            "logging/setLevel": self._handle_set_level,
        }
        handler = handlers.get(request.method)
        if handler is None:
            return Error(
                code=METHOD_NOT_FOUND, message=f"Method not found: {request.method}"
            )
        return await handler(request)

    def _tools_unsupported(self) -> Error | None:
        if self.server_config.capabilities.tools is None:
            return Error(
                code=METHOD_NOT_FOUND,
                message="Server does not support tools capability",
            )
        return None

    async def _handle_ping(self, request: PingRequest) -> EmptyResult:
        return EmptyResult()

    async def _handle_initialize(self, request: InitializeRequest) -> InitializeResult:
        """Remember the client's details and describe this server.

        Always succeeds, however many times it is called.
        """
        self.client_state = ClientState(
            capabilities=request.capabilities,
            info=request.client_info,
            protocol_version=request.protocol_version,
        )
        client_name = request.client_info.name if request.client_info else "unknown client"
        logger.info(f"Initialize from {client_name}")

        config = self.server_config
        return InitializeResult(
            protocol_version=config.protocol_version,
            capabilities=config.capabilities,
            server_info=config.info,
            instructions=config.instructions,
        )

    async def _handle_list_tools(
        self, request: ListToolsRequest
    ) -> ListToolsResult | Error:
        unsupported = self._tools_unsupported()
        if unsupported is not None:
            return unsupported
        return await self.tools.handle_list(request)

    async def _handle_call_tool(
        self, request: CallToolRequest
    ) -> CallToolResult | Error:
        """Run a tool.

        Returns:
            The tool's result, INVALID_PARAMS when no tool has the requested
            name, or INTERNAL_ERROR when the tool raised.
        """
        unsupported = self._tools_unsupported()
        if unsupported is not None:
            return unsupported
        try:
            return await self.tools.handle_call(request)
        except KeyError:
            return Error(code=INVALID_PARAMS, message=f"Unknown tool: {request.name}")

    async def _handle_set_level(self, request: SetLevelRequest) -> EmptyResult:
        return await self.logging.handle_set_level(request)

    # Notifications

    async def _dispatch_notification(self, payload: dict[str, Any]) -> None:
        """Act on a notification. Nothing is ever sent back.

        Unknown methods and handler failures are logged and dropped.
        """
        method = payload["method"]
        notification_class = NOTIFICATION_CLASSES.get(method)
        if notification_class is None:
            logger.debug(f"Unhandled notification method: {method}")
            return

        try:
            self._on_notification(notification_class.from_protocol(payload))
        except Exception as e:
            logger.error(f"Error handling notification {method}: {e}")

    def _on_notification(self, notification: Notification) -> None:
        if isinstance(notification, InitializedNotification):
            self._initialized = True
            logger.info("Client initialized")
        elif isinstance(notification, CancelledNotification):
            # Work already in flight is not interrupted.
            logger.info(
                f"Request {notification.request_id} was cancelled: "
                f"{notification.reason}"
            )
