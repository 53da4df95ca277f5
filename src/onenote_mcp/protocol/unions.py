from onenote_mcp.protocol.common import CancelledNotification, PingRequest
from onenote_mcp.protocol.initialization import (
    InitializedNotification,
    InitializeRequest,
)
from onenote_mcp.protocol.logging import SetLevelRequest
from onenote_mcp.protocol.tools import CallToolRequest, ListToolsRequest

# Methods the server answers, by name.
REQUEST_CLASSES = {
    "ping": PingRequest,
    "initialize": InitializeRequest,
    "logging/setLevel": SetLevelRequest,
    "tools/list": ListToolsRequest,
    "tools/call": CallToolRequest,
}

# Notifications the server acts on. Other `notifications/*` are ignored.
NOTIFICATION_CLASSES = {
    "initialized": InitializedNotification,
    "notifications/initialized": InitializedNotification,
    "notifications/cancelled": CancelledNotification,
}
