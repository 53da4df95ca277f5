from onenote_mcp.protocol.base import PROTOCOL_VERSION
from onenote_mcp.protocol.initialization import (
    Implementation,
    InitializedNotification,
    InitializeRequest,
    InitializeResult,
    ServerCapabilities,
    ToolsCapability,
)


class TestInitializeRequest:
    def test_reads_client_handshake(self):
        # Arrange
        payload = {
            "jsonrpc": "2.0",
            "id": 0,
            "method": "initialize",
            "params": {
                "protocolVersion": "2024-11-05",
                "capabilities": {"sampling": {}},
                "clientInfo": {"name": "client", "version": "2.1"},
            },
        }

        # Act
        request = InitializeRequest.from_protocol(payload)

        # Assert
        assert request.protocol_version == "2024-11-05"
        assert request.capabilities == {"sampling": {}}
        assert request.client_info == Implementation(name="client", version="2.1")

    def test_accepts_missing_params(self):
        # Act
        request = InitializeRequest.from_protocol({"method": "initialize"})

        # Assert
        assert request.protocol_version is None
        assert request.client_info is None
        assert request.capabilities is None

    def test_drops_malformed_fields_instead_of_failing(self):
        # Arrange
        payload = {
            "method": "initialize",
            "params": {
                "protocolVersion": 2024,
                "capabilities": "all",
                "clientInfo": {"version": "1"},
            },
        }

        # Act
        request = InitializeRequest.from_protocol(payload)

        # Assert
        assert request.protocol_version is None
        assert request.capabilities is None
        assert request.client_info is None

    def test_coerces_missing_client_version_to_empty_string(self):
        # Act
        request = InitializeRequest.from_protocol(
            {"method": "initialize", "params": {"clientInfo": {"name": "bare"}}}
        )

        # Assert
        assert request.client_info == Implementation(name="bare", version="")


class TestInitializeResult:
    def test_serializes_with_camel_case_keys(self):
        # Arrange
        result = InitializeResult(
            capabilities=ServerCapabilities(tools=ToolsCapability(), logging={}),
            server_info=Implementation(name="OneNote MCP Server", version="1.0.0"),
        )

        # Act
        serialized = result.to_protocol()

        # Assert
        assert serialized == {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "logging": {}},
            "serverInfo": {"name": "OneNote MCP Server", "version": "1.0.0"},
        }

    def test_includes_instructions_when_set(self):
        # Arrange
        result = InitializeResult(
            capabilities=ServerCapabilities(),
            server_info=Implementation(name="s", version="1"),
            instructions="Sign in first",
        )

        # Act & Assert
        assert result.to_protocol()["instructions"] == "Sign in first"


class TestInitializedNotification:
    def test_accepts_legacy_method_name(self):
        # Act
        notification = InitializedNotification.from_protocol({"method": "initialized"})

        # Assert
        assert notification.method == "initialized"

    def test_defaults_to_namespaced_method(self):
        assert InitializedNotification().method == "notifications/initialized"
