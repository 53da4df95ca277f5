import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest

from onenote_mcp.protocol.initialization import (
    Implementation,
    ServerCapabilities,
    ToolsCapability,
)
from onenote_mcp.server.session import ServerConfig, ServerSession
from onenote_mcp.transport.stdio import StdioTransport, decode_line, serialize_message


class TestDecodeLine:
    def test_decodes_valid_json_object(self):
        # Arrange
        line = '{"jsonrpc": "2.0", "method": "ping", "id": 1}\n'

        # Act
        message = decode_line(line)

        # Assert
        assert message.payload == {"jsonrpc": "2.0", "method": "ping", "id": 1}
        assert message.parse_error is None

    def test_returns_none_for_blank_lines(self):
        """Blank lines are skipped rather than answered."""
        assert decode_line("") is None
        assert decode_line("   ") is None
        assert decode_line("\n\t  ") is None

    def test_reports_parse_error_for_malformed_json(self):
        # Act
        message = decode_line('{"incomplete": json')

        # Assert
        assert message.payload is None
        assert message.parse_error

    def test_passes_through_non_object_json(self):
        """Valid JSON that isn't an object is left for the session to reject."""
        for line, expected in [("42", 42), ("[1, 2]", [1, 2]), ("null", None)]:
            message = decode_line(line)
            assert message.payload == expected
            assert message.parse_error is None

    def test_handles_unicode_content(self):
        # Act
        message = decode_line('{"title": "Réunion 会议"}')

        # Assert
        assert message.payload == {"title": "Réunion 会议"}


class TestSerializeMessage:
    def test_serializes_compactly_on_one_line(self):
        # Act
        line = serialize_message({"jsonrpc": "2.0", "id": 1, "result": {"a": "b\nc"}})

        # Assert
        assert "\n" not in line
        assert line == '{"jsonrpc":"2.0","id":1,"result":{"a":"b\\nc"}}'

    def test_keeps_non_ascii_characters(self):
        assert serialize_message({"text": "café"}) == '{"text":"café"}'

    def test_raises_value_error_for_unserializable_message(self):
        with pytest.raises(ValueError):
            serialize_message({"method": lambda: None})


class TestSend:
    async def test_send_writes_one_line_to_stdout(self, capsys):
        # Arrange
        transport = StdioTransport()
        message = {"jsonrpc": "2.0", "id": 1, "result": {}}

        # Act
        await transport.send(message)

        # Assert
        out = capsys.readouterr().out
        assert out == '{"jsonrpc":"2.0","id":1,"result":{}}\n'
        assert json.loads(out) == message

    async def test_send_raises_connection_error_when_closed(self):
        # Arrange
        transport = StdioTransport()
        await transport.close()

        # Act & Assert
        with pytest.raises(ConnectionError):
            await transport.send({"jsonrpc": "2.0", "id": 1, "result": {}})

    async def test_send_raises_value_error_for_invalid_message(self):
        transport = StdioTransport()

        with pytest.raises(ValueError):
            await transport.send({"id": object()})


class TestMessages:
    def _reader_with(self, data: bytes) -> asyncio.StreamReader:
        reader = asyncio.StreamReader()
        reader.feed_data(data)
        reader.feed_eof()
        return reader

    async def test_yields_one_message_per_non_blank_line(self):
        # Arrange
        transport = StdioTransport()
        reader = self._reader_with(
            b'{"jsonrpc":"2.0","method":"ping","id":1}\n'
            b"\n"
            b"not json\n"
            b'{"jsonrpc":"2.0","method":"ping","id":2}\n'
        )

        # Act
        with patch.object(
            transport, "_setup_stdin_reader", AsyncMock(return_value=reader)
        ):
            messages = [m async for m in transport.messages()]

        # Assert
        assert len(messages) == 3
        assert messages[0].payload["id"] == 1
        assert messages[1].parse_error is not None
        assert messages[2].payload["id"] == 2

    async def test_overlong_line_is_reported_and_skipped(self):
        # Arrange
        transport = StdioTransport()
        reader = asyncio.StreamReader(limit=64)
        reader.feed_data(
            b'{"jsonrpc":"2.0","method":"tools/call","id":1,"params":{"name":"'
            + b"x" * 200
            + b'"}}\n'
            b'{"jsonrpc":"2.0","method":"ping","id":2}\n'
        )
        reader.feed_eof()

        # Act
        with patch.object(
            transport, "_setup_stdin_reader", AsyncMock(return_value=reader)
        ):
            messages = [m async for m in transport.messages()]

        # Assert
        assert len(messages) == 2
        assert messages[0].payload is None
        assert messages[0].parse_error is not None
        assert messages[1].payload == {"jsonrpc": "2.0", "method": "ping", "id": 2}

    async def test_session_answers_overlong_line_and_keeps_serving(self, capsys):
        # Arrange
        transport = StdioTransport()
        session = ServerSession(
            transport,
            ServerConfig(
                capabilities=ServerCapabilities(tools=ToolsCapability()),
                info=Implementation(name="OneNote MCP Server", version="1.0.0"),
            ),
        )
        reader = asyncio.StreamReader(limit=64)
        reader.feed_data(b"[" + b"1," * 100 + b"1]\n")
        reader.feed_data(b'{"jsonrpc":"2.0","method":"ping","id":2}\n')
        reader.feed_eof()

        # Act
        with patch.object(
            transport, "_setup_stdin_reader", AsyncMock(return_value=reader)
        ):
            await session.run()

        # Assert
        lines = capsys.readouterr().out.splitlines()
        assert [json.loads(line) for line in lines] == [
            {
                "jsonrpc": "2.0",
                "id": None,
                "error": {"code": -32700, "message": "Parse error"},
            },
            {"jsonrpc": "2.0", "id": 2, "result": {}},
        ]

    async def test_closes_transport_at_eof(self):
        # Arrange
        transport = StdioTransport()
        reader = self._reader_with(b"")

        # Act
        with patch.object(
            transport, "_setup_stdin_reader", AsyncMock(return_value=reader)
        ):
            messages = [m async for m in transport.messages()]

        # Assert
        assert messages == []
        assert transport.is_open is False

    async def test_raises_connection_error_when_stdin_unavailable(self):
        # Arrange
        transport = StdioTransport()

        # Act & Assert
        with patch.object(
            transport,
            "_setup_stdin_reader",
            AsyncMock(side_effect=OSError("bad pipe")),
        ):
            with pytest.raises(ConnectionError):
                async for _ in transport.messages():
                    pass

    async def test_yields_nothing_when_already_closed(self):
        # Arrange
        transport = StdioTransport()
        await transport.close()

        # Act
        messages = [m async for m in transport.messages()]

        # Assert
        assert messages == []
