import asyncio
import json
import logging
import sys
from collections.abc import AsyncIterator
from typing import Any

from onenote_mcp.transport.base import Transport, TransportMessage

logger = logging.getLogger(__name__)

# asyncio's 64 KiB default is too small for page HTML sent inline.
LINE_LIMIT = 16 * 1024 * 1024


def decode_line(line: str) -> TransportMessage | None:
    """Decode one line read from stdin.

    Args:
        line: Raw line, with or without its trailing newline

    Returns:
        None for blank lines, which are skipped. Otherwise a TransportMessage
        holding either the decoded JSON value or the parse error.
    """
    line = line.strip()
    if not line:
        return None

    try:
        payload = json.loads(line)
    except json.JSONDecodeError as e:
        return TransportMessage(payload=None, parse_error=str(e))
    return TransportMessage(payload=payload)


def serialize_message(message: dict[str, Any]) -> str:
    """Serialize message to a single-line JSON string.

    Raises:
        ValueError: If the message can't be serialized to JSON
    """
    try:
        return json.dumps(message, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to serialize message to JSON: {e}") from e


class StdioTransport(Transport):
    """Newline-delimited JSON over the process's stdin and stdout.

    Stdout carries protocol messages and nothing else. Diagnostics go to
    stderr through logging.
    """

    def __init__(self):
        self._is_open = True
        self._stdin_reader: asyncio.StreamReader | None = None

    @property
    def is_open(self) -> bool:
        return self._is_open

    async def send(self, payload: dict[str, Any]) -> None:
        """Write `payload` to stdout as one line and flush it.

        Raises:
            ValueError: The payload isn't JSON-serializable
            ConnectionError: The transport is closed or stdout is gone
        """
        if not self._is_open:
            raise ConnectionError("Cannot send on a closed stdio transport")

        line = serialize_message(payload)
        try:
            sys.stdout.write(line + "\n")
            sys.stdout.flush()
        except Exception as e:
            raise ConnectionError(f"Write to stdout failed: {e}") from e
        logger.debug(f"Sent response: {line}")

    async def _setup_stdin_reader(self) -> asyncio.StreamReader:
        if self._stdin_reader is None:
            self._stdin_reader = asyncio.StreamReader(limit=LINE_LIMIT)
            protocol = asyncio.StreamReaderProtocol(self._stdin_reader)
            loop = asyncio.get_running_loop()
            await loop.connect_read_pipe(lambda: protocol, sys.stdin)
        return self._stdin_reader

    async def messages(self) -> AsyncIterator[TransportMessage]:
        """Yield one message per non-blank stdin line until EOF.

        A line longer than LINE_LIMIT is skipped and reported as a parse
        error. The transport closes itself when the stream ends.

        Raises:
            ConnectionError: stdin can't be attached or read
        """
        if not self._is_open:
            return

        try:
            reader = await self._setup_stdin_reader()
        except Exception as e:
            raise ConnectionError(f"Cannot attach to stdin: {e}") from e

        try:
            while self._is_open:
                try:
                    line = await reader.readline()
                except ValueError as e:
                    # Over LINE_LIMIT. The reader has dropped the chunk.
                    logger.error(f"Discarded overlong line: {e}")
                    yield TransportMessage(payload=None, parse_error=str(e))
                    continue
                except Exception as e:
                    raise ConnectionError(f"Read from stdin failed: {e}") from e

                if not line:  # EOF
                    break

                text = line.decode("utf-8", errors="replace")
                logger.debug(f"Received: {text.strip()}")

                message = decode_line(text)
                if message is not None:
                    yield message
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop reading. Later sends raise ConnectionError."""
        self._is_open = False
        self._stdin_reader = None
