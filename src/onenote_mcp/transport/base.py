from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any


@dataclass
class TransportMessage:
    """One inbound line, decoded.

    `payload` is whatever JSON value the line held. A line that isn't JSON
    still produces a message: `payload` is None and `parse_error` says why,
    so the session can answer it with a parse error.
    """

    payload: Any
    parse_error: str | None = None


class Transport(ABC):
    """Moves JSON-RPC payloads in and out of the server.

    Framing and encoding live here. Routing, ids and error codes belong to
    the session.
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """False once the transport has been closed."""

    @abstractmethod
    async def send(self, payload: dict[str, Any]) -> None:
        """Write one outbound payload.

        Raises:
            ValueError: The payload isn't JSON-serializable
            ConnectionError: The transport is closed or the write failed
        """

    @abstractmethod
    def messages(self) -> AsyncIterator[TransportMessage]:
        """Inbound messages in arrival order, malformed lines included.

        Ends at end of input or when the transport is closed.

        Raises:
            ConnectionError: The input stream can't be read
        """

    @abstractmethod
    async def close(self) -> None:
        """Stop reading and refuse further sends."""
