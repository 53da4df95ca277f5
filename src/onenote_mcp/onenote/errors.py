"""Exceptions raised while serving OneNote tool calls."""

from __future__ import annotations


class OneNoteError(Exception):
    """Base exception for OneNote command failures."""

    pass


class ArgumentValidationError(OneNoteError):
    """Raised when a command is missing a required argument.

    Raised before any remote call is made.
    """

    pass


class UnknownCommandError(OneNoteError):
    """Raised for a `type` the tool doesn't support."""

    pass


class RemoteAPIError(OneNoteError):
    """Raised when Microsoft Graph rejects a request or can't be reached.

    The message is Graph's own error message when it sent one.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
