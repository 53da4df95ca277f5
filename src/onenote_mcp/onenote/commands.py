"""Map `onenote-read` / `onenote-create` arguments onto client calls."""

import logging
from typing import Any

from onenote_mcp.onenote.client import OneNoteClient
from onenote_mcp.onenote.errors import ArgumentValidationError, UnknownCommandError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_CONTENT = "<p>New page</p>"

# Required arguments per command type. Checked before any remote call.
READ_COMMANDS: dict[str, tuple[str, ...]] = {
    "list_notebooks": (),
    "list_sections": ("notebookId",),
    "list_pages": ("sectionId",),
    "read_content": ("pageId",),
}

CREATE_COMMANDS: dict[str, tuple[str, ...]] = {
    "create_notebook": ("displayName",),
    "create_section": ("notebookId", "displayName"),
    "create_page": ("sectionId", "title"),
}


def require(args: dict[str, Any], fields: tuple[str, ...]) -> None:
    """Fail unless every field is present and non-empty.

    Raises:
        ArgumentValidationError: Naming the fields the command needs.
    """
    if all(args.get(name) for name in fields):
        return
    if len(fields) == 1:
        raise ArgumentValidationError(f"{fields[0]} is required")
    raise ArgumentValidationError(f"{' and '.join(fields)} are required")


class CommandDispatcher:
    def __init__(self, client: OneNoteClient):
        self.client = client

    async def dispatch_read(self, args: dict[str, Any] | None) -> Any:
        """Run a read command.

        Raises:
            UnknownCommandError: For a type outside READ_COMMANDS.
            ArgumentValidationError: If a required id is missing.
        """
        args = args if isinstance(args, dict) else {}
        command = args.get("type")
        if not isinstance(command, str) or command not in READ_COMMANDS:
            raise UnknownCommandError(f"Unknown read type: {command}")
        require(args, READ_COMMANDS[command])

        if command == "list_notebooks":
            return await self.client.list_notebooks()
        if command == "list_sections":
            return await self.client.list_sections(args["notebookId"])
        if command == "list_pages":
            return await self.client.list_pages(args["sectionId"])

        content = await self.client.get_page_content(args["pageId"])
        return {"pageId": args["pageId"], "content": content}

    async def dispatch_create(self, args: dict[str, Any] | None) -> Any:
        """Run a create command.

        `create_page` falls back to a placeholder paragraph when no content
        is given.

        Raises:
            UnknownCommandError: For a type outside CREATE_COMMANDS.
            ArgumentValidationError: If a required argument is missing.
        """
        args = args if isinstance(args, dict) else {}
        command = args.get("type")
        if not isinstance(command, str) or command not in CREATE_COMMANDS:
            raise UnknownCommandError(f"Unknown create type: {command}")
        require(args, CREATE_COMMANDS[command])

        if command == "create_notebook":
            return await self.client.create_notebook(args["displayName"])
        if command == "create_section":
            return await self.client.create_section(
                args["notebookId"], args["displayName"]
            )

        content = args.get("content") or DEFAULT_PAGE_CONTENT
        return await self.client.create_page(args["sectionId"], args["title"], content)
