"""
OneNote Graph API client.

Thin async wrapper over the Microsoft Graph OneNote endpoints. Each call
fetches a bearer token from the TokenProvider and makes exactly one HTTP
request; failures surface as RemoteAPIError without retries.
"""

from __future__ import annotations

import html
import logging
from typing import Any
from urllib.parse import quote

import httpx

from onenote_mcp.auth.provider import TokenProvider
from onenote_mcp.config import GRAPH_BASE_URL
from onenote_mcp.onenote.errors import RemoteAPIError

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <title>{title}</title>
</head>
<body>
    {content}
</body>
</html>"""


def build_page_html(title: str, content: str) -> str:
    """Wrap an HTML fragment in the document OneNote expects for a new page.

    The title is escaped; the content is inserted as-is.
    """
    return PAGE_TEMPLATE.format(title=html.escape(title), content=content)


def _segment(resource_id: Any) -> str:
    # Ids are caller-supplied, so "/", "?" and "$" must not reach the path.
    return quote(str(resource_id), safe="")


def _error_message(response: httpx.Response) -> str:
    """Graph's error message from a failed response, or the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class OneNoteClient:
    """OneNote Graph API client."""

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str = GRAPH_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.token_provider = token_provider
        self.base_url = base_url.rstrip("/")
        # No timeout: calls run until Graph answers.
        self._http_client = http_client or httpx.AsyncClient(timeout=None)

    async def aclose(self) -> None:
        """Close the HTTP client and clean up resources."""
        await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict[str, Any] | None = None,
        content: str | None = None,
        content_type: str = "application/json",
    ) -> httpx.Response:
        """Make one authenticated Graph request.

        Raises:
            AuthenticationError: If no token could be obtained
            RemoteAPIError: On transport failure or a non-2xx response
        """
        access_token = await self.token_provider.get_access_token()

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": content_type,
        }
        url = f"{self.base_url}{endpoint}"

        try:
            response = await self._http_client.request(
                method,
                url,
                headers=headers,
                json=json_data,
                content=content.encode("utf-8") if content is not None else None,
            )
        except httpx.HTTPError as e:
            logger.error(f"Graph API error: {e}")
            raise RemoteAPIError(str(e) or type(e).__name__) from e

        if not response.is_success:
            message = _error_message(response)
            logger.error(f"Graph API error: {message}")
            raise RemoteAPIError(message, status_code=response.status_code)

        return response

    async def _request_json(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        response = await self._request(method, endpoint, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteAPIError(f"Invalid JSON from Graph API: {e}") from e

    async def _list(self, endpoint: str) -> list[dict[str, Any]]:
        data = await self._request_json("GET", endpoint)
        return (data or {}).get("value", [])

    # ========================================================================
    # Read
    # ========================================================================

    async def list_notebooks(self) -> list[dict[str, Any]]:
        logger.info("Reading notebooks")
        return await self._list("/me/onenote/notebooks")

    async def list_sections(self, notebook_id: str) -> list[dict[str, Any]]:
        logger.info(f"Reading sections for notebook: {notebook_id}")
        endpoint = f"/me/onenote/notebooks/{_segment(notebook_id)}/sections"
        return await self._list(endpoint)

    async def list_pages(self, section_id: str) -> list[dict[str, Any]]:
        logger.info(f"Reading pages for section: {section_id}")
        endpoint = f"/me/onenote/sections/{_segment(section_id)}/pages"
        return await self._list(endpoint)

    async def get_page_content(self, page_id: str) -> str:
        """Fetch a page's body as the HTML Graph returns."""
        logger.info(f"Reading content for page: {page_id}")
        endpoint = f"/me/onenote/pages/{_segment(page_id)}/content"
        response = await self._request("GET", endpoint)
        return response.text

    # ========================================================================
    # Create
    # ========================================================================

    async def create_notebook(self, display_name: str) -> dict[str, Any] | None:
        logger.info(f"Creating notebook: {display_name}")
        return await self._request_json(
            "POST", "/me/onenote/notebooks", json_data={"displayName": display_name}
        )

    async def create_section(
        self, notebook_id: str, display_name: str
    ) -> dict[str, Any] | None:
        logger.info(f"Creating section: {display_name} in notebook: {notebook_id}")
        return await self._request_json(
            "POST",
            f"/me/onenote/notebooks/{_segment(notebook_id)}/sections",
            json_data={"displayName": display_name},
        )

    async def create_page(
        self, section_id: str, title: str, content: str
    ) -> dict[str, Any] | None:
        """Create a page from an HTML fragment.

        Unlike the other calls this one sends an HTML document, not JSON.
        """
        logger.info(f"Creating page: {title} in section: {section_id}")
        return await self._request_json(
            "POST",
            f"/me/onenote/sections/{_segment(section_id)}/pages",
            content=build_page_html(title, content),
            content_type="text/html",
        )
