"""Notion REST client.

All network I/O for a crawl goes through a single NotionClient instance.
The client receives an httpx.AsyncClient via constructor injection; the
caller owns the client lifecycle. No retries happen here: every failure is
mapped to a NaviError and raised to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import structlog
from pydantic import ValidationError

from navi import __version__
from navi.errors import ErrorCode, NaviError
from navi.models.listing import ListPage

if TYPE_CHECKING:
    from navi.config import NotionSettings

log = structlog.get_logger()


def build_http_client(settings: NotionSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once per process."""
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={
            "Authorization": f"Bearer {settings.token}",
            "Notion-Version": settings.api_version,
            "User-Agent": f"navi/{__version__}",
        },
    )


def _error_for_response(response: httpx.Response, what: str) -> NaviError:
    status = response.status_code
    if status in (401, 403):
        return NaviError(
            code=ErrorCode.UNAUTHORIZED,
            message=f"HTTP {status} fetching {what}",
            suggestion="Check the Notion integration token and that pages are shared with it.",
            recoverable=False,
        )
    if status == 404:
        return NaviError(
            code=ErrorCode.NOT_FOUND,
            message=f"HTTP 404 fetching {what}",
            suggestion="The object does not exist or is not shared with the integration.",
            recoverable=False,
        )
    if status == 429:
        retry_after = response.headers.get("retry-after", "unknown")
        return NaviError(
            code=ErrorCode.RATE_LIMITED,
            message=f"Rate limited fetching {what} (retry after {retry_after}s)",
            suggestion="Wait before running the crawl again.",
            recoverable=True,
        )
    return NaviError(
        code=ErrorCode.FETCH_FAILED,
        message=f"HTTP {status} fetching {what}",
        suggestion="The Notion API may be temporarily unavailable.",
        recoverable=status >= 500,
    )


class NotionClient:
    """Paginated Notion listings implementing RemoteContentPort."""

    def __init__(self, client: httpx.AsyncClient, settings: NotionSettings) -> None:
        self._client = client
        self._page_size = settings.page_size

    async def list_recent_documents(self, cursor: str | None = None) -> ListPage:
        body: dict[str, Any] = {
            "filter": {"value": "page", "property": "object"},
            "sort": {"timestamp": "last_edited_time", "direction": "descending"},
            "page_size": self._page_size,
        }
        if cursor is not None:
            body["start_cursor"] = cursor
        return await self._request("POST", "/search", "search results", json=body)

    async def list_children(self, unit_id: str, cursor: str | None = None) -> ListPage:
        params: dict[str, Any] = {"page_size": self._page_size}
        if cursor is not None:
            params["start_cursor"] = cursor
        return await self._request(
            "GET",
            f"/blocks/{unit_id}/children",
            f"children of {unit_id}",
            params=params,
        )

    async def _request(self, method: str, path: str, what: str, **kwargs: Any) -> ListPage:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise NaviError(
                code=ErrorCode.FETCH_FAILED,
                message=f"Network error fetching {what}: {exc}",
                suggestion="Check your network connection; the Notion API may be unreachable.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            error = _error_for_response(response, what)
            log.warning("notion_request_failed", path=path, status_code=response.status_code)
            raise error

        try:
            data = response.json()
            page = ListPage(
                records=data["results"],
                next_cursor=data.get("next_cursor"),
                has_more=data.get("has_more", False),
            )
        except (ValueError, KeyError, TypeError, ValidationError) as exc:
            raise NaviError(
                code=ErrorCode.MALFORMED_RECORD,
                message=f"Unexpected response body fetching {what}",
                suggestion="The Notion API returned a response navi does not understand.",
                recoverable=False,
            ) from exc

        log.debug(
            "notion_page_fetched",
            path=path,
            results=len(page.records),
            has_more=page.has_more,
        )
        return page
