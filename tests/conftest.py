"""Shared test fixtures for the navi test suite."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import pytest

from navi.models.listing import ListPage

# Crawl window used throughout: anything edited on or after CUTOFF is fresh.
CUTOFF = datetime(2026, 10, 12, tzinfo=UTC)
FRESH = "2026-10-18T09:30:00.000Z"
STALE = "2026-09-01T09:30:00.000Z"

RecordFactory = Callable[..., dict[str, Any]]


class FakeContentSource:
    """In-memory RemoteContentPort with cursor pagination and a call log."""

    def __init__(self, page_size: int = 100) -> None:
        self.page_size = page_size
        self.search_pages: list[list[dict[str, Any]]] = []
        self.children: dict[str, list[dict[str, Any]]] = {}
        self.calls: list[tuple[str, str | None, str | None]] = []

    def add_search_page(self, records: list[dict[str, Any]]) -> None:
        self.search_pages.append(records)

    def set_children(self, parent_id: str, records: list[dict[str, Any]]) -> None:
        self.children[parent_id] = records

    def children_fetched(self) -> list[str]:
        """IDs whose children were requested, one entry per request."""
        return [unit_id for kind, unit_id, _ in self.calls if kind == "children" and unit_id]

    async def list_recent_documents(self, cursor: str | None = None) -> ListPage:
        self.calls.append(("search", None, cursor))
        index = int(cursor) if cursor else 0
        records = self.search_pages[index] if index < len(self.search_pages) else []
        has_more = index + 1 < len(self.search_pages)
        return ListPage(
            records=records,
            next_cursor=str(index + 1) if has_more else None,
            has_more=has_more,
        )

    async def list_children(self, unit_id: str, cursor: str | None = None) -> ListPage:
        self.calls.append(("children", unit_id, cursor))
        records = self.children.get(unit_id, [])
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        has_more = end < len(records)
        return ListPage(
            records=records[start:end],
            next_cursor=str(end) if has_more else None,
            has_more=has_more,
        )


def _rich_text(text: str) -> list[dict[str, Any]]:
    if not text:
        return []
    return [
        {
            "type": "text",
            "text": {"content": text, "link": None},
            "plain_text": text,
            "href": None,
        }
    ]


def build_block(
    block_id: str,
    text: str = "",
    *,
    kind: str = "paragraph",
    fresh: bool = False,
    edited: str | None = None,
    has_children: bool = False,
    parent_id: str = "page-1",
) -> dict[str, Any]:
    """A raw Notion block object as returned by GET /blocks/{id}/children."""
    return {
        "object": "block",
        "id": block_id,
        "parent": {"type": "page_id", "page_id": parent_id},
        "created_time": "2026-08-01T09:00:00.000Z",
        "last_edited_time": edited or (FRESH if fresh else STALE),
        "has_children": has_children,
        "archived": False,
        "type": kind,
        kind: {"rich_text": _rich_text(text), "color": "default"},
    }


def build_page(
    page_id: str,
    *,
    fresh: bool = True,
    edited: str | None = None,
    slug: str = "Weekly-Notes",
    object_type: str = "page",
) -> dict[str, Any]:
    """A raw Notion page object as returned by POST /search."""
    return {
        "object": object_type,
        "id": page_id,
        "created_time": "2026-08-01T09:00:00.000Z",
        "last_edited_time": edited or (FRESH if fresh else STALE),
        "url": f"https://www.notion.so/{slug}-{page_id.replace('-', '')}",
        "parent": {"type": "workspace", "workspace": True},
    }


@pytest.fixture()
def cutoff() -> datetime:
    return CUTOFF


@pytest.fixture()
def source() -> FakeContentSource:
    return FakeContentSource()


@pytest.fixture()
def make_block() -> RecordFactory:
    return build_block


@pytest.fixture()
def make_page() -> RecordFactory:
    return build_page
