"""Conversion of raw Notion objects into navi content models.

Pure functions only: plain-text extraction, markdown rendering of a single
block, and page title derivation. No I/O; fetching lives in discovery.py.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from navi.errors import ErrorCode, NaviError
from navi.models.content import ContentUnit, DocumentID, ParentRef, UnitID, UnitKind

UNKNOWN_PAGE_TITLE = "Unknown Page Title"

# Kinds whose text lives in ``<kind>.rich_text``
_RICH_TEXT_KINDS = frozenset(
    {
        UnitKind.PARAGRAPH,
        UnitKind.HEADING_1,
        UnitKind.HEADING_2,
        UnitKind.HEADING_3,
        UnitKind.BULLETED_LIST_ITEM,
        UnitKind.NUMBERED_LIST_ITEM,
        UnitKind.QUOTE,
        UnitKind.TO_DO,
        UnitKind.TOGGLE,
        UnitKind.CALLOUT,
        UnitKind.CODE,
    }
)

# Kinds whose only text is an optional ``<kind>.caption``
_CAPTION_KINDS = frozenset(
    {
        UnitKind.IMAGE,
        UnitKind.FILE,
        UnitKind.PDF,
        UnitKind.VIDEO,
        UnitKind.AUDIO,
        UnitKind.EMBED,
        UnitKind.BOOKMARK,
    }
)

_MARKDOWN_PREFIXES: dict[UnitKind, str] = {
    UnitKind.HEADING_1: "# ",
    UnitKind.HEADING_2: "## ",
    UnitKind.HEADING_3: "### ",
    UnitKind.BULLETED_LIST_ITEM: "- ",
    # No running counter: markdown renderers renumber consecutive items.
    UnitKind.NUMBERED_LIST_ITEM: "1. ",
    UnitKind.TO_DO: "- [ ] ",
    UnitKind.TOGGLE: "> ",
    UnitKind.QUOTE: "> ",
}


def _join_spans(spans: list[dict[str, Any]] | None) -> str:
    return " ".join(span.get("plain_text") or "" for span in spans or [])


def extract_plain_text(record: dict[str, Any]) -> str:
    """Return the plain text of a raw block object.

    Blocks without inherent text (dividers, column layouts, synced blocks,
    unsupported types, ...) yield an empty string.
    """
    kind = UnitKind.parse(record.get("type"))
    payload = record.get(kind.value) or {}

    if kind in _RICH_TEXT_KINDS:
        return _join_spans(payload.get("rich_text"))

    if kind in _CAPTION_KINDS:
        return _join_spans(payload.get("caption"))

    if kind is UnitKind.TABLE_ROW:
        return " | ".join(_join_spans(cell) for cell in payload.get("cells") or [])

    if kind is UnitKind.EQUATION:
        return payload.get("expression") or ""

    if kind is UnitKind.LINK_PREVIEW:
        return payload.get("url") or ""

    return ""


def parse_timestamp(value: Any, field_name: str, object_id: str) -> datetime:
    if not isinstance(value, str):
        raise NaviError(
            code=ErrorCode.MALFORMED_RECORD,
            message=f"Object {object_id} has no {field_name}",
            suggestion="The Notion API returned an unexpected object shape.",
        )
    try:
        # Notion timestamps end in "Z", which fromisoformat accepts on 3.11+
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise NaviError(
            code=ErrorCode.MALFORMED_RECORD,
            message=f"Object {object_id} has an invalid {field_name}: {value!r}",
            suggestion="The Notion API returned an unexpected timestamp format.",
        ) from exc


def _parse_parent(raw: Any) -> ParentRef | None:
    if not isinstance(raw, dict) or "type" not in raw:
        return None
    parent_kind = raw["type"]
    parent_id = raw.get(parent_kind)
    # {"type": "workspace", "workspace": true} carries no ID
    return ParentRef(kind=parent_kind, id=parent_id if isinstance(parent_id, str) else None)


def unit_from_record(record: dict[str, Any], document_id: DocumentID) -> ContentUnit:
    """Build an immutable ContentUnit from a raw Notion block object."""
    unit_id = record.get("id")
    if not unit_id:
        raise NaviError(
            code=ErrorCode.MALFORMED_RECORD,
            message="Block object without an id",
            suggestion="The Notion API returned an unexpected object shape.",
        )

    kind = UnitKind.parse(record.get("type"))
    return ContentUnit(
        id=UnitID(unit_id),
        document_id=document_id,
        kind=kind,
        payload=record.get(kind.value) or {},
        plain_text=extract_plain_text(record),
        created_at=parse_timestamp(record.get("created_time"), "created_time", unit_id),
        edited_at=parse_timestamp(record.get("last_edited_time"), "last_edited_time", unit_id),
        parent=_parse_parent(record.get("parent")),
        has_children=bool(record.get("has_children", False)),
    )


def title_from_url(url: str) -> str:
    """Derive a page title from its URL slug.

    ``https://www.notion.so/August-19-2024-651d530e07a14f9c97b4084614c5049b``
    becomes ``"August 19 2024"``. The final dash-separated token is the page
    ID and is dropped. This is a heuristic; it is good enough to tell pages
    apart, not to reproduce titles exactly.
    """
    slug = urlparse(url).path.rstrip("/").rsplit("/", 1)[-1]
    parts = slug.split("-")
    title = " ".join(parts[:-1]).strip()
    return title or UNKNOWN_PAGE_TITLE


def to_markdown(unit: ContentUnit) -> str:
    """Render one block as a line of markdown."""
    return _MARKDOWN_PREFIXES.get(unit.kind, "") + unit.plain_text


def is_empty(unit: ContentUnit) -> bool:
    return len(unit.plain_text) == 0
