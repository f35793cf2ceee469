"""Discovery of recently edited pages.

Walks the search listing newest-first and stops paging at the first page
edited before the cutoff. Every page kept is turned into a Document with its
top-level blocks fetched eagerly.

Errors from the content source propagate unchanged; a failure on any
listing page loses everything collected so far.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from navi.blocks import parse_timestamp, title_from_url, unit_from_record
from navi.errors import ErrorCode, NaviError
from navi.models.content import ContentUnit, Document, DocumentID

if TYPE_CHECKING:
    from datetime import datetime

    from navi.protocols import RemoteContentPort

log = structlog.get_logger()


async def fetch_all_children(
    port: RemoteContentPort,
    unit_id: str,
    document_id: DocumentID,
) -> list[ContentUnit]:
    """Fetch every direct child of a page or block, following cursors.

    The API only returns 100 children per request.
    """
    children: list[ContentUnit] = []
    cursor: str | None = None

    while True:
        page = await port.list_children(unit_id, cursor)
        children.extend(unit_from_record(record, document_id) for record in page.records)

        if not page.has_more or page.next_cursor is None:
            break
        cursor = page.next_cursor

    return children


def _edited_at(record: dict[str, Any]) -> datetime:
    return parse_timestamp(
        record.get("last_edited_time"), "last_edited_time", record.get("id", "?")
    )


async def discover_documents(port: RemoteContentPort, cutoff: datetime) -> list[Document]:
    """Return every page edited at or after ``cutoff``, newest first.

    Databases mixed into the listing are ignored.
    """
    documents: list[Document] = []
    cursor: str | None = None

    while True:
        listing = await port.list_recent_documents(cursor)
        records = [record for record in listing.records if record.get("object") == "page"]

        # The listing is sorted newest first, so once one record falls before
        # the cutoff every later record (and page) does too.
        cutoff_index = next(
            (i for i, record in enumerate(records) if _edited_at(record) < cutoff),
            None,
        )
        if cutoff_index is not None:
            records = records[:cutoff_index]

        for record in records:
            documents.append(await document_from_record(port, record))

        if cutoff_index is not None or not listing.has_more or listing.next_cursor is None:
            break
        cursor = listing.next_cursor

    log.info("documents_discovered", count=len(documents), cutoff=cutoff.isoformat())
    return documents


async def document_from_record(port: RemoteContentPort, record: dict[str, Any]) -> Document:
    """Build a Document from a raw page object, fetching its top-level blocks."""
    raw_id = record.get("id")
    if not raw_id:
        raise NaviError(
            code=ErrorCode.MALFORMED_RECORD,
            message="Page object without an id",
            suggestion="The Notion API returned an unexpected object shape.",
        )
    document_id = DocumentID(raw_id)
    url = record.get("url") or ""

    root_units = await fetch_all_children(port, raw_id, document_id)
    log.debug("document_fetched", document_id=raw_id, root_units=len(root_units))

    return Document(
        id=document_id,
        title=title_from_url(url),
        url=url,
        created_at=parse_timestamp(record.get("created_time"), "created_time", raw_id),
        edited_at=_edited_at(record),
        root_units=tuple(root_units),
    )
