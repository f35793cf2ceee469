"""Crawl orchestration: discovery -> edit root scan -> expansion.

Receives a content source and a cutoff, returns expanded block trees.
No knowledge of settings files, HTTP, or output formats.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from navi.discovery import discover_documents
from navi.expander import expand_all
from navi.models.content import CrawledDocument
from navi.scanner import DEFAULT_SCAN_BUDGET_SECONDS, scan_edit_roots

if TYPE_CHECKING:
    from collections.abc import Sequence

    from navi.models.content import Document, Tree, UnitID
    from navi.protocols import RemoteContentPort

log = structlog.get_logger()


def cutoff_for(lookback_days: int, now: datetime | None = None) -> datetime:
    """Return the start of a crawl window ``lookback_days`` long, in UTC."""
    if now is None:
        now = datetime.now(tz=UTC)
    return now - timedelta(days=lookback_days)


def compile_exclusions(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    """Compile page exclusion regexes, dropping (and logging) invalid ones."""
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as exc:
            log.warning("invalid_exclusion_pattern", pattern=pattern, error=str(exc))
    return compiled


def is_excluded(document: Document, exclusions: Sequence[re.Pattern[str]]) -> bool:
    for regex in exclusions:
        if regex.search(document.title) or regex.search(document.url):
            log.debug(
                "document_excluded",
                pattern=regex.pattern,
                title=document.title,
                url=document.url,
            )
            return True
    return False


async def crawl_documents(
    port: RemoteContentPort,
    cutoff: datetime,
    *,
    exclusions: Sequence[str] = (),
    scan_budget_seconds: float = DEFAULT_SCAN_BUDGET_SECONDS,
) -> list[CrawledDocument]:
    """Crawl every page edited since ``cutoff``.

    Pages are processed newest first, one at a time. Only pages with at
    least one edit root not already shown under an earlier page are returned.
    """
    patterns = compile_exclusions(exclusions)
    documents = await discover_documents(port, cutoff)

    # Scanning marks edit roots as visited; expansion has to visit them
    # again, so the two passes keep separate sets. Each set spans all pages.
    scanned: set[UnitID] = set()
    expanded: set[UnitID] = set()

    crawled: list[CrawledDocument] = []
    for document in documents:
        if is_excluded(document, patterns):
            continue

        roots = await scan_edit_roots(
            port,
            document,
            cutoff,
            scanned,
            budget_seconds=scan_budget_seconds,
        )
        if not roots:
            continue

        log.debug(
            "edit_roots_found",
            document_id=document.id,
            title=document.title,
            roots=len(roots),
        )
        forest = await expand_all(port, roots, expanded)
        if not forest:
            continue
        crawled.append(
            CrawledDocument(
                document_id=document.id,
                title=document.title,
                url=document.url,
                forest=forest,
            )
        )

    log.info("crawl_complete", documents=len(documents), documents_with_edits=len(crawled))
    return crawled


async def crawl(
    port: RemoteContentPort,
    cutoff: datetime,
    *,
    exclusions: Sequence[str] = (),
    scan_budget_seconds: float = DEFAULT_SCAN_BUDGET_SECONDS,
) -> list[Tree]:
    """Return the expanded edit roots of every page edited since ``cutoff``.

    Trees are ordered by page (newest first), then by discovery order
    within each page.
    """
    crawled = await crawl_documents(
        port,
        cutoff,
        exclusions=exclusions,
        scan_budget_seconds=scan_budget_seconds,
    )
    return [tree for document in crawled for tree in document.forest]
