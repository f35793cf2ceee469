"""Edit root scanning.

An edit root is the shallowest block in a page whose own last-edited time is
inside the crawl window. The scan is breadth-first from the page's top-level
blocks and only descends into stale blocks: a recently edited block is kept
as-is (its descendants are collected later by the expander), and a stale
block without children is a dead end.

Some pages are huge, so the scan runs against a wall-clock budget. The budget
is checked before each block is taken off the queue; an in-flight fetch is
never interrupted, so the scan can overshoot by one request's latency. When
the budget runs out the roots found so far are returned. A truncated result
is still a valid result.
"""

from __future__ import annotations

import time
from collections import deque
from typing import TYPE_CHECKING

import structlog

from navi.blocks import is_empty
from navi.discovery import fetch_all_children

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from navi.models.content import ContentUnit, Document, UnitID
    from navi.protocols import RemoteContentPort

log = structlog.get_logger()

DEFAULT_SCAN_BUDGET_SECONDS = 30.0


async def scan_edit_roots(
    port: RemoteContentPort,
    document: Document,
    cutoff: datetime,
    visited: set[UnitID] | None = None,
    *,
    budget_seconds: float = DEFAULT_SCAN_BUDGET_SECONDS,
    clock: Callable[[], float] = time.monotonic,
) -> list[ContentUnit]:
    """Return the non-empty edit roots of ``document``, in discovery order.

    ``visited`` guards against cycles in the block graph. Pass the same set
    for several pages to also skip blocks already seen in an earlier page.
    """
    if visited is None:
        visited = set()

    queue: deque[ContentUnit] = deque(document.root_units)
    roots: list[ContentUnit] = []
    deadline = clock() + budget_seconds

    while queue:
        if clock() > deadline:
            log.debug(
                "scan_budget_exhausted",
                document_id=document.id,
                title=document.title,
                roots=len(roots),
                pending=len(queue),
            )
            break

        unit = queue.popleft()

        # The block graph Notion hands back may contain cycles.
        if unit.id in visited:
            log.debug("unit_already_visited", unit_id=unit.id)
            continue
        visited.add(unit.id)

        if unit.edited_at >= cutoff:
            if not is_empty(unit):
                roots.append(unit)
            continue

        # Stale, but one of its descendants may have been edited.
        if unit.has_children:
            children = await fetch_all_children(port, unit.id, unit.document_id)
            queue.extend(children)

    log.debug(
        "edit_roots_scanned",
        document_id=document.id,
        title=document.title,
        roots=len(roots),
    )
    return roots
