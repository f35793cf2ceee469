"""Expansion of edit roots into block trees.

Each edit root becomes a Tree holding every non-empty descendant, in the order
Notion returns children. The walk is breadth-first with an explicit queue and a
visited set instead of recursion, so a malformed block graph (a child listed
under two parents, or a back-edge to an ancestor) cannot loop forever; the
repeated block is silently skipped.

Empty descendants are never attached and their own children are never
fetched, so a branch hidden under an empty block is lost.
"""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

import structlog

from navi.blocks import is_empty
from navi.discovery import fetch_all_children
from navi.models.content import Tree

if TYPE_CHECKING:
    from collections.abc import Iterable

    from navi.models.content import ContentUnit, UnitID
    from navi.protocols import RemoteContentPort

log = structlog.get_logger()


async def expand_subtree(
    port: RemoteContentPort,
    root: ContentUnit,
    visited: set[UnitID] | None = None,
) -> Tree:
    """Expand one edit root into a Tree of its non-empty descendants."""
    if visited is None:
        visited = set()

    tree = Tree(unit=root)
    queue: deque[tuple[Tree, ContentUnit]] = deque([(tree, root)])
    # Units attached but not yet dequeued. Without this a child listed twice
    # at the same depth would be attached twice before either copy is visited.
    queued: set[UnitID] = {root.id}

    while queue:
        node, unit = queue.popleft()

        if unit.id in visited:
            log.debug("unit_already_visited", unit_id=unit.id)
            continue
        visited.add(unit.id)

        if not unit.has_children:
            continue

        for child in await fetch_all_children(port, unit.id, unit.document_id):
            if child.id in visited or child.id in queued:
                log.debug("child_already_visited", unit_id=child.id, parent_id=unit.id)
                continue
            if is_empty(child):
                continue

            child_node = Tree(unit=child)
            node.children.append(child_node)
            queue.append((child_node, child))
            queued.add(child.id)

    return tree


async def expand_all(
    port: RemoteContentPort,
    roots: Iterable[ContentUnit],
    visited: set[UnitID] | None = None,
) -> list[Tree]:
    """Expand several edit roots with one shared visited set.

    A block reachable from two roots ends up under whichever root is
    expanded first. A root that was itself already attached elsewhere is
    skipped, so no block appears twice in the returned forest.
    """
    if visited is None:
        visited = set()

    forest: list[Tree] = []
    for root in roots:
        # Already attached under an earlier root, possibly on another page
        if root.id in visited:
            log.debug("edit_root_already_expanded", unit_id=root.id)
            continue
        forest.append(await expand_subtree(port, root, visited))
    return forest
