"""Protocol interfaces for swappable components.

The crawl modules reference these protocols, not the concrete client.
This allows:
- Tests to use lightweight in-memory content sources
- Other note-taking backends to be plugged in without changing crawl code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from navi.models.listing import ListPage


class RemoteContentPort(Protocol):
    """Interface for the paginated content source.

    Implementations raise NaviError on transport failures; callers let it
    propagate.
    """

    async def list_recent_documents(self, cursor: str | None = None) -> ListPage:
        """One page of page objects, most recently edited first."""
        ...

    async def list_children(self, unit_id: str, cursor: str | None = None) -> ListPage:
        """One page of the direct children of a page or block, in stable order."""
        ...
