from __future__ import annotations

from navi.models.content import (
    ContentUnit,
    CrawledDocument,
    Document,
    DocumentID,
    ParentRef,
    Tree,
    UnitID,
    UnitKind,
)
from navi.models.listing import ListPage

__all__ = [
    # content
    "DocumentID",
    "UnitID",
    "UnitKind",
    "ParentRef",
    "ContentUnit",
    "Document",
    "Tree",
    "CrawledDocument",
    # listing
    "ListPage",
]
