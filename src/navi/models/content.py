from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any, NewType

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Iterator

# Distinct identifier types so a page ID is never passed where a block ID
# is expected (and vice versa).
DocumentID = NewType("DocumentID", str)
UnitID = NewType("UnitID", str)


class UnitKind(StrEnum):
    """Notion block types. Anything unrecognised maps to UNSUPPORTED."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    FILE = "file"
    PDF = "pdf"
    EMBED = "embed"
    BOOKMARK = "bookmark"
    EQUATION = "equation"
    LINK_PREVIEW = "link_preview"
    LINK_TO_PAGE = "link_to_page"
    TABLE = "table"
    TABLE_ROW = "table_row"
    DIVIDER = "divider"
    BREADCRUMB = "breadcrumb"
    TABLE_OF_CONTENTS = "table_of_contents"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    SYNCED_BLOCK = "synced_block"
    TEMPLATE = "template"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    UNSUPPORTED = "unsupported"

    @classmethod
    def parse(cls, raw: str | None) -> UnitKind:
        try:
            return cls(raw)
        except ValueError:
            return cls.UNSUPPORTED


class ParentRef(BaseModel):
    """Where a unit lives: a page, another block, a database or the workspace.

    A relation only. Ownership runs parent -> children through Tree.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    id: str | None = None


class ContentUnit(BaseModel):
    """A single block of notes.

    The variant-specific data from the API is kept in ``payload``; a plain
    form of its text is extracted once into ``plain_text`` when the unit is
    built (see ``navi.blocks.unit_from_record``). Children are never stored
    on the unit; they have to be fetched separately.
    """

    model_config = ConfigDict(frozen=True)

    id: UnitID
    document_id: DocumentID
    kind: UnitKind
    payload: dict[str, Any] = {}
    plain_text: str
    created_at: datetime
    edited_at: datetime
    parent: ParentRef | None = None
    has_children: bool = False


class Document(BaseModel):
    """A Notion page together with its top-level blocks."""

    model_config = ConfigDict(frozen=True)

    id: DocumentID
    title: str
    url: str
    created_at: datetime
    edited_at: datetime
    root_units: tuple[ContentUnit, ...] = ()


@dataclass
class Tree:
    """An edit root and every non-empty descendant reached from it."""

    unit: ContentUnit
    children: list[Tree] = field(default_factory=list)

    def walk(self) -> Iterator[ContentUnit]:
        """Yield every unit in the tree, pre-order."""
        yield self.unit
        for child in self.children:
            yield from child.walk()


@dataclass
class CrawledDocument:
    """Expanded edit roots found in one page."""

    document_id: DocumentID
    title: str
    url: str
    forest: list[Tree] = field(default_factory=list)
