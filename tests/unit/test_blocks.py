"""Unit tests for block conversion, text extraction and markdown rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError

from navi.blocks import (
    UNKNOWN_PAGE_TITLE,
    extract_plain_text,
    is_empty,
    title_from_url,
    to_markdown,
    unit_from_record,
)
from navi.errors import ErrorCode, NaviError
from navi.models.content import DocumentID, ParentRef, UnitKind

if TYPE_CHECKING:
    from conftest import RecordFactory

DOC = DocumentID("page-1")


def _spans(*texts: str) -> list[dict]:
    return [{"type": "text", "plain_text": text} for text in texts]


# ---------------------------------------------------------------------------
# extract_plain_text
# ---------------------------------------------------------------------------


class TestExtractPlainText:
    @pytest.mark.parametrize(
        "kind",
        [
            "paragraph",
            "heading_1",
            "heading_2",
            "heading_3",
            "bulleted_list_item",
            "numbered_list_item",
            "quote",
            "to_do",
            "toggle",
            "callout",
            "code",
        ],
    )
    def test_rich_text_kinds_join_spans_with_spaces(self, kind: str) -> None:
        record = {"type": kind, kind: {"rich_text": _spans("Ship", "the release")}}
        assert extract_plain_text(record) == "Ship the release"

    def test_rich_text_span_without_plain_text(self) -> None:
        record = {"type": "paragraph", "paragraph": {"rich_text": [{"type": "mention"}]}}
        assert extract_plain_text(record) == ""

    @pytest.mark.parametrize("kind", ["image", "file", "pdf", "video", "embed", "bookmark"])
    def test_caption_kinds_use_caption(self, kind: str) -> None:
        record = {"type": kind, kind: {"caption": _spans("Whiteboard", "photo")}}
        assert extract_plain_text(record) == "Whiteboard photo"

    def test_caption_missing_is_empty(self) -> None:
        record = {"type": "image", "image": {"type": "external", "external": {"url": "x"}}}
        assert extract_plain_text(record) == ""

    def test_table_row_joins_cells_with_pipes(self) -> None:
        record = {
            "type": "table_row",
            "table_row": {"cells": [_spans("Owner"), _spans("Ada", "L."), []]},
        }
        assert extract_plain_text(record) == "Owner | Ada L. | "

    def test_equation_uses_expression(self) -> None:
        record = {"type": "equation", "equation": {"expression": "e = mc^2"}}
        assert extract_plain_text(record) == "e = mc^2"

    def test_link_preview_uses_url(self) -> None:
        record = {"type": "link_preview", "link_preview": {"url": "https://github.com/x/y"}}
        assert extract_plain_text(record) == "https://github.com/x/y"

    @pytest.mark.parametrize(
        "kind",
        [
            "divider",
            "breadcrumb",
            "table_of_contents",
            "column_list",
            "column",
            "synced_block",
            "template",
            "table",
            "unsupported",
        ],
    )
    def test_textless_kinds_are_empty(self, kind: str) -> None:
        record = {"type": kind, kind: {"rich_text": _spans("ignored")}}
        assert extract_plain_text(record) == ""

    def test_unknown_kind_is_empty(self) -> None:
        record = {"type": "ai_block", "ai_block": {"rich_text": _spans("ignored")}}
        assert extract_plain_text(record) == ""

    def test_missing_payload_is_empty(self) -> None:
        assert extract_plain_text({"type": "paragraph"}) == ""


# ---------------------------------------------------------------------------
# unit_from_record
# ---------------------------------------------------------------------------


class TestUnitFromRecord:
    def test_fields_are_populated(self, make_block: RecordFactory) -> None:
        record = make_block("b1", "Met with Sam", kind="bulleted_list_item", has_children=True)
        unit = unit_from_record(record, DOC)

        assert unit.id == "b1"
        assert unit.document_id == DOC
        assert unit.kind is UnitKind.BULLETED_LIST_ITEM
        assert unit.plain_text == "Met with Sam"
        assert unit.has_children is True
        assert unit.parent == ParentRef(kind="page_id", id="page-1")
        assert unit.edited_at.tzinfo is not None
        assert unit.edited_at >= unit.created_at

    def test_unknown_kind_maps_to_unsupported(self, make_block: RecordFactory) -> None:
        unit = unit_from_record(make_block("b1", "x", kind="ai_block"), DOC)
        assert unit.kind is UnitKind.UNSUPPORTED
        assert unit.plain_text == ""

    def test_workspace_parent_has_no_id(self, make_block: RecordFactory) -> None:
        record = make_block("b1", "x")
        record["parent"] = {"type": "workspace", "workspace": True}
        unit = unit_from_record(record, DOC)
        assert unit.parent == ParentRef(kind="workspace", id=None)

    def test_missing_parent(self, make_block: RecordFactory) -> None:
        record = make_block("b1", "x")
        del record["parent"]
        assert unit_from_record(record, DOC).parent is None

    def test_unit_is_immutable(self, make_block: RecordFactory) -> None:
        unit = unit_from_record(make_block("b1", "x"), DOC)
        with pytest.raises(ValidationError):
            unit.plain_text = "changed"  # type: ignore[misc]

    def test_missing_id_raises_malformed(self, make_block: RecordFactory) -> None:
        record = make_block("b1", "x")
        del record["id"]
        with pytest.raises(NaviError) as exc_info:
            unit_from_record(record, DOC)
        assert exc_info.value.code == ErrorCode.MALFORMED_RECORD

    def test_bad_timestamp_raises_malformed(self, make_block: RecordFactory) -> None:
        record = make_block("b1", "x", edited="last tuesday")
        with pytest.raises(NaviError) as exc_info:
            unit_from_record(record, DOC)
        assert exc_info.value.code == ErrorCode.MALFORMED_RECORD


# ---------------------------------------------------------------------------
# to_markdown / is_empty
# ---------------------------------------------------------------------------


class TestToMarkdown:
    @pytest.mark.parametrize(
        ("kind", "expected"),
        [
            ("heading_1", "# Notes"),
            ("heading_2", "## Notes"),
            ("heading_3", "### Notes"),
            ("bulleted_list_item", "- Notes"),
            ("numbered_list_item", "1. Notes"),
            ("to_do", "- [ ] Notes"),
            ("toggle", "> Notes"),
            ("quote", "> Notes"),
            ("paragraph", "Notes"),
            ("callout", "Notes"),
            ("code", "Notes"),
        ],
    )
    def test_prefix_per_kind(self, make_block: RecordFactory, kind: str, expected: str) -> None:
        unit = unit_from_record(make_block("b1", "Notes", kind=kind), DOC)
        assert to_markdown(unit) == expected

    def test_numbered_items_never_count(self, make_block: RecordFactory) -> None:
        units = [
            unit_from_record(make_block(f"b{i}", f"step {i}", kind="numbered_list_item"), DOC)
            for i in range(3)
        ]
        assert [to_markdown(unit) for unit in units] == ["1. step 0", "1. step 1", "1. step 2"]

    def test_multiple_blocks_as_lines(self, make_block: RecordFactory) -> None:
        records = [
            make_block("1", "Heading 1", kind="heading_1"),
            make_block("2", "Heading 2", kind="heading_2"),
            make_block("3", "Bullet point", kind="bulleted_list_item"),
            make_block("4", "Normal text"),
        ]
        markdown = "\n".join(to_markdown(unit_from_record(r, DOC)) for r in records)
        assert markdown == "# Heading 1\n## Heading 2\n- Bullet point\nNormal text"


class TestIsEmpty:
    def test_text_block_is_not_empty(self, make_block: RecordFactory) -> None:
        assert not is_empty(unit_from_record(make_block("b1", "x"), DOC))

    def test_blank_paragraph_is_empty(self, make_block: RecordFactory) -> None:
        assert is_empty(unit_from_record(make_block("b1", ""), DOC))

    def test_divider_is_empty(self, make_block: RecordFactory) -> None:
        assert is_empty(unit_from_record(make_block("b1", "x", kind="divider"), DOC))

    def test_whitespace_is_not_empty(self, make_block: RecordFactory) -> None:
        assert not is_empty(unit_from_record(make_block("b1", " "), DOC))


# ---------------------------------------------------------------------------
# title_from_url
# ---------------------------------------------------------------------------


class TestTitleFromUrl:
    def test_drops_id_suffix(self) -> None:
        url = "https://www.notion.so/August-19-2024-651d530e07a14f9c97b4084614c5049b"
        assert title_from_url(url) == "August 19 2024"

    def test_workspace_prefixed_url(self) -> None:
        url = "https://www.notion.so/acme/Team-Sync-0f1e2d3c4b5a69788796a5b4c3d2e1f0"
        assert title_from_url(url) == "Team Sync"

    def test_query_string_ignored(self) -> None:
        url = "https://www.notion.so/Retro-651d530e07a14f9c97b4084614c5049b?pvs=4"
        assert title_from_url(url) == "Retro"

    def test_untitled_page_falls_back(self) -> None:
        url = "https://www.notion.so/651d530e07a14f9c97b4084614c5049b"
        assert title_from_url(url) == UNKNOWN_PAGE_TITLE

    def test_empty_url_falls_back(self) -> None:
        assert title_from_url("") == UNKNOWN_PAGE_TITLE
