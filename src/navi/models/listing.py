from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class ListPage(BaseModel):
    """One page of a cursor-paginated Notion listing."""

    records: list[dict[str, Any]] = []  # Raw API objects, converted by navi.blocks
    next_cursor: str | None = None
    has_more: bool = False
