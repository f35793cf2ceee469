"""Flat markdown rendering of expanded block trees.

Each block is one markdown line. A block's children follow it after a block
separator, joined by newlines and indented two spaces per level of depth.
The separator defaults to ``<br>`` so the output survives a markdown-to-HTML
pass with its line structure intact.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from navi.blocks import to_markdown

if TYPE_CHECKING:
    from collections.abc import Sequence

    from navi.models.content import CrawledDocument, Tree

BLOCK_SEPARATOR = "<br>"
# Prompts are plain text, so a newline stands in for the HTML separator.
PROMPT_SEPARATOR = "\n"


def render_tree(tree: Tree, depth: int = 0, separator: str = BLOCK_SEPARATOR) -> str:
    markdown = to_markdown(tree.unit)
    if not tree.children:
        return markdown

    indentation = "  " * depth
    children = "\n".join(render_tree(child, depth + 1, separator) for child in tree.children)
    return f"{markdown}{separator}{indentation}{children}"


def render(forest: Sequence[Tree], separator: str = BLOCK_SEPARATOR) -> str:
    """Render a forest of trees to a single string."""
    return separator.join(render_tree(tree, 0, separator) for tree in forest)


def to_prompt_text(documents: Sequence[CrawledDocument]) -> str:
    """Render crawled pages as titled plain-markdown sections for a prompt."""
    sections = [
        f"Page Title: {document.title}\n{render(document.forest, separator=PROMPT_SEPARATOR)}"
        for document in documents
    ]
    return "\n\n".join(sections)
