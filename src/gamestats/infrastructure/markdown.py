"""Markdown to HTML conversion via markdown-it-py.

CommonMark plus GFM tables and strikethrough. Raw HTML in the source is
passed through: content is authored in-repo and trusted.
"""

from __future__ import annotations

from markdown_it import MarkdownIt


def build_markdown() -> MarkdownIt:
    """Create a configured :class:`MarkdownIt` instance."""
    return MarkdownIt("commonmark", {"html": True}).enable(["table", "strikethrough"])


def markdown_to_html(text: str, *, md: MarkdownIt | None = None) -> str:
    """Render *text* to HTML."""
    return (md or build_markdown()).render(text)
