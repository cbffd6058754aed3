"""Excerpts and citations shared by both search paths."""

from __future__ import annotations

from typing import Literal

from pageindex.config import (
    ELLIPSIS,
    PAGEINDEX_EXCERPT_CHARS,
    UNKNOWN_DOCUMENT_ID,
    UNKNOWN_DOCUMENT_TITLE,
)
from pageindex.schemas import Citation, DocumentNode, SearchResult


def extract_excerpt(content: str, max_chars: int = PAGEINDEX_EXCERPT_CHARS) -> str:
    """Trim ``content`` to at most ``max_chars`` on a word boundary.

    Short content is returned unchanged. Longer content is cut at the last
    whitespace at or before ``max_chars`` (a hard cut when there is none)
    and gets an ellipsis.
    """
    if len(content) <= max_chars:
        return content
    window = content[: max_chars + 1]
    cut = max(window.rfind(" "), window.rfind("\n"), window.rfind("\t"))
    if cut <= 0:
        cut = max_chars
    return content[:cut] + ELLIPSIS


def document_title_for(node: DocumentNode) -> str:
    """Return the title of the root of the tree ``node`` belongs to."""
    current: DocumentNode | None = node
    while current is not None:
        if current.kind == "root" and current.title:
            return current.title
        current = current.parent
    return UNKNOWN_DOCUMENT_TITLE


def build_citation(node: DocumentNode) -> Citation:
    return Citation(
        document_id=node.document_id or UNKNOWN_DOCUMENT_ID,
        document_title=document_title_for(node),
        node_id=node.id,
        section=node.title,
        page_number=node.page_number,
        position=node.metadata.position,
    )


def build_result(
    node: DocumentNode,
    relevance: float,
    *,
    source: Literal["llm", "keyword"],
) -> SearchResult:
    return SearchResult(
        content=node.content,
        relevance=relevance,
        citation=build_citation(node),
        excerpt=extract_excerpt(node.content),
        source=source,
    )
