"""Serialize document trees into an LLM-readable outline."""

from __future__ import annotations

from pageindex.config import (
    ELLIPSIS,
    PAGEINDEX_CONTEXT_CHARS,
    PAGEINDEX_NODE_CONTENT_CHARS,
)
from pageindex.schemas import DocumentNode

INDENT = "  "
TRUNCATION_NOTICE = "\n[... context truncated ...]"


def flatten_node(
    node: DocumentNode,
    depth: int = 0,
    *,
    max_content_chars: int = PAGEINDEX_NODE_CONTENT_CHARS,
) -> str:
    """Render ``node`` and its descendants, one tagged block per node.

    Each node gets a header line ``[<id>] ## <title>`` (heading marker and
    title only when the node has a title) followed by its content on the next
    line, whitespace-collapsed and cut to ``max_content_chars``. Children are
    indented two spaces per level of depth.
    """
    lines: list[str] = []
    _render(node, depth, max_content_chars, lines)
    return "".join(lines)


def _render(node: DocumentNode, depth: int, max_chars: int, lines: list[str]) -> None:
    indent = INDENT * depth
    header = f"[{node.id}]"
    if node.title:
        marker = "#" * node.level
        header = f"{header} {marker} {node.title}" if marker else f"{header} {node.title}"
    lines.append(f"{indent}{header}\n")

    content = " ".join(node.content.split())
    if content and content not in (node.title, f"{'#' * node.level} {node.title}"):
        if len(content) > max_chars:
            content = content[:max_chars] + ELLIPSIS
        lines.append(f"{indent}{content}\n")

    for child in node.children:
        _render(child, depth + 1, max_chars, lines)


def build_search_context(
    forest: list[DocumentNode],
    *,
    max_chars: int = PAGEINDEX_CONTEXT_CHARS,
    max_content_chars: int = PAGEINDEX_NODE_CONTENT_CHARS,
) -> str:
    """Flatten every tree of ``forest`` into one bounded text block.

    The result is hard-truncated at ``max_chars`` with a notice appended;
    nodes past the cut are invisible to the reasoning step.
    """
    context = "\n".join(
        flatten_node(tree, max_content_chars=max_content_chars) for tree in forest
    )
    if len(context) > max_chars:
        return context[:max_chars] + TRUNCATION_NOTICE
    return context
