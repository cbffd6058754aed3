"""Deterministic keyword relevance over document trees."""

from __future__ import annotations

from pageindex.citations import build_result
from pageindex.schemas import DocumentNode, SearchQuery, SearchResult, iter_forest


def tokenize_query(query: str) -> list[str]:
    """Lower-case ``query`` and split it on whitespace."""
    return query.lower().split()


def score_content(content: str, keywords: list[str]) -> float:
    """Distinct ``keywords`` found in ``content`` over the total keyword count.

    A repeated query word is matched once but still counts in the total.
    """
    if not keywords:
        return 0.0
    lowered = content.lower()
    matched = sum(1 for keyword in set(keywords) if keyword in lowered)
    return matched / len(keywords)


def keyword_search(forest: list[DocumentNode], query: SearchQuery) -> list[SearchResult]:
    """Rank every node of ``forest`` by keyword overlap with the query.

    Nodes without any match are dropped. Ties keep pre-order (reading)
    order, so the ranking never depends on anything but the trees and the
    query.
    """
    keywords = tokenize_query(query.query)
    if not keywords:
        return []

    scored: list[tuple[float, DocumentNode]] = []
    for node in iter_forest(forest):
        score = score_content(node.content, keywords)
        if score > 0:
            scored.append((score, node))

    # sorted() is stable: equal scores stay in traversal order.
    scored = sorted(scored, key=lambda item: item[0], reverse=True)
    if query.threshold is not None:
        scored = [item for item in scored if item[0] >= query.threshold]

    return [
        build_result(node, score, source="keyword")
        for score, node in scored[: query.max_results]
    ]
