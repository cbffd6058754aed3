"""Search query and result models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from pageindex.config import PAGEINDEX_MAX_RESULTS


class SearchQuery(BaseModel):
    """A natural-language query against the indexed documents.

    Attributes:
        query: The query text.
        max_results: Upper bound on the number of results returned.
        threshold: Minimum relevance a result must reach, if set.
        collection: Restrict the search to documents whose source contains
            this substring.
    """

    query: str
    max_results: int = Field(PAGEINDEX_MAX_RESULTS, ge=1)
    threshold: float | None = Field(None, ge=0.0, le=1.0)
    collection: str | None = None


class Citation(BaseModel):
    """Provenance of a search result."""

    document_id: str
    document_title: str
    node_id: str
    section: str | None = None
    page_number: int | None = None
    position: int = 0


class SearchResult(BaseModel):
    """A ranked search hit."""

    content: str
    relevance: float = Field(..., ge=0.0, le=1.0)
    citation: Citation
    excerpt: str
    source: Literal["llm", "keyword"] = "keyword"
