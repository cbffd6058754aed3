"""Shared schemas for pageindex."""

from pageindex.schemas.config import (
    IndexStats,
    LLMClientFunction,
    LLMProvider,
    PageIndexConfig,
)
from pageindex.schemas.documents import DocumentMetadata, DocumentType, ParsedDocument
from pageindex.schemas.nodes import (
    DocumentNode,
    NodeKind,
    NodeMetadata,
    find_node_by_id,
    iter_forest,
)
from pageindex.schemas.search import Citation, SearchQuery, SearchResult

__all__ = [
    "Citation",
    "DocumentMetadata",
    "DocumentNode",
    "DocumentType",
    "IndexStats",
    "LLMClientFunction",
    "LLMProvider",
    "NodeKind",
    "NodeMetadata",
    "PageIndexConfig",
    "ParsedDocument",
    "SearchQuery",
    "SearchResult",
    "find_node_by_id",
    "iter_forest",
]
