"""pageindex: reasoning-based search over hierarchical document trees."""

import logging

from pageindex.exceptions import (
    IndexPersistenceError,
    LLMInvocationError,
    PageIndexError,
    ParseError,
    ProviderConfigurationError,
)
from pageindex.index import PageIndex
from pageindex.keyword import keyword_search
from pageindex.parsers import parse_document
from pageindex.schemas import (
    Citation,
    DocumentNode,
    IndexStats,
    LLMClientFunction,
    LLMProvider,
    PageIndexConfig,
    ParsedDocument,
    SearchQuery,
    SearchResult,
)
from pageindex.search import search_with_llm

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Citation",
    "DocumentNode",
    "IndexPersistenceError",
    "IndexStats",
    "LLMClientFunction",
    "LLMInvocationError",
    "LLMProvider",
    "PageIndex",
    "PageIndexConfig",
    "PageIndexError",
    "ParseError",
    "ParsedDocument",
    "ProviderConfigurationError",
    "SearchQuery",
    "SearchResult",
    "keyword_search",
    "parse_document",
    "search_with_llm",
]
