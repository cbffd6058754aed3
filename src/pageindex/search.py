"""Reasoning search: ask an LLM which nodes answer a query.

One prompt, one reply. The reply is read as a ranked list of node ids. Any
failure on the way (configuration, transport, timeout, an unusable reply)
routes the query to the keyword scorer instead, so callers always get a
ranked list and never see the LLM error itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pageindex.citations import build_result
from pageindex.config import NODE_ID_PREFIX, PAGEINDEX_LLM_RELEVANCE
from pageindex.context import build_search_context
from pageindex.exceptions import LLMInvocationError, ProviderConfigurationError
from pageindex.keyword import keyword_search
from pageindex.llm import invoke_llm
from pageindex.schemas import (
    DocumentNode,
    LLMClientFunction,
    LLMProvider,
    SearchQuery,
    SearchResult,
    find_node_by_id,
)

_logger = logging.getLogger(__name__)

SEARCH_PROMPT_TEMPLATE = """You are a document search assistant. Your task is to find the most relevant sections of documents for a given query.

QUERY: {query}

DOCUMENT CONTENT:
{context}

INSTRUCTIONS:
1. Read the query carefully
2. Review the document content above
3. Identify the most relevant sections (nodes) that answer the query
4. Return the node IDs of the most relevant sections, one per line
5. Prioritize sections that directly answer the query over general context

Return ONLY the node IDs, one per line, in order of relevance. Each node ID starts with "{prefix}"."""


def build_search_prompt(query: str, context: str) -> str:
    return SEARCH_PROMPT_TEMPLATE.format(query=query, context=context, prefix=NODE_ID_PREFIX)


def parse_llm_response(response: str) -> list[str]:
    """Return the node ids in ``response``, most relevant first.

    Only lines that start with the node id prefix (after trimming) count;
    everything else the model wrote is ignored.
    """
    return [
        line.strip()
        for line in response.splitlines()
        if line.strip().startswith(NODE_ID_PREFIX)
    ]


def resolve_results(forest: list[DocumentNode], node_ids: list[str]) -> list[SearchResult]:
    """Turn ranked ids into results; unknown and repeated ids are dropped."""
    results: list[SearchResult] = []
    seen: set[str] = set()
    for node_id in node_ids:
        if node_id in seen:
            continue
        seen.add(node_id)
        node = find_node_by_id(forest, node_id)
        if node is None:
            continue
        results.append(build_result(node, PAGEINDEX_LLM_RELEVANCE, source="llm"))
    return results


@dataclass(frozen=True)
class LLMAttempt:
    """Outcome of the reasoning path: results, or the reason it failed."""

    results: list[SearchResult] = field(default_factory=list)
    reason: BaseException | str | None = None

    @property
    def ok(self) -> bool:
        return self.reason is None


async def attempt_llm_search(
    forest: list[DocumentNode],
    query: SearchQuery,
    provider: LLMProvider,
    custom_client: LLMClientFunction | None = None,
    *,
    timeout: float | None = None,
) -> LLMAttempt:
    """Run the reasoning path once and report how it went. Never raises."""
    try:
        context = build_search_context(forest)
        prompt = build_search_prompt(query.query, context)
        response = await invoke_llm(prompt, provider, custom_client, timeout=timeout)
        results = resolve_results(forest, parse_llm_response(response))
    except Exception as exc:
        return LLMAttempt(reason=exc)

    if not results:
        return LLMAttempt(reason="LLM response contained no known node ids")
    return LLMAttempt(results=results)


async def search_with_llm(
    forest: list[DocumentNode],
    query: SearchQuery,
    provider: LLMProvider,
    custom_client: LLMClientFunction | None = None,
    *,
    timeout: float | None = None,
    logger: logging.Logger | None = None,
) -> list[SearchResult]:
    """Search ``forest`` with LLM reasoning, falling back to keywords.

    Args:
        forest: Root nodes of the documents to search.
        query: The query and its limits.
        provider: Vendor settings used when no custom client is given.
        custom_client: Callable taking the prompt and returning the reply
            text (optionally awaitable); replaces the vendor call.
        timeout: Seconds allowed for the LLM call; defaults to the
            provider's timeout. Expiry falls back like any other failure.
        logger: Logger for fallback reports; defaults to this module's.

    Returns:
        At most ``query.max_results`` results, most relevant first.
    """
    log = logger or _logger
    if not forest:
        return []

    outcome = await attempt_llm_search(
        forest, query, provider, custom_client, timeout=timeout
    )
    if outcome.ok:
        results = outcome.results
        if query.threshold is not None:
            results = [result for result in results if result.relevance >= query.threshold]
        log.debug("LLM search returned %d results for %r", len(results), query.query)
        return results[: query.max_results]

    _report_fallback(log, outcome.reason, provider)
    return keyword_search(forest, query)


def _report_fallback(
    log: logging.Logger, reason: BaseException | str | None, provider: LLMProvider
) -> None:
    if isinstance(reason, ProviderConfigurationError):
        log.error(
            "LLM provider %r is misconfigured, using keyword search: %s",
            provider.name,
            reason,
        )
    elif isinstance(reason, LLMInvocationError):
        log.warning("LLM search failed, using keyword search: %s", reason)
    elif isinstance(reason, BaseException):
        log.warning(
            "LLM search raised %s, using keyword search",
            type(reason).__name__,
            exc_info=reason,
        )
    else:
        log.info("%s; using keyword search", reason)
