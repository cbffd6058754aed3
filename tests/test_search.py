"""Tests for LLM-driven search and its keyword fallback."""

from __future__ import annotations

import asyncio
import logging

import pytest

from pageindex.keyword import keyword_search
from pageindex.schemas import DocumentNode, LLMProvider, SearchQuery
from pageindex.search import (
    attempt_llm_search,
    build_search_prompt,
    parse_llm_response,
    search_with_llm,
)


class TestParseLlmResponse:
    """Tests for parse_llm_response."""

    def test_keeps_only_node_id_lines_in_order(self) -> None:
        response = "Here you go:\n  node-7  \ngarbage\nnode-3\n"

        assert parse_llm_response(response) == ["node-7", "node-3"]

    def test_empty_reply(self) -> None:
        assert parse_llm_response("") == []


class TestBuildSearchPrompt:
    """Tests for the search prompt."""

    def test_contains_query_context_and_id_prefix(self) -> None:
        prompt = build_search_prompt("where is the port?", "[node-1] body")

        assert "QUERY: where is the port?" in prompt
        assert "[node-1] body" in prompt
        assert '"node-"' in prompt


class TestSearchWithLlm:
    """Tests for search_with_llm."""

    @pytest.mark.asyncio
    async def test_sync_client_results_follow_reply_order(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        """Ids from the reply become results in reply order."""
        prompts: list[str] = []

        def client(prompt: str) -> str:
            prompts.append(prompt)
            return "node-7\ngarbage\nnode-3"

        results = await search_with_llm(
            manual_forest, SearchQuery(query="server port"), provider, client
        )

        assert [r.citation.node_id for r in results] == ["node-7", "node-3"]
        assert all(r.relevance == 0.8 and r.source == "llm" for r in results)
        assert results[0].citation.document_title == "Manual"
        assert results[0].citation.document_id == "doc1"
        assert "[node-7]" in prompts[0]

    @pytest.mark.asyncio
    async def test_async_client(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        async def client(prompt: str) -> str:
            return "node-5"

        results = await search_with_llm(
            manual_forest, SearchQuery(query="errors"), provider, client
        )

        assert [r.citation.node_id for r in results] == ["node-5"]

    @pytest.mark.asyncio
    async def test_duplicate_ids_are_reported_once(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        results = await search_with_llm(
            manual_forest,
            SearchQuery(query="x"),
            provider,
            lambda prompt: "node-1\nnode-1\nnode-99\nnode-3",
        )

        assert [r.citation.node_id for r in results] == ["node-1", "node-3"]

    @pytest.mark.asyncio
    async def test_max_results_caps_llm_results(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        results = await search_with_llm(
            manual_forest,
            SearchQuery(query="x", max_results=1),
            provider,
            lambda prompt: "node-5\nnode-1",
        )

        assert [r.citation.node_id for r in results] == ["node-5"]

    @pytest.mark.asyncio
    async def test_threshold_above_llm_relevance_drops_everything(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        results = await search_with_llm(
            manual_forest,
            SearchQuery(query="x", threshold=0.9),
            provider,
            lambda prompt: "node-1",
        )

        assert results == []

    @pytest.mark.asyncio
    async def test_empty_forest_returns_nothing(self, provider: LLMProvider) -> None:
        def client(prompt: str) -> str:
            raise AssertionError("client must not be called")

        assert await search_with_llm([], SearchQuery(query="x"), provider, client) == []


class TestFallback:
    """Tests for the keyword fallback path."""

    @pytest.mark.asyncio
    async def test_raising_client_falls_back_to_keywords(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        """A client error yields exactly the keyword results."""

        def client(prompt: str) -> str:
            raise RuntimeError("boom")

        query = SearchQuery(query="server port")
        results = await search_with_llm(manual_forest, query, provider, client)

        assert results == keyword_search(manual_forest, query)
        assert results and all(r.source == "keyword" for r in results)

    @pytest.mark.asyncio
    async def test_timeout_falls_back(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        async def slow_client(prompt: str) -> str:
            await asyncio.sleep(5)
            return "node-1"

        results = await search_with_llm(
            manual_forest,
            SearchQuery(query="port"),
            provider,
            slow_client,
            timeout=0.01,
        )

        assert [r.citation.node_id for r in results] == ["node-3", "node-7"]
        assert all(r.source == "keyword" for r in results)

    @pytest.mark.asyncio
    async def test_unknown_ids_fall_back(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        results = await search_with_llm(
            manual_forest,
            SearchQuery(query="client"),
            provider,
            lambda prompt: "node-42\nnothing useful",
        )

        assert [r.citation.node_id for r in results] == ["node-5"]
        assert results[0].source == "keyword"

    @pytest.mark.asyncio
    async def test_non_string_reply_falls_back(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        results = await search_with_llm(
            manual_forest, SearchQuery(query="client"), provider, lambda prompt: 42
        )

        assert [r.source for r in results] == ["keyword"]

    @pytest.mark.asyncio
    async def test_misconfigured_provider_logs_error(
        self, manual_forest: list[DocumentNode], caplog: pytest.LogCaptureFixture
    ) -> None:
        """A provider with no known API is reported at ERROR level."""
        caplog.set_level(logging.DEBUG, logger="pageindex.search")
        bad_provider = LLMProvider(name="test", model="m")

        results = await search_with_llm(
            manual_forest, SearchQuery(query="port"), bad_provider
        )

        assert [r.source for r in results] == ["keyword", "keyword"]
        errors = [rec for rec in caplog.records if rec.levelno == logging.ERROR]
        assert len(errors) == 1
        assert "'test'" in errors[0].getMessage()

    @pytest.mark.asyncio
    async def test_injected_logger_receives_reports(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        records: list[logging.LogRecord] = []

        class _Collect(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                records.append(record)

        log = logging.getLogger("pageindex.tests.injected")
        log.setLevel(logging.DEBUG)
        handler = _Collect()
        log.addHandler(handler)
        try:

            def client(prompt: str) -> str:
                raise ValueError("bad")

            await search_with_llm(
                manual_forest, SearchQuery(query="port"), provider, client, logger=log
            )
        finally:
            log.removeHandler(handler)

        assert [rec.levelno for rec in records] == [logging.WARNING]
        assert "ValueError" in records[0].getMessage()


class TestAttemptLlmSearch:
    """Tests for the tagged outcome of the reasoning path."""

    @pytest.mark.asyncio
    async def test_success(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        outcome = await attempt_llm_search(
            manual_forest, SearchQuery(query="x"), provider, lambda prompt: "node-1"
        )

        assert outcome.ok
        assert [r.citation.node_id for r in outcome.results] == ["node-1"]

    @pytest.mark.asyncio
    async def test_failure_carries_exception(
        self, manual_forest: list[DocumentNode], provider: LLMProvider
    ) -> None:
        def client(prompt: str) -> str:
            raise KeyError("missing")

        outcome = await attempt_llm_search(
            manual_forest, SearchQuery(query="x"), provider, client
        )

        assert not outcome.ok
        assert isinstance(outcome.reason, KeyError)
        assert outcome.results == []
