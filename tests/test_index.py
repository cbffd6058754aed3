"""Tests for PageIndex."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pageindex.exceptions import IndexPersistenceError, ParseError
from pageindex.index import PageIndex
from pageindex.schemas import LLMProvider, PageIndexConfig, SearchQuery


def _no_llm(prompt: str) -> str:
    raise RuntimeError("offline")


@pytest.fixture
def index(provider: LLMProvider, tmp_path: Path) -> PageIndex:
    """An index whose LLM always fails, so searches use keyword scoring."""
    config = PageIndexConfig(
        llm_provider=provider,
        custom_llm_client=_no_llm,
        index_path=str(tmp_path / "index.json"),
    )
    return PageIndex(config)


class TestAddAndSearch:
    """Tests for indexing documents and searching them."""

    @pytest.mark.asyncio
    async def test_add_literal_markdown(self, index: PageIndex, markdown_sample: str) -> None:
        doc_id = await index.add_document("notes.md", markdown_sample)
        document = index.get_document(doc_id)

        assert doc_id in index
        assert len(index) == 1
        assert document is not None
        assert document.type == "markdown"
        a, c = document.tree.children
        assert [a.title, c.title] == ["A", "C"]
        assert [child.title for child in a.children if child.kind != "paragraph"] == ["B"]

    @pytest.mark.asyncio
    async def test_add_from_file(self, index: PageIndex, tmp_path: Path) -> None:
        path = tmp_path / "guide.html"
        path.write_text("<title>Guide</title><h1>Setup</h1><p>Install it</p>", encoding="utf-8")

        doc_id = await index.add_document(str(path))

        document = index.get_document(doc_id)
        assert document is not None
        assert document.type == "html"
        assert document.title == "Guide"

    @pytest.mark.asyncio
    async def test_missing_file_leaves_index_unchanged(
        self, index: PageIndex, tmp_path: Path
    ) -> None:
        with pytest.raises(ParseError):
            await index.add_document(str(tmp_path / "absent.md"))

        assert len(index) == 0

    @pytest.mark.asyncio
    async def test_search_falls_back_to_keywords(self, index: PageIndex) -> None:
        await index.add_document(
            "fruit.txt",
            "The first paragraph talks about apples.\n\nThe second section covers oranges.",
        )

        results = await index.search("second section")

        assert len(results) == 1
        assert results[0].relevance == 1.0
        assert results[0].citation.document_title == "fruit.txt"

    @pytest.mark.asyncio
    async def test_search_uses_custom_client(self, provider: LLMProvider) -> None:
        captured: dict[str, str] = {}

        async def client(prompt: str) -> str:
            captured["prompt"] = prompt
            first = next(
                line.split("]")[0].strip(" [")
                for line in prompt.splitlines()
                if "]" in line and "Beta" in line
            )
            return first

        index = PageIndex(PageIndexConfig(llm_provider=provider, custom_llm_client=client))
        await index.add_document("doc.md", "# Alpha\n\nfirst\n\n# Beta\n\nsecond")

        results = await index.search("beta")

        assert [r.source for r in results] == ["llm"]
        assert results[0].citation.section == "Beta"
        assert "QUERY: beta" in captured["prompt"]

    @pytest.mark.asyncio
    async def test_collection_filters_by_source(self, index: PageIndex) -> None:
        await index.add_document("manuals/server.txt", "server port settings")
        await index.add_document("notes/server.txt", "server restart notes")

        results = await index.search(SearchQuery(query="server", collection="manuals/"))

        assert [r.content for r in results] == ["server port settings"]

    @pytest.mark.asyncio
    async def test_empty_index_returns_nothing(self, index: PageIndex) -> None:
        assert await index.search("anything") == []

    @pytest.mark.asyncio
    async def test_add_documents_in_order(self, index: PageIndex, tmp_path: Path) -> None:
        first = tmp_path / "a.txt"
        second = tmp_path / "b.md"
        first.write_text("alpha", encoding="utf-8")
        second.write_text("# Beta", encoding="utf-8")

        ids = await index.add_documents([str(first), str(second)])

        assert [index.get_document(i).type for i in ids] == ["text", "markdown"]


class TestManagement:
    """Tests for removal, stats and clearing."""

    @pytest.mark.asyncio
    async def test_remove_document(self, index: PageIndex) -> None:
        doc_id = await index.add_document("a.txt", "alpha")

        assert index.remove_document(doc_id) is True
        assert index.remove_document(doc_id) is False
        assert index.get_all_documents() == []

    @pytest.mark.asyncio
    async def test_stats(self, index: PageIndex) -> None:
        await index.add_document("a.txt", "one two\n\nthree")
        await index.add_document("b.md", "# Head\n\nbody")

        stats = index.get_stats()

        assert stats.total_documents == 2
        assert stats.total_nodes == 3 + 3
        assert stats.index_size == len(index.dumps())
        assert set(stats.as_dict()) == {
            "total_documents",
            "total_nodes",
            "total_chars",
            "index_size",
            "last_updated",
        }

    @pytest.mark.asyncio
    async def test_clear(self, index: PageIndex) -> None:
        await index.add_document("a.txt", "alpha")
        index.clear()

        assert len(index) == 0
        assert index.get_stats().total_nodes == 0


class TestPersistence:
    """Tests for save/load."""

    @pytest.mark.asyncio
    async def test_round_trip_preserves_documents(
        self, index: PageIndex, provider: LLMProvider, markdown_sample: str
    ) -> None:
        doc_id = await index.add_document("notes.md", markdown_sample)
        path = await index.save()

        restored = PageIndex(
            PageIndexConfig(
                llm_provider=provider,
                custom_llm_client=_no_llm,
                index_path=str(path),
            )
        )
        await restored.load()

        original = index.get_document(doc_id)
        loaded = restored.get_document(doc_id)
        assert loaded is not None
        assert loaded.tree == original.tree
        assert loaded.created_at == original.created_at

        results = await restored.search("text2")
        assert results[0].citation.document_title == "notes.md"
        assert results[0].content == "text2"

    @pytest.mark.asyncio
    async def test_save_to_explicit_path(self, index: PageIndex, tmp_path: Path) -> None:
        await index.add_document("a.txt", "alpha")
        target = tmp_path / "nested" / "dir" / "saved.json"

        assert await index.save(target) == target
        entries = json.loads(target.read_text(encoding="utf-8"))
        assert len(entries) == 1
        assert entries[0][1]["source"] == "a.txt"

    @pytest.mark.asyncio
    async def test_load_missing_file(self, index: PageIndex, tmp_path: Path) -> None:
        with pytest.raises(IndexPersistenceError):
            await index.load(tmp_path / "missing.json")

    @pytest.mark.asyncio
    async def test_no_path_configured(self, provider: LLMProvider) -> None:
        index = PageIndex(PageIndexConfig(llm_provider=provider))

        with pytest.raises(IndexPersistenceError):
            await index.save()

    @pytest.mark.asyncio
    async def test_invalid_data_keeps_current_index(self, index: PageIndex) -> None:
        await index.add_document("a.txt", "alpha")

        with pytest.raises(IndexPersistenceError):
            index.loads('[["x", {"id": "x"}]]')

        assert len(index) == 1
