"""Document index: parsed documents plus search over their trees."""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from pageindex.exceptions import IndexPersistenceError
from pageindex.parsers import parse_document
from pageindex.schemas import (
    DocumentNode,
    DocumentType,
    IndexStats,
    PageIndexConfig,
    ParsedDocument,
    SearchQuery,
    SearchResult,
)
from pageindex.search import search_with_llm

_logger = logging.getLogger(__name__)

_INDEX_ADAPTER = TypeAdapter(list[tuple[str, ParsedDocument]])


class PageIndex:
    """Index of parsed documents searchable by LLM reasoning.

    The index does no locking: callers that interleave ``add_document`` and
    ``search`` on one instance from concurrent tasks must serialize them.
    """

    def __init__(self, config: PageIndexConfig, *, logger: logging.Logger | None = None) -> None:
        self.config = config
        self._logger = logger or _logger
        self._documents: dict[str, ParsedDocument] = {}
        self._last_updated = datetime.now(timezone.utc)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._documents

    async def add_document(
        self,
        source: str,
        content: str | bytes | None = None,
        *,
        doc_type: DocumentType | None = None,
    ) -> str:
        """Parse a document and add it to the index.

        Args:
            source: File path, or an identifier when ``content`` is given.
            content: Literal document content; read from ``source`` if omitted.
            doc_type: Force a format instead of sniffing it.

        Returns:
            The new document id.

        Raises:
            ParseError: If the document cannot be read or parsed. The index
                is left unchanged.
        """
        document = await parse_document(source, content, doc_type=doc_type)
        self._documents[document.id] = document
        self._touch()
        self._logger.info(
            "Indexed %s as %s (%s, %d nodes)",
            source,
            document.id,
            document.type,
            document.tree.count_nodes(),
        )
        return document.id

    async def add_documents(self, sources: list[str]) -> list[str]:
        """Add several files in order; stops at the first one that fails."""
        ids: list[str] = []
        for source in sources:
            ids.append(await self.add_document(source))
        return ids

    def remove_document(self, document_id: str) -> bool:
        removed = self._documents.pop(document_id, None) is not None
        if removed:
            self._touch()
        return removed

    async def search(self, query: SearchQuery | str) -> list[SearchResult]:
        """Search the indexed documents.

        ``query.collection`` restricts the search to documents whose source
        contains that substring. LLM failures never surface here; they fall
        back to keyword scoring.
        """
        if isinstance(query, str):
            query = SearchQuery(query=query)
        forest = self._forest(query.collection)
        results = await search_with_llm(
            forest,
            query,
            self.config.llm_provider,
            self.config.custom_llm_client,
            logger=self._logger,
        )
        level = logging.INFO if self.config.debug else logging.DEBUG
        self._logger.log(
            level,
            "Query %r over %d documents returned %d results",
            query.query,
            len(forest),
            len(results),
        )
        return results

    def get_document(self, document_id: str) -> ParsedDocument | None:
        return self._documents.get(document_id)

    def get_all_documents(self) -> list[ParsedDocument]:
        return list(self._documents.values())

    def get_stats(self) -> IndexStats:
        return IndexStats(
            total_documents=len(self._documents),
            total_nodes=sum(doc.tree.count_nodes() for doc in self._documents.values()),
            total_chars=sum(doc.metadata.total_chars for doc in self._documents.values()),
            index_size=len(self.dumps()),
            last_updated=self._last_updated,
        )

    def clear(self) -> None:
        self._documents.clear()
        self._touch()

    def dumps(self) -> str:
        """Serialize the index as a JSON list of ``[id, document]`` pairs."""
        return json.dumps(
            [[doc_id, doc.model_dump(mode="json")] for doc_id, doc in self._documents.items()]
        )

    def loads(self, data: str | bytes) -> None:
        """Replace the whole index with serialized ``data``.

        Raises:
            IndexPersistenceError: If ``data`` is not a valid index. The
                current index is left unchanged.
        """
        try:
            entries = _INDEX_ADAPTER.validate_json(data)
        except ValidationError as exc:
            raise IndexPersistenceError(f"Invalid index data: {exc}") from exc
        self._documents = dict(entries)
        self._touch()

    async def save(self, path: str | Path | None = None) -> Path:
        """Write the index to ``path`` (default: ``config.index_path``)."""
        target = self._index_path(path)
        payload = self.dumps()
        try:
            await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_text, payload, encoding="utf-8")
        except OSError as exc:
            raise IndexPersistenceError(f"Cannot write index to {target}: {exc}") from exc
        self._logger.info("Saved %d documents to %s", len(self._documents), target)
        return target

    async def load(self, path: str | Path | None = None) -> None:
        """Replace the index with the one stored at ``path``."""
        target = self._index_path(path)
        try:
            data = await asyncio.to_thread(target.read_text, encoding="utf-8")
        except OSError as exc:
            raise IndexPersistenceError(f"Cannot read index from {target}: {exc}") from exc
        self.loads(data)
        self._logger.info("Loaded %d documents from %s", len(self._documents), target)

    def _forest(self, collection: str | None) -> list[DocumentNode]:
        return [
            doc.tree
            for doc in self._documents.values()
            if not collection or collection in doc.source
        ]

    def _index_path(self, path: str | Path | None) -> Path:
        chosen = path or self.config.index_path
        if not chosen:
            raise IndexPersistenceError("No index path given and config.index_path is unset")
        return Path(chosen).expanduser()

    def _touch(self) -> None:
        self._last_updated = datetime.now(timezone.utc)
